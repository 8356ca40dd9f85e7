"""Domain events and their fan-out to the timeline and the outbox."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from models.enums import OUTBOX_EVENT_TYPES, OutboxStatus, TimelineEventType
from models.records import OutboxEvent, TimelineEvent
from usecases.base import new_id
from usecases.ports import EventLogPort, OutboxPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    """Something that happened to a party, emitted once per action.

    ``payload`` goes to the timeline. ``outbox_payload`` is the minimal
    version staged for sync when the type is externally relevant; it
    defaults to just the party id.
    """
    party_id: str
    type: TimelineEventType
    label: str
    payload: Optional[dict[str, Any]] = None
    outbox_payload: Optional[dict[str, Any]] = None


class EventPublisher:
    """Writes each domain event to the timeline, and to the outbox when relevant."""

    def __init__(self, event_log: EventLogPort, outbox: OutboxPort):
        self._event_log = event_log
        self._outbox = outbox

    def publish(self, event: DomainEvent, at: str) -> TimelineEvent:
        entry = TimelineEvent(
            id=new_id(),
            party_id=event.party_id,
            type=event.type,
            label=event.label,
            payload=event.payload,
            created_at=at,
        )
        self._event_log.append(entry)
        logger.info("party=%s %s: %s", event.party_id, event.type.value, event.label)

        if event.type in OUTBOX_EVENT_TYPES:
            self._outbox.append(OutboxEvent(
                id=new_id(),
                party_id=event.party_id,
                type=event.type,
                payload=event.outbox_payload or {"party_id": event.party_id},
                status=OutboxStatus.PENDING,
                created_at=at,
            ))
            logger.debug("party=%s %s staged in outbox", event.party_id, event.type.value)
        return entry

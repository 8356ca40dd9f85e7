"""Records stored alongside a party: notes, save slots, timeline and outbox."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import with_config

from models.enums import OutboxStatus, TimelineEventType
from models.party import CAMEL_CONFIG, Party


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Note:
    """A free-text journal entry. Never edited after creation."""
    id: str
    party_id: str
    content: str
    created_at: str


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class SaveSlot:
    """One of three numbered snapshots of a party."""
    id: str
    party_id: str
    slot: int  # 1, 2 or 3
    snapshot: "PartySnapshot"
    created_at: str


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class PartySnapshot:
    """Everything needed to rebuild a party: itself, its notes and its saves.

    Saves can embed earlier saves, so the structure is recursive.
    """
    party: Party
    notes: list[Note] = field(default_factory=list)
    save_slots: list[SaveSlot] = field(default_factory=list)


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class TimelineEvent:
    id: str
    party_id: str
    type: TimelineEventType
    label: str
    created_at: str
    payload: Optional[dict[str, Any]] = None


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class OutboxEvent:
    """Staged copy of an externally relevant event, waiting for a sync channel."""
    id: str
    party_id: str
    type: TimelineEventType
    payload: dict[str, Any]
    status: OutboxStatus
    created_at: str
    sent_at: Optional[str] = None

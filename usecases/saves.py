"""Save slots: snapshot the party into one of three slots, and restore it."""

import logging
from dataclasses import replace

from config.exceptions import (
    InvalidInputError,
    InvariantViolationError,
    RestoreNotAllowedError,
    SaveSlotLimitError,
    SaveSlotNotFoundError,
)
from models.enums import TimelineEventType
from models.party import Party
from models.records import PartySnapshot, SaveSlot
from rules.character import MAX_SAVE_SLOTS, can_restore_any_slot
from usecases.base import load_party, new_id, require_active
from usecases.events import DomainEvent, EventPublisher
from usecases.ports import Clock, NoteRepositoryPort, PartyRepositoryPort, SaveSlotRepositoryPort

logger = logging.getLogger(__name__)

SLOT_NUMBERS = tuple(range(1, MAX_SAVE_SLOTS + 1))


def trim_slots(slots: list[SaveSlot], depth: int) -> list[SaveSlot]:
    """Keep ``depth`` generations of nested saves and drop the rest.

    Depth 0 embeds no saves at all; depth 1 embeds the current saves with
    their own embedded saves emptied, and so on.
    """
    if depth <= 0:
        return []
    return [
        replace(s, snapshot=replace(s.snapshot, save_slots=trim_slots(s.snapshot.save_slots, depth - 1)))
        for s in slots
    ]


class CreateSaveUseCase:
    def __init__(
        self,
        parties: PartyRepositoryPort,
        notes: NoteRepositoryPort,
        save_slots: SaveSlotRepositoryPort,
        events: EventPublisher,
        clock: Clock,
        snapshot_depth: int = 1,
    ):
        self.parties = parties
        self.notes = notes
        self.save_slots = save_slots
        self.events = events
        self.clock = clock
        self.snapshot_depth = snapshot_depth

    def execute(self, party_id: str, slot_number: int) -> SaveSlot:
        """Save into ``slot_number``; an occupied slot is overwritten in place."""
        if slot_number not in SLOT_NUMBERS:
            raise InvalidInputError("Slot must be 1, 2 or 3", {"slot": slot_number})
        party = load_party(self.parties, party_id)
        require_active(party)
        notes = self.notes.find_by_party(party_id)
        slots = self.save_slots.find_by_party(party_id)

        used = {s.slot for s in slots}
        if len(used) > MAX_SAVE_SLOTS or len(used) != len(slots):
            raise InvariantViolationError(
                "Party holds an impossible set of save slots",
                {"party_id": party_id, "slots": sorted(s.slot for s in slots)},
            )
        existing = next((s for s in slots if s.slot == slot_number), None)
        if existing is None and len(used) >= MAX_SAVE_SLOTS:
            logger.warning("Party %s: all %d save slots in use", party_id, MAX_SAVE_SLOTS)
            raise SaveSlotLimitError(slot_number, MAX_SAVE_SLOTS)

        now = self.clock.now()
        slot = SaveSlot(
            id=existing.id if existing else new_id(),
            party_id=party_id,
            slot=slot_number,
            snapshot=PartySnapshot(
                party=party,
                notes=notes,
                save_slots=trim_slots(slots, self.snapshot_depth),
            ),
            created_at=now,
        )
        self.save_slots.save(slot)

        if existing:
            event_type = TimelineEventType.SAVE_REPLACED
            label = f"Save slot {slot_number} replaced"
        else:
            event_type = TimelineEventType.SAVE_CREATED
            label = f"Save created (slot {slot_number})"
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=event_type,
            label=label,
            payload={"slot": slot_number, "slot_id": slot.id},
            outbox_payload={"party_id": party_id, "slot": slot_number},
        ), now)
        return slot


class RestoreSaveUseCase:
    def __init__(
        self,
        parties: PartyRepositoryPort,
        notes: NoteRepositoryPort,
        save_slots: SaveSlotRepositoryPort,
        events: EventPublisher,
        clock: Clock,
    ):
        self.parties = parties
        self.notes = notes
        self.save_slots = save_slots
        self.events = events
        self.clock = clock

    def execute(self, party_id: str, slot_id: str) -> Party:
        """Bring the party back to a saved state.

        Notes written after the save are kept; snapshot notes are re-saved
        on top of them. Simplified mode only accepts the latest save.
        """
        party = load_party(self.parties, party_id)
        require_active(party)

        slots = self.save_slots.find_by_party(party_id)
        slot = next((s for s in slots if s.id == slot_id), None)
        if slot is None:
            raise SaveSlotNotFoundError(slot_id, party_id)

        if not can_restore_any_slot(party.mode):
            latest = max(slots, key=lambda s: s.created_at)
            if latest.id != slot_id:
                logger.warning("Party %s: slot %d is not the latest save", party_id, slot.slot)
                raise RestoreNotAllowedError(
                    "Simplified mode: only the most recent save can be restored",
                    {"slot": slot.slot, "latest_slot": latest.slot},
                )

        now = self.clock.now()
        snapshot = slot.snapshot
        # Identity, mode and status belong to the live party
        restored = replace(
            snapshot.party,
            id=party.id,
            mode=party.mode,
            status=party.status,
            updated_at=now,
        )
        self.parties.save(restored)
        for note in snapshot.notes:
            self.notes.save(replace(note, party_id=party_id))

        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.SAVE_RESTORED,
            label=f"Save slot {slot.slot} restored",
            payload={"slot_id": slot_id, "slot": slot.slot},
        ), now)
        return restored

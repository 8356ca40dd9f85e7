"""Export a party to a portable JSON file, and import one back."""

import logging
from collections import Counter
from dataclasses import dataclass, replace

from config.exceptions import ImportFormatError, InvalidInputError
from models.enums import PartyStatus, TimelineEventType
from models.party import Party
from models.records import PartySnapshot
from rules.character import MAX_SAVE_SLOTS, validate_inventory
from usecases.base import load_party, new_id
from usecases.events import DomainEvent, EventPublisher
from usecases.ports import (
    Clock,
    NoteRepositoryPort,
    PartyRepositoryPort,
    SaveSlotRepositoryPort,
    SnapshotCodec,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    json: str
    summary: str
    exported_at: str


class ExportPartyUseCase:
    """Available in every party status."""

    def __init__(
        self,
        parties: PartyRepositoryPort,
        notes: NoteRepositoryPort,
        save_slots: SaveSlotRepositoryPort,
        codec: SnapshotCodec,
        events: EventPublisher,
        clock: Clock,
    ):
        self.parties = parties
        self.notes = notes
        self.save_slots = save_slots
        self.codec = codec
        self.events = events
        self.clock = clock

    def execute(self, party_id: str) -> ExportResult:
        party = load_party(self.parties, party_id)
        snapshot = PartySnapshot(
            party=party,
            notes=self.notes.find_by_party(party_id),
            save_slots=self.save_slots.find_by_party(party_id),
        )
        now = self.clock.now()
        result = ExportResult(
            json=self.codec.export_party(snapshot, now),
            summary=self.codec.export_summary(snapshot, now),
            exported_at=now,
        )
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.PARTY_EXPORTED,
            label="Party exported (JSON)",
            payload={"notes": len(snapshot.notes), "save_slots": len(snapshot.save_slots)},
        ), now)
        return result


def _rehome(snapshot: PartySnapshot, party_id: str, id_map: dict[str, str]) -> PartySnapshot:
    """Rewrite every party, note and slot id inside ``snapshot``.

    ``id_map`` keeps old -> new ids consistent across nested snapshots, so a
    note embedded in a save keeps matching its live copy.
    """
    def remap(old: str) -> str:
        return id_map.setdefault(old, new_id())

    return PartySnapshot(
        party=replace(snapshot.party, id=party_id),
        notes=[replace(n, id=remap(n.id), party_id=party_id) for n in snapshot.notes],
        save_slots=[
            replace(s, id=remap(s.id), party_id=party_id, snapshot=_rehome(s.snapshot, party_id, id_map))
            for s in snapshot.save_slots
        ],
    )


def _check_party(party: Party, where: str) -> None:
    """Reject a party no use case could have produced."""
    character = party.character
    problems = []
    if character.hp_max < 1:
        problems.append("hpMax must be at least 1")
    if not 0 <= character.hp_current <= character.hp_max:
        problems.append("hpCurrent must be between 0 and hpMax")
    if character.luck < 0:
        problems.append("luck cannot be negative")
    if party.current_chapter < 1:
        problems.append("currentChapter must be at least 1")
    try:
        validate_inventory(character.inventory)
    except InvalidInputError as e:
        problems.append(f"inventory: {e.message}")
    if problems:
        raise ImportFormatError(f"Invalid party in {where}: {'; '.join(problems)}", {"problems": problems})


def _check_snapshot(snapshot: PartySnapshot, where: str = "snapshot") -> None:
    _check_party(snapshot.party, where)
    for slot in snapshot.save_slots:
        _check_snapshot(slot.snapshot, f"save slot {slot.slot}")


class ImportPartyUseCase:
    """Create a new party from an export file.

    The imported party always gets fresh ids, so importing a file twice,
    or next to the party it came from, never overwrites anything.
    """

    def __init__(
        self,
        parties: PartyRepositoryPort,
        notes: NoteRepositoryPort,
        save_slots: SaveSlotRepositoryPort,
        codec: SnapshotCodec,
        events: EventPublisher,
        clock: Clock,
    ):
        self.parties = parties
        self.notes = notes
        self.save_slots = save_slots
        self.codec = codec
        self.events = events
        self.clock = clock

    def execute(self, data: str | bytes) -> Party:
        snapshot = self.codec.import_party(data)
        counts = Counter(s.slot for s in snapshot.save_slots)
        if len(counts) > MAX_SAVE_SLOTS or any(n > 1 for n in counts.values()) \
                or any(slot not in range(1, MAX_SAVE_SLOTS + 1) for slot in counts):
            raise ImportFormatError("Save slots in the file are inconsistent", {"slots": sorted(counts.elements())})
        _check_snapshot(snapshot)

        now = self.clock.now()
        party_id = new_id()
        source_id = snapshot.party.id
        snapshot = _rehome(snapshot, party_id, {})
        party = replace(
            snapshot.party,
            status=PartyStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )

        self.parties.save(party)
        for note in snapshot.notes:
            self.notes.save(note)
        for slot in snapshot.save_slots:
            self.save_slots.save(slot)

        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.PARTY_CREATED,
            label=f'Party imported: "{party.name}"',
            payload={"imported": True, "source_party_id": source_id},
            outbox_payload={"party_id": party_id, "name": party.name, "mode": party.mode.value, "imported": True},
        ), now)
        logger.info("Imported party %s as %s (%d notes, %d saves)",
                    source_id, party_id, len(snapshot.notes), len(snapshot.save_slots))
        return party

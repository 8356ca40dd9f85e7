"""Ports the use cases depend on.

Implement these protocols to plug in another store, dice source or clock;
the SQLite repositories in ``models.database`` and the adapters in
``adapters`` are the shipped implementations.
"""

from typing import Optional, Protocol, runtime_checkable

from models.enums import OutboxStatus
from models.party import Party
from models.records import Note, OutboxEvent, PartySnapshot, SaveSlot, TimelineEvent


# ---- Storage ----

@runtime_checkable
class PartyRepositoryPort(Protocol):
    def find_all(self) -> list[Party]:
        """All parties, most recently updated first."""
        ...

    def find_by_id(self, party_id: str) -> Optional[Party]:
        ...

    def save(self, party: Party) -> None:
        """Insert or replace the whole aggregate."""
        ...

    def delete(self, party_id: str) -> None:
        """Delete the party with its notes, saves, timeline and outbox atomically."""
        ...


@runtime_checkable
class NoteRepositoryPort(Protocol):
    def find_by_party(self, party_id: str) -> list[Note]:
        """Notes of a party, most recent first."""
        ...

    def save(self, note: Note) -> None:
        ...


@runtime_checkable
class SaveSlotRepositoryPort(Protocol):
    def find_by_party(self, party_id: str) -> list[SaveSlot]:
        ...

    def save(self, slot: SaveSlot) -> None:
        ...

    def delete(self, slot_id: str) -> None:
        ...


@runtime_checkable
class EventLogPort(Protocol):
    def find_by_party(self, party_id: str) -> list[TimelineEvent]:
        """Timeline of a party, most recent first."""
        ...

    def append(self, event: TimelineEvent) -> None:
        ...


@runtime_checkable
class OutboxPort(Protocol):
    def find_pending(self) -> list[OutboxEvent]:
        ...

    def append(self, event: OutboxEvent) -> None:
        ...

    def update_status(self, event_id: str, status: OutboxStatus, sent_at: Optional[str] = None) -> None:
        ...


# ---- Capabilities ----

@runtime_checkable
class DiceRoller(Protocol):
    def roll_d6(self) -> int:
        ...

    def roll_2d6(self) -> tuple[int, int]:
        ...

    def roll_nd6(self, n: int) -> list[int]:
        ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> str:
        """Current instant as a sortable ISO-8601 string."""
        ...


@runtime_checkable
class SnapshotCodec(Protocol):
    def export_party(self, snapshot: PartySnapshot, exported_at: str) -> str:
        ...

    def export_summary(self, snapshot: PartySnapshot, exported_at: str) -> str:
        ...

    def import_party(self, data: str | bytes) -> PartySnapshot:
        ...

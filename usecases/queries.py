"""Read-only views for front ends."""

from dataclasses import dataclass

from models.party import Party
from models.records import Note, SaveSlot, TimelineEvent
from usecases.base import load_party
from usecases.ports import EventLogPort, NoteRepositoryPort, PartyRepositoryPort, SaveSlotRepositoryPort


@dataclass(frozen=True)
class PartyOverview:
    party: Party
    notes: list[Note]
    save_slots: list[SaveSlot]
    timeline: list[TimelineEvent]


class ListPartiesUseCase:
    def __init__(self, parties: PartyRepositoryPort):
        self.parties = parties

    def execute(self) -> list[Party]:
        return self.parties.find_all()


class GetPartyOverviewUseCase:
    def __init__(
        self,
        parties: PartyRepositoryPort,
        notes: NoteRepositoryPort,
        save_slots: SaveSlotRepositoryPort,
        event_log: EventLogPort,
    ):
        self.parties = parties
        self.notes = notes
        self.save_slots = save_slots
        self.event_log = event_log

    def execute(self, party_id: str) -> PartyOverview:
        party = load_party(self.parties, party_id)
        return PartyOverview(
            party=party,
            notes=self.notes.find_by_party(party_id),
            save_slots=self.save_slots.find_by_party(party_id),
            timeline=self.event_log.find_by_party(party_id),
        )

"""Journal entries: notes and free-form custom actions."""

from config.exceptions import InvalidInputError
from models.enums import TimelineEventType
from models.records import Note, TimelineEvent
from usecases.base import load_party, new_id, preview
from usecases.events import DomainEvent, EventPublisher
from usecases.ports import Clock, NoteRepositoryPort, PartyRepositoryPort


class AddNoteUseCase:
    def __init__(
        self,
        parties: PartyRepositoryPort,
        notes: NoteRepositoryPort,
        events: EventPublisher,
        clock: Clock,
        preview_chars: int = 40,
    ):
        self.parties = parties
        self.notes = notes
        self.events = events
        self.clock = clock
        self.preview_chars = preview_chars

    def execute(self, party_id: str, content: str) -> Note:
        if not content.strip():
            raise InvalidInputError("Note is empty")
        load_party(self.parties, party_id)

        now = self.clock.now()
        note = Note(id=new_id(), party_id=party_id, content=content, created_at=now)
        self.notes.save(note)
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.NOTE_ADDED,
            label=f'Note added: "{preview(content, self.preview_chars)}"',
            payload={"note_id": note.id},
        ), now)
        return note


class AddCustomActionUseCase:
    def __init__(self, parties: PartyRepositoryPort, events: EventPublisher, clock: Clock):
        self.parties = parties
        self.events = events
        self.clock = clock

    def execute(self, party_id: str, label: str) -> TimelineEvent:
        if not label.strip():
            raise InvalidInputError("Custom action needs a label")
        load_party(self.parties, party_id)
        return self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.CUSTOM_ACTION,
            label=label.strip(),
        ), self.clock.now())

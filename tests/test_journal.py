"""Tests for notes, custom actions and the event fan-out."""

import pytest

from config.exceptions import InvalidInputError, PartyNotFoundError
from models.enums import OUTBOX_EVENT_TYPES, TimelineEventType
from usecases.events import DomainEvent, EventPublisher


class TestAddNote:
    def test_short_note_label(self, container, party):
        note = container.add_note.execute(party.id, "Met the ferryman")
        assert container.db.notes.find_by_party(party.id) == [note]
        event = container.db.timeline.find_by_party(party.id)[0]
        assert event.type == TimelineEventType.NOTE_ADDED
        assert event.label == 'Note added: "Met the ferryman"'
        assert event.payload == {"note_id": note.id}

    def test_long_note_preview_is_truncated(self, container, party):
        content = "x" * 41
        container.add_note.execute(party.id, content)
        event = container.db.timeline.find_by_party(party.id)[0]
        assert event.label == f'Note added: "{"x" * 40}…"'

    def test_exactly_forty_chars_not_truncated(self, container, party):
        container.add_note.execute(party.id, "y" * 40)
        assert container.db.timeline.find_by_party(party.id)[0].label.endswith('y"')

    def test_empty_note_rejected(self, container, party):
        with pytest.raises(InvalidInputError):
            container.add_note.execute(party.id, "   ")

    def test_missing_party(self, container):
        with pytest.raises(PartyNotFoundError):
            container.add_note.execute("ghost", "hello")

    def test_notes_are_not_staged(self, container, party):
        container.add_note.execute(party.id, "quiet")
        assert [o.type for o in container.db.outbox.find_pending()] == [TimelineEventType.PARTY_CREATED]


class TestAddCustomAction:
    def test_logs_label(self, container, party):
        event = container.add_custom_action.execute(party.id, "  Bribed the guard  ")
        assert event.type == TimelineEventType.CUSTOM_ACTION
        assert event.label == "Bribed the guard"
        assert container.db.timeline.find_by_party(party.id)[0] == event

    def test_empty_label_rejected(self, container, party):
        with pytest.raises(InvalidInputError):
            container.add_custom_action.execute(party.id, "")


class TestEventPublisher:
    def test_outbox_types(self):
        assert OUTBOX_EVENT_TYPES == {
            TimelineEventType.PARTY_CREATED,
            TimelineEventType.SAVE_CREATED,
            TimelineEventType.SAVE_REPLACED,
            TimelineEventType.PARTY_FINISHED,
            TimelineEventType.DEATH_RESET,
        }

    def test_default_outbox_payload_is_party_id(self, db):
        publisher = EventPublisher(db.timeline, db.outbox)
        publisher.publish(
            DomainEvent(party_id="p1", type=TimelineEventType.PARTY_FINISHED, label="done", payload={"chapter": 3}),
            "2026-01-01T00:00:00.000Z",
        )
        entry = db.outbox.find_pending()[0]
        assert entry.payload == {"party_id": "p1"}
        assert entry.created_at == "2026-01-01T00:00:00.000Z"

    def test_timeline_only_types_skip_outbox(self, db):
        publisher = EventPublisher(db.timeline, db.outbox)
        entry = publisher.publish(
            DomainEvent(party_id="p1", type=TimelineEventType.HP_CHANGED, label="HP -1"),
            "2026-01-01T00:00:00.000Z",
        )
        assert db.timeline.find_by_party("p1") == [entry]
        assert db.outbox.find_pending() == []

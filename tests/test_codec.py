"""Tests for the JSON export codec, clock and dice adapters."""

import json
import logging
from datetime import datetime, timezone

import pytest

from adapters.clock import SystemClock, format_timestamp
from adapters.dice import SecureDiceRoller, SeededDiceRoller, make_dice_roller
from adapters.json_codec import EXPORT_VERSION, JsonCodec
from config.exceptions import ImportFormatError
from models.enums import GameMode, PartyStatus, Talent
from models.party import Party
from models.records import Note, PartySnapshot
from rules.character import create_character
from usecases.ports import Clock, DiceRoller, SnapshotCodec


@pytest.fixture
def snapshot():
    party = Party(
        id="p1",
        name="Fog Road",
        mode=GameMode.MORTAL,
        status=PartyStatus.ACTIVE,
        current_chapter=7,
        character=create_character("Mael", Talent.SLEIGHT_OF_HAND, 6, 3),
        created_at="2026-01-01T00:00:00.000Z",
        updated_at="2026-01-02T00:00:00.000Z",
    )
    notes = [Note(id="n1", party_id="p1", content="Ça commence", created_at="2026-01-01T00:00:01.000Z")]
    return PartySnapshot(party=party, notes=notes)


class TestJsonCodec:
    def test_satisfies_port(self):
        assert isinstance(JsonCodec(), SnapshotCodec)

    def test_export_then_import(self, snapshot):
        codec = JsonCodec()
        raw = codec.export_party(snapshot, "2026-02-01T00:00:00.000Z")
        assert codec.import_party(raw) == snapshot

    def test_keeps_non_ascii_text(self, snapshot):
        raw = JsonCodec().export_party(snapshot, "2026-02-01T00:00:00.000Z")
        assert "Ça commence" in raw

    def test_accepts_bytes(self, snapshot):
        raw = JsonCodec().export_party(snapshot, "2026-02-01T00:00:00.000Z").encode("utf-8")
        assert JsonCodec().import_party(raw).party.id == "p1"

    def test_summary_uses_talent_label(self, snapshot):
        summary = JsonCodec().export_summary(snapshot, "2026-02-01T00:00:00.000Z")
        assert "Talent: Sleight of hand" in summary
        assert "Saves: 0 / 3" in summary
        assert "Exported at 2026-02-01T00:00:00.000Z" in summary

    def test_unknown_version_warns_but_imports(self, snapshot, caplog):
        data = json.loads(JsonCodec().export_party(snapshot, "2026-02-01T00:00:00.000Z"))
        data["version"] = EXPORT_VERSION + 1
        with caplog.at_level(logging.WARNING, logger="adapters.json_codec"):
            result = JsonCodec().import_party(json.dumps(data))
        assert result.party.id == "p1"
        assert "version" in caplog.text

    def test_wrong_shape_rejected(self, snapshot):
        data = json.loads(JsonCodec().export_party(snapshot, "2026-02-01T00:00:00.000Z"))
        data["snapshot"]["party"]["character"]["hpMax"] = "lots"
        with pytest.raises(ImportFormatError, match="expected shape"):
            JsonCodec().import_party(json.dumps(data))

    def test_non_object_rejected(self):
        with pytest.raises(ImportFormatError):
            JsonCodec().import_party("[1, 2, 3]")


class TestClock:
    def test_format(self):
        moment = datetime(2026, 10, 19, 14, 3, 7, 512000, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2026-10-19T14:03:07.512Z"

    def test_system_clock(self):
        clock = SystemClock()
        assert isinstance(clock, Clock)
        assert clock.now().endswith("Z")


class TestDice:
    def test_secure_range(self):
        roller = SecureDiceRoller()
        assert isinstance(roller, DiceRoller)
        assert all(1 <= roller.roll_d6() <= 6 for _ in range(200))
        assert len(roller.roll_nd6(3)) == 3

    def test_seeded_is_reproducible(self):
        assert SeededDiceRoller(42).roll_nd6(10) == SeededDiceRoller(42).roll_nd6(10)

    def test_factory(self):
        assert isinstance(make_dice_roller(None), SecureDiceRoller)
        assert isinstance(make_dice_roller(3), SeededDiceRoller)

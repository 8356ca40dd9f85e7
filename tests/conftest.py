"""Shared pytest fixtures for the dagda test suite."""

from datetime import datetime, timedelta, timezone

import pytest

from adapters.clock import format_timestamp


# ---------------------------------------------------------------------------
# Deterministic fakes
# ---------------------------------------------------------------------------

class ScriptedDiceRoller:
    """Returns queued values in order; fails loudly when the script runs out."""

    def __init__(self, *values: int):
        self.queue = list(values)

    def push(self, *values: int) -> None:
        self.queue.extend(values)

    def roll_d6(self) -> int:
        if not self.queue:
            raise AssertionError("ScriptedDiceRoller ran out of values")
        return self.queue.pop(0)

    def roll_2d6(self) -> tuple[int, int]:
        return (self.roll_d6(), self.roll_d6())

    def roll_nd6(self, n: int) -> list[int]:
        return [self.roll_d6() for _ in range(n)]


class TickingClock:
    """Advances one second on every call so ordering by time is strict."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def now(self) -> str:
        stamp = format_timestamp(self.current)
        self.current += timedelta(seconds=1)
        return stamp


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite database path."""
    return tmp_path / "test_dagda.db"


@pytest.fixture
def db(tmp_db_path):
    """Return an initialized Database instance backed by a temp file."""
    from models.database import Database
    return Database(tmp_db_path)


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Return a Settings instance with all paths pointing to tmp_path."""
    from config.settings import Settings
    return Settings(
        _env_file=None,
        sqlite_db_path=tmp_path / "dagda.db",
        export_dir=tmp_path / "exports",
        log_dir=tmp_path / "logs",
    )


# ---------------------------------------------------------------------------
# Use case wiring
# ---------------------------------------------------------------------------

@pytest.fixture
def dice():
    return ScriptedDiceRoller()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def container(settings, db, dice, clock):
    """Return a Container on the temp database with scripted dice and clock."""
    from usecases.container import Container
    return Container(settings, db, dice, clock)


@pytest.fixture
def make_party(container, dice):
    """Factory creating a party with chosen creation rolls.

    ``hp_dice`` are the two HP dice, ``luck`` the luck die. The defaults
    give 28 HP and 4 luck.
    """
    from models.enums import GameMode, Talent

    def _make(mode=GameMode.NARRATIVE, hp_dice=(3, 4), luck=4, name="The Fog Road"):
        dice.push(*hp_dice, luck)
        return container.create_party.execute(name, mode, Talent.INSTINCT, "Mael")

    return _make


@pytest.fixture
def party(make_party):
    """An ACTIVE narrative party: 28/28 HP, luck 4, dexterity 7."""
    return make_party()

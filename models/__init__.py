"""Models package: domain dataclasses, enums, and the SQLite store."""

from models.database import Database
from models.party import Party, Character, Inventory, Weapon, Item, Currency
from models.records import Note, SaveSlot, PartySnapshot, TimelineEvent, OutboxEvent
from models.combat import Enemy, CombatLogEntry, CombatState
from models.enums import (
    GameMode,
    Talent,
    TALENT_LABELS,
    PartyStatus,
    TimelineEventType,
    OUTBOX_EVENT_TYPES,
    OutboxStatus,
    CombatOutcome,
)

__all__ = [
    "Database",
    "Party",
    "Character",
    "Inventory",
    "Weapon",
    "Item",
    "Currency",
    "Note",
    "SaveSlot",
    "PartySnapshot",
    "TimelineEvent",
    "OutboxEvent",
    "Enemy",
    "CombatLogEntry",
    "CombatState",
    "GameMode",
    "Talent",
    "TALENT_LABELS",
    "PartyStatus",
    "TimelineEventType",
    "OUTBOX_EVENT_TYPES",
    "OutboxStatus",
    "CombatOutcome",
]

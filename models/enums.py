"""Enumerations for party state and timeline tracking."""

from enum import Enum


class GameMode(str, Enum):
    NARRATIVE = "NARRATIVE"
    SIMPLIFIED = "SIMPLIFIED"
    MORTAL = "MORTAL"


class Talent(str, Enum):
    INSTINCT = "INSTINCT"
    HERBOLOGY = "HERBOLOGY"
    DISCRETION = "DISCRETION"
    PERSUASION = "PERSUASION"
    OBSERVATION = "OBSERVATION"
    SLEIGHT_OF_HAND = "SLEIGHT_OF_HAND"
    EMPATHY_PRACTICE = "EMPATHY_PRACTICE"


TALENT_LABELS: dict[Talent, str] = {
    Talent.INSTINCT: "Instinct",
    Talent.HERBOLOGY: "Herbology",
    Talent.DISCRETION: "Discretion",
    Talent.PERSUASION: "Persuasion",
    Talent.OBSERVATION: "Observation",
    Talent.SLEIGHT_OF_HAND: "Sleight of hand",
    Talent.EMPATHY_PRACTICE: "Empathy practice",
}


class PartyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
    DEAD = "DEAD"


class TimelineEventType(str, Enum):
    PARTY_CREATED = "party_created"
    CHAPTER_SET = "chapter_set"
    HP_CHANGED = "hp_changed"
    LUCK_SPENT = "luck_spent"
    LUCK_CHANGED = "luck_changed"
    NOTE_ADDED = "note_added"
    SAVE_CREATED = "save_created"
    SAVE_REPLACED = "save_replaced"
    SAVE_RESTORED = "save_restored"
    COMBAT_STARTED = "combat_started"
    COMBAT_HIT = "combat_hit"
    COMBAT_MISS = "combat_miss"
    COMBAT_ENEMY_HIT = "combat_enemy_hit"
    COMBAT_ENEMY_MISS = "combat_enemy_miss"
    COMBAT_VICTORY = "combat_victory"
    COMBAT_DEFEAT = "combat_defeat"
    DEATH_RESET = "death_reset"
    DICE_REROLLED = "dice_rerolled"
    PARTY_EXPORTED = "party_exported"
    PARTY_FINISHED = "party_finished"
    CUSTOM_ACTION = "custom_action"
    INVENTORY_CHANGED = "inventory_changed"


# Event types that are staged in the outbox for a future sync channel
OUTBOX_EVENT_TYPES = frozenset({
    TimelineEventType.PARTY_CREATED,
    TimelineEventType.SAVE_CREATED,
    TimelineEventType.SAVE_REPLACED,
    TimelineEventType.PARTY_FINISHED,
    TimelineEventType.DEATH_RESET,
})


class OutboxStatus(str, Enum):
    PENDING = "PENDING"
    SENT = "SENT"


class CombatOutcome(str, Enum):
    ONGOING = "ongoing"
    VICTORY = "victory"
    DEFEAT = "defeat"
    MORTAL_DEATH = "mortal_death"

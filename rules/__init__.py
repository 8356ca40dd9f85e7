"""Rules package: pure character and combat rules."""

from rules.character import (
    INITIAL_DEXTERITY,
    MAX_SAVE_SLOTS,
    create_initial_inventory,
    create_character,
    apply_hp_change,
    apply_luck_cost,
    is_dead,
    apply_death_reset,
    can_restore_any_slot,
    equipped_weapon,
    apply_inventory_patch,
)
from rules.combat import (
    HitResult,
    DamageResult,
    LuckAdjustment,
    resolve_hit,
    resolve_damage,
    apply_luck_to_die,
    is_victory,
    is_defeat,
)

__all__ = [
    "INITIAL_DEXTERITY",
    "MAX_SAVE_SLOTS",
    "create_initial_inventory",
    "create_character",
    "apply_hp_change",
    "apply_luck_cost",
    "is_dead",
    "apply_death_reset",
    "can_restore_any_slot",
    "equipped_weapon",
    "apply_inventory_patch",
    "HitResult",
    "DamageResult",
    "LuckAdjustment",
    "resolve_hit",
    "resolve_damage",
    "apply_luck_to_die",
    "is_victory",
    "is_defeat",
]

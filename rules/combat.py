"""Combat rules: roll-under hits, flat damage, luck adjustments."""

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from models.combat import CombatLogEntry, Enemy
from models.party import Character
from rules.character import is_dead

DICE_TO_HIT = 2  # 2d6
DICE_DAMAGE = 1  # 1d6
DAMAGE_BASE = 1


@dataclass(frozen=True)
class HitResult:
    rolls: tuple[int, ...]
    total: int
    success: bool


@dataclass(frozen=True)
class DamageResult:
    roll: int
    total: int
    weapon_bonus: int


@dataclass(frozen=True)
class LuckAdjustment:
    new_roll: int
    luck_cost: int


def resolve_hit(rolls: Sequence[int], dexterity: int) -> HitResult:
    """2d6 under or equal to dexterity hits."""
    total = sum(rolls)
    return HitResult(rolls=tuple(rolls), total=total, success=total <= dexterity)


def resolve_damage(roll: int, weapon_bonus: int) -> DamageResult:
    return DamageResult(roll=roll, total=DAMAGE_BASE + roll + weapon_bonus, weapon_bonus=weapon_bonus)


def apply_luck_to_die(original_roll: int, target_value: int, available_luck: int) -> Optional[LuckAdjustment]:
    """Move a die to ``target_value`` for one luck point per pip.

    Returns None when nothing would change or when luck does not cover it.
    """
    if target_value == original_roll:
        return None
    cost = abs(target_value - original_roll)
    if cost > available_luck:
        return None
    return LuckAdjustment(new_roll=target_value, luck_cost=cost)


def is_victory(enemies: Iterable[Enemy]) -> bool:
    return all(e.hp_current <= 0 for e in enemies)


def is_defeat(character: Character) -> bool:
    return is_dead(character)


def apply_damage_to_enemy(enemy: Enemy, amount: int) -> Enemy:
    return replace(enemy, hp_current=max(0, enemy.hp_current - amount))


def _rolls_label(hit: HitResult) -> str:
    return f"{'+'.join(str(r) for r in hit.rolls)}={hit.total}"


def build_player_entry(
    turn: int,
    hit: HitResult,
    dexterity: int,
    damage: Optional[DamageResult] = None,
    luck_spent: Optional[int] = None,
) -> CombatLogEntry:
    if hit.success:
        dealt = damage.total if damage else 0
        label = f"Turn {turn} - player hits ({_rolls_label(hit)}) for {dealt} damage"
    else:
        label = f"Turn {turn} - player misses ({_rolls_label(hit)} > DEX {dexterity})"
    return CombatLogEntry(
        turn=turn,
        actor="player",
        rolls=hit.rolls,
        success=hit.success,
        label=label,
        damage=damage.total if (hit.success and damage) else None,
        luck_spent=luck_spent,
    )


def build_enemy_entry(
    turn: int,
    enemy: Enemy,
    hit: HitResult,
    damage: Optional[DamageResult] = None,
) -> CombatLogEntry:
    if hit.success:
        dealt = damage.total if damage else 0
        label = f"Turn {turn} - {enemy.name} hits ({_rolls_label(hit)}) for {dealt} damage"
    else:
        label = f"Turn {turn} - {enemy.name} misses ({_rolls_label(hit)})"
    return CombatLogEntry(
        turn=turn,
        actor=enemy.id,
        rolls=hit.rolls,
        success=hit.success,
        label=label,
        damage=damage.total if (hit.success and damage) else None,
    )

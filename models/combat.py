"""Combat-local data. Enemies live only for the duration of a fight."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Enemy:
    id: str
    name: str
    hp_max: int = 10
    hp_current: int = 10
    dexterity: int = 6
    attack_bonus: int = 0


@dataclass(frozen=True)
class CombatLogEntry:
    """One resolved attack, as shown to the player."""
    turn: int
    actor: str  # "player" or an enemy id
    rolls: tuple[int, ...]
    success: bool
    label: str
    damage: Optional[int] = None
    luck_spent: Optional[int] = None


@dataclass
class CombatState:
    """Mutable bookkeeping for a running fight."""
    party_id: str
    enemies: list[Enemy]
    turn: int = 1
    log: list[CombatLogEntry] = field(default_factory=list)

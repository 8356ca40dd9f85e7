"""Party aggregate: the campaign root, its character and inventory."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import ConfigDict, with_config
from pydantic.alias_generators import to_camel

from models.enums import GameMode, PartyStatus, Talent

# Stored and exported documents use camelCase keys
CAMEL_CONFIG = ConfigDict(alias_generator=to_camel)


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Weapon:
    """A weapon; ``bonus`` is added to damage rolls."""
    id: str
    name: str
    bonus: int = 0
    description: Optional[str] = None


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Item:
    """A stack of carried items."""
    id: str
    name: str
    quantity: int = 1
    description: Optional[str] = None


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Currency:
    boulons: int = 0


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Inventory:
    """Weapons, items and money carried by the character."""
    weapons: list[Weapon] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    currency: Currency = field(default_factory=Currency)
    equipped_weapon_id: Optional[str] = None  # Falls back to the first weapon


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Character:
    """The player character. Only rules functions produce new versions."""
    name: str
    talent: Talent
    hp_max: int
    hp_current: int
    luck: int
    dexterity: int
    inventory: Inventory = field(default_factory=Inventory)


@with_config(CAMEL_CONFIG)
@dataclass(frozen=True)
class Party:
    """One playthrough. Notes, saves and timeline reference it by id."""
    id: str
    name: str
    mode: GameMode
    status: PartyStatus
    current_chapter: int
    character: Character
    created_at: str  # ISO-8601 UTC
    updated_at: str

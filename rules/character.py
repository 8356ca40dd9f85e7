"""Character rules: creation, HP and luck bookkeeping, death, inventory.

Every function is pure and returns a new ``Character``; nothing here reads
the clock, the dice or the database.
"""

from dataclasses import fields, replace
from typing import Any, Optional

from config.exceptions import InvalidInputError
from models.enums import GameMode, Talent
from models.party import Character, Currency, Inventory, Item, Weapon

INITIAL_DEXTERITY = 7
MAX_SAVE_SLOTS = 3
HP_MULTIPLIER = 4

_INVENTORY_FIELDS = frozenset(f.name for f in fields(Inventory))


def create_initial_inventory() -> Inventory:
    return Inventory(weapons=[], items=[], currency=Currency(boulons=0))


def create_character(name: str, talent: Talent, hp_roll: int, luck_roll: int) -> Character:
    """Build a fresh character from its creation rolls.

    ``hp_roll`` is the sum of 2d6 and ``luck_roll`` a single d6. Ranges are
    not checked here; rolling is the caller's job.
    """
    hp_max = hp_roll * HP_MULTIPLIER
    return Character(
        name=name,
        talent=talent,
        hp_max=hp_max,
        hp_current=hp_max,
        luck=luck_roll,
        dexterity=INITIAL_DEXTERITY,
        inventory=create_initial_inventory(),
    )


def apply_hp_change(character: Character, delta: int) -> Character:
    hp_current = max(0, min(character.hp_max, character.hp_current + delta))
    return replace(character, hp_current=hp_current)


def apply_luck_cost(character: Character, cost: int) -> Character:
    """Spend luck, flooring at zero. Callers that must not overspend check first."""
    return replace(character, luck=max(0, character.luck - cost))


def is_dead(character: Character) -> bool:
    return character.hp_current <= 0


def apply_death_reset(character: Character) -> Character:
    """Full HP and an empty inventory; luck is kept."""
    return replace(
        character,
        hp_current=character.hp_max,
        inventory=create_initial_inventory(),
    )


def can_restore_any_slot(mode: GameMode) -> bool:
    return mode != GameMode.SIMPLIFIED


def equipped_weapon(inventory: Inventory) -> Optional[Weapon]:
    """Return the equipped weapon, the first weapon, or None when unarmed."""
    if inventory.equipped_weapon_id is not None:
        for weapon in inventory.weapons:
            if weapon.id == inventory.equipped_weapon_id:
                return weapon
    return inventory.weapons[0] if inventory.weapons else None


def _coerce(value: Any, cls: type) -> Any:
    if isinstance(value, cls):
        return value
    if isinstance(value, dict):
        try:
            return cls(**value)
        except TypeError as e:
            raise InvalidInputError(f"Invalid {cls.__name__.lower()}: {e}") from e
    raise InvalidInputError(f"Expected {cls.__name__}, got {type(value).__name__}")


def validate_inventory(inventory: Inventory) -> Inventory:
    """Check the inventory invariants and return it unchanged.

    Raises:
        InvalidInputError: On duplicate ids, non-positive quantities, negative
            currency or an equipped id that matches no weapon.
    """
    weapon_ids = [w.id for w in inventory.weapons]
    if len(set(weapon_ids)) != len(weapon_ids):
        raise InvalidInputError("Duplicate weapon id", {"weapon_ids": weapon_ids})
    item_ids = [i.id for i in inventory.items]
    if len(set(item_ids)) != len(item_ids):
        raise InvalidInputError("Duplicate item id", {"item_ids": item_ids})
    for item in inventory.items:
        if item.quantity < 1:
            raise InvalidInputError("Item quantity must be positive", {"item": item.name, "quantity": item.quantity})
    if inventory.currency.boulons < 0:
        raise InvalidInputError("Currency cannot be negative", {"boulons": inventory.currency.boulons})
    if inventory.equipped_weapon_id is not None and inventory.equipped_weapon_id not in weapon_ids:
        raise InvalidInputError(
            "Equipped weapon is not in the inventory",
            {"equipped_weapon_id": inventory.equipped_weapon_id},
        )
    return inventory


def apply_inventory_patch(character: Character, patch: dict[str, Any]) -> Character:
    """Merge ``patch`` onto the character's inventory.

    Keys are ``Inventory`` field names; list and currency values may be
    dataclasses or plain dicts. Unequipping is ``{"equipped_weapon_id": None}``.
    Removing the equipped weapon also clears the equipped reference.
    """
    unknown = set(patch) - _INVENTORY_FIELDS
    if unknown:
        raise InvalidInputError("Unknown inventory fields", {"fields": sorted(unknown)})

    changes: dict[str, Any] = {}
    if "weapons" in patch:
        changes["weapons"] = [_coerce(w, Weapon) for w in patch["weapons"]]
    if "items" in patch:
        changes["items"] = [_coerce(i, Item) for i in patch["items"]]
    if "currency" in patch:
        currency = patch["currency"]
        changes["currency"] = Currency(boulons=currency) if isinstance(currency, int) else _coerce(currency, Currency)
    if "equipped_weapon_id" in patch:
        changes["equipped_weapon_id"] = patch["equipped_weapon_id"]

    inventory = replace(character.inventory, **changes)
    if "equipped_weapon_id" not in patch and inventory.equipped_weapon_id is not None:
        if inventory.equipped_weapon_id not in {w.id for w in inventory.weapons}:
            inventory = replace(inventory, equipped_weapon_id=None)
    return replace(character, inventory=validate_inventory(inventory))

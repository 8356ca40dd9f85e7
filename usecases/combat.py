"""Turn-by-turn combat driven by the pure combat rules.

Enemy damage goes through ``UpdateHpUseCase`` so death handling stays in
one place; luck goes through ``ApplyLuckUseCase``. A session ends exactly
once, in victory, defeat or mortal death.
"""

import logging
from typing import Optional, Sequence

from config.exceptions import CombatOverError, InsufficientLuckError, InvalidInputError
from models.combat import CombatLogEntry, CombatState, Enemy
from models.enums import CombatOutcome, TimelineEventType
from rules.character import equipped_weapon
from rules.combat import (
    HitResult,
    apply_damage_to_enemy,
    apply_luck_to_die,
    build_enemy_entry,
    build_player_entry,
    is_victory,
    resolve_damage,
    resolve_hit,
)
from usecases.base import load_party, require_active
from usecases.events import DomainEvent, EventPublisher
from usecases.party import ApplyLuckUseCase, UpdateHpUseCase
from usecases.ports import Clock, DiceRoller, PartyRepositoryPort

logger = logging.getLogger(__name__)

MAX_ENEMIES = 5
MAX_DEXTERITY = 12


def check_enemy(enemy: Enemy) -> Enemy:
    """Reject enemies that could not take part in a fight."""
    if enemy.hp_max < 1 or not 1 <= enemy.hp_current <= enemy.hp_max:
        raise InvalidInputError(
            f"{enemy.name} needs between 1 HP and its maximum",
            {"enemy_id": enemy.id, "hp_max": enemy.hp_max, "hp_current": enemy.hp_current},
        )
    if not 1 <= enemy.dexterity <= MAX_DEXTERITY:
        raise InvalidInputError(
            f"{enemy.name}: dexterity must be 1 to {MAX_DEXTERITY}",
            {"enemy_id": enemy.id, "dexterity": enemy.dexterity},
        )
    if enemy.attack_bonus < 0:
        raise InvalidInputError(
            f"{enemy.name}: attack bonus cannot be negative",
            {"enemy_id": enemy.id, "attack_bonus": enemy.attack_bonus},
        )
    return enemy


class CombatSession:
    def __init__(
        self,
        party_id: str,
        enemies: Sequence[Enemy],
        parties: PartyRepositoryPort,
        events: EventPublisher,
        dice: DiceRoller,
        clock: Clock,
        update_hp: UpdateHpUseCase,
        apply_luck: ApplyLuckUseCase,
    ):
        if not 1 <= len(enemies) <= MAX_ENEMIES:
            raise InvalidInputError(f"A fight needs 1 to {MAX_ENEMIES} enemies", {"enemies": len(enemies)})
        if len({e.id for e in enemies}) != len(enemies):
            raise InvalidInputError("Enemy ids must be unique")
        self.state = CombatState(party_id=party_id, enemies=[check_enemy(e) for e in enemies])
        self.outcome = CombatOutcome.ONGOING
        self.started = False
        self.parties = parties
        self.events = events
        self.dice = dice
        self.clock = clock
        self.update_hp = update_hp
        self.apply_luck = apply_luck
        # Last missed player attack, open to luck or a reroll
        self._pending: Optional[tuple[HitResult, str]] = None

    @property
    def party_id(self) -> str:
        return self.state.party_id

    @property
    def enemies(self) -> list[Enemy]:
        return list(self.state.enemies)

    @property
    def log(self) -> list[CombatLogEntry]:
        return list(self.state.log)

    # ---- lifecycle ----

    def start(self) -> None:
        if self.started:
            return
        require_active(load_party(self.parties, self.party_id))
        self._publish(
            TimelineEventType.COMBAT_STARTED,
            f"Combat started against {len(self.state.enemies)} enemy(ies)",
            {"enemies": [e.name for e in self.state.enemies]},
        )
        self.started = True

    def _ensure_ongoing(self) -> None:
        if self.outcome != CombatOutcome.ONGOING:
            raise CombatOverError("Combat is over", {"outcome": self.outcome.value})
        if not self.started:
            self.start()

    def _publish(self, event_type: TimelineEventType, label: str, payload: Optional[dict] = None) -> None:
        self.events.publish(DomainEvent(
            party_id=self.party_id, type=event_type, label=label, payload=payload,
        ), self.clock.now())

    def _finish(self, outcome: CombatOutcome) -> None:
        self.outcome = outcome
        self._pending = None
        if outcome == CombatOutcome.VICTORY:
            self._publish(TimelineEventType.COMBAT_VICTORY, "Victory!", {"turn": self.state.turn})
        elif outcome == CombatOutcome.DEFEAT:
            self._publish(TimelineEventType.COMBAT_DEFEAT, "Defeat - HP at 0.", {"turn": self.state.turn})
        # Mortal death is already on the timeline from the HP update
        logger.info("Combat for party %s ended: %s", self.party_id, outcome.value)

    def _enemy(self, enemy_id: str) -> Enemy:
        for enemy in self.state.enemies:
            if enemy.id == enemy_id:
                if enemy.hp_current <= 0:
                    raise InvalidInputError(f"{enemy.name} is already down", {"enemy_id": enemy_id})
                return enemy
        raise InvalidInputError("No such enemy in this fight", {"enemy_id": enemy_id})

    # ---- player actions ----

    def player_attack(self, enemy_id: str) -> CombatLogEntry:
        self._ensure_ongoing()
        self._enemy(enemy_id)
        hit = resolve_hit(self.dice.roll_2d6(), self._dexterity())
        return self._resolve_player_hit(hit, enemy_id)

    def _dexterity(self) -> int:
        return load_party(self.parties, self.party_id).character.dexterity

    def _resolve_player_hit(
        self,
        hit: HitResult,
        enemy_id: str,
        luck_spent: Optional[int] = None,
        replaces_miss: bool = False,
    ) -> CombatLogEntry:
        """Apply one player attack. A replayed attack that still misses is
        not logged again: the timeline already holds the original miss."""
        turn = self.state.turn
        party = load_party(self.parties, self.party_id)
        if hit.success:
            weapon = equipped_weapon(party.character.inventory)
            damage = resolve_damage(self.dice.roll_d6(), weapon.bonus if weapon else 0)
            self.state.enemies = [
                apply_damage_to_enemy(e, damage.total) if e.id == enemy_id else e
                for e in self.state.enemies
            ]
            entry = build_player_entry(turn, hit, party.character.dexterity, damage, luck_spent)
            self._publish(TimelineEventType.COMBAT_HIT, entry.label, {
                "rolls": list(hit.rolls), "damage": damage.total, "turn": turn, "enemy_id": enemy_id,
            })
            self._pending = None
        else:
            entry = build_player_entry(turn, hit, party.character.dexterity, luck_spent=luck_spent)
            if not replaces_miss:
                self._publish(TimelineEventType.COMBAT_MISS, entry.label, {
                    "rolls": list(hit.rolls), "turn": turn, "enemy_id": enemy_id,
                })
            self._pending = (hit, enemy_id)
        self.state.log.append(entry)
        if is_victory(self.state.enemies):
            self._finish(CombatOutcome.VICTORY)
        return entry

    def spend_luck(self, die_index: int, target_value: int) -> CombatLogEntry:
        """Turn one die of the last missed attack into ``target_value``.

        Costs one luck per pip moved. If the adjusted roll hits, damage is
        rolled and applied as for a normal hit.
        """
        self._ensure_ongoing()
        if self._pending is None:
            raise InvalidInputError("No missed attack to adjust")
        if die_index not in (0, 1):
            raise InvalidInputError("Die index must be 0 or 1", {"die_index": die_index})
        if not 1 <= target_value <= 6:
            raise InvalidInputError("A die shows 1 to 6", {"target_value": target_value})
        hit, enemy_id = self._pending
        original = hit.rolls[die_index]
        luck = load_party(self.parties, self.party_id).character.luck
        adjustment = apply_luck_to_die(original, target_value, luck)
        if adjustment is None:
            if target_value == original:
                raise InvalidInputError("The die already shows that value", {"value": original})
            raise InsufficientLuckError(abs(target_value - original), luck)

        self.apply_luck.execute(self.party_id, adjustment.luck_cost)
        rolls = list(hit.rolls)
        rolls[die_index] = adjustment.new_roll
        # Drop the missed entry; the adjusted attack replaces it
        self.state.log.pop()
        return self._resolve_player_hit(
            resolve_hit(rolls, self._dexterity()), enemy_id,
            luck_spent=adjustment.luck_cost, replaces_miss=True,
        )

    def reroll_player_attack(self) -> CombatLogEntry:
        """Roll the last missed attack again, for a roll that did not register."""
        self._ensure_ongoing()
        if self._pending is None:
            raise InvalidInputError("No missed attack to reroll")
        hit, enemy_id = self._pending
        rolls = self.dice.roll_2d6()
        self._publish(TimelineEventType.DICE_REROLLED, f"Reroll: {hit.total} -> {sum(rolls)}", {
            "context": "combat-player-attack", "before": hit.total, "after": sum(rolls),
        })
        self.state.log.pop()
        return self._resolve_player_hit(resolve_hit(rolls, self._dexterity()), enemy_id, replaces_miss=True)

    # ---- enemy actions ----

    def enemy_attack(self, enemy_id: str) -> CombatLogEntry:
        self._ensure_ongoing()
        enemy = self._enemy(enemy_id)
        turn = self.state.turn
        hit = resolve_hit(self.dice.roll_2d6(), enemy.dexterity)
        self._pending = None

        if hit.success:
            damage = resolve_damage(self.dice.roll_d6(), enemy.attack_bonus)
            entry = build_enemy_entry(turn, enemy, hit, damage)
            hp_result = self.update_hp.execute(self.party_id, -damage.total)
            self._publish(TimelineEventType.COMBAT_ENEMY_HIT, entry.label, {
                "rolls": list(hit.rolls), "damage": damage.total, "turn": turn, "enemy_id": enemy.id,
            })
            self.state.log.append(entry)
            if hp_result.is_mortal_death:
                self._finish(CombatOutcome.MORTAL_DEATH)
                return entry
            if hp_result.is_dead:
                self._finish(CombatOutcome.DEFEAT)
                return entry
        else:
            entry = build_enemy_entry(turn, enemy, hit)
            self._publish(TimelineEventType.COMBAT_ENEMY_MISS, entry.label, {
                "rolls": list(hit.rolls), "turn": turn, "enemy_id": enemy.id,
            })
            self.state.log.append(entry)

        self.state.turn += 1
        return entry

    def add_enemy(self, enemy: Enemy) -> None:
        """Reinforcements joining before the first blow."""
        if self.started:
            raise InvalidInputError("Enemies can only be added before the fight starts")
        if len(self.state.enemies) >= MAX_ENEMIES:
            raise InvalidInputError(f"A fight has at most {MAX_ENEMIES} enemies")
        if any(e.id == enemy.id for e in self.state.enemies):
            raise InvalidInputError("Enemy ids must be unique")
        self.state.enemies.append(check_enemy(enemy))

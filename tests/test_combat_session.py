"""Tests for the turn-by-turn combat session."""

import pytest

from config.exceptions import (
    CombatOverError,
    InsufficientLuckError,
    InvalidInputError,
    PartyNotActiveError,
)
from models.combat import Enemy
from models.enums import CombatOutcome, GameMode, PartyStatus, TimelineEventType


def _types(container, party_id):
    return [e.type for e in reversed(container.db.timeline.find_by_party(party_id))]


@pytest.fixture
def wolf():
    return Enemy(id="wolf", name="Wolf", hp_max=10, hp_current=10, dexterity=6, attack_bonus=1)


class TestSetup:
    def test_start_logs_once(self, container, party, wolf):
        session = container.combat(party.id, [wolf])
        session.start()
        session.start()
        assert _types(container, party.id).count(TimelineEventType.COMBAT_STARTED) == 1
        assert session.outcome == CombatOutcome.ONGOING

    @pytest.mark.parametrize("count", [0, 6])
    def test_enemy_count_bounds(self, container, party, count):
        enemies = [Enemy(id=f"e{i}", name=f"E{i}") for i in range(count)]
        with pytest.raises(InvalidInputError):
            container.combat(party.id, enemies)

    def test_duplicate_enemy_ids(self, container, party):
        with pytest.raises(InvalidInputError):
            container.combat(party.id, [Enemy(id="e", name="A"), Enemy(id="e", name="B")])

    @pytest.mark.parametrize("stats", [
        {"hp_max": 0, "hp_current": 0},
        {"hp_max": 5, "hp_current": 0},
        {"hp_max": 5, "hp_current": 6},
        {"dexterity": 0},
        {"dexterity": 13},
        {"attack_bonus": -1},
    ])
    def test_unfit_enemy_rejected(self, container, party, stats):
        with pytest.raises(InvalidInputError):
            container.combat(party.id, [Enemy(id="e", name="Rat", **stats)])
        assert container.db.timeline.find_by_party(party.id)[0].type == TimelineEventType.PARTY_CREATED

    def test_dead_party_cannot_fight(self, container, make_party, wolf):
        party = make_party(mode=GameMode.MORTAL)
        container.update_hp.execute(party.id, -28)
        with pytest.raises(PartyNotActiveError):
            container.combat(party.id, [wolf]).start()

    def test_first_action_starts_the_fight(self, container, party, wolf, dice):
        dice.push(6, 6)
        container.combat(party.id, [wolf]).player_attack("wolf")
        assert _types(container, party.id)[1:3] == [TimelineEventType.COMBAT_STARTED, TimelineEventType.COMBAT_MISS]


class TestPlayerAttack:
    def test_hit_damages_enemy(self, container, party, wolf, dice):
        dice.push(3, 4, 2)
        session = container.combat(party.id, [wolf])
        entry = session.player_attack("wolf")

        assert entry.success
        assert entry.damage == 3
        assert entry.label == "Turn 1 - player hits (3+4=7) for 3 damage"
        assert session.enemies[0].hp_current == 7
        hit = container.db.timeline.find_by_party(party.id)[0]
        assert hit.type == TimelineEventType.COMBAT_HIT
        assert hit.payload["damage"] == 3

    def test_miss(self, container, party, wolf, dice):
        dice.push(4, 4)
        session = container.combat(party.id, [wolf])
        entry = session.player_attack("wolf")
        assert not entry.success
        assert entry.damage is None
        assert session.enemies[0].hp_current == 10

    def test_equipped_weapon_adds_bonus(self, container, party, wolf, dice):
        container.update_inventory.execute(
            party.id, {"weapons": [{"id": "s", "name": "Sword", "bonus": 2}]}, "Sword found",
        )
        dice.push(1, 1, 3)
        entry = container.combat(party.id, [wolf]).player_attack("wolf")
        assert entry.damage == 6

    def test_unknown_or_downed_enemy(self, container, party, dice):
        rat = Enemy(id="rat", name="Rat", hp_max=2, hp_current=2)
        wolf = Enemy(id="wolf", name="Wolf")
        session = container.combat(party.id, [rat, wolf])
        with pytest.raises(InvalidInputError):
            session.player_attack("bear")
        dice.push(1, 1, 1)
        session.player_attack("rat")
        with pytest.raises(InvalidInputError, match="already down"):
            session.player_attack("rat")

    def test_victory_ends_the_fight(self, container, party, dice):
        rat = Enemy(id="rat", name="Rat", hp_max=3, hp_current=3)
        dice.push(1, 1, 2)
        session = container.combat(party.id, [rat])
        session.player_attack("rat")

        assert session.outcome == CombatOutcome.VICTORY
        assert _types(container, party.id)[-1] == TimelineEventType.COMBAT_VICTORY
        with pytest.raises(CombatOverError):
            session.player_attack("rat")
        with pytest.raises(CombatOverError):
            session.enemy_attack("rat")


class TestLuck:
    def test_luck_turns_a_miss_into_a_hit(self, container, party, wolf, dice):
        dice.push(5, 6)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")

        dice.push(4)
        entry = session.spend_luck(1, 2)

        assert entry.success
        assert entry.rolls == (5, 2)
        assert entry.luck_spent == 4
        assert entry.damage == 5
        assert len(session.log) == 1
        assert container.db.parties.find_by_id(party.id).character.luck == 0
        assert _types(container, party.id)[-3:] == [
            TimelineEventType.COMBAT_MISS, TimelineEventType.LUCK_SPENT, TimelineEventType.COMBAT_HIT,
        ]

    def test_adjusted_roll_can_still_miss(self, container, party, wolf, dice):
        dice.push(6, 6)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")
        entry = session.spend_luck(0, 3)
        assert not entry.success
        assert entry.rolls == (3, 6)
        assert container.db.parties.find_by_id(party.id).character.luck == 1
        assert len(session.log) == 1
        assert _types(container, party.id)[-2:] == [TimelineEventType.COMBAT_MISS, TimelineEventType.LUCK_SPENT]
        assert _types(container, party.id).count(TimelineEventType.COMBAT_MISS) == 1

    def test_not_enough_luck(self, container, party, wolf, dice):
        dice.push(6, 6)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")
        with pytest.raises(InsufficientLuckError):
            session.spend_luck(0, 1)
        assert container.db.parties.find_by_id(party.id).character.luck == 4

    def test_same_value_is_rejected(self, container, party, wolf, dice):
        dice.push(6, 6)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")
        with pytest.raises(InvalidInputError):
            session.spend_luck(0, 6)

    def test_nothing_to_adjust(self, container, party, wolf, dice):
        dice.push(1, 2, 1)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")
        with pytest.raises(InvalidInputError, match="No missed attack"):
            session.spend_luck(0, 1)


class TestReroll:
    def test_reroll_replaces_the_miss(self, container, party, wolf, dice):
        dice.push(6, 6)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")

        dice.push(1, 2, 1)
        entry = session.reroll_player_attack()

        assert entry.success
        assert len(session.log) == 1
        reroll = next(e for e in container.db.timeline.find_by_party(party.id)
                      if e.type == TimelineEventType.DICE_REROLLED)
        assert reroll.payload == {"context": "combat-player-attack", "before": 12, "after": 3}

    def test_reroll_that_misses_again_is_not_logged_twice(self, container, party, wolf, dice):
        dice.push(6, 6)
        session = container.combat(party.id, [wolf])
        session.player_attack("wolf")

        dice.push(5, 4)
        entry = session.reroll_player_attack()

        assert not entry.success
        assert entry.rolls == (5, 4)
        assert len(session.log) == 1
        assert _types(container, party.id)[-2:] == [TimelineEventType.COMBAT_MISS, TimelineEventType.DICE_REROLLED]
        assert _types(container, party.id).count(TimelineEventType.COMBAT_MISS) == 1
        # The miss can still be adjusted after a reroll
        dice.push(3)
        assert session.spend_luck(0, 1).success

    def test_nothing_to_reroll(self, container, party, wolf):
        session = container.combat(party.id, [wolf])
        with pytest.raises(InvalidInputError):
            session.reroll_player_attack()


class TestEnemyAttack:
    def test_hit_goes_through_hp_update(self, container, party, wolf, dice):
        dice.push(2, 2, 3)
        session = container.combat(party.id, [wolf])
        entry = session.enemy_attack("wolf")

        assert entry.success
        assert entry.damage == 5
        assert entry.actor == "wolf"
        assert container.db.parties.find_by_id(party.id).character.hp_current == 23
        assert session.state.turn == 2
        assert _types(container, party.id)[-2:] == [TimelineEventType.HP_CHANGED, TimelineEventType.COMBAT_ENEMY_HIT]

    def test_miss_leaves_hp(self, container, party, wolf, dice):
        dice.push(6, 5)
        session = container.combat(party.id, [wolf])
        entry = session.enemy_attack("wolf")
        assert not entry.success
        assert container.db.parties.find_by_id(party.id).character.hp_current == 28
        assert _types(container, party.id)[-1] == TimelineEventType.COMBAT_ENEMY_MISS

    def test_defeat_outside_mortal_mode(self, container, party, dice):
        brute = Enemy(id="brute", name="Brute", dexterity=12, attack_bonus=30)
        dice.push(1, 1, 6)
        session = container.combat(party.id, [brute])
        session.enemy_attack("brute")

        assert session.outcome == CombatOutcome.DEFEAT
        assert _types(container, party.id)[-1] == TimelineEventType.COMBAT_DEFEAT
        assert container.db.parties.find_by_id(party.id).status == PartyStatus.ACTIVE
        with pytest.raises(CombatOverError):
            session.player_attack("brute")

    def test_mortal_death_is_its_own_outcome(self, container, make_party, dice):
        party = make_party(mode=GameMode.MORTAL)
        brute = Enemy(id="brute", name="Brute", dexterity=12, attack_bonus=30)
        dice.push(1, 1, 6)
        session = container.combat(party.id, [brute])
        session.enemy_attack("brute")

        assert session.outcome == CombatOutcome.MORTAL_DEATH
        types = _types(container, party.id)
        assert TimelineEventType.DEATH_RESET in types
        assert TimelineEventType.COMBAT_DEFEAT not in types
        assert container.db.parties.find_by_id(party.id).status == PartyStatus.DEAD


class TestAddEnemy:
    def test_before_start_only(self, container, party, wolf):
        session = container.combat(party.id, [wolf])
        session.add_enemy(Enemy(id="cub", name="Cub"))
        assert len(session.enemies) == 2
        session.start()
        with pytest.raises(InvalidInputError):
            session.add_enemy(Enemy(id="pup", name="Pup"))

    def test_unfit_reinforcement_rejected(self, container, party, wolf):
        session = container.combat(party.id, [wolf])
        with pytest.raises(InvalidInputError):
            session.add_enemy(Enemy(id="ghost", name="Ghost", hp_max=4, hp_current=0))
        assert len(session.enemies) == 1

    def test_cap(self, container, party):
        session = container.combat(party.id, [Enemy(id=f"e{i}", name="E") for i in range(5)])
        with pytest.raises(InvalidInputError):
            session.add_enemy(Enemy(id="e9", name="E"))

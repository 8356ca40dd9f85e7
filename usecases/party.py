"""Use cases that create a party and change its live state."""

import logging
from dataclasses import dataclass, replace
from typing import Any

from config.exceptions import InsufficientLuckError, InvalidConfigError, InvalidInputError
from models.enums import GameMode, PartyStatus, Talent, TimelineEventType
from models.party import Party
from rules.character import (
    apply_death_reset,
    apply_hp_change,
    apply_inventory_patch,
    apply_luck_cost,
    create_character,
    is_dead,
)
from usecases.base import load_party, new_id, require_active
from usecases.events import DomainEvent, EventPublisher
from usecases.ports import Clock, DiceRoller, PartyRepositoryPort

logger = logging.getLogger(__name__)

DEATH_POLICIES = ("permadeath", "reset")


class CreatePartyUseCase:
    def __init__(
        self,
        parties: PartyRepositoryPort,
        events: EventPublisher,
        dice: DiceRoller,
        clock: Clock,
    ):
        self.parties = parties
        self.events = events
        self.dice = dice
        self.clock = clock

    def execute(self, name: str, mode: GameMode, talent: Talent, character_name: str) -> Party:
        if not name.strip() or not character_name.strip():
            raise InvalidInputError("Party and character names are required")

        hp_roll = sum(self.dice.roll_nd6(2))
        luck_roll = self.dice.roll_d6()
        now = self.clock.now()
        party_id = new_id()

        character = create_character(character_name.strip(), talent, hp_roll, luck_roll)
        party = Party(
            id=party_id,
            name=name.strip(),
            mode=mode,
            status=PartyStatus.ACTIVE,
            current_chapter=1,
            character=character,
            created_at=now,
            updated_at=now,
        )
        self.parties.save(party)

        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.PARTY_CREATED,
            label=f'Party "{party.name}" created (mode {mode.value})',
            payload={"mode": mode.value, "talent": talent.value, "hp_roll": hp_roll, "luck_roll": luck_roll},
            outbox_payload={"party_id": party_id, "name": party.name, "mode": mode.value},
        ), now)
        logger.info("Created party %s (%s, hp=%d, luck=%d)", party_id, mode.value, character.hp_max, character.luck)
        return party


class UpdateChapterUseCase:
    def __init__(self, parties: PartyRepositoryPort, events: EventPublisher, clock: Clock):
        self.parties = parties
        self.events = events
        self.clock = clock

    def execute(self, party_id: str, chapter: int) -> Party:
        """Move the party to ``chapter``. Same chapter is a silent no-op."""
        if chapter < 1:
            raise InvalidInputError("Chapter must be a positive integer", {"chapter": chapter})
        party = load_party(self.parties, party_id)
        require_active(party)
        if chapter == party.current_chapter:
            return party

        now = self.clock.now()
        updated = replace(party, current_chapter=chapter, updated_at=now)
        self.parties.save(updated)
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.CHAPTER_SET,
            label=f"Chapter {party.current_chapter} -> {chapter}",
            payload={"chapter": chapter, "previous": party.current_chapter},
        ), now)
        return updated


@dataclass(frozen=True)
class UpdateHpResult:
    hp_before: int
    hp_after: int
    is_dead: bool  # HP reached zero, whatever the mode
    is_mortal_death: bool  # Mortal mode under permadeath: the party is over
    was_reset: bool = False  # Mortal mode under the reset policy


class UpdateHpUseCase:
    """Apply damage or healing, and the Mortal-mode death policy at zero HP.

    ``death_policy`` is ``"permadeath"`` (status becomes DEAD, HP stays 0)
    or ``"reset"`` (chapter 1, full HP, empty inventory, party stays ACTIVE).
    """

    def __init__(
        self,
        parties: PartyRepositoryPort,
        events: EventPublisher,
        clock: Clock,
        death_policy: str = "permadeath",
    ):
        if death_policy not in DEATH_POLICIES:
            raise InvalidConfigError("Unknown death policy", {"death_policy": death_policy})
        self.parties = parties
        self.events = events
        self.clock = clock
        self.death_policy = death_policy

    def execute(self, party_id: str, delta: int) -> UpdateHpResult:
        party = load_party(self.parties, party_id)
        require_active(party)
        now = self.clock.now()

        before = party.character.hp_current
        character = apply_hp_change(party.character, delta)
        updated = replace(party, character=character, updated_at=now)

        dead = is_dead(character)
        mortal = dead and party.mode == GameMode.MORTAL
        permanent = mortal and self.death_policy == "permadeath"
        reset = mortal and self.death_policy == "reset"

        if permanent:
            updated = replace(updated, status=PartyStatus.DEAD)
        elif reset:
            updated = replace(updated, character=apply_death_reset(character), current_chapter=1)

        self.parties.save(updated)

        sign = "+" if delta > 0 else ""
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.HP_CHANGED,
            label=f"HP {sign}{delta} ({character.hp_current}/{character.hp_max})",
            payload={"delta": delta, "before": before, "after": character.hp_current},
        ), now)

        if permanent:
            self.events.publish(DomainEvent(
                party_id=party_id,
                type=TimelineEventType.DEATH_RESET,
                label="Permanent death - the adventure ends.",
                payload={"policy": "permadeath", "chapter": party.current_chapter},
                outbox_payload={"party_id": party_id, "status": PartyStatus.DEAD.value},
            ), now)
            logger.info("Party %s died in Mortal mode", party_id)
        elif reset:
            self.events.publish(DomainEvent(
                party_id=party_id,
                type=TimelineEventType.DEATH_RESET,
                label="Death - back to chapter 1 with full HP and an empty pack.",
                payload={"policy": "reset", "previous_chapter": party.current_chapter},
                outbox_payload={"party_id": party_id, "chapter": 1},
            ), now)
            logger.info("Party %s reset to chapter 1 after death", party_id)

        return UpdateHpResult(
            hp_before=before,
            hp_after=updated.character.hp_current,
            is_dead=dead,
            is_mortal_death=permanent,
            was_reset=reset,
        )


class ApplyLuckUseCase:
    def __init__(self, parties: PartyRepositoryPort, events: EventPublisher, clock: Clock):
        self.parties = parties
        self.events = events
        self.clock = clock

    def execute(self, party_id: str, cost: int) -> Party:
        """Spend exactly ``cost`` luck, refusing rather than clamping."""
        if cost < 1:
            raise InvalidInputError("Luck cost must be positive", {"cost": cost})
        party = load_party(self.parties, party_id)
        require_active(party)
        if party.character.luck < cost:
            logger.warning("Party %s: luck %d < cost %d", party_id, party.character.luck, cost)
            raise InsufficientLuckError(cost, party.character.luck)

        now = self.clock.now()
        character = apply_luck_cost(party.character, cost)
        updated = replace(party, character=character, updated_at=now)
        self.parties.save(updated)
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.LUCK_SPENT,
            label=f"Luck spent: -{cost} ({character.luck} left)",
            payload={"cost": cost, "remaining": character.luck},
        ), now)
        return updated


class UpdateInventoryUseCase:
    """Single entry point for every inventory edit: equip, loot, pay, drop."""

    def __init__(self, parties: PartyRepositoryPort, events: EventPublisher, clock: Clock):
        self.parties = parties
        self.events = events
        self.clock = clock

    def execute(self, party_id: str, patch: dict[str, Any], label: str) -> Party:
        if not label or not label.strip():
            raise InvalidInputError("An inventory change needs a label")
        if not patch:
            raise InvalidInputError("Inventory patch is empty")
        party = load_party(self.parties, party_id)
        require_active(party)

        now = self.clock.now()
        character = apply_inventory_patch(party.character, patch)
        updated = replace(party, character=character, updated_at=now)
        self.parties.save(updated)
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.INVENTORY_CHANGED,
            label=label.strip(),
            payload={"fields": sorted(patch)},
        ), now)
        return updated


class FinishPartyUseCase:
    def __init__(self, parties: PartyRepositoryPort, events: EventPublisher, clock: Clock):
        self.parties = parties
        self.events = events
        self.clock = clock

    def execute(self, party_id: str) -> Party:
        party = load_party(self.parties, party_id)
        require_active(party)
        now = self.clock.now()
        updated = replace(party, status=PartyStatus.FINISHED, updated_at=now)
        self.parties.save(updated)
        self.events.publish(DomainEvent(
            party_id=party_id,
            type=TimelineEventType.PARTY_FINISHED,
            label="Party finished",
            payload={"chapter": party.current_chapter},
        ), now)
        return updated


class DeletePartyUseCase:
    def __init__(self, parties: PartyRepositoryPort):
        self.parties = parties

    def execute(self, party_id: str) -> None:
        """Remove the party and everything attached to it."""
        load_party(self.parties, party_id)
        self.parties.delete(party_id)
        logger.info("Deleted party %s", party_id)

"""Wire the SQLite store, adapters and use cases from settings."""

import logging
from typing import Optional, Sequence

from adapters.clock import SystemClock
from adapters.dice import make_dice_roller
from adapters.json_codec import JsonCodec
from config.settings import Settings, get_settings
from models.combat import Enemy
from models.database import Database
from usecases.combat import CombatSession
from usecases.events import EventPublisher
from usecases.journal import AddCustomActionUseCase, AddNoteUseCase
from usecases.party import (
    ApplyLuckUseCase,
    CreatePartyUseCase,
    DeletePartyUseCase,
    FinishPartyUseCase,
    UpdateChapterUseCase,
    UpdateHpUseCase,
    UpdateInventoryUseCase,
)
from usecases.ports import Clock, DiceRoller
from usecases.queries import GetPartyOverviewUseCase, ListPartiesUseCase
from usecases.saves import CreateSaveUseCase, RestoreSaveUseCase
from usecases.transfer import ExportPartyUseCase, ImportPartyUseCase

logger = logging.getLogger(__name__)


class Container:
    """Holds one instance of every use case, sharing the same store."""

    def __init__(self, settings: Settings, db: Database, dice: DiceRoller, clock: Clock):
        self.settings = settings
        self.db = db
        self.dice = dice
        self.clock = clock
        self.codec = JsonCodec()
        self.events = EventPublisher(db.timeline, db.outbox)

        self.create_party = CreatePartyUseCase(db.parties, self.events, dice, clock)
        self.update_chapter = UpdateChapterUseCase(db.parties, self.events, clock)
        self.update_hp = UpdateHpUseCase(db.parties, self.events, clock, settings.mortal_death_policy)
        self.apply_luck = ApplyLuckUseCase(db.parties, self.events, clock)
        self.update_inventory = UpdateInventoryUseCase(db.parties, self.events, clock)
        self.finish_party = FinishPartyUseCase(db.parties, self.events, clock)
        self.delete_party = DeletePartyUseCase(db.parties)

        self.add_note = AddNoteUseCase(db.parties, db.notes, self.events, clock, settings.note_preview_chars)
        self.add_custom_action = AddCustomActionUseCase(db.parties, self.events, clock)

        self.create_save = CreateSaveUseCase(
            db.parties, db.notes, db.save_slots, self.events, clock, settings.snapshot_slot_depth,
        )
        self.restore_save = RestoreSaveUseCase(db.parties, db.notes, db.save_slots, self.events, clock)

        self.export_party = ExportPartyUseCase(db.parties, db.notes, db.save_slots, self.codec, self.events, clock)
        self.import_party = ImportPartyUseCase(db.parties, db.notes, db.save_slots, self.codec, self.events, clock)

        self.list_parties = ListPartiesUseCase(db.parties)
        self.party_overview = GetPartyOverviewUseCase(db.parties, db.notes, db.save_slots, db.timeline)

    def combat(self, party_id: str, enemies: Sequence[Enemy]) -> CombatSession:
        """Open a fight for ``party_id``. Call ``start()`` or just attack."""
        return CombatSession(
            party_id,
            enemies,
            parties=self.db.parties,
            events=self.events,
            dice=self.dice,
            clock=self.clock,
            update_hp=self.update_hp,
            apply_luck=self.apply_luck,
        )


def build_container(
    settings: Optional[Settings] = None,
    dice: Optional[DiceRoller] = None,
    clock: Optional[Clock] = None,
) -> Container:
    """Build a container; unspecified pieces come from settings."""
    settings = settings or get_settings()
    db = Database(settings.sqlite_db_path)
    if dice is None:
        dice = make_dice_roller(settings.dice_seed)
        if settings.dice_seed is not None:
            logger.info("Using seeded dice (seed=%d)", settings.dice_seed)
    return Container(settings, db, dice, clock or SystemClock())

"""Use cases package: every state change of a party, paired with its timeline event."""

from usecases.combat import CombatSession, MAX_ENEMIES
from usecases.container import Container, build_container
from usecases.events import DomainEvent, EventPublisher
from usecases.journal import AddCustomActionUseCase, AddNoteUseCase
from usecases.party import (
    ApplyLuckUseCase,
    CreatePartyUseCase,
    DeletePartyUseCase,
    FinishPartyUseCase,
    UpdateChapterUseCase,
    UpdateHpResult,
    UpdateHpUseCase,
    UpdateInventoryUseCase,
)
from usecases.queries import GetPartyOverviewUseCase, ListPartiesUseCase, PartyOverview
from usecases.saves import CreateSaveUseCase, RestoreSaveUseCase
from usecases.transfer import ExportPartyUseCase, ExportResult, ImportPartyUseCase

__all__ = [
    "CombatSession",
    "MAX_ENEMIES",
    "Container",
    "build_container",
    "DomainEvent",
    "EventPublisher",
    "AddCustomActionUseCase",
    "AddNoteUseCase",
    "ApplyLuckUseCase",
    "CreatePartyUseCase",
    "DeletePartyUseCase",
    "FinishPartyUseCase",
    "UpdateChapterUseCase",
    "UpdateHpResult",
    "UpdateHpUseCase",
    "UpdateInventoryUseCase",
    "GetPartyOverviewUseCase",
    "ListPartiesUseCase",
    "PartyOverview",
    "CreateSaveUseCase",
    "RestoreSaveUseCase",
    "ExportPartyUseCase",
    "ExportResult",
    "ImportPartyUseCase",
]

"""Configuration package: settings, logging, and exceptions."""

from config.exceptions import (
    DagdaError,
    NotFoundError,
    PartyNotFoundError,
    SaveSlotNotFoundError,
    PreconditionError,
    InsufficientLuckError,
    SaveSlotLimitError,
    RestoreNotAllowedError,
    PartyNotActiveError,
    CombatOverError,
    FormatError,
    ImportFormatError,
    InvariantViolationError,
    ValidationError,
    InvalidInputError,
    InvalidConfigError,
    DatabaseError,
)
from config.logging_config import setup_logging
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "DagdaError",
    "NotFoundError",
    "PartyNotFoundError",
    "SaveSlotNotFoundError",
    "PreconditionError",
    "InsufficientLuckError",
    "SaveSlotLimitError",
    "RestoreNotAllowedError",
    "PartyNotActiveError",
    "CombatOverError",
    "FormatError",
    "ImportFormatError",
    "InvariantViolationError",
    "ValidationError",
    "InvalidInputError",
    "InvalidConfigError",
    "DatabaseError",
]

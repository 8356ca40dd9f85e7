"""Configuration settings loaded from .env file."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

DeathPolicy = Literal["permadeath", "reset"]


class Settings(BaseSettings):
    """Application settings, loaded from .env file.

    The Mortal-mode death policy is a deliberate switch: ``permadeath``
    ends the party for good, ``reset`` sends the character back to
    chapter 1 with full HP and an empty inventory.
    """

    # Storage
    sqlite_db_path: Path = Path("./data/dagda.db")
    export_dir: Path = Path("./data/exports")

    # Rules
    mortal_death_policy: DeathPolicy = "permadeath"
    snapshot_slot_depth: int = 1  # How many generations of saves a save embeds
    note_preview_chars: int = 40

    # Dice
    dice_seed: Optional[int] = None  # Seeded dice for reproducible sessions

    # Logging
    log_dir: Path = Path("./data/logs")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("snapshot_slot_depth")
    @classmethod
    def validate_snapshot_depth(cls, v: int) -> int:
        if v < 0:
            raise ValueError("snapshot_slot_depth must be >= 0")
        return v

    @field_validator("note_preview_chars")
    @classmethod
    def validate_preview_chars(cls, v: int) -> int:
        if v < 1:
            raise ValueError("note_preview_chars must be >= 1")
        return v

    @field_validator("sqlite_db_path", "export_dir", "log_dir")
    @classmethod
    def ensure_parent_dirs(cls, v: Path) -> Path:
        v.parent.mkdir(parents=True, exist_ok=True)
        return v


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance

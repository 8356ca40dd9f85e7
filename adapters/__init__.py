"""Adapters package: dice, clock, and the JSON export codec."""

from adapters.clock import SystemClock, format_timestamp
from adapters.dice import SecureDiceRoller, SeededDiceRoller, make_dice_roller
from adapters.json_codec import EXPORT_VERSION, JsonCodec

__all__ = [
    "SystemClock",
    "format_timestamp",
    "SecureDiceRoller",
    "SeededDiceRoller",
    "make_dice_roller",
    "EXPORT_VERSION",
    "JsonCodec",
]

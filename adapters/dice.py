"""Six-sided dice sources."""

import random
import secrets
from typing import Optional


class SecureDiceRoller:
    """Uniform d6 rolls from the operating system's secure random source."""

    def roll_d6(self) -> int:
        return secrets.randbelow(6) + 1

    def roll_2d6(self) -> tuple[int, int]:
        return (self.roll_d6(), self.roll_d6())

    def roll_nd6(self, n: int) -> list[int]:
        return [self.roll_d6() for _ in range(n)]


class SeededDiceRoller:
    """Deterministic d6 rolls for replayable sessions."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def roll_d6(self) -> int:
        return self._rng.randint(1, 6)

    def roll_2d6(self) -> tuple[int, int]:
        return (self.roll_d6(), self.roll_d6())

    def roll_nd6(self, n: int) -> list[int]:
        return [self.roll_d6() for _ in range(n)]


def make_dice_roller(seed: Optional[int] = None):
    """Seeded dice when a seed is configured, secure dice otherwise."""
    if seed is not None:
        return SeededDiceRoller(seed)
    return SecureDiceRoller()

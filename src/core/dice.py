"""
Dice rolling on top of numpy's random Generator.

Every die in the rules core is rolled through a DiceRoller so that tests and
replays can substitute a ScriptedDiceRoller with predetermined results.
"""

from collections import deque
from typing import Iterable, Optional

import numpy as np


class DiceRoller:
    """Uniform dice backed by ``np.random.default_rng``."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the roller.

        Args:
            seed: Optional seed for reproducible sequences
        """
        self._rng = np.random.default_rng(seed)

    def roll_d20(self) -> int:
        """Roll a single d20 in [1, 20]."""
        return self.roll_die(20)

    def roll_die(self, sides: int) -> int:
        """Roll one die with ``sides`` faces."""
        if sides <= 0:
            raise ValueError(f"Die must have at least one side, got {sides}")
        return int(self._rng.integers(1, sides + 1))

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """Roll a pool of dice in one vectorized draw.

        Returns:
            Individual results; empty when count or sides is not positive
        """
        if count <= 0 or sides <= 0:
            return []
        return self._rng.integers(1, sides + 1, size=count).tolist()

    def roll_total(self, count: int, sides: int) -> int:
        """Sum of ``count`` dice of ``sides`` faces."""
        return int(sum(self.roll_dice(count, sides)))


class ScriptedDiceRoller(DiceRoller):
    """Dice roller that replays predetermined results.

    d20 rolls and other dice are scripted separately. When a script runs out
    the roller falls back to random rolls from the (optionally seeded)
    generator.
    """

    def __init__(
        self,
        d20_rolls: Iterable[int] = (),
        die_rolls: Iterable[int] = (),
        seed: Optional[int] = None,
    ):
        super().__init__(seed)
        self._d20_rolls: deque[int] = deque(d20_rolls)
        self._die_rolls: deque[int] = deque(die_rolls)

    def queue_d20(self, *rolls: int) -> None:
        self._d20_rolls.extend(rolls)

    def queue_dice(self, *rolls: int) -> None:
        self._die_rolls.extend(rolls)

    @property
    def remaining_d20(self) -> int:
        return len(self._d20_rolls)

    @property
    def remaining_dice(self) -> int:
        return len(self._die_rolls)

    def roll_d20(self) -> int:
        if self._d20_rolls:
            return self._checked(self._d20_rolls.popleft(), 20)
        return DiceRoller.roll_die(self, 20)

    def roll_die(self, sides: int) -> int:
        if self._die_rolls:
            return self._checked(self._die_rolls.popleft(), sides)
        return super().roll_die(sides)

    def roll_dice(self, count: int, sides: int) -> list[int]:
        if count <= 0 or sides <= 0:
            return []
        return [self.roll_die(sides) for _ in range(count)]

    @staticmethod
    def _checked(value: int, sides: int) -> int:
        if not 1 <= value <= sides:
            raise ValueError(f"Scripted roll {value} is not a valid d{sides} result")
        return value

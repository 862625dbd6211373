"""
d20 resolution shared by attacks, saving throws and skill checks.

The engine turns a list of labelled bonuses and a target number into an
immutable RollOutcome. Attack, save and skill check results wrap the outcome
with their own context instead of copying its fields.

Rules:
- base roll is uniform in [1, 20]
- total = base roll + sum of bonuses
- natural 20 always succeeds (critical), natural 1 always fails (fumble),
  when natural overrides are enabled for the check kind
- otherwise success = total >= target
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ...core.data.data_structures import RollBonus
from ...core.data.game_enums import CheckKind
from ...core.dice import DiceRoller

NATURAL_CRIT = 20
NATURAL_FUMBLE = 1

# Natural 20/1 overrides per check kind
DEFAULT_NATURAL_OVERRIDES = {
    CheckKind.ATTACK: True,
    CheckKind.SAVE: True,
    CheckKind.SKILL_CHECK: True,
}


@dataclass(frozen=True)
class RollOutcome:
    """Immutable record of one d20 resolution."""
    base_roll: int
    bonuses: tuple[RollBonus, ...]
    target_value: int
    success: bool
    is_critical_hit: bool = False
    is_fumble: bool = False
    is_auto_fail: bool = False
    kind: CheckKind = CheckKind.ATTACK

    @property
    def total_modifier(self) -> int:
        return sum(bonus.value for bonus in self.bonuses)

    @property
    def total(self) -> int:
        return self.base_roll + self.total_modifier

    @property
    def margin(self) -> int:
        """How far the total cleared (positive) or missed (negative) the target."""
        return self.total - self.target_value

    def describe(self) -> str:
        """Compact breakdown, e.g. "14 (10 +3 Dexterity Modifier +1 Proficiency) vs 15"."""
        if self.is_auto_fail:
            return f"auto-fail vs {self.target_value}"
        terms = " ".join(str(bonus) for bonus in self.bonuses)
        inner = f"{self.base_roll} {terms}".strip()
        return f"{self.total} ({inner}) vs {self.target_value}"


class RollEngine:
    """Rolls d20 checks with configurable natural-roll rules."""

    def __init__(self, dice: Optional[DiceRoller] = None, natural_overrides: Optional[dict[CheckKind, bool]] = None):
        """Initialize the roll engine.

        Args:
            dice: Dice source (a fresh unseeded DiceRoller if omitted)
            natural_overrides: Whether natural 20/1 override the total, per
                check kind. Kinds not listed use the defaults.
        """
        self.dice = dice or DiceRoller()
        self.natural_overrides = dict(DEFAULT_NATURAL_OVERRIDES)
        if natural_overrides:
            self.natural_overrides.update(natural_overrides)

    def uses_natural_rules(self, kind: CheckKind) -> bool:
        return self.natural_overrides.get(kind, True)

    def roll(self, bonuses: Iterable[RollBonus], target_value: int, kind: CheckKind = CheckKind.ATTACK) -> RollOutcome:
        """Roll a d20 against a target value."""
        return self.from_roll(self.dice.roll_d20(), bonuses, target_value, kind)

    def from_roll(
        self,
        base_roll: int,
        bonuses: Iterable[RollBonus],
        target_value: int,
        kind: CheckKind = CheckKind.ATTACK,
    ) -> RollOutcome:
        """Evaluate an already rolled d20.

        Raises:
            ValueError: If base_roll is not a d20 result
        """
        if not NATURAL_FUMBLE <= base_roll <= NATURAL_CRIT:
            raise ValueError(f"Base roll must be 1-20, got {base_roll}")

        bonuses = tuple(bonuses)
        total = base_roll + sum(bonus.value for bonus in bonuses)

        is_crit = False
        is_fumble = False
        if self.uses_natural_rules(kind):
            is_crit = base_roll == NATURAL_CRIT
            is_fumble = base_roll == NATURAL_FUMBLE

        success = is_crit or (not is_fumble and total >= target_value)

        return RollOutcome(
            base_roll=base_roll,
            bonuses=bonuses,
            target_value=target_value,
            success=success,
            is_critical_hit=is_crit,
            is_fumble=is_fumble,
            kind=kind,
        )

    @staticmethod
    def auto_fail(target_value: int, kind: CheckKind = CheckKind.SKILL_CHECK) -> RollOutcome:
        """Outcome for a check nobody could attempt: no roll, no bonuses, failure."""
        return RollOutcome(
            base_roll=0,
            bonuses=(),
            target_value=target_value,
            success=False,
            is_auto_fail=True,
            kind=kind,
        )

"""
Status effect definitions.

A definition is the authored, immutable description of an effect (Burning,
Haste, Stunned). It is shared by every application of that effect; per-target
state lives on AppliedStatusEffect in runtime.py.

An effect is composed of up to three parts:
- stat modifiers, attached to the target while the effect is active
- periodic effects resolved once per turn (damage, healing, energy)
- behavioral flags other systems poll (stunned, immobilized, amplified damage)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ...core.data.data_structures import DiceFormula
from ...core.data.game_enums import (
    Attribute,
    DamageType,
    EntityFeature,
    ModifierType,
    PeriodicEffectType,
    DAMAGE_TYPE_NAMES,
)
from ...core.dice import DiceRoller

INDEFINITE_DURATION = -1


@dataclass(frozen=True)
class ModifierDefinition:
    """One stat change applied while the effect is active."""
    attribute: Attribute
    value: float
    modifier_type: ModifierType = ModifierType.FLAT


@dataclass(frozen=True)
class PeriodicEffectDefinition:
    """Per-turn effect, e.g. 1d6 fire damage or 5 energy drain."""
    effect_type: PeriodicEffectType
    dice_count: int = 0
    die_size: int = 6
    bonus: int = 0
    damage_type: DamageType = DamageType.FIRE

    @property
    def formula(self) -> DiceFormula:
        return DiceFormula(self.dice_count, self.die_size, self.bonus)

    def notation(self) -> str:
        """E.g. "1d6 Fire damage", "5 energy drain"."""
        amount = self.formula.notation()
        if self.effect_type == PeriodicEffectType.DAMAGE:
            return f"{amount} {DAMAGE_TYPE_NAMES[self.damage_type]} damage"
        return f"{amount} {self.effect_type.name.lower().replace('_', ' ')}"

    def roll(self, dice: DiceRoller) -> int:
        """Roll the amount for one tick; never negative."""
        formula = self.formula
        rolled = dice.roll_total(formula.dice_count, formula.die_size) if formula.has_dice else 0
        return max(0, rolled + formula.bonus)


@dataclass(frozen=True)
class BehavioralEffects:
    """Restrictions and multipliers that are queried rather than applied."""
    prevents_actions: bool = False
    prevents_movement: bool = False
    prevents_skill_use: bool = False
    damage_amplification: float = 1.0  # 1.5 = takes 50% more damage


@dataclass(frozen=True)
class StatusEffectDefinition:
    """Immutable template for a named status effect.

    Attributes:
        name: Display name; also the stacking key
        modifiers: Stat changes while active
        periodic_effects: Per-turn effects
        behavior: Behavioral flags
        base_duration: Turns the effect lasts; -1 is indefinite
        required_features: Target must have all of these
        excluded_features: Target must have none of these
        description: Tooltip text
    """
    name: str
    modifiers: tuple[ModifierDefinition, ...] = ()
    periodic_effects: tuple[PeriodicEffectDefinition, ...] = ()
    behavior: BehavioralEffects = field(default_factory=BehavioralEffects)
    base_duration: int = INDEFINITE_DURATION
    required_features: EntityFeature = EntityFeature.NONE
    excluded_features: EntityFeature = EntityFeature.NONE
    description: str = ""

    def __post_init__(self):
        # Accept lists from loaders and tests
        object.__setattr__(self, 'modifiers', tuple(self.modifiers))
        object.__setattr__(self, 'periodic_effects', tuple(self.periodic_effects))

    @property
    def is_indefinite(self) -> bool:
        return self.base_duration < 0

    @property
    def total_magnitude(self) -> float:
        """Sum of absolute modifier values; the first stacking comparison."""
        return sum(abs(modifier.value) for modifier in self.modifiers)

    def block_reason(self, target: Any) -> Optional[str]:
        """Why this effect cannot be applied to a target, or None if it can."""
        if self.required_features != EntityFeature.NONE and not target.has_feature(self.required_features):
            missing = self.required_features & ~target.features
            return f"{target.name} lacks required features: {_feature_names(missing)}"
        if self.excluded_features != EntityFeature.NONE and target.has_any_feature(self.excluded_features):
            present = self.excluded_features & target.features
            return f"{target.name} has excluded features: {_feature_names(present)}"
        return None


def _feature_names(features: EntityFeature) -> str:
    names = [member.name.lower() for member in EntityFeature if member.value and member in features]
    return ", ".join(names)

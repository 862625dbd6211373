"""
Dynamic modifiers: attributes that feed other attributes.

Evaluated by the stat calculator at calculation time and never stored on the
entity, so they always reflect the current state.

Current formulas:
- Speed -> ArmorClass (moving targets are harder to hit)
"""

from typing import Any

from ..data.data_structures import AttributeModifier
from ..data.game_enums import Attribute, ModifierCategory, ModifierType

# AC bonus per unit of current speed
SPEED_TO_AC_RATIO = 1.0


class DynamicModifierEvaluator:
    """Builds temporary modifiers for a target attribute."""

    @staticmethod
    def evaluate_all(entity: Any, attribute: Attribute) -> list[AttributeModifier]:
        """Evaluate every formula that targets ``attribute``.

        Args:
            entity: The entity whose attribute is being calculated
            attribute: Attribute being calculated

        Returns:
            Temporary modifiers to include in the breakdown
        """
        modifiers: list[AttributeModifier] = []

        if attribute == Attribute.ARMOR_CLASS:
            DynamicModifierEvaluator._evaluate_speed_to_ac(entity, modifiers)

        return modifiers

    @staticmethod
    def _evaluate_speed_to_ac(entity: Any, modifiers: list[AttributeModifier]) -> None:
        """Current (not maximum) speed grants AC; stationary targets get nothing."""
        get_speed = getattr(entity, "get_current_speed", None)
        if get_speed is None:
            return

        bonus = get_speed() * SPEED_TO_AC_RATIO
        if bonus <= 0:
            return

        modifiers.append(AttributeModifier(
            attribute=Attribute.ARMOR_CLASS,
            modifier_type=ModifierType.FLAT,
            value=bonus,
            source=entity,
            category=ModifierCategory.DYNAMIC,
            label="Speed -> AC",
        ))

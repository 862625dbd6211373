"""
Special attack rules layered on top of the primary attack pipeline.

Each rule is a small object that inspects a resolved attack and may produce
one follow-up attack. Rules never touch the calculators' internals: they call
the same AttackCalculator.compute() the primary attempt uses, with a different
target and extra penalty. Disable a rule by flipping ``enabled`` or leaving it
out of the performer's rule list.
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..vehicles.vehicle_components import VehicleComponent

if TYPE_CHECKING:
    from .attacks import AttackCalculator, AttackResult
    from .check_specs import AttackSpec

COMPONENT_TARGETING_PENALTY = 5


class AttackPhase(Enum):
    """States of one attack resolution."""
    PRIMARY_ATTEMPT = auto()
    FALLBACK_ATTEMPT = auto()
    RESOLVED = auto()


class AttackSpecialRule(ABC):
    """Optional rule that can follow up a resolved attack."""

    name = "Special Rule"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    @abstractmethod
    def try_apply(
        self,
        spec: "AttackSpec",
        primary: "AttackResult",
        calculator: "AttackCalculator",
    ) -> Optional["AttackResult"]:
        """Produce a follow-up attack, or None when the rule does not apply."""
        pass


class ComponentFallbackRule(AttackSpecialRule):
    """A missed attack on a component gets one retry against the chassis, at a penalty."""

    name = "Component Fallback"

    def __init__(self, penalty: int = COMPONENT_TARGETING_PENALTY, enabled: bool = True):
        super().__init__(enabled)
        self.penalty = penalty

    def try_apply(
        self,
        spec: "AttackSpec",
        primary: "AttackResult",
        calculator: "AttackCalculator",
    ) -> Optional["AttackResult"]:
        if primary.is_hit:
            return None

        target = spec.target
        if not isinstance(target, VehicleComponent):
            return None

        vehicle = target.vehicle
        if vehicle is None or vehicle.chassis is None:
            return None

        chassis = vehicle.chassis
        # Already aimed at the chassis
        if target is chassis:
            return None
        if not chassis.can_be_targeted():
            return None

        return calculator.compute(
            chassis,
            attacker=primary.attacker,
            character=primary.character,
            additional_penalty=self.penalty,
            was_fallback=True,
        )

"""Check, save and attack specifications.

A spec says what is being tested, independent of who ends up rolling it.
Vehicle and character variants are separate types, so a vehicle check has no
skill field to read by mistake and vice versa.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union, TYPE_CHECKING

from ...core.data.game_enums import (
    CharacterAttribute,
    CharacterSkill,
    ComponentType,
    VehicleCheckAttribute,
    CHARACTER_ATTRIBUTE_NAMES,
    CHARACTER_SKILL_NAMES,
    VEHICLE_CHECK_ATTRIBUTE_NAMES,
)

if TYPE_CHECKING:
    from ..characters.character import Character
    from ..entities.combatant import Combatant


@dataclass(frozen=True)
class VehicleCheckSpec:
    """Skill check rolled by the component that owns a vehicle attribute."""
    attribute: VehicleCheckAttribute

    @property
    def display_name(self) -> str:
        return VEHICLE_CHECK_ATTRIBUTE_NAMES.get(self.attribute, "Unknown")


@dataclass(frozen=True)
class CharacterCheckSpec:
    """Skill check rolled by a crew member, optionally the operator of a component type."""
    skill: CharacterSkill
    required_component_type: Optional[ComponentType] = None

    @property
    def requires_component(self) -> bool:
        return self.required_component_type is not None

    @property
    def display_name(self) -> str:
        return CHARACTER_SKILL_NAMES.get(self.skill, "Unknown")


@dataclass(frozen=True)
class VehicleSaveSpec:
    """Saving throw made by the component that owns a vehicle attribute."""
    attribute: VehicleCheckAttribute

    @property
    def display_name(self) -> str:
        return VEHICLE_CHECK_ATTRIBUTE_NAMES.get(self.attribute, "Unknown")


@dataclass(frozen=True)
class CharacterSaveSpec:
    """Saving throw made by a crew member on an attribute."""
    attribute: CharacterAttribute
    required_component_type: Optional[ComponentType] = None

    @property
    def requires_component(self) -> bool:
        return self.required_component_type is not None

    @property
    def display_name(self) -> str:
        return CHARACTER_ATTRIBUTE_NAMES.get(self.attribute, "Unknown")


CheckSpec = Union[VehicleCheckSpec, CharacterCheckSpec]
SaveSpec = Union[VehicleSaveSpec, CharacterSaveSpec]


@dataclass(frozen=True)
class AttackSpec:
    """An attack against one target.

    Attributes:
        target: Component or standalone entity being attacked
        attacker: Weapon component or standalone entity making the attack
        character: Character operating the attacker; resolved from the
            attacker's seat when omitted
        causal_source: Skill, event card or hazard that caused the attack
    """
    target: "Combatant"
    attacker: Optional["Combatant"] = None
    character: Optional["Character"] = None
    causal_source: Optional[Any] = None


def describe_spec(spec: Any) -> str:
    """Display name of a check or save spec, tolerating authoring mistakes."""
    return getattr(spec, "display_name", None) or "Unknown check"


def spec_is_configured(spec: Any) -> bool:
    """True when a spec is one of the known variants with its payload set."""
    if isinstance(spec, (VehicleCheckSpec, VehicleSaveSpec)):
        return isinstance(spec.attribute, VehicleCheckAttribute)
    if isinstance(spec, CharacterCheckSpec):
        return isinstance(spec.skill, CharacterSkill)
    if isinstance(spec, CharacterSaveSpec):
        return isinstance(spec.attribute, CharacterAttribute)
    return False

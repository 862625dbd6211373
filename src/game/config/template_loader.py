"""
Template loading for authored rules data.

Status effect definitions, characters and vehicles are authored in YAML and
turned into rules objects here. Names are matched case-insensitively against
the enums ("armor_class", "ArmorClass" and "ARMOR CLASS" are the same), and
dice use standard notation ("2d6+1").

Every authoring mistake raises TemplateError naming the template at fault,
so bad data fails at load time instead of mid-combat.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import yaml

from ...core.data.data_structures import DataConverter, DiceFormula
from ...core.data.game_enums import (
    Attribute,
    CharacterAttribute,
    CharacterSkill,
    ComponentTargetMode,
    ComponentType,
    DamageType,
    EntityFeature,
    ModifierType,
    PeriodicEffectType,
    ResistanceLevel,
)
from ...core.entities.components import ComponentError
from ..characters.character import Character
from ..status_effects.definitions import (
    BehavioralEffects,
    ModifierDefinition,
    PeriodicEffectDefinition,
    StatusEffectDefinition,
    INDEFINITE_DURATION,
)
from ..vehicles.seats import VehicleSeat
from ..vehicles.vehicle import Vehicle
from ..vehicles.vehicle_components import (
    ChassisComponent,
    DriveComponent,
    GenericComponent,
    PowerCoreComponent,
    ProvidedModifier,
    VehicleComponent,
    WeaponComponent,
)
from .rules_config import ConfigError, resolve_path

DEFAULT_STATUS_EFFECTS_PATH = "assets/data/status_effects.yaml"
DEFAULT_CHARACTERS_PATH = "assets/data/characters.yaml"
DEFAULT_VEHICLES_PATH = "assets/data/vehicles.yaml"

# Component keys handled by the typed constructors
COMPONENT_CLASSES: dict[ComponentType, type[VehicleComponent]] = {
    ComponentType.CHASSIS: ChassisComponent,
    ComponentType.POWER_CORE: PowerCoreComponent,
    ComponentType.DRIVE: DriveComponent,
    ComponentType.WEAPON: WeaponComponent,
}
COMPONENT_NUMERIC_FIELDS = (
    "max_health", "armor_class", "max_energy", "energy_regen",
    "mobility", "max_speed", "acceleration", "stability", "attack_bonus",
)


class TemplateError(ConfigError):
    """Raised when a template cannot be converted into rules objects."""


class TemplateLoader:
    """Loads status effects, characters and vehicles from YAML."""

    def __init__(self):
        self.status_effects: dict[str, StatusEffectDefinition] = {}
        self.characters: dict[str, Character] = {}
        self._vehicle_data: dict[str, dict[str, Any]] = {}

    # ============== Files ==============

    @staticmethod
    def read_yaml(path: Union[str, Path]) -> dict[str, Any]:
        """Read a YAML mapping.

        Raises:
            TemplateError: If the file is missing, unparsable or not a mapping
        """
        file_path = resolve_path(str(path))
        if not file_path.exists():
            raise TemplateError(f"Template file not found: {file_path}")
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise TemplateError(f"Could not parse {file_path}: {e}") from e
        if not isinstance(data, dict):
            raise TemplateError(f"{file_path} must contain a mapping at the top level")
        return data

    def load_all(
        self,
        status_effects_path: str = DEFAULT_STATUS_EFFECTS_PATH,
        characters_path: str = DEFAULT_CHARACTERS_PATH,
        vehicles_path: str = DEFAULT_VEHICLES_PATH,
    ) -> "TemplateLoader":
        self.load_status_effects(status_effects_path)
        self.load_characters(characters_path)
        self.load_vehicles(vehicles_path)
        return self

    def load_status_effects(self, path: str = DEFAULT_STATUS_EFFECTS_PATH) -> dict[str, StatusEffectDefinition]:
        data = self.read_yaml(path)
        for key, entry in (data.get("status_effects") or {}).items():
            self.status_effects[key] = self.parse_status_effect(key, entry)
        return self.status_effects

    def load_characters(self, path: str = DEFAULT_CHARACTERS_PATH) -> dict[str, Character]:
        data = self.read_yaml(path)
        for key, entry in (data.get("characters") or {}).items():
            self.characters[key] = self.parse_character(key, entry)
        return self.characters

    def load_vehicles(self, path: str = DEFAULT_VEHICLES_PATH) -> list[str]:
        """Read vehicle templates; build instances with create_vehicle().

        Returns:
            Names of the loaded vehicle templates
        """
        data = self.read_yaml(path)
        for key, entry in (data.get("vehicles") or {}).items():
            if not isinstance(entry, dict):
                raise TemplateError(f"Vehicle '{key}' must be a mapping")
            self._vehicle_data[key] = entry
        return list(self._vehicle_data)

    # ============== Lookups ==============

    def get_status_effect(self, key: str) -> StatusEffectDefinition:
        try:
            return self.status_effects[key]
        except KeyError:
            raise TemplateError(f"Unknown status effect '{key}'") from None

    def get_character(self, key: str) -> Character:
        try:
            return self.characters[key]
        except KeyError:
            raise TemplateError(f"Unknown character '{key}'") from None

    def create_vehicle(self, key: str, crew: Optional[dict[str, Character]] = None) -> Vehicle:
        """Build a fresh vehicle from a loaded template.

        Each call returns new component instances, so two vehicles built from
        the same template never share state.

        Args:
            key: Vehicle template name
            crew: Seat name -> character overrides for the template's crew
        """
        if key not in self._vehicle_data:
            raise TemplateError(f"Unknown vehicle '{key}'")
        return self.parse_vehicle(key, self._vehicle_data[key], crew)

    # ============== Parsing ==============

    @staticmethod
    def parse_status_effect(key: str, data: dict[str, Any]) -> StatusEffectDefinition:
        with _template_context("status effect", key):
            behavior_data = data.get("behavior") or {}
            return StatusEffectDefinition(
                name=data.get("name", key),
                description=data.get("description", ""),
                base_duration=int(data.get("duration", INDEFINITE_DURATION)),
                modifiers=[
                    ModifierDefinition(
                        attribute=DataConverter.parse_enum(Attribute, mod["attribute"]),
                        value=float(mod["value"]),
                        modifier_type=DataConverter.parse_enum(ModifierType, mod.get("type", "flat")),
                    )
                    for mod in data.get("modifiers") or []
                ],
                periodic_effects=[
                    TemplateLoader._parse_periodic(entry) for entry in data.get("periodic") or []
                ],
                behavior=BehavioralEffects(
                    prevents_actions=bool(behavior_data.get("prevents_actions", False)),
                    prevents_movement=bool(behavior_data.get("prevents_movement", False)),
                    prevents_skill_use=bool(behavior_data.get("prevents_skill_use", False)),
                    damage_amplification=float(behavior_data.get("damage_amplification", 1.0)),
                ),
                required_features=DataConverter.parse_flags(EntityFeature, data.get("required_features")),
                excluded_features=DataConverter.parse_flags(EntityFeature, data.get("excluded_features")),
            )

    @staticmethod
    def _parse_periodic(data: dict[str, Any]) -> PeriodicEffectDefinition:
        formula = DiceFormula.parse(data.get("amount", 0))
        return PeriodicEffectDefinition(
            effect_type=DataConverter.parse_enum(PeriodicEffectType, data["type"]),
            dice_count=formula.dice_count,
            die_size=formula.die_size,
            bonus=formula.bonus,
            damage_type=DataConverter.parse_enum(DamageType, data.get("damage_type", "fire")),
        )

    @staticmethod
    def parse_character(key: str, data: dict[str, Any]) -> Character:
        with _template_context("character", key):
            attributes = {
                DataConverter.parse_enum(CharacterAttribute, name): int(score)
                for name, score in (data.get("attributes") or {}).items()
            }
            return Character(
                name=data.get("name", key),
                level=int(data.get("level", 1)),
                attributes=attributes,
                proficient_skills=[
                    DataConverter.parse_enum(CharacterSkill, skill) for skill in data.get("proficient_skills") or []
                ],
                base_attack_bonus=int(data.get("base_attack_bonus", 0)),
                description=data.get("description", ""),
            )

    def parse_vehicle(self, key: str, data: dict[str, Any], crew: Optional[dict[str, Character]] = None) -> Vehicle:
        with _template_context("vehicle", key):
            components = [self._parse_component(entry) for entry in data.get("components") or []]
            vehicle = Vehicle(data.get("name", key), components)

            for seat_data in data.get("seats") or []:
                seat_name = seat_data["name"]
                controlled = []
                for component_name in seat_data.get("controls") or []:
                    component = vehicle.find_component(component_name)
                    if component is None:
                        raise TemplateError(f"Seat '{seat_name}' controls unknown component '{component_name}'")
                    controlled.append(component)

                character = (crew or {}).get(seat_name)
                if character is None and seat_data.get("character"):
                    character = self.get_character(seat_data["character"])
                vehicle.add_seat(VehicleSeat(seat_name, controlled, character))

            vehicle.initialize_component_modifiers()
            return vehicle

    @staticmethod
    def _parse_component(data: dict[str, Any]) -> VehicleComponent:
        component_type = DataConverter.parse_enum(ComponentType, data["type"])
        kwargs: dict[str, Any] = {field: data[field] for field in COMPONENT_NUMERIC_FIELDS if field in data}

        if "features" in data:
            kwargs["features"] = DataConverter.parse_flags(EntityFeature, data["features"])
        if "resistances" in data:
            kwargs["resistances"] = {
                DataConverter.parse_enum(DamageType, damage_type): DataConverter.parse_enum(ResistanceLevel, level)
                for damage_type, level in data["resistances"].items()
            }
        if "provided_modifiers" in data:
            kwargs["provided_modifiers"] = [
                ProvidedModifier(
                    attribute=DataConverter.parse_enum(Attribute, mod["attribute"]),
                    value=float(mod["value"]),
                    modifier_type=DataConverter.parse_enum(ModifierType, mod.get("type", "flat")),
                    target_mode=DataConverter.parse_enum(ComponentTargetMode, mod.get("target", "chassis")),
                )
                for mod in data["provided_modifiers"]
            ]

        if component_type == ComponentType.WEAPON:
            kwargs["damage"] = DiceFormula.parse(data.get("damage", "1d8"))
            kwargs["damage_type"] = DataConverter.parse_enum(DamageType, data.get("damage_type", "physical"))

        component_class = COMPONENT_CLASSES.get(component_type)
        if component_class is None:
            return GenericComponent(data.get("name", component_type.name.title()), component_type, **kwargs)
        if "name" in data:
            kwargs["name"] = data["name"]
        return component_class(**kwargs)


@contextmanager
def _template_context(kind: str, key: str) -> Iterator[None]:
    """Re-raise parsing errors as TemplateError naming the template."""
    try:
        yield
    except TemplateError:
        raise
    except (ComponentError, KeyError, TypeError, ValueError) as e:
        raise TemplateError(f"Invalid {kind} '{key}': {e}") from e

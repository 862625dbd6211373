"""
Shared fixtures for the rules core test suite.

Dice are always scripted so that every roll in a test is explicit.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from src.core.data.data_structures import DiceFormula
from src.core.data.game_enums import CharacterAttribute, CharacterSkill, DamageType, EntityFeature
from src.core.dice import ScriptedDiceRoller
from src.core.events.combat_event_bus import CombatEventBus
from src.core.events.event_manager import EventManager
from src.game.characters.character import Character
from src.game.combat.combat_resolver import CombatResolver
from src.game.config.rules_config import RulesConfig
from src.game.vehicles.seats import VehicleSeat
from src.game.vehicles.vehicle import Vehicle
from src.game.vehicles.vehicle_components import (
    ChassisComponent,
    DriveComponent,
    PowerCoreComponent,
    WeaponComponent,
)

COMPONENT_FEATURES = EntityFeature.HAS_HEALTH | EntityFeature.IS_MECHANICAL


class EventRecorder:
    """Universal subscriber that keeps every delivered event."""

    def __init__(self, bus: CombatEventBus):
        self.events = []
        bus.subscribe_all(self.events.append, subscriber_name="EventRecorder")

    def of_type(self, event_type):
        return [event for event in self.events if event.event_type == event_type]

    def clear(self):
        self.events.clear()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def event_bus():
    """Strict bus: invariant violations raise."""
    return CombatEventBus(enable_debug_logging=False, strict_invariants=True)


@pytest.fixture
def lenient_bus():
    """Bus that reports invariant violations without raising."""
    return CombatEventBus(enable_debug_logging=False, strict_invariants=False)


@pytest.fixture
def recorder(event_bus):
    return EventRecorder(event_bus)


@pytest.fixture
def dice():
    return ScriptedDiceRoller(seed=1234)


@pytest.fixture
def resolver(event_bus, dice):
    return CombatResolver(event_bus=event_bus, dice=dice, config=RulesConfig())


@pytest.fixture
def pilot():
    """Level 5, DEX 16, proficient in Piloting: +3 DEX, +3 proficiency."""
    return Character(
        "Vex",
        level=5,
        attributes={CharacterAttribute.DEXTERITY: 16, CharacterAttribute.CONSTITUTION: 14},
        proficient_skills=[CharacterSkill.PILOTING],
        base_attack_bonus=1,
    )


@pytest.fixture
def gunner():
    return Character(
        "Rook",
        level=4,
        attributes={CharacterAttribute.WISDOM: 13},
        proficient_skills=[CharacterSkill.PERCEPTION],
        base_attack_bonus=2,
    )


def build_vehicle(name="Test Rig", pilot=None, gunner=None, chassis_ac=12, weapon_ac=18,
                  attack_bonus=4, stability=5):
    """Chassis, power core, drive and one weapon, with Driver and Gunner seats."""
    chassis = ChassisComponent("Hull", max_health=100, armor_class=chassis_ac, mobility=3,
                               features=COMPONENT_FEATURES | EntityFeature.HAS_ARMOR)
    core = PowerCoreComponent("Core", max_health=50, armor_class=14, max_energy=40, energy_regen=5,
                              features=COMPONENT_FEATURES | EntityFeature.HAS_ENERGY)
    drive = DriveComponent("Wheels", max_health=50, armor_class=15, max_speed=8, stability=stability,
                           features=COMPONENT_FEATURES)
    weapon = WeaponComponent("Turret", max_health=30, armor_class=weapon_ac, attack_bonus=attack_bonus,
                             damage=DiceFormula(1, 8, 2), damage_type=DamageType.PIERCING,
                             features=COMPONENT_FEATURES)
    vehicle = Vehicle(name, [chassis, core, drive, weapon])
    vehicle.add_seat(VehicleSeat("Driver", [drive], pilot))
    vehicle.add_seat(VehicleSeat("Gunner", [weapon], gunner))
    vehicle.initialize_component_modifiers()
    return vehicle


@pytest.fixture
def vehicle(pilot, gunner):
    return build_vehicle("Test Rig", pilot, gunner)


@pytest.fixture
def enemy_vehicle():
    return build_vehicle("Enemy Rig")


@pytest.fixture
def vehicle_factory():
    """build_vehicle() for tests that need custom stats."""
    return build_vehicle

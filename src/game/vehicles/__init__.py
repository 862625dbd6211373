"""Vehicles, their components and their seats.

- vehicle.py: Vehicle entity, attribute ownership and seat lookup
- vehicle_components.py: Chassis, power core, drive, weapon and generic components
- seats.py: Crew stations linking characters to the components they operate
"""

from .seats import VehicleSeat
from .vehicle_components import (
    ChassisComponent,
    DriveComponent,
    GenericComponent,
    PowerCoreComponent,
    ProvidedModifier,
    VehicleComponent,
    WeaponComponent,
)
from .vehicle import Vehicle

__all__ = [
    "Vehicle",
    "VehicleSeat",
    "VehicleComponent",
    "ChassisComponent",
    "PowerCoreComponent",
    "DriveComponent",
    "WeaponComponent",
    "GenericComponent",
    "ProvidedModifier",
]

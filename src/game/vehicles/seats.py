"""Vehicle seats: where characters sit and which components they can reach."""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..characters.character import Character
    from .vehicle_components import VehicleComponent


@dataclass(eq=False)
class VehicleSeat:
    """A station on a vehicle.

    A character can only operate the components their seat controls. Each seat
    acts at most once per turn.
    """
    name: str
    controlled_components: list["VehicleComponent"] = field(default_factory=list)
    assigned_character: Optional["Character"] = None
    has_acted_this_turn: bool = False

    def controls(self, component: "VehicleComponent") -> bool:
        return any(existing is component for existing in self.controlled_components)

    def get_operational_components(self) -> list["VehicleComponent"]:
        return [c for c in self.controlled_components if c.is_operational]

    def can_act(self) -> bool:
        """A seat acts with a character and at least one operational component."""
        return self.cannot_act_reason() is None

    def cannot_act_reason(self) -> Optional[str]:
        """Why this seat cannot act, or None if it can."""
        if self.assigned_character is None:
            return "No character assigned"
        if not self.get_operational_components():
            return "All controlled components destroyed or disabled"
        return None

    def mark_as_acted(self) -> None:
        self.has_acted_this_turn = True

    def reset_turn_state(self) -> None:
        self.has_acted_this_turn = False

"""Component-based entity system for composite participants.

This module provides the foundation for participants that are assembled from
discrete parts: a vehicle is an Entity, and its chassis, drive, weapons and
power core are its Components. Components know their owner; the owner indexes
its components by type.
"""

from abc import ABC, abstractmethod
from typing import Optional
import uuid

from ..data.game_enums import ComponentType


class Component(ABC):
    """Base class for all parts owned by an Entity.

    Components represent one physical part of a composite participant and
    contain both data and methods related to that part.
    """

    def __init__(self, entity: Optional["Entity"] = None):
        """Initialize component with an optional reference to its owner.

        Args:
            entity: The entity this component belongs to (set on add_component)
        """
        self.entity = entity

    @abstractmethod
    def get_component_type(self) -> ComponentType:
        """Get the type identifier for this component."""
        pass


class Entity:
    """Container for components that together define a participant.

    An entity is a unique ID plus an ordered collection of components. Several
    components may share a type (two weapons), except for the types listed in
    ``UNIQUE_COMPONENT_TYPES``.
    """

    UNIQUE_COMPONENT_TYPES: frozenset[ComponentType] = frozenset()

    def __init__(self, name: str = "Entity"):
        """Initialize entity with unique ID and empty component collection."""
        self.entity_id: str = str(uuid.uuid4())
        self.name = name
        self.components: list[Component] = []

    def add_component(self, component: Component) -> Component:
        """Add a component to this entity and take ownership of it.

        Args:
            component: The component to add

        Returns:
            The added component

        Raises:
            DuplicateComponentError: If the component is already present, or a
                unique component type is already filled
        """
        component_type = component.get_component_type()
        if any(existing is component for existing in self.components):
            raise DuplicateComponentError(self.entity_id, component_type)
        if component_type in self.UNIQUE_COMPONENT_TYPES and self.has_component(component_type):
            raise DuplicateComponentError(self.entity_id, component_type)

        component.entity = self
        self.components.append(component)
        return component

    def get_component(self, component_type: ComponentType) -> Optional[Component]:
        """Get the first component of a type.

        Returns:
            The component if it exists, None otherwise
        """
        for component in self.components:
            if component.get_component_type() == component_type:
                return component
        return None

    def get_components(self, component_type: ComponentType) -> list[Component]:
        """Get every component of a type, in insertion order."""
        return [c for c in self.components if c.get_component_type() == component_type]

    def has_component(self, component_type: ComponentType) -> bool:
        """Check if this entity has a component of a specific type."""
        return self.get_component(component_type) is not None

    def remove_component(self, component: Component) -> bool:
        """Remove a component from this entity.

        Returns:
            True if the component was present and removed
        """
        for index, existing in enumerate(self.components):
            if existing is component:
                del self.components[index]
                component.entity = None
                return True
        return False

    def get_all_components(self) -> list[Component]:
        """Get a snapshot of all components on this entity."""
        return list(self.components)


class ComponentError(Exception):
    """Base exception for component system errors."""
    pass


class DuplicateComponentError(ComponentError):
    """Raised when trying to add a component that already exists."""

    def __init__(self, entity_id: str, component_type: ComponentType):
        super().__init__(f"Entity {entity_id} already has component: {component_type}")
        self.entity_id = entity_id
        self.component_type = component_type

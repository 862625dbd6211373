"""Entity system foundation.

This package contains the composite-participant foundation:
- components.py: Base Component and Entity classes plus component errors
"""

from .components import Component, Entity, ComponentError, DuplicateComponentError

__all__ = [
    "Component",
    "Entity",
    "ComponentError",
    "DuplicateComponentError",
]

"""
Domain layer - Core business logic and models.

This layer contains the fundamental rules and models for name-based dependency injection.
It has no dependencies on other layers.
"""

from .enums import FactoryKind
from .exceptions import (
    CircularDependencyError,
    DependencyNotFoundError,
    DIException,
    FactoryError,
    ModuleLoadError,
    ParseError,
)
from .interfaces import IInjector, IModuleLoader, IPathMatcher, IResolver
from .models import OPTIONAL_SUFFIX, Dependency, Node, Registration

__all__ = [
    # Enums
    "FactoryKind",
    # Exceptions
    "DIException",
    "ParseError",
    "DependencyNotFoundError",
    "CircularDependencyError",
    "FactoryError",
    "ModuleLoadError",
    # Interfaces
    "IInjector",
    "IResolver",
    "IPathMatcher",
    "IModuleLoader",
    # Models
    "OPTIONAL_SUFFIX",
    "Dependency",
    "Registration",
    "Node",
]

"""
namewire: Lightweight name-based Dependency Injection container with lazy, memoized resolution.

Public API exports for the namewire package.
"""

# Application exports
from namewire.application.container import INJECTOR_NAME, Injector
from namewire.application.signature_parser import extract_dependency_names

# Configuration
from namewire.config import InjectorSettings

# Domain exports
from namewire.domain.enums import FactoryKind
from namewire.domain.exceptions import (
    CircularDependencyError,
    DependencyNotFoundError,
    DIException,
    FactoryError,
    ModuleLoadError,
    ParseError,
)
from namewire.domain.models import Dependency

__version__ = "0.1.0"

__all__ = [
    # Injector
    "Injector",
    "INJECTOR_NAME",
    "InjectorSettings",
    # Parsing
    "extract_dependency_names",
    "Dependency",
    # Enums
    "FactoryKind",
    # Exceptions
    "DIException",
    "ParseError",
    "DependencyNotFoundError",
    "CircularDependencyError",
    "FactoryError",
    "ModuleLoadError",
]

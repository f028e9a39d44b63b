"""
Application layer - Use cases and orchestration.

This layer contains the signature parser, the resolution engine and the
injector facade that orchestrates them.
"""

from .circular_detector import CircularDependencyDetector
from .container import INJECTOR_NAME, Injector
from .invoker import FactoryInvoker
from .resolver import DependencyResolver, unwrap_name
from .signature_parser import dependencies_of, extract_dependency_names, signature_dependencies

__all__ = [
    "INJECTOR_NAME",
    "Injector",
    "DependencyResolver",
    "FactoryInvoker",
    "CircularDependencyDetector",
    "extract_dependency_names",
    "signature_dependencies",
    "dependencies_of",
    "unwrap_name",
]

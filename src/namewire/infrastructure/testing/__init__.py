"""
Testing utilities module.

Provides helpers and utilities for testing applications using namewire.
The ``injector`` pytest fixture lives in :mod:`namewire.infrastructure.testing.plugin`.
"""

from .utilities import TestInjector, create_mock_injector

__all__ = [
    "TestInjector",
    "create_mock_injector",
]

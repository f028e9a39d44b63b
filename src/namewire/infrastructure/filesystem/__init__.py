"""
Filesystem module.

Provides the glob path matcher and module loader used for path-based registration.
"""

from .module_loader import ModuleLoader
from .path_matcher import GlobPathMatcher

__all__ = [
    "GlobPathMatcher",
    "ModuleLoader",
]

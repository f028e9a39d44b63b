"""
Infrastructure layer - External integrations.

This layer contains the filesystem collaborators and integrations with external
frameworks and tools. The ``testing`` and ``fastapi_integration`` modules depend
on the Application layer and are imported explicitly by their users.
"""

from . import filesystem

__all__ = [
    "filesystem",
]

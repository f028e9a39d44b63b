"""Application layer - Circular dependency detection."""

import threading
from typing import List, Tuple

from namewire.domain import CircularDependencyError


class CircularDependencyDetector:
    """Tracks the resolution path and detects circular dependencies.

    The stack lives on the injector rather than on a single resolve call, so a
    factory that imperatively resolves a name still under construction is
    reported as a cycle instead of recursing without bound.

    Uses thread-local storage to keep one stack per thread.

    Attributes:
        _local: Thread-local storage for resolution stacks.
    """

    def __init__(self) -> None:
        """Initialize the circular dependency detector with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> List[Tuple[str, bool]]:
        """Get the current thread's resolution stack.

        Returns:
            Entries of ``(name, is_context)`` for the current thread.
        """
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def push(self, name: str) -> None:
        """Add a dependency name to the resolution stack.

        Args:
            name: The name being resolved.

        Raises:
            CircularDependencyError: If the name is already in the stack.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.push("a")
            >>> detector.push("b")
            >>> detector.push("a")  # Raises CircularDependencyError: a -> b -> a
        """
        stack = self._get_stack()
        names = [entry for entry, is_context in stack if not is_context]

        if name in names:
            cycle_start_index = names.index(name)
            cycle = names[cycle_start_index:] + [name]
            raise CircularDependencyError(cycle)

        stack.append((name, False))

    def push_context(self, label: str) -> None:
        """Add a caller-supplied label to the path without cycle checking.

        Args:
            label: Context shown in front of the names in error messages.
        """
        self._get_stack().append((label, True))

    def pop(self) -> None:
        """Remove the last entry from the resolution stack."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    def current_path(self) -> List[str]:
        """Return a copy of the current resolution path, outermost first."""
        return [entry for entry, _ in self._get_stack()]

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        if hasattr(self._local, "stack"):
            self._local.stack.clear()

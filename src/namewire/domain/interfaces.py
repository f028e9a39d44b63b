from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from namewire.domain.enums import FactoryKind
from namewire.domain.models import Dependency, Node


class IInjector(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register(
        self,
        name: str,
        factory: Callable[..., Any],
        dependencies: Optional[Sequence[Union[str, Dependency]]] = None,
        kind: Optional[FactoryKind] = None,
    ) -> None:
        """Register a factory under a name.

        Args:
            name: The name to register.
            factory: Callable producing the value.
            dependencies: Explicit dependency manifest overriding signature parsing.
            kind: Explicit invocation strategy.
        """

    @abstractmethod
    def register_value(self, name: str, value: Any) -> None:
        """Register a fixed value under a name.

        Args:
            name: The name to register.
            value: The value returned by every resolve of ``name``.
        """

    @abstractmethod
    def resolve(
        self,
        target: Any,
        local_values: Optional[Mapping[str, Any]] = None,
        context: Optional[str] = None,
    ) -> Any:
        """Resolve a name, a list of names, or invoke a callable with its dependencies.

        Args:
            target: A name, a sequence of names, or a callable.
            local_values: Values that take precedence over the registry for this call.
            context: Label prepended to the resolution path in error messages.
        """

    @abstractmethod
    def is_registered(self, name: str) -> bool:
        """Check whether a name is registered."""

    @abstractmethod
    def get_registered_names(self) -> List[str]:
        """Return registered names in registration order."""

    @abstractmethod
    def get_registry_copy(self) -> Dict[str, Node]:
        """Get a copy of the current registry."""


class IResolver(ABC):
    """Abstract interface for dependency graph resolution."""

    @abstractmethod
    def resolve_one(
        self,
        dependency: Dependency,
        registry: Mapping[str, Node],
        local_values: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Resolve a single dependency, building its own dependencies first.

        Args:
            dependency: The dependency to resolve.
            registry: Nodes by name.
            local_values: Values that short-circuit the registry lookup.

        Returns:
            The resolved value, or None for a missing optional dependency.

        Raises:
            DependencyNotFoundError: If a required dependency is not registered.
            CircularDependencyError: If a dependency is reached while still being resolved.
        """


class IPathMatcher(ABC):
    """Abstract interface for expanding path patterns into files."""

    @abstractmethod
    def match(self, patterns: Union[str, Sequence[str]]) -> List[str]:
        """Expand patterns into an ordered, de-duplicated list of real paths.

        Args:
            patterns: A pattern or patterns; a leading ``!`` excludes matches.
        """


class IModuleLoader(ABC):
    """Abstract interface for loading code given a path or module name."""

    @abstractmethod
    def load(self, path: str) -> Any:
        """Load the file at ``path`` and return its export.

        Args:
            path: Path to a Python source file.
        """

    @abstractmethod
    def require(self, module_name: str) -> Any:
        """Import a module by its logical name and return it.

        Args:
            module_name: Dotted module name.
        """

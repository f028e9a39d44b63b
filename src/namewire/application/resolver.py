import logging
from typing import Any, List, Mapping, Optional, Sequence

from namewire.application.circular_detector import CircularDependencyDetector
from namewire.application.invoker import FactoryInvoker
from namewire.domain import Dependency, DependencyNotFoundError, IResolver, Node

logger = logging.getLogger(__name__)


def unwrap_name(name: str) -> str:
    """Strip one pair of wrapping underscores: ``_foo_`` becomes ``foo``.

    Lets a factory name a parameter ``_config_`` when ``config`` is already
    taken by a local variable.
    """
    if len(name) > 2 and name.startswith("_") and name.endswith("_"):
        return name[1:-1]
    return name


class DependencyResolver(IResolver):
    """Resolves names against a registry with memoization and cycle detection.

    Resolution is a depth-first walk: each unresolved node has its declared
    dependencies resolved in order before its factory is invoked once and
    the result cached on the node.
    """

    def __init__(
        self,
        detector: Optional[CircularDependencyDetector] = None,
        invoker: Optional[FactoryInvoker] = None,
        unwrap_underscores: bool = True,
    ) -> None:
        self._detector = detector or CircularDependencyDetector()
        self._invoker = invoker or FactoryInvoker()
        self._unwrap_underscores = unwrap_underscores

    @property
    def detector(self) -> CircularDependencyDetector:
        return self._detector

    @property
    def invoker(self) -> FactoryInvoker:
        return self._invoker

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
            local_values: Values that short-circuit the registry for this
                dependency only. They are never cached nor passed on to
                nested factories.

        Returns:
            The resolved value, or None for a missing optional dependency.

        Raises:
            DependencyNotFoundError: If a required dependency is not registered.
            CircularDependencyError: If a dependency is reached while still being resolved.
            FactoryError: If a factory fails.
        """
        name = unwrap_name(dependency.name) if self._unwrap_underscores else dependency.name

        if local_values is not None and name in local_values:
            return local_values[name]

        node = registry.get(name)
        if node is None:
            if dependency.optional:
                return None
            raise DependencyNotFoundError(name, self._detector.current_path())

        if node.resolved:
            return node.value

        self._detector.push(name)
        try:
            registration = node.registration
            values = [self.resolve_one(child, registry) for child in registration.dependencies]
            value = self._invoker.create(registration, values)
        finally:
            self._detector.pop()

        logger.debug("Resolved dependency '%s'", name)
        return node.resolve_with(value)

    def resolve_all(
        self,
        dependencies: Sequence[Dependency],
        registry: Mapping[str, Node],
        local_values: Optional[Mapping[str, Any]] = None,
    ) -> List[Any]:
        """Resolve dependencies in order, stopping at the first failure."""
        return [self.resolve_one(dependency, registry, local_values) for dependency in dependencies]

import logging
from typing import Any, Callable, Dict, List, Sequence

from namewire.domain import Dependency, DIException, FactoryError, FactoryKind, Registration

logger = logging.getLogger(__name__)


class FactoryInvoker:
    """Invokes factories with their resolved dependencies.

    Positional dependencies are passed in declaration order and keyword-only
    dependencies by name. Factories are called without an implicit receiver,
    so calling a class constructs it whatever its ``FactoryKind``.
    """

    def invoke(
        self,
        factory: Callable[..., Any],
        kind: FactoryKind,
        dependencies: Sequence[Dependency],
        values: Sequence[Any],
    ) -> Any:
        """Invoke ``factory`` with ``values`` matched to ``dependencies``.

        Args:
            factory: The callable or class to invoke.
            kind: The registration's kind. Only logged; a class given
                ``CALL`` is still instantiated.
            dependencies: Declared dependencies, in order.
            values: Resolved values, one per dependency.

        Returns:
            The factory's return value, which for a class is a new instance.
        """
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for dependency, value in zip(dependencies, values):
            if dependency.keyword:
                kwargs[dependency.name] = value
            else:
                args.append(value)

        logger.debug("Invoking %s (%s)", getattr(factory, "__qualname__", factory), kind)
        return factory(*args, **kwargs)

    def create(self, registration: Registration, values: Sequence[Any]) -> Any:
        """Produce the value of a registration.

        Args:
            registration: The registration to invoke.
            values: Resolved dependency values.

        Raises:
            FactoryError: If the factory raises anything other than a DI error.
        """
        try:
            return self.invoke(registration.factory, registration.kind, registration.dependencies, values)
        except DIException:
            raise
        except Exception as e:
            raise FactoryError(registration.name, f"{type(e).__name__}: {e}") from e

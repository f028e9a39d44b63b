import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from namewire.application.circular_detector import CircularDependencyDetector
from namewire.application.invoker import FactoryInvoker
from namewire.application.resolver import DependencyResolver
from namewire.application.signature_parser import dependencies_of
from namewire.config import InjectorSettings
from namewire.domain import (
    Dependency,
    FactoryKind,
    IInjector,
    IModuleLoader,
    IPathMatcher,
    ModuleLoadError,
    Node,
    Registration,
)
from namewire.infrastructure.filesystem import GlobPathMatcher, ModuleLoader

logger = logging.getLogger(__name__)

INJECTOR_NAME = "$injector"
NAME_ATTRIBUTE = "__inject_name__"

NameMaker = Callable[[str, str, Callable[..., Any]], Optional[str]]


class Injector(IInjector):
    """Name-based dependency injection container.

    Maps names to factories and builds values lazily: a factory's
    dependencies are the names of its parameters (or its ``__inject__``
    manifest), resolved recursively the first time the factory's own name is
    requested. Every factory runs at most once per injector.

    Attributes:
        _registry: Dictionary mapping names to their nodes, in registration order.
        _resolver: Component performing memoized, cycle-checked resolution.
        _path_matcher: Expands path patterns for ``register_path``.
        _module_loader: Loads files and modules for path registration.
        _settings: Injector configuration.

    Example:
        >>> injector = Injector()
        >>> injector.register_value("dsn", "sqlite://")
        >>> injector.register("db", lambda dsn: Database(dsn))
        >>> injector.resolve("db").dsn
        'sqlite://'
    """

    def __init__(
        self,
        settings: Optional[InjectorSettings] = None,
        path_matcher: Optional[IPathMatcher] = None,
        module_loader: Optional[IModuleLoader] = None,
    ) -> None:
        """Initialize the injector and register it as ``$injector``."""
        self._settings = settings or InjectorSettings()
        self._registry: Dict[str, Node] = {}
        self._resolver = DependencyResolver(
            detector=CircularDependencyDetector(),
            invoker=FactoryInvoker(),
            unwrap_underscores=self._settings.unwrap_underscores,
        )
        self._path_matcher = path_matcher or GlobPathMatcher(self._settings.base_path)
        self._module_loader = module_loader or ModuleLoader(self._settings.export_attribute)

        self.register_value(INJECTOR_NAME, self)

    @property
    def settings(self) -> InjectorSettings:
        return self._settings

    def register(
        self,
        name: str,
        factory: Callable[..., Any],
        dependencies: Optional[Sequence[Union[str, Dependency]]] = None,
        kind: Optional[FactoryKind] = None,
    ) -> None:
        """Register a factory under a name, replacing any previous registration.

        Nothing is resolved until the name is first requested.

        Args:
            name: The name to register.
            factory: Function or class producing the value.
            dependencies: Explicit manifest, e.g. ``["config", "cache?"]``. Takes
                precedence over the factory's ``__inject__`` attribute and its
                parameter names.
            kind: Explicit invocation strategy. Defaults to ``CONSTRUCT`` for
                classes and ``CALL`` otherwise.

        Raises:
            ParseError: If the dependencies cannot be parsed or an entry names nothing.

        Example:
            >>> injector.register("mailer", Mailer)
            >>> injector.register("report", build_report, dependencies=["db", "clock?"])
        """
        if dependencies is not None:
            parsed = [Dependency.parse(dependency) for dependency in dependencies]
        else:
            parsed = dependencies_of(factory)

        if kind is None:
            kind = FactoryKind.CONSTRUCT if inspect.isclass(factory) else FactoryKind.CALL

        registration = Registration(name=name, factory=factory, dependencies=parsed, kind=kind)
        self._registry[name] = Node(registration=registration)
        logger.debug("Registered '%s' with dependencies %s", name, [str(dependency) for dependency in parsed])

    def register_value(self, name: str, value: Any) -> None:
        """Register a fixed value.

        Args:
            name: The name to register.
            value: Returned as-is by every resolve of ``name``.

        Example:
            >>> injector.register_value("retries", 0)
            >>> injector.resolve("retries")
            0
        """
        self.register(name, lambda: value, dependencies=[], kind=FactoryKind.CALL)

    def register_requires(self, requirements: Mapping[str, str]) -> None:
        """Import modules and register each as a value.

        Args:
            requirements: Mapping of registration name to dotted module name.

        Raises:
            ModuleLoadError: If a module cannot be imported.

        Example:
            >>> injector.register_requires({"json": "json", "paths": "os.path"})
        """
        for name, module_name in requirements.items():
            self.register_value(name, self._module_loader.require(module_name))

    def register_path(
        self,
        patterns: Union[str, Sequence[str]],
        name_maker: Optional[NameMaker] = None,
    ) -> None:
        """Register the exports of files matching path patterns.

        Non-callable exports are skipped. The default name is the export's
        ``__inject_name__`` attribute or the file stem.

        Args:
            patterns: Glob pattern or patterns; a leading ``!`` excludes matches.
            name_maker: Called with ``(default_name, real_path, factory)``; a
                truthy return replaces the default name.

        Raises:
            ModuleLoadError: If a matched file cannot be loaded.

        Example:
            >>> injector.register_path(["services/*.py", "!services/test_*.py"])
            >>> injector.register_path("jobs/*.py", lambda name, path, fn: f"job.{name}")
        """
        for path in self._path_matcher.match(patterns):
            factory = self._module_loader.load(path)
            if not callable(factory):
                logger.debug("Skipping %s: export is not callable", path)
                continue

            default_name = getattr(factory, NAME_ATTRIBUTE, None) or Path(path).stem
            name = (name_maker and name_maker(default_name, path, factory)) or default_name
            self.register(name, factory)

    def resolve(
        self,
        target: Any,
        local_values: Optional[Mapping[str, Any]] = None,
        context: Optional[str] = None,
    ) -> Any:
        """Resolve a name, a list of names, or invoke a callable with its dependencies.

        Args:
            target: A name (a trailing ``?`` makes it optional), a list or
                tuple of names, or a function or class whose parameters name
                its dependencies.
            local_values: Values used instead of registered ones for this call
                only. Never registered nor cached.
            context: Label prepended to the resolution path in error messages.

        Returns:
            The value for a name, a list of values in input order for a
            sequence, or the result of invoking a callable.

        Raises:
            DependencyNotFoundError: If a required name is not registered.
            CircularDependencyError: If a circular dependency is detected.
            FactoryError: If a registered factory fails.
            ParseError: If a name is empty or not a string, or a callable's
                dependencies cannot be parsed.

        Example:
            >>> log = injector.resolve("log")
            >>> fs, log = injector.resolve(["fs", "log"])
            >>> total = injector.resolve(lambda price, tax: price + tax, {"tax": 5})
        """
        is_callable = callable(target) and not isinstance(target, str)
        if is_callable:
            dependencies = dependencies_of(target)
        elif isinstance(target, (list, tuple)):
            dependencies = [Dependency.parse(name) for name in target]
        else:
            dependencies = [Dependency.parse(target)]

        detector = self._resolver.detector
        if context:
            detector.push_context(context)
        try:
            values = self._resolver.resolve_all(dependencies, self._registry, local_values)
        finally:
            if context:
                detector.pop()

        if is_callable:
            kind = FactoryKind.CONSTRUCT if inspect.isclass(target) else FactoryKind.CALL
            return self._resolver.invoker.invoke(target, kind, dependencies, values)
        if isinstance(target, (list, tuple)):
            return values
        return values[0]

    def resolve_path(
        self,
        path: Union[str, Path],
        local_values: Optional[Mapping[str, Any]] = None,
        context: Optional[str] = None,
    ) -> Any:
        """Load the file at ``path`` and resolve its export as a factory.

        Args:
            path: File path; relative paths are taken from ``settings.base_path``.
            local_values: Values used instead of registered ones for this call.
            context: Label for error messages. Defaults to ``path``.

        Raises:
            ModuleLoadError: If the file cannot be loaded or its export is not callable.

        Example:
            >>> app = injector.resolve_path("app/main.py")
        """
        full_path = Path(path)
        if not full_path.is_absolute():
            full_path = self._settings.base_path / full_path

        factory = self._module_loader.load(str(full_path))
        if not callable(factory):
            raise ModuleLoadError(str(path), "export is not callable")
        return self.resolve(factory, local_values, context or str(path))

    def is_registered(self, name: str) -> bool:
        """Check whether a name is registered. Never triggers resolution."""
        return name in self._registry

    def get_registered_names(self) -> List[str]:
        """Return registered names in registration order, including ``$injector``."""
        return list(self._registry)

    def get_registry_copy(self) -> Dict[str, Node]:
        """Get a copy of the registry with fresh, unresolved nodes.

        Returns:
            Copy of the current registry sharing registrations but no values.
        """
        return {name: Node(registration=node.registration) for name, node in self._registry.items()}

    def clear(self) -> None:
        """Clear all registrations except the injector itself.

        Useful for testing or resetting the injector state.
        """
        self._registry.clear()
        self._resolver.detector.clear()
        self.register_value(INJECTOR_NAME, self)

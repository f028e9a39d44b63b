"""Unit tests for DependencyResolver."""

import pytest

from namewire.application.resolver import DependencyResolver, unwrap_name
from namewire.domain import (
    CircularDependencyError,
    Dependency,
    DependencyNotFoundError,
    FactoryError,
    IResolver,
    Node,
    Registration,
)


def node(name, factory, *dependencies):
    return Node(
        registration=Registration(
            name=name,
            factory=factory,
            dependencies=[Dependency.parse(dependency) for dependency in dependencies],
        )
    )


class TestResolverInitialization:
    """Test cases for DependencyResolver initialization."""

    def test_resolver_implements_interface(self):
        """Test that DependencyResolver implements IResolver."""
        assert isinstance(DependencyResolver(), IResolver)

    def test_resolver_creates_default_components(self):
        """Test that detector and invoker default to fresh instances."""
        resolver = DependencyResolver()
        assert resolver.detector is not None
        assert resolver.invoker is not None


class TestUnwrapName:
    """Test cases for the underscore convention."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("_b_", "b"),
            ("_config_", "config"),
            ("__b__", "_b_"),
            ("b", "b"),
            ("_b", "_b"),
            ("b_", "b_"),
            ("_", "_"),
            ("__", "__"),
        ],
    )
    def test_unwrap_name(self, name, expected):
        """Test that exactly one pair of wrapping underscores is removed."""
        assert unwrap_name(name) == expected


class TestResolveOne:
    """Test cases for resolving single dependencies."""

    def test_resolves_dependencies_depth_first(self):
        """Test that dependencies are built before their dependents."""
        order = []
        registry = {
            "a": node("a", lambda: order.append("a") or "A"),
            "b": node("b", lambda a: order.append("b") or a + "B", "a"),
        }

        value = DependencyResolver().resolve_one(Dependency(name="b"), registry)

        assert value == "AB"
        assert order == ["a", "b"]

    def test_caches_value_on_node(self):
        """Test that a resolved value is stored on its node."""
        registry = {"a": node("a", lambda: {"me": "a"})}
        resolver = DependencyResolver()

        first = resolver.resolve_one(Dependency(name="a"), registry)

        assert registry["a"].resolved is True
        assert registry["a"].value is first
        assert resolver.resolve_one(Dependency(name="a"), registry) is first

    def test_caches_falsy_values(self):
        """Test that falsy values count as resolved."""
        calls = []
        registry = {"zero": node("zero", lambda: calls.append(1) or 0)}
        resolver = DependencyResolver()

        assert resolver.resolve_one(Dependency(name="zero"), registry) == 0
        assert resolver.resolve_one(Dependency(name="zero"), registry) == 0
        assert len(calls) == 1

    def test_missing_required_dependency(self):
        """Test that a missing required name raises DependencyNotFoundError."""
        with pytest.raises(DependencyNotFoundError) as exc_info:
            DependencyResolver().resolve_one(Dependency(name="foo"), {})

        assert exc_info.value.name == "foo"
        assert exc_info.value.path == []

    def test_missing_nested_dependency_reports_path(self):
        """Test that the resolution path appears in the error."""
        registry = {
            "a": node("a", lambda b: b, "b"),
            "b": node("b", lambda c: c, "c"),
        }

        with pytest.raises(DependencyNotFoundError) as exc_info:
            DependencyResolver().resolve_one(Dependency(name="a"), registry)

        assert exc_info.value.path == ["a", "b"]
        assert "a -> b -> c" in str(exc_info.value)

    def test_missing_optional_dependency(self):
        """Test that a missing optional name resolves to None."""
        assert DependencyResolver().resolve_one(Dependency(name="foo", optional=True), {}) is None

    def test_optional_nested_dependency(self):
        """Test that optional dependencies of a factory resolve to None."""
        registry = {"a": node("a", lambda b: ("a", b), "b?")}

        assert DependencyResolver().resolve_one(Dependency(name="a"), registry) == ("a", None)

    def test_circular_dependency(self):
        """Test that a cycle raises CircularDependencyError with the full cycle."""
        registry = {
            "a": node("a", lambda b: b, "b"),
            "b": node("b", lambda a: a, "a"),
        }

        with pytest.raises(CircularDependencyError, match="a -> b -> a") as exc_info:
            DependencyResolver().resolve_one(Dependency(name="a"), registry)

        assert exc_info.value.dependency_chain == ["a", "b", "a"]

    def test_optional_does_not_suppress_cycles(self):
        """Test that an optional dependency on a name in progress still fails."""
        registry = {
            "a": node("a", lambda b: b, "b"),
            "b": node("b", lambda a: a, "a?"),
        }

        with pytest.raises(CircularDependencyError):
            DependencyResolver().resolve_one(Dependency(name="a"), registry)

    def test_path_is_empty_after_failure(self):
        """Test that the detector stack is unwound after an error."""
        registry = {"a": node("a", lambda b: b, "b")}
        resolver = DependencyResolver()

        with pytest.raises(DependencyNotFoundError):
            resolver.resolve_one(Dependency(name="a"), registry)

        assert resolver.detector.current_path() == []

    def test_failed_node_stays_unresolved_and_retries(self):
        """Test that a failing factory leaves its node unresolved for a retry."""
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("not yet")
            return "ready"

        registry = {"flaky": node("flaky", flaky)}
        resolver = DependencyResolver()

        with pytest.raises(FactoryError):
            resolver.resolve_one(Dependency(name="flaky"), registry)
        assert registry["flaky"].resolved is False

        assert resolver.resolve_one(Dependency(name="flaky"), registry) == "ready"
        assert len(attempts) == 2

    def test_underscore_names_are_unwrapped(self):
        """Test that ``_b_`` resolves the registry key ``b``."""
        registry = {"b": node("b", lambda: "B")}

        assert DependencyResolver().resolve_one(Dependency(name="_b_"), registry) == "B"

    def test_unwrapping_can_be_disabled(self):
        """Test that unwrapping is skipped when disabled."""
        registry = {"b": node("b", lambda: "B")}

        with pytest.raises(DependencyNotFoundError):
            DependencyResolver(unwrap_underscores=False).resolve_one(Dependency(name="_b_"), registry)


class TestLocalValues:
    """Test cases for local value overrides."""

    def test_local_value_short_circuits_registry(self):
        """Test that a local value wins over a registration."""
        registry = {"a": node("a", lambda: "registered")}

        value = DependencyResolver().resolve_one(Dependency(name="a"), registry, {"a": "local"})

        assert value == "local"
        assert registry["a"].resolved is False

    def test_falsy_local_value_is_used(self):
        """Test that falsy local values are honored."""
        registry = {"a": node("a", lambda: "registered")}

        assert DependencyResolver().resolve_one(Dependency(name="a"), registry, {"a": 0}) == 0

    def test_local_values_do_not_reach_nested_factories(self):
        """Test that locals only apply to the requested dependency."""
        registry = {
            "price": node("price", lambda: 10),
            "total": node("total", lambda price: price * 2, "price"),
        }

        value = DependencyResolver().resolve_one(Dependency(name="total"), registry, {"price": 99})

        assert value == 20

    def test_resolve_all_keeps_order(self):
        """Test that resolve_all returns values in input order."""
        registry = {
            "a": node("a", lambda: "A"),
            "b": node("b", lambda: "B"),
        }
        deps = [Dependency(name="b"), Dependency(name="a"), Dependency(name="b")]

        assert DependencyResolver().resolve_all(deps, registry) == ["B", "A", "B"]

    def test_resolve_all_stops_at_first_failure(self):
        """Test that later names are not resolved after a failure."""
        calls = []
        registry = {
            "a": node("a", lambda: calls.append("a")),
            "c": node("c", lambda: calls.append("c")),
        }
        deps = [Dependency(name="a"), Dependency(name="missing"), Dependency(name="c")]

        with pytest.raises(DependencyNotFoundError):
            DependencyResolver().resolve_all(deps, registry)

        assert calls == ["a"]

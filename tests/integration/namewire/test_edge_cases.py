"""Integration tests for edge cases across the parser and the injector."""

import pytest

from namewire import (
    CircularDependencyError,
    DependencyNotFoundError,
    Injector,
    InjectorSettings,
    ParseError,
    extract_dependency_names,
)


class TestDeclarationShapes:
    """Test that every supported declaration shape wires correctly."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("function (a, b, c) {}", ["a", "b", "c"]),
            ("(foo, bar) => (baz) => {}", ["foo", "bar"]),
            ("function (a, /* optional */ b, c) {}", ["a", "b?", "c"]),
            ("class { constructor(a, b) {} }", ["a", "b"]),
            ("class {}", []),
            ("x => x * 2", ["x"]),
            ("def build(a, b=None): ...", ["a", "b"]),
            ("lambda a, b: a + b", ["a", "b"]),
            ("class Service:\n    def __init__(self, db, cache=None): ...", ["db", "cache"]),
        ],
    )
    def test_declaration_examples(self, text, expected):
        """Test dependency extraction for each declaration shape."""
        assert [str(dependency) for dependency in extract_dependency_names(text)] == expected

    def test_arrow_inside_body_comment(self):
        """Test that arrows in comments or bodies do not end the parameter list."""
        text = "(a, b) => { /* (c) => d */ return (e) => a + b + e; }"

        assert [dependency.name for dependency in extract_dependency_names(text)] == ["a", "b"]

    def test_malformed_declaration(self):
        """Test that text without a parameter list raises ParseError."""
        with pytest.raises(ParseError):
            extract_dependency_names("just some words")


class TestRegistryEdgeCases:
    """Test edge cases of the registry."""

    def test_reregistering_injector_shadows_self_reference(self):
        """Test that $injector may be re-registered by user code."""
        injector = Injector()
        injector.register_value("$injector", "shadow")

        assert injector.resolve("$injector") == "shadow"
        assert injector.get_registered_names() == ["$injector"]

    def test_two_injectors_do_not_share_state(self):
        """Test that registries are owned by a single injector."""
        first = Injector()
        second = Injector()
        first.register_value("a", 1)

        assert not second.is_registered("a")
        assert second.resolve("$injector") is second

    def test_optional_missing_registered_later(self):
        """Test that a dependent keeps the value its optional dependency had when it was built."""
        injector = Injector()
        injector.register("a", lambda cache: cache, dependencies=["cache?"])

        assert injector.resolve("a") is None

        injector.register_value("cache", "late")

        assert injector.resolve("a") is None
        assert injector.resolve("cache") == "late"

    def test_long_chain(self):
        """Test resolving a long acyclic chain."""
        injector = Injector()
        injector.register_value("n0", 0)
        for index in range(1, 50):
            injector.register(f"n{index}", lambda previous: previous + 1, dependencies=[f"n{index - 1}"])

        assert injector.resolve("n49") == 49

    def test_three_node_cycle(self):
        """Test the reported chain for a longer cycle."""
        injector = Injector()
        injector.register("a", lambda b: b)
        injector.register("b", lambda c: c)
        injector.register("c", lambda a: a)

        with pytest.raises(CircularDependencyError, match="a -> b -> c -> a"):
            injector.resolve("a")

    def test_cycle_entered_midway(self):
        """Test that a cycle reached through a non-cyclic name reports only the cycle."""
        injector = Injector()
        injector.register("root", lambda a: a)
        injector.register("a", lambda b: b)
        injector.register("b", lambda a: a)

        with pytest.raises(CircularDependencyError) as exc_info:
            injector.resolve("root")

        assert exc_info.value.dependency_chain == ["a", "b", "a"]

    def test_not_found_after_cycle_error(self):
        """Test that a failed resolve leaves no stale path behind."""
        injector = Injector()
        injector.register("a", lambda a: a)

        with pytest.raises(CircularDependencyError):
            injector.resolve("a")

        with pytest.raises(DependencyNotFoundError) as exc_info:
            injector.resolve("b")

        assert exc_info.value.path == []


class TestRegisterPathExclusion:
    """Test path exclusion with module files."""

    def test_excluded_file_is_not_registered(self, tmp_path):
        """Test that an excluded file cannot be resolved."""
        (tmp_path / "a.py").write_text("def a():\n    return 'A'\n")
        (tmp_path / "b.py").write_text("def b():\n    return 'B'\n")
        injector = Injector(InjectorSettings(base_path=tmp_path))

        injector.register_path(["*.py", "!*/b.py"])

        assert injector.resolve("a") == "A"
        with pytest.raises(DependencyNotFoundError):
            injector.resolve("b")

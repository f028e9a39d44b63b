import inspect
from typing import Any, Callable, List, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from namewire.domain.enums import FactoryKind
from namewire.domain.exceptions import ParseError

OPTIONAL_SUFFIX = "?"


class Dependency(BaseModel):
    """Value object describing one declared dependency of a factory.

    Attributes:
        name: The declared name, as written in the factory's parameter list or manifest.
        optional: Whether a missing registration resolves to None instead of failing.
        keyword: Whether the value is passed as a keyword argument.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="The declared dependency name.")
    optional: bool = Field(default=False, description="Resolve to None when not registered.")
    keyword: bool = Field(default=False, description="Pass the resolved value by keyword.")

    @classmethod
    def parse(cls, value: Union[str, "Dependency"]) -> "Dependency":
        """Build a dependency from a manifest entry.

        A trailing ``?`` marks the entry optional.

        Raises:
            ParseError: If the entry is not a string or names nothing.

        Example:
            >>> Dependency.parse("logger?")
            Dependency(name='logger', optional=True, keyword=False)
        """
        if isinstance(value, Dependency):
            return value
        if not isinstance(value, str):
            raise ParseError(repr(value), "dependency names must be strings")
        optional = value.endswith(OPTIONAL_SUFFIX)
        name = value[: -len(OPTIONAL_SUFFIX)] if optional else value
        if not name:
            raise ParseError(value, "empty dependency name")
        return cls(name=name, optional=optional)

    def __str__(self) -> str:
        return self.name + (OPTIONAL_SUFFIX if self.optional else "")


class Registration(BaseModel):
    """Value object representing a named factory registration.

    Attributes:
        name: The name the factory is registered under.
        factory: Callable that produces the value from its resolved dependencies.
        dependencies: Ordered dependencies, fixed at registration time.
        kind: How the factory is invoked.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="The name the factory is registered under.")
    factory: Callable[..., Any] = Field(..., description="The factory producing the value.")
    dependencies: List[Dependency] = Field(
        default_factory=list,
        description="Ordered dependencies passed to the factory.",
    )
    kind: FactoryKind = Field(default=FactoryKind.CALL, description="How the factory is invoked.")

    @model_validator(mode="after")
    def _check_kind(self) -> "Registration":
        if self.kind == FactoryKind.CONSTRUCT and not inspect.isclass(self.factory):
            raise ValueError(f"Factory for '{self.name}' must be a class to be constructed")
        return self


class Node(BaseModel):
    """Registry entry tracking a registration and its resolved value.

    ``resolved`` rather than the truthiness of ``value`` tells whether the
    factory has run, since factories may return ``0``, ``False`` or ``None``.

    Attributes:
        registration: The registration this node was created from.
        value: The value produced by the factory once resolved.
        resolved: Whether the factory has already produced ``value``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    registration: Registration = Field(..., description="The registration details of the dependency.")
    value: Any = Field(default=None, description="Value produced by the factory.")
    resolved: bool = Field(default=False, description="Whether the value has been produced.")

    def resolve_with(self, value: Any) -> Any:
        """Store the produced value. A resolved node never changes again."""
        if not self.resolved:
            self.value = value
            self.resolved = True
        return self.value

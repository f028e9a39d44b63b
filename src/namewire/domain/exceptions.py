from typing import List, Optional, Sequence


class DIException(Exception):
    """Base exception for DI-related errors."""


class ParseError(DIException):
    """Raised when dependency names cannot be parsed from a declaration.

    Attributes:
        text: The declaration text that failed to parse.
        reason: Optional reason for the failure.
    """

    def __init__(self, text: str, reason: Optional[str] = None) -> None:
        self.text = text
        self.reason = reason
        message = f"Unable to parse dependency names from: {text!r}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class DependencyNotFoundError(DIException):
    """Raised when a required dependency has no registration.

    Attributes:
        name: The name that could not be found.
        path: Names being resolved when the lookup failed, outermost first.
    """

    def __init__(self, name: str, path: Sequence[str] = ()) -> None:
        self.name = name
        self.path = list(path)
        message = f"Dependency not found: {' -> '.join(self.path + [name])}"
        super().__init__(message)


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of names involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[str]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join(dependency_chain)}"
        super().__init__(message)


class FactoryError(DIException):
    """Raised when a registered factory fails while producing its value.

    The original exception is chained as ``__cause__``.

    Attributes:
        name: The name whose factory failed.
        reason: Optional reason for the failure.
    """

    def __init__(self, name: str, reason: Optional[str] = None) -> None:
        self.name = name
        self.reason = reason
        message = f"Factory for dependency '{name}' failed"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ModuleLoadError(DIException):
    """Raised when a file or module cannot be loaded.

    This occurs when:
    - The file does not exist or is not importable.
    - Executing the module raises.
    - The loaded export cannot be used as a factory.

    Attributes:
        target: The path or module name that was requested.
        reason: Optional reason for the failure.
    """

    def __init__(self, target: str, reason: Optional[str] = None) -> None:
        self.target = target
        self.reason = reason
        message = f"Cannot load module: {target}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)

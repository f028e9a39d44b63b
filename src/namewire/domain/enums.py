from enum import Enum


class FactoryKind(str, Enum):
    """Labels how a registered factory is meant to be invoked.

    Both kinds call the factory with the resolved arguments, so a class
    registered as ``CALL`` is still instantiated. The kind is validated at
    registration (``CONSTRUCT`` requires a class) and shown in debug logs.

    Attributes:
        CALL: Call the factory with the resolved arguments and use its return value.
        CONSTRUCT: Instantiate the factory class with the resolved arguments.
    """

    CALL = "call"
    CONSTRUCT = "construct"

    def __str__(self) -> str:
        return self.value

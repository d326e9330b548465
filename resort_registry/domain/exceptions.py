"""Base exception classes for the resort registry domain layer."""


class ResortRegistryError(Exception):
    """Base exception for all resort registry errors.

    Constraint violations are NOT exceptions - they are returned as
    ConstraintViolation values. Exceptions are reserved for failures
    that have no violation channel, such as an unreachable store.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)

"""Constraint violation result type.

Every field validator, reference check and mutator returns exactly one
ConstraintViolation. Callers test ``violation.ok`` to proceed and
otherwise propagate the violation as the operation's failure. Violations
are values, never raised.

Kinds:
    NO_VIOLATION: The checked value is acceptable.
    MANDATORY_VALUE: A required value is missing.
    RANGE: Wrong type, out of range, or otherwise inadmissible value.
    STRING_LENGTH: String exceeds its length ceiling.
    PATTERN: String does not match its required pattern.
    UNIQUENESS: A value meant to become a new key already exists.
    REFERENTIAL_INTEGRITY: A reference points at a record that does not exist.
    FROZEN_VALUE: An attempt to change a value that may not change.
    STORE_UNAVAILABLE: The document store could not be reached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ViolationKind(Enum):
    """Kind of constraint violation."""

    NO_VIOLATION = "NO_VIOLATION"
    MANDATORY_VALUE = "MANDATORY_VALUE"
    RANGE = "RANGE"
    STRING_LENGTH = "STRING_LENGTH"
    PATTERN = "PATTERN"
    UNIQUENESS = "UNIQUENESS"
    REFERENTIAL_INTEGRITY = "REFERENTIAL_INTEGRITY"
    FROZEN_VALUE = "FROZEN_VALUE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(frozen=True, eq=True)
class ConstraintViolation:
    """Outcome of a constraint check.

    Attributes:
        kind: The violation kind.
        message: Human-readable description (empty for NO_VIOLATION).
        checked_value: Normalized value produced by a successful check
            (e.g., the int parsed from "12"). Only set for NO_VIOLATION.
    """

    kind: ViolationKind
    message: str = ""
    checked_value: Any = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Reject messageless failures and values attached to failures."""
        if self.kind is ViolationKind.NO_VIOLATION:
            if self.message:
                raise ValueError("NO_VIOLATION carries no message")
        else:
            if not self.message:
                raise ValueError(f"{self.kind.value} requires a message")
            if self.checked_value is not None:
                raise ValueError("Only NO_VIOLATION carries a checked value")

    @property
    def ok(self) -> bool:
        """True when no constraint was violated."""
        return self.kind is ViolationKind.NO_VIOLATION

    def __str__(self) -> str:
        if self.ok:
            return self.kind.value
        return f"{self.kind.value}: {self.message}"


def no_violation(checked_value: Any = None) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.NO_VIOLATION, checked_value=checked_value)


def mandatory_value(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.MANDATORY_VALUE, message)


def range_violation(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.RANGE, message)


def string_length(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.STRING_LENGTH, message)


def pattern(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.PATTERN, message)


def uniqueness(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.UNIQUENESS, message)


def referential_integrity(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.REFERENTIAL_INTEGRITY, message)


def frozen_value(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.FROZEN_VALUE, message)


def store_unavailable(message: str) -> ConstraintViolation:
    return ConstraintViolation(ViolationKind.STORE_UNAVAILABLE, message)


NO_VIOLATION = no_violation()

"""Employee references.

A therapist or manager reference may arrive as a raw key (int or
integer string), as a mapping with an "employeeId"/"id" entry, or as an
already-resolved Employee. ``to_reference`` is the single normalization
point: every entry that accepts a reference calls it, and downstream
code only ever sees ``EmployeeKey | Employee``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from resort_registry.domain.models.constraint_violation import (
    ConstraintViolation,
    no_violation,
    range_violation,
)
from resort_registry.domain.models.employee import EMPLOYEE_ID, Employee
from resort_registry.domain.validation.values import is_positive_id


@dataclass(frozen=True)
class EmployeeKey:
    """Unresolved reference to an employee by key."""

    employee_id: int


EmployeeReference: TypeAlias = EmployeeKey | Employee


def reference_id(reference: EmployeeReference) -> int:
    """Return the employeeId a reference points at."""
    return reference.employee_id


def to_reference(raw: Any) -> tuple[EmployeeReference | None, ConstraintViolation]:
    """Normalize a raw reference.

    Args:
        raw: Employee, EmployeeKey, mapping with "employeeId" or "id",
            int, or integer string.

    Returns:
        (reference, NO_VIOLATION), or (None, RANGE violation) when the
        value cannot denote a positive employee ID.
    """
    if isinstance(raw, (Employee, EmployeeKey)):
        return raw, no_violation(raw)
    if isinstance(raw, Mapping):
        raw = raw.get(EMPLOYEE_ID, raw.get("id"))
    if not is_positive_id(raw):
        return None, range_violation(
            f"Invalid employee reference: {raw!r} is not a positive integer ID!"
        )
    reference = EmployeeKey(int(raw))
    return reference, no_violation(reference)

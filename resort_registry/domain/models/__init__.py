"""Domain models for the resort registry.

Immutable value objects; no infrastructure dependencies.
"""

from resort_registry.domain.models.constraint_violation import (
    NO_VIOLATION,
    ConstraintViolation,
    ViolationKind,
)
from resort_registry.domain.models.employee import EMPLOYEES_COLLECTION, Employee
from resort_registry.domain.models.enumerations import Gender, TherapySkill
from resort_registry.domain.models.page import DEFAULT_PAGE_SIZE, Page
from resort_registry.domain.models.reference import (
    EmployeeKey,
    EmployeeReference,
    to_reference,
)
from resort_registry.domain.models.resort import RESORTS_COLLECTION, Resort

__all__: list[str] = [
    "ConstraintViolation",
    "DEFAULT_PAGE_SIZE",
    "EMPLOYEES_COLLECTION",
    "Employee",
    "EmployeeKey",
    "EmployeeReference",
    "Gender",
    "NO_VIOLATION",
    "Page",
    "RESORTS_COLLECTION",
    "Resort",
    "TherapySkill",
    "ViolationKind",
    "to_reference",
]

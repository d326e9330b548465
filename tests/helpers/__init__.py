"""Test helpers.

Usage:
    from tests.helpers import seed_employee, seed_resort
"""

from tests.helpers.documents import (
    FIXED_TODAY,
    employee_document,
    resort_document,
    seed_employee,
    seed_resort,
)

__all__ = [
    "FIXED_TODAY",
    "employee_document",
    "resort_document",
    "seed_employee",
    "seed_resort",
]

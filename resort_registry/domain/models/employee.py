"""Employee domain model.

An Employee is a validated aggregate of personal fields plus a set of
therapy skill codes. Employees holding at least one skill qualify as
therapists of a resort.

Document layout (collection "employees", key = str(employeeId)):
    {
        "employeeId": 7,
        "firstName": "Ada",
        "lastName": "Lovelace",
        "birthdate": "1990-12-10",
        "gender": 2,
        "therapySkills": [1, 2]
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from resort_registry.domain.models.enumerations import Gender

EMPLOYEES_COLLECTION = "employees"

# Document field names
EMPLOYEE_ID = "employeeId"
FIRST_NAME = "firstName"
LAST_NAME = "lastName"
BIRTHDATE = "birthdate"
GENDER = "gender"
THERAPY_SKILLS = "therapySkills"

EMPLOYEE_FIELDS: tuple[str, ...] = (
    EMPLOYEE_ID,
    FIRST_NAME,
    LAST_NAME,
    BIRTHDATE,
    GENDER,
    THERAPY_SKILLS,
)


@dataclass(frozen=True, eq=True)
class Employee:
    """An employee record.

    Instances are only built from values that passed the field
    validators (see resort_registry.domain.validation.employee) or
    from stored documents.

    Attributes:
        employee_id: Positive integer key, immutable once assigned.
        first_name: Letters-only first name.
        last_name: Letters-only last name.
        birthdate: Date of birth, never in the future.
        gender: Gender code.
        therapy_skills: Sorted, deduplicated therapy skill codes.
    """

    employee_id: int
    first_name: str
    last_name: str
    birthdate: date
    gender: Gender
    therapy_skills: tuple[int, ...] = field(default=())

    @property
    def key(self) -> str:
        """Document key of this employee."""
        return str(self.employee_id)

    @property
    def is_qualified_therapist(self) -> bool:
        """True if the employee holds at least one therapy skill."""
        return len(self.therapy_skills) > 0

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document form."""
        return {
            EMPLOYEE_ID: self.employee_id,
            FIRST_NAME: self.first_name,
            LAST_NAME: self.last_name,
            BIRTHDATE: self.birthdate.isoformat(),
            GENDER: int(self.gender),
            THERAPY_SKILLS: list(self.therapy_skills),
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Employee:
        """Rebuild an employee from its stored document."""
        birthdate = document[BIRTHDATE]
        if isinstance(birthdate, str):
            birthdate = date.fromisoformat(birthdate[:10])
        return cls(
            employee_id=int(document[EMPLOYEE_ID]),
            first_name=document[FIRST_NAME],
            last_name=document[LAST_NAME],
            birthdate=birthdate,
            gender=Gender(int(document[GENDER])),
            therapy_skills=tuple(
                sorted({int(code) for code in document.get(THERAPY_SKILLS) or ()})
            ),
        )

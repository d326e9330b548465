"""Employee field validators.

Pure, synchronous checks, one per field. Each returns a
ConstraintViolation; NO_VIOLATION carries the normalized value.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from resort_registry.domain.models.constraint_violation import (
    ConstraintViolation,
    mandatory_value,
    no_violation,
    pattern,
    range_violation,
    string_length,
)
from resort_registry.domain.models.employee import (
    BIRTHDATE,
    EMPLOYEE_ID,
    FIRST_NAME,
    GENDER,
    LAST_NAME,
    THERAPY_SKILLS,
    Employee,
)
from resort_registry.domain.models.enumerations import (
    GENDER_MAX,
    THERAPY_SKILL_MAX,
    Gender,
)
from resort_registry.domain.validation.rules import Rule, run_rules
from resort_registry.domain.validation.values import (
    LETTERS_ONLY,
    is_absent,
    is_int_in_range,
    is_non_empty_string,
    is_positive_id,
    parse_date,
)

NAME_MAX_LENGTH = 30

EMPLOYEE_ID_REQUIRED = "A value for the employee ID must be provided!"

EMPLOYEE_ID_RULES: tuple[Rule, ...] = (
    Rule(
        lambda v: not is_positive_id(v),
        range_violation,
        "The employee ID must be a positive integer!",
    ),
)


def _name_rules(label: str) -> tuple[Rule, ...]:
    return (
        Rule(is_absent, mandatory_value, f"A {label} must be provided!"),
        Rule(
            lambda v: not is_non_empty_string(v),
            range_violation,
            f"The {label} must be a non-empty string!",
        ),
        Rule(
            lambda v: LETTERS_ONLY.match(v) is None,
            pattern,
            f"The {label} must consist of letters only.",
        ),
        Rule(
            lambda v: len(v) > NAME_MAX_LENGTH,
            string_length,
            f"The {label} must be at most {NAME_MAX_LENGTH} characters long.",
        ),
    )


FIRST_NAME_RULES = _name_rules("first name")
LAST_NAME_RULES = _name_rules("last name")

GENDER_RULES: tuple[Rule, ...] = (
    Rule(is_absent, mandatory_value, "A gender must be provided!"),
    Rule(
        lambda v: not is_int_in_range(v, 1, GENDER_MAX),
        range_violation,
        "Invalid value for gender: {value}",
    ),
)

THERAPY_SKILL_RULES: tuple[Rule, ...] = (
    Rule(
        lambda v: not is_int_in_range(v, 1, THERAPY_SKILL_MAX),
        range_violation,
        "Invalid value for therapy: {value}",
    ),
)


def check_employee_id(employee_id: Any) -> ConstraintViolation:
    """Check an employee ID's syntax; an absent ID is not an error here."""
    return run_rules(employee_id, EMPLOYEE_ID_RULES, normalize=int, optional=True)


def check_employee_id_mandatory(employee_id: Any) -> ConstraintViolation:
    """Check an employee ID used as the record's own identifier."""
    if is_absent(employee_id):
        return mandatory_value(EMPLOYEE_ID_REQUIRED)
    return check_employee_id(employee_id)


def check_first_name(first_name: Any) -> ConstraintViolation:
    return run_rules(first_name, FIRST_NAME_RULES)


def check_last_name(last_name: Any) -> ConstraintViolation:
    return run_rules(last_name, LAST_NAME_RULES)


def check_birthdate(birthdate: Any, today: date | None = None) -> ConstraintViolation:
    """Check a birthdate: mandatory, a real calendar date, not in the future.

    Args:
        birthdate: date, datetime or ISO date string.
        today: Reference date (defaults to the current local date).
    """
    reference = today or date.today()
    rules = (
        Rule(is_absent, mandatory_value, "A value for the birthdate must be provided!"),
        Rule(
            lambda v: parse_date(v) is None,
            range_violation,
            "The value of birthdate must be a valid date",
        ),
        Rule(
            lambda v: parse_date(v) > reference,
            range_violation,
            "The birthdate of an employee must not be in the future!",
        ),
    )
    return run_rules(birthdate, rules, normalize=parse_date)


def check_gender(gender: Any) -> ConstraintViolation:
    return run_rules(gender, GENDER_RULES, normalize=lambda v: Gender(int(v)))


def check_therapy_skill(skill: Any) -> ConstraintViolation:
    return run_rules(skill, THERAPY_SKILL_RULES, normalize=int)


def check_therapy_skills(skills: Any) -> ConstraintViolation:
    """Check an optional list of therapy codes.

    Absent or empty is accepted. Otherwise the value must be a list
    whose every element is a valid therapy code.

    Returns:
        First element violation, or NO_VIOLATION carrying the sorted,
        deduplicated code tuple.
    """
    if is_absent(skills):
        return no_violation(())
    if not isinstance(skills, (list, tuple, set, frozenset)):
        return range_violation("The value of therapySkills must be a list/array!")
    codes: set[int] = set()
    for skill in skills:
        violation = check_therapy_skill(skill)
        if not violation.ok:
            return violation
        codes.add(violation.checked_value)
    return no_violation(tuple(sorted(codes)))


def build_employee(
    slots: Mapping[str, Any],
    today: date | None = None,
) -> tuple[Employee | None, ConstraintViolation]:
    """Validate raw form slots and construct an Employee.

    Fields are checked in document order; the first violation aborts
    construction.

    Args:
        slots: Raw values keyed by document field name.
        today: Reference date for the birthdate check.

    Returns:
        (employee, NO_VIOLATION) on success, (None, violation) otherwise.
    """
    checks = (
        (EMPLOYEE_ID, check_employee_id_mandatory),
        (FIRST_NAME, check_first_name),
        (LAST_NAME, check_last_name),
        (BIRTHDATE, lambda v: check_birthdate(v, today)),
        (GENDER, check_gender),
        (THERAPY_SKILLS, check_therapy_skills),
    )
    values: dict[str, Any] = {}
    for field_name, check in checks:
        violation = check(slots.get(field_name))
        if not violation.ok:
            return None, violation
        values[field_name] = violation.checked_value

    employee = Employee(
        employee_id=values[EMPLOYEE_ID],
        first_name=values[FIRST_NAME],
        last_name=values[LAST_NAME],
        birthdate=values[BIRTHDATE],
        gender=values[GENDER],
        therapy_skills=values[THERAPY_SKILLS],
    )
    return employee, no_violation(employee)


EMPLOYEE_FIELD_CHECKS = {
    FIRST_NAME: check_first_name,
    LAST_NAME: check_last_name,
    BIRTHDATE: check_birthdate,
    GENDER: check_gender,
    THERAPY_SKILLS: check_therapy_skills,
}

"""Resort field validators.

Local, synchronous checks only. Existence of referenced employees and
the therapist qualification (at least one skill) need the store and
live in ReferentialIntegrityService.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from resort_registry.domain.models.constraint_violation import (
    ConstraintViolation,
    mandatory_value,
    no_violation,
    pattern,
    range_violation,
    string_length,
)
from resort_registry.domain.models.reference import reference_id, to_reference
from resort_registry.domain.models.resort import (
    AVAILABLE_REHAS,
    CITY,
    MANAGER_ID,
    RESORT_ID,
    THERAPIST_ID_REFS,
    Resort,
)
from resort_registry.domain.validation.employee import check_therapy_skills
from resort_registry.domain.validation.rules import Rule, run_rules
from resort_registry.domain.validation.values import (
    LETTERS_ONLY,
    is_absent,
    is_non_empty_string,
    is_positive_id,
)

CITY_MAX_LENGTH = 50

RESORT_ID_REQUIRED = "A value for the resort ID must be provided!"
MANAGER_ID_REQUIRED = "A value for the manager ID must be provided!"

RESORT_ID_RULES: tuple[Rule, ...] = (
    Rule(
        lambda v: not is_positive_id(v),
        range_violation,
        "The resort ID must be a positive integer!",
    ),
)

CITY_RULES: tuple[Rule, ...] = (
    Rule(is_absent, mandatory_value, "The name of the city must be provided!"),
    Rule(
        lambda v: not is_non_empty_string(v),
        range_violation,
        "The name of the city must be a non-empty string!",
    ),
    Rule(
        lambda v: LETTERS_ONLY.match(v) is None,
        pattern,
        "The name of the city must consist of letters only.",
    ),
    Rule(
        lambda v: len(v) > CITY_MAX_LENGTH,
        string_length,
        f"The name of the city must be at most {CITY_MAX_LENGTH} characters long.",
    ),
)


def check_resort_id(resort_id: Any) -> ConstraintViolation:
    """Check a resort ID's syntax; an absent ID is not an error here."""
    return run_rules(resort_id, RESORT_ID_RULES, normalize=int, optional=True)


def check_resort_id_mandatory(resort_id: Any) -> ConstraintViolation:
    if is_absent(resort_id):
        return mandatory_value(RESORT_ID_REQUIRED)
    return check_resort_id(resort_id)


def check_city(city: Any) -> ConstraintViolation:
    return run_rules(city, CITY_RULES)


def check_manager_id(manager_id: Any) -> ConstraintViolation:
    """Check the mandatory manager reference.

    Accepts the same reference forms as a therapist reference.

    Returns:
        NO_VIOLATION carrying the manager's employeeId.
    """
    if is_absent(manager_id):
        return mandatory_value(MANAGER_ID_REQUIRED)
    reference, violation = to_reference(manager_id)
    if reference is None:
        return violation
    return no_violation(reference_id(reference))


def check_therapist_id_refs(refs: Any) -> ConstraintViolation:
    """Check the optional therapist reference list syntactically.

    Returns:
        First malformed reference's violation, or NO_VIOLATION carrying
        the unique employeeIds in first-seen order.
    """
    if is_absent(refs):
        return no_violation(())
    if not isinstance(refs, (list, tuple, set, frozenset)):
        return range_violation("The value of therapistIdRefs must be a list/array!")
    ids: list[int] = []
    for raw in refs:
        reference, violation = to_reference(raw)
        if reference is None:
            return violation
        if reference_id(reference) not in ids:
            ids.append(reference_id(reference))
    return no_violation(tuple(ids))


def check_available_rehas(rehas: Any) -> ConstraintViolation:
    """Check a supplied derived therapy set; same domain as therapy skills."""
    return check_therapy_skills(rehas)


def build_resort(
    slots: Mapping[str, Any],
) -> tuple[Resort | None, ConstraintViolation]:
    """Validate raw form slots and construct a Resort.

    A supplied ``availableRehas`` is only checked syntactically and kept
    on the returned instance; callers compare it against the derived
    value before persisting.

    Returns:
        (resort, NO_VIOLATION) on success, (None, violation) otherwise.
    """
    checks = (
        (RESORT_ID, check_resort_id_mandatory),
        (CITY, check_city),
        (MANAGER_ID, check_manager_id),
        (THERAPIST_ID_REFS, check_therapist_id_refs),
        (AVAILABLE_REHAS, check_available_rehas),
    )
    values: dict[str, Any] = {}
    for field_name, check in checks:
        violation = check(slots.get(field_name))
        if not violation.ok:
            return None, violation
        values[field_name] = violation.checked_value

    resort = Resort(
        resort_id=values[RESORT_ID],
        city=values[CITY],
        manager_id=values[MANAGER_ID],
        therapist_id_refs=values[THERAPIST_ID_REFS],
        available_rehas=values[AVAILABLE_REHAS],
    )
    return resort, no_violation(resort)

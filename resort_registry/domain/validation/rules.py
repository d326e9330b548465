"""Declarative validation rules.

A field's constraints are an ordered list of Rule entries, each pairing
a predicate that detects a violation with the violation to report. The
runner returns the first failing rule's violation, so list order is the
check order (mandatory, then type/range, then pattern, then length).

Usage:
    CITY_RULES = (
        Rule(is_absent, mandatory_value, "The name of the city must be provided!"),
        Rule(lambda v: not is_non_empty_string(v), range_violation, "..."),
    )

    violation = run_rules(city, CITY_RULES, normalize=str.strip)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from resort_registry.domain.models.constraint_violation import (
    ConstraintViolation,
    no_violation,
)
from resort_registry.domain.validation.values import is_absent


@dataclass(frozen=True)
class Rule:
    """One constraint of a field.

    Attributes:
        violates: Predicate returning True when the value breaks the rule.
        make: Factory for the violation (e.g., range_violation).
        message: Message text; "{value}" is replaced by the checked value.
    """

    violates: Callable[[Any], bool]
    make: Callable[[str], ConstraintViolation]
    message: str

    def check(self, value: Any) -> ConstraintViolation | None:
        if self.violates(value):
            return self.make(self.message.replace("{value}", str(value)))
        return None


def run_rules(
    value: Any,
    rules: Sequence[Rule],
    normalize: Callable[[Any], Any] | None = None,
    optional: bool = False,
) -> ConstraintViolation:
    """Evaluate rules in order; the first failing rule wins.

    Args:
        value: Raw input value.
        rules: Ordered rules for the field.
        normalize: Converts an accepted value to its stored form; the
            result is returned as the violation's checked_value.
        optional: If True, an absent value is accepted without running
            any rule.

    Returns:
        The first rule's violation, or NO_VIOLATION carrying the
        normalized value.
    """
    if optional and is_absent(value):
        return no_violation()
    for rule in rules:
        violation = rule.check(value)
        if violation is not None:
            return violation
    return no_violation(normalize(value) if normalize is not None else value)

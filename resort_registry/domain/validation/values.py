"""Value predicates and coercions shared by the field validators."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

_INTEGER_STRING = re.compile(r"^-?[0-9]+$")
LETTERS_ONLY = re.compile(r"^[A-Za-z]+$")


def is_absent(value: Any) -> bool:
    """True for values a form leaves empty: None, "" and empty sequences."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def is_integer_or_integer_string(value: Any) -> bool:
    """True for ints (not bools) and strings holding an optionally signed integer."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and _INTEGER_STRING.match(value) is not None


def is_positive_id(value: Any) -> bool:
    return is_integer_or_integer_string(value) and int(value) >= 1


def is_int_in_range(value: Any, low: int, high: int) -> bool:
    return is_integer_or_integer_string(value) and low <= int(value) <= high


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def parse_date(value: Any) -> date | None:
    """Parse a calendar date.

    Accepts date and datetime objects, and ISO-8601 strings
    ("1990-12-10" or a full timestamp).

    Returns:
        The date, or None if the value is not a real calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None

"""Code enumerations for employee attributes.

Codes are 1-based integers as stored in documents. Gender is a
single-valued attribute; therapy skills are multi-valued.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum


class Gender(IntEnum):
    """Gender codes."""

    MALE = 1
    FEMALE = 2
    OTHER = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class TherapySkill(IntEnum):
    """Rehabilitation therapy codes.

    A resort's available therapies are the union of its therapists'
    skills, expressed with these codes.
    """

    BALANCE = 1
    SPEECH = 2
    SWALLOWING = 3
    RESPIRATORY = 4
    VISION = 5
    PHYSICAL = 6
    OCCUPATIONAL = 7

    @property
    def label(self) -> str:
        return self.name.capitalize()


GENDER_MAX: int = max(Gender)
THERAPY_SKILL_MAX: int = max(TherapySkill)


def stringify_skills(codes: Iterable[int]) -> str:
    """Render therapy codes as a comma separated label list.

    Args:
        codes: Therapy skill codes (unknown codes are rendered as-is).

    Returns:
        Labels in the given order, e.g. "Balance, Speech".
    """
    labels = []
    for code in codes:
        try:
            labels.append(TherapySkill(code).label)
        except ValueError:
            labels.append(str(code))
    return ", ".join(labels)

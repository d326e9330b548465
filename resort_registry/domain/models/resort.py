"""Resort domain model.

A Resort references one manager and any number of therapists in the
employees collection. Its ``available_rehas`` is derived: the sorted
union of the therapy skills of its current therapists. It is never
assigned independently of the therapist set.

Document layout (collection "resorts", key = str(resortId)):
    {
        "resortId": 3,
        "city": "Cottbus",
        "managerId": 7,
        "therapistIdRefs": [7, 12],
        "availableRehas": [1, 2, 5]
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

RESORTS_COLLECTION = "resorts"

# Document field names
RESORT_ID = "resortId"
CITY = "city"
MANAGER_ID = "managerId"
THERAPIST_ID_REFS = "therapistIdRefs"
AVAILABLE_REHAS = "availableRehas"

RESORT_FIELDS: tuple[str, ...] = (
    RESORT_ID,
    CITY,
    MANAGER_ID,
    THERAPIST_ID_REFS,
    AVAILABLE_REHAS,
)


@dataclass(frozen=True, eq=True)
class Resort:
    """A resort record.

    Attributes:
        resort_id: Positive integer key.
        city: Letters-only city name.
        manager_id: employeeId of the managing employee (mandatory).
        therapist_id_refs: employeeIds of the therapists, unique, in
            insertion order.
        available_rehas: Derived, sorted therapy codes.
    """

    resort_id: int
    city: str
    manager_id: int
    therapist_id_refs: tuple[int, ...] = field(default=())
    available_rehas: tuple[int, ...] = field(default=())

    @property
    def key(self) -> str:
        """Document key of this resort."""
        return str(self.resort_id)

    def with_therapists(
        self,
        added: tuple[int, ...] = (),
        removed: tuple[int, ...] = (),
    ) -> tuple[int, ...]:
        """Compute the therapist set after additions and removals.

        Since Resort is frozen, returns the new reference tuple rather
        than mutating. Additions already present and removals not
        present are no-ops.

        Args:
            added: employeeIds to add.
            removed: employeeIds to remove.

        Returns:
            The resulting therapist reference tuple.
        """
        refs = list(self.therapist_id_refs)
        for employee_id in added:
            if employee_id not in refs:
                refs.append(employee_id)
        removed_set = set(removed)
        return tuple(ref for ref in refs if ref not in removed_set)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document form."""
        return {
            RESORT_ID: self.resort_id,
            CITY: self.city,
            MANAGER_ID: self.manager_id,
            THERAPIST_ID_REFS: list(self.therapist_id_refs),
            AVAILABLE_REHAS: list(self.available_rehas),
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Resort:
        """Rebuild a resort from its stored document."""
        return cls(
            resort_id=int(document[RESORT_ID]),
            city=document[CITY],
            manager_id=int(document[MANAGER_ID]),
            therapist_id_refs=tuple(
                int(ref) for ref in document.get(THERAPIST_ID_REFS) or ()
            ),
            available_rehas=tuple(
                int(code) for code in document.get(AVAILABLE_REHAS) or ()
            ),
        )

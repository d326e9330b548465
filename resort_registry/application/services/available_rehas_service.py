"""Derived availableRehas maintenance.

A resort's availableRehas is the sorted union of the therapy skills of
the employees in its therapistIdRefs. This service is the only code that
computes it. Mutators call it when:

- a resort is created with therapists
- a resort's therapist set changes
- an employee's skills change (every resort listing them as therapist)
- an employee is deleted (every resort that listed them, after the
  reference has been stripped)

Reverse lookup ("which resorts reference employee X") is a query on
therapistIdRefs membership plus a query on managerId equality; no
back-references are stored on employees.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from resort_registry.application.ports.document_store import (
    DocumentStoreProtocol,
    FieldFilter,
    FilterOp,
    WriteBatch,
)
from resort_registry.application.services.base import LoggingMixin
from resort_registry.domain.models.employee import (
    EMPLOYEES_COLLECTION,
    THERAPY_SKILLS,
)
from resort_registry.domain.models.reference import reference_id, to_reference
from resort_registry.domain.models.resort import (
    AVAILABLE_REHAS,
    MANAGER_ID,
    RESORTS_COLLECTION,
    THERAPIST_ID_REFS,
    Resort,
)


@dataclass(frozen=True)
class ReferencingResorts:
    """Resorts that reference one employee.

    Attributes:
        employee_id: The referenced employee.
        as_therapist: Resorts listing the employee in therapistIdRefs.
        as_manager: Resorts whose managerId is the employee.
    """

    employee_id: int
    as_therapist: tuple[Resort, ...] = ()
    as_manager: tuple[Resort, ...] = ()

    @property
    def managed_keys(self) -> frozenset[str]:
        return frozenset(resort.key for resort in self.as_manager)

    @property
    def therapist_only_keys(self) -> tuple[str, ...]:
        """Keys of therapist resorts that the employee does not also manage."""
        managed = self.managed_keys
        return tuple(r.key for r in self.as_therapist if r.key not in managed)

    @property
    def is_empty(self) -> bool:
        return not self.as_therapist and not self.as_manager


class AvailableRehasService(LoggingMixin):
    """Computes and persists the derived availableRehas of resorts.

    Reads propagate DocumentStoreError; the calling mutator turns it
    into a STORE_UNAVAILABLE violation.
    """

    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store
        self._init_logger()

    async def derive_available_rehas(self, refs: Iterable[Any]) -> tuple[int, ...]:
        """Compute the sorted, deduplicated union of the therapists' skills.

        Every reference is re-read from the store, resolved Employee
        objects included, so skills changed since they were loaded
        count. References to employees that no longer exist are skipped.

        Args:
            refs: Employee references (Employee, EmployeeKey, key, mapping).

        Returns:
            Ascending therapy codes.

        Raises:
            DocumentStoreError: If an employee cannot be read.
        """
        log = self._log_operation("derive_available_rehas")
        skills: set[int] = set()
        for raw in refs:
            reference, violation = to_reference(raw)
            if reference is None:
                log.warning("malformed_therapist_reference", detail=violation.message)
                continue
            employee_id = reference_id(reference)
            document = await self._store.get(EMPLOYEES_COLLECTION, str(employee_id))
            if document is None:
                log.warning("dangling_therapist_reference", employee_id=employee_id)
                continue
            skills.update(int(code) for code in document.get(THERAPY_SKILLS) or ())
        return tuple(sorted(skills))

    async def find_resorts_referencing(self, employee_id: int) -> ReferencingResorts:
        """Reverse lookup of the resorts that reference an employee.

        Raises:
            DocumentStoreError: If the resorts cannot be queried.
        """
        as_therapist = await self._store.query(
            RESORTS_COLLECTION,
            where=FieldFilter(THERAPIST_ID_REFS, FilterOp.ARRAY_CONTAINS, employee_id),
        )
        as_manager = await self._store.query(
            RESORTS_COLLECTION,
            where=FieldFilter(MANAGER_ID, FilterOp.EQUALS, employee_id),
        )
        found = ReferencingResorts(
            employee_id=employee_id,
            as_therapist=tuple(Resort.from_document(d) for d in as_therapist),
            as_manager=tuple(Resort.from_document(d) for d in as_manager),
        )
        self._log_operation(
            "find_resorts_referencing", employee_id=employee_id
        ).debug(
            "referencing_resorts_found",
            as_therapist=[r.resort_id for r in found.as_therapist],
            as_manager=[r.resort_id for r in found.as_manager],
        )
        return found

    async def refresh_available_rehas(
        self, resort_keys: Iterable[str]
    ) -> tuple[Resort, ...]:
        """Recompute availableRehas for resorts and persist them in one batch.

        Each resort is re-read first so the derivation runs over its
        current therapist set. Resorts that no longer exist are skipped.

        Args:
            resort_keys: Document keys of the resorts to refresh.

        Returns:
            The refreshed resorts, with their new derived values.

        Raises:
            DocumentStoreError: If a read or the batch commit fails.
            RecordNotFoundError: If a resort vanishes before the commit.
        """
        keys = list(dict.fromkeys(resort_keys))
        log = self._log_operation("refresh_available_rehas", resort_keys=keys)
        batch = WriteBatch(self._store)
        refreshed: list[Resort] = []
        for key in keys:
            document = await self._store.get(RESORTS_COLLECTION, key)
            if document is None:
                log.debug("resort_gone_before_refresh", resort_key=key)
                continue
            resort = Resort.from_document(document)
            rehas = await self.derive_available_rehas(resort.therapist_id_refs)
            batch.update(RESORTS_COLLECTION, key, {AVAILABLE_REHAS: list(rehas)})
            refreshed.append(
                Resort(
                    resort_id=resort.resort_id,
                    city=resort.city,
                    manager_id=resort.manager_id,
                    therapist_id_refs=resort.therapist_id_refs,
                    available_rehas=rehas,
                )
            )
        await batch.commit()
        if refreshed:
            log.info("resort_refresh_committed", refreshed_count=len(refreshed))
        return tuple(refreshed)

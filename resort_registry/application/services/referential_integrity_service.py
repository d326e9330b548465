"""Referential integrity checks against the document store.

Every key field has two asynchronous checks:

- "as id": the value is about to become a record's own key. It must be
  syntactically valid and NOT yet present (UNIQUENESS otherwise).
- "as id-ref": the value must point at an existing record. It must be
  syntactically valid and present (REFERENTIAL_INTEGRITY otherwise).

Each costs one point lookup. Therapist references add a second fetch of
the referenced employee to confirm at least one therapy skill (RANGE
otherwise).

Store failures are reported as STORE_UNAVAILABLE violations, so these
checks can also back responsive form validation.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from resort_registry.application.ports.document_store import DocumentStoreProtocol
from resort_registry.application.services.base import LoggingMixin
from resort_registry.domain.errors import DocumentStoreError, RecordNotFoundError
from resort_registry.domain.exceptions import ResortRegistryError
from resort_registry.domain.models.constraint_violation import (
    ConstraintViolation,
    no_violation,
    range_violation,
    referential_integrity,
    store_unavailable,
    uniqueness,
)
from resort_registry.domain.models.employee import EMPLOYEES_COLLECTION, Employee
from resort_registry.domain.models.reference import reference_id, to_reference
from resort_registry.domain.models.resort import RESORTS_COLLECTION
from resort_registry.domain.validation.employee import check_employee_id_mandatory
from resort_registry.domain.validation.resort import (
    check_manager_id,
    check_resort_id_mandatory,
    check_therapist_id_refs,
)

THERAPIST_NOT_QUALIFIED = (
    "A therapist must be an employee with at least 1 therapy skill!"
)


def violation_for_store_error(exc: ResortRegistryError) -> ConstraintViolation:
    """Map a store exception to the violation reported to callers.

    RecordNotFoundError means the record vanished between read and
    write; every other store error means the store was unreachable.
    """
    if isinstance(exc, RecordNotFoundError):
        return referential_integrity(
            f"The {exc.collection} record {exc.key} no longer exists!"
        )
    reason = exc.reason if isinstance(exc, DocumentStoreError) else str(exc)
    return store_unavailable(f"The document store is unavailable: {reason}")


class ReferentialIntegrityService(LoggingMixin):
    """Key uniqueness and reference existence checks.

    Attributes:
        _store: Document store the checks read from.
    """

    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store
        self._init_logger()

    async def check_employee_id_as_id(self, employee_id: Any) -> ConstraintViolation:
        """Check a new employee's key: valid and not taken."""
        return await self._check_as_id(
            employee_id,
            check_employee_id_mandatory,
            EMPLOYEES_COLLECTION,
            "There is already an employee record with this ID!",
        )

    async def check_employee_id_as_id_ref(
        self, employee_id: Any
    ) -> ConstraintViolation:
        """Check a reference to an employee: valid and existing."""
        return await self._check_as_id_ref(
            employee_id,
            check_employee_id_mandatory,
            EMPLOYEES_COLLECTION,
            "There is no employee record with this employee ID {id}!",
        )

    async def check_resort_id_as_id(self, resort_id: Any) -> ConstraintViolation:
        """Check a new resort's key: valid and not taken."""
        return await self._check_as_id(
            resort_id,
            check_resort_id_mandatory,
            RESORTS_COLLECTION,
            "There is already a resort record with this ID!",
        )

    async def check_resort_id_as_id_ref(self, resort_id: Any) -> ConstraintViolation:
        """Check a reference to a resort: valid and existing."""
        return await self._check_as_id_ref(
            resort_id,
            check_resort_id_mandatory,
            RESORTS_COLLECTION,
            "There is no resort record with this resort ID {id}!",
        )

    async def check_manager_id_as_id_ref(self, manager_id: Any) -> ConstraintViolation:
        """Check a manager reference; any existing employee qualifies."""
        return await self._check_as_id_ref(
            manager_id,
            check_manager_id,
            EMPLOYEES_COLLECTION,
            "There is no employee record with this manager ID {id}!",
        )

    async def check_therapist_id_ref(self, raw: Any) -> ConstraintViolation:
        """Check one therapist reference.

        Two remote steps: the employee must exist, and the freshly
        fetched employee must hold at least one therapy skill. A
        resolved Employee passed in is re-read, never trusted.

        Args:
            raw: Key, integer string, mapping or Employee.

        Returns:
            NO_VIOLATION carrying the employeeId, or the first violation.
        """
        reference, violation = to_reference(raw)
        if reference is None:
            return violation
        employee_id = reference_id(reference)

        existence = await self.check_employee_id_as_id_ref(employee_id)
        if not existence.ok:
            return existence

        try:
            document = await self._store.get(EMPLOYEES_COLLECTION, str(employee_id))
        except DocumentStoreError as exc:
            return self._store_failure("check_therapist_id_ref", exc)
        if document is None:
            return referential_integrity(
                f"There is no employee record with this employee ID {employee_id}!"
            )
        if not Employee.from_document(document).is_qualified_therapist:
            self._log_operation(
                "check_therapist_id_ref", employee_id=employee_id
            ).debug("therapist_not_qualified")
            return range_violation(THERAPIST_NOT_QUALIFIED)
        return no_violation(employee_id)

    async def check_therapist_id_refs(self, refs: Any) -> ConstraintViolation:
        """Check a whole therapist reference list, stopping at the first failure.

        Returns:
            NO_VIOLATION carrying the unique employeeIds in order.
        """
        syntax = check_therapist_id_refs(refs)
        if not syntax.ok:
            return syntax
        for employee_id in syntax.checked_value:
            violation = await self.check_therapist_id_ref(employee_id)
            if not violation.ok:
                return violation
        return syntax

    async def _check_as_id(
        self,
        value: Any,
        check_syntax: Callable[[Any], ConstraintViolation],
        collection: str,
        taken_message: str,
    ) -> ConstraintViolation:
        syntax = check_syntax(value)
        if not syntax.ok:
            return syntax
        try:
            taken = await self._store.exists(collection, str(syntax.checked_value))
        except DocumentStoreError as exc:
            return self._store_failure("check_as_id", exc)
        if taken:
            return uniqueness(taken_message)
        return syntax

    async def _check_as_id_ref(
        self,
        value: Any,
        check_syntax: Callable[[Any], ConstraintViolation],
        collection: str,
        missing_message: str,
    ) -> ConstraintViolation:
        syntax = check_syntax(value)
        if not syntax.ok:
            return syntax
        try:
            found = await self._store.exists(collection, str(syntax.checked_value))
        except DocumentStoreError as exc:
            return self._store_failure("check_as_id_ref", exc)
        if not found:
            return referential_integrity(
                missing_message.replace("{id}", str(syntax.checked_value))
            )
        return syntax

    def _store_failure(
        self, operation: str, exc: DocumentStoreError
    ) -> ConstraintViolation:
        self._log_operation(operation, collection=exc.collection).warning(
            "reference_check_store_failure", error=str(exc)
        )
        return violation_for_store_error(exc)

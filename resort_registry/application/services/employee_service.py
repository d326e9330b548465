"""Employee use cases: add, retrieve, page, update, delete.

Mutators return a ConstraintViolation and never raise for invalid
input or store failures. A failed check aborts the whole operation
before anything is written.

Consistency with resorts:
- update: if the skill set changed, every resort listing the employee
  as therapist gets its availableRehas recomputed. If the skill set
  became empty, the employee no longer qualifies and is first removed
  from those resorts' therapistIdRefs (batch 1), then the derivation
  runs over the smaller sets (batch 2).
- delete: batch 1 strips the employee from every therapist set and
  deletes every resort the employee manages; batch 2 recomputes the
  remaining resorts; the employee document is deleted last.

The two batches are not atomic together. If batch 2 fails, resorts
keep a stale availableRehas until their next update, which recomputes it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date
from enum import IntEnum
from typing import Any

from resort_registry.application.ports.document_store import (
    ArrayRemove,
    DocumentStoreProtocol,
    WriteBatch,
)
from resort_registry.application.services.available_rehas_service import (
    AvailableRehasService,
    ReferencingResorts,
)
from resort_registry.application.services.base import LoggingMixin
from resort_registry.application.services.page_reader import PageReader
from resort_registry.application.services.referential_integrity_service import (
    ReferentialIntegrityService,
    violation_for_store_error,
)
from resort_registry.domain.errors import DocumentStoreError, RecordNotFoundError
from resort_registry.domain.models.constraint_violation import (
    ConstraintViolation,
    frozen_value,
    no_violation,
    range_violation,
    referential_integrity,
)
from resort_registry.domain.models.employee import (
    BIRTHDATE,
    EMPLOYEE_FIELDS,
    EMPLOYEE_ID,
    EMPLOYEES_COLLECTION,
    THERAPY_SKILLS,
    Employee,
)
from resort_registry.domain.models.page import DEFAULT_PAGE_SIZE, Page
from resort_registry.domain.models.resort import RESORTS_COLLECTION, THERAPIST_ID_REFS
from resort_registry.domain.validation.employee import (
    EMPLOYEE_FIELD_CHECKS,
    build_employee,
    check_birthdate,
    check_employee_id,
    check_employee_id_mandatory,
)
from resort_registry.infrastructure.observability.correlation import operation_scope


def _stored_form(value: Any) -> Any:
    """Convert a normalized field value to its document representation."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, IntEnum):
        return int(value)
    if isinstance(value, tuple):
        return list(value)
    return value


class EmployeeService(LoggingMixin):
    """Consistency-preserving employee operations.

    Attributes:
        _store: Document store.
        _integrity: Key uniqueness and reference checks.
        _rehas: Derived availableRehas maintenance.
        _pages: Page reader over the employees collection.
        _today: Clock for the birthdate check.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        integrity: ReferentialIntegrityService | None = None,
        rehas: AvailableRehasService | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._store = store
        self._integrity = integrity or ReferentialIntegrityService(store)
        self._rehas = rehas or AvailableRehasService(store)
        self._pages: PageReader[Employee] = PageReader(
            store,
            EMPLOYEES_COLLECTION,
            Employee.from_document,
            orderable_fields=EMPLOYEE_FIELDS,
            page_size=page_size,
        )
        self._today = today or date.today
        self._init_logger(collection=EMPLOYEES_COLLECTION)

    async def add_employee(self, slots: Mapping[str, Any]) -> ConstraintViolation:
        """Validate and persist a new employee.

        Args:
            slots: Raw field values keyed by document field name.

        Returns:
            NO_VIOLATION carrying the stored Employee, or the violation
            that stopped the operation.
        """
        with operation_scope():
            log = self._log_operation("add_employee", employee_id=slots.get(EMPLOYEE_ID))
            employee, violation = build_employee(slots, today=self._today())
            if employee is None:
                return self._log_rejection(log, "add_rejected", violation)

            violation = await self._integrity.check_employee_id_as_id(
                employee.employee_id
            )
            if not violation.ok:
                return self._log_rejection(log, "add_rejected", violation)

            try:
                await self._store.set(
                    EMPLOYEES_COLLECTION, employee.key, employee.to_document()
                )
            except DocumentStoreError as exc:
                log.error("add_failed", error=str(exc))
                return violation_for_store_error(exc)

            log.info("employee_added")
            return no_violation(employee)

    async def retrieve_employee(self, employee_id: Any) -> Employee | None:
        """Read one employee by key.

        Returns:
            The employee, or None if there is no such record.

        Raises:
            ValueError: If employee_id is not a positive integer.
            DocumentStoreError: If the store cannot be read.
        """
        violation = check_employee_id_mandatory(employee_id)
        if not violation.ok:
            raise ValueError(violation.message)
        document = await self._store.get(
            EMPLOYEES_COLLECTION, str(violation.checked_value)
        )
        return Employee.from_document(document) if document is not None else None

    async def retrieve_employee_page(
        self, order_by: str = EMPLOYEE_ID, cursor: Any = None
    ) -> Page[Employee]:
        """Read one page of employees; see PageReader.read_page."""
        return await self._pages.read_page(order_by, cursor)

    async def update_employee(
        self, employee_id: Any, changes: Mapping[str, Any]
    ) -> ConstraintViolation:
        """Apply field changes to an existing employee.

        Only fields whose value differs from the stored one are checked
        and written. Any failing check aborts the update with nothing
        written.

        Args:
            employee_id: Key of the employee to update.
            changes: Submitted values keyed by document field name.

        Returns:
            NO_VIOLATION carrying the updated Employee, or the violation.
        """
        with operation_scope():
            log = self._log_operation("update_employee", employee_id=employee_id)
            key_check = check_employee_id_mandatory(employee_id)
            if not key_check.ok:
                return key_check
            employee_id = key_check.checked_value

            try:
                document = await self._store.get(EMPLOYEES_COLLECTION, str(employee_id))
            except DocumentStoreError as exc:
                log.error("update_failed", error=str(exc))
                return violation_for_store_error(exc)
            if document is None:
                return referential_integrity(
                    f"There is no employee record with this employee ID {employee_id}!"
                )
            current = Employee.from_document(document)

            updates, violation = self._diff(current, changes)
            if not violation.ok:
                return self._log_rejection(log, "update_rejected", violation)
            if not updates:
                log.debug("update_no_changes")
                return no_violation(current)

            updated = Employee.from_document({**current.to_document(), **updates})
            try:
                await self._store.update(EMPLOYEES_COLLECTION, current.key, updates)
                if THERAPY_SKILLS in updates:
                    await self._propagate_skill_change(updated)
            except (DocumentStoreError, RecordNotFoundError) as exc:
                log.error("update_failed", error=str(exc), fields=sorted(updates))
                return violation_for_store_error(exc)

            log.info("employee_updated", fields=sorted(updates))
            return no_violation(updated)

    async def delete_employee(self, employee_id: Any) -> ConstraintViolation:
        """Delete an employee and repair every resort that referenced it.

        Resorts managed by the employee are deleted. Resorts listing the
        employee as therapist lose the reference and get their
        availableRehas recomputed.

        Returns:
            NO_VIOLATION carrying the employeeId, or the violation.
        """
        with operation_scope():
            log = self._log_operation("delete_employee", employee_id=employee_id)
            violation = await self._integrity.check_employee_id_as_id_ref(employee_id)
            if not violation.ok:
                return self._log_rejection(log, "delete_rejected", violation)
            employee_id = violation.checked_value

            try:
                referencing = await self._rehas.find_resorts_referencing(employee_id)
                await self._detach(referencing)
                await self._rehas.refresh_available_rehas(
                    referencing.therapist_only_keys
                )
                await self._store.delete(EMPLOYEES_COLLECTION, str(employee_id))
            except (DocumentStoreError, RecordNotFoundError) as exc:
                log.error("delete_failed", error=str(exc))
                return violation_for_store_error(exc)

            log.info(
                "employee_deleted",
                removed_as_therapist=list(referencing.therapist_only_keys),
                deleted_resorts=sorted(referencing.managed_keys),
            )
            return no_violation(employee_id)

    def _diff(
        self, current: Employee, changes: Mapping[str, Any]
    ) -> tuple[dict[str, Any], ConstraintViolation]:
        stored = current.to_document()
        updates: dict[str, Any] = {}
        for field_name, raw in changes.items():
            if field_name == EMPLOYEE_ID:
                violation = check_employee_id(raw)
                if not violation.ok:
                    return {}, violation
                if violation.checked_value not in (None, current.employee_id):
                    return {}, frozen_value("The employee ID must not be changed!")
                continue
            check = EMPLOYEE_FIELD_CHECKS.get(field_name)
            if check is None:
                return {}, range_violation(f"Unknown employee field: {field_name}")
            if field_name == BIRTHDATE:
                violation = check_birthdate(raw, today=self._today())
            else:
                violation = check(raw)
            if not violation.ok:
                return {}, violation
            value = _stored_form(violation.checked_value)
            if value != stored.get(field_name):
                updates[field_name] = value
        return updates, no_violation(updates)

    async def _propagate_skill_change(self, employee: Employee) -> None:
        referencing = await self._rehas.find_resorts_referencing(employee.employee_id)
        keys = [resort.key for resort in referencing.as_therapist]
        if not keys:
            return
        log = self._log_operation(
            "propagate_skill_change", employee_id=employee.employee_id
        )
        if not employee.is_qualified_therapist:
            await self._detach(
                ReferencingResorts(employee.employee_id, referencing.as_therapist)
            )
            log.info("therapist_reference_removed", resort_keys=keys)
        await self._rehas.refresh_available_rehas(keys)

    async def _detach(self, referencing: ReferencingResorts) -> None:
        """Strip the employee from therapist sets and delete managed resorts, in one batch."""
        batch = WriteBatch(self._store)
        remove = ArrayRemove((referencing.employee_id,))
        for key in referencing.therapist_only_keys:
            batch.update(RESORTS_COLLECTION, key, {THERAPIST_ID_REFS: remove})
        for resort in referencing.as_manager:
            batch.delete(RESORTS_COLLECTION, resort.key)
        await batch.commit()

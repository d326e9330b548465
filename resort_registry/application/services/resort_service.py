"""Resort use cases: add, retrieve, page, update, delete.

availableRehas is never taken from the caller. It is derived from the
therapist set on every write; a caller-supplied value that differs
from the derived one is rejected with FROZEN_VALUE.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from resort_registry.application.ports.document_store import DocumentStoreProtocol
from resort_registry.application.services.available_rehas_service import (
    AvailableRehasService,
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
from resort_registry.domain.models.page import DEFAULT_PAGE_SIZE, Page
from resort_registry.domain.models.reference import reference_id, to_reference
from resort_registry.domain.models.resort import (
    AVAILABLE_REHAS,
    CITY,
    MANAGER_ID,
    RESORT_FIELDS,
    RESORT_ID,
    RESORTS_COLLECTION,
    THERAPIST_ID_REFS,
    Resort,
)
from resort_registry.domain.validation.resort import (
    build_resort,
    check_available_rehas,
    check_city,
    check_resort_id,
    check_resort_id_mandatory,
)
from resort_registry.domain.validation.values import is_absent
from resort_registry.infrastructure.observability.correlation import operation_scope

REHAS_ARE_DERIVED = (
    "The available rehabilitation therapies are derived from the "
    "therapists and cannot be set directly!"
)


class ResortService(LoggingMixin):
    """Consistency-preserving resort operations."""

    def __init__(
        self,
        store: DocumentStoreProtocol,
        integrity: ReferentialIntegrityService | None = None,
        rehas: AvailableRehasService | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._store = store
        self._integrity = integrity or ReferentialIntegrityService(store)
        self._rehas = rehas or AvailableRehasService(store)
        self._pages: PageReader[Resort] = PageReader(
            store,
            RESORTS_COLLECTION,
            Resort.from_document,
            orderable_fields=RESORT_FIELDS[:3],
            page_size=page_size,
        )
        self._init_logger(collection=RESORTS_COLLECTION)

    async def add_resort(self, slots: Mapping[str, Any]) -> ConstraintViolation:
        """Validate and persist a new resort.

        Checks run in order: local fields, key uniqueness, manager
        existence, each therapist (existence, then at least one skill).
        availableRehas is then derived from the therapists.

        Args:
            slots: Raw field values keyed by document field name.

        Returns:
            NO_VIOLATION carrying the stored Resort, or the violation.
        """
        with operation_scope():
            log = self._log_operation("add_resort", resort_id=slots.get(RESORT_ID))
            resort, violation = build_resort(slots)
            if resort is None:
                return self._log_rejection(log, "add_rejected", violation)

            checks = (
                (self._integrity.check_resort_id_as_id, resort.resort_id),
                (self._integrity.check_manager_id_as_id_ref, resort.manager_id),
                (self._integrity.check_therapist_id_refs, resort.therapist_id_refs),
            )
            for check, value in checks:
                violation = await check(value)
                if not violation.ok:
                    return self._log_rejection(log, "add_rejected", violation)

            try:
                rehas = await self._rehas.derive_available_rehas(
                    resort.therapist_id_refs
                )
                if not is_absent(slots.get(AVAILABLE_REHAS)) and (
                    resort.available_rehas != rehas
                ):
                    return self._log_rejection(
                        log, "add_rejected", frozen_value(REHAS_ARE_DERIVED)
                    )
                resort = replace(resort, available_rehas=rehas)
                await self._store.set(
                    RESORTS_COLLECTION, resort.key, resort.to_document()
                )
            except DocumentStoreError as exc:
                log.error("add_failed", error=str(exc))
                return violation_for_store_error(exc)

            log.info("resort_added", available_rehas=list(rehas))
            return no_violation(resort)

    async def retrieve_resort(self, resort_id: Any) -> Resort | None:
        """Read one resort by key.

        Raises:
            ValueError: If resort_id is not a positive integer.
            DocumentStoreError: If the store cannot be read.
        """
        violation = check_resort_id_mandatory(resort_id)
        if not violation.ok:
            raise ValueError(violation.message)
        document = await self._store.get(
            RESORTS_COLLECTION, str(violation.checked_value)
        )
        return Resort.from_document(document) if document is not None else None

    async def retrieve_resort_page(
        self, order_by: str = RESORT_ID, cursor: Any = None
    ) -> Page[Resort]:
        """Read one page of resorts; see PageReader.read_page."""
        return await self._pages.read_page(order_by, cursor)

    async def update_resort(
        self,
        resort_id: Any,
        changes: Mapping[str, Any],
        therapists_to_add: Iterable[Any] = (),
        therapists_to_remove: Iterable[Any] = (),
    ) -> ConstraintViolation:
        """Apply changes to an existing resort.

        ``changes`` may carry city, managerId, a replacement
        therapistIdRefs and (only if equal to the derived value)
        availableRehas. Therapist additions and removals are applied on
        top of the resulting set. Every added therapist is checked
        against the store before anything is written; changed fields
        and the recomputed availableRehas are written in one update.

        Returns:
            NO_VIOLATION carrying the updated Resort, or the violation.
        """
        with operation_scope():
            log = self._log_operation("update_resort", resort_id=resort_id)
            key_check = check_resort_id_mandatory(resort_id)
            if not key_check.ok:
                return key_check
            resort_id = key_check.checked_value

            try:
                document = await self._store.get(RESORTS_COLLECTION, str(resort_id))
            except DocumentStoreError as exc:
                log.error("update_failed", error=str(exc))
                return violation_for_store_error(exc)
            if document is None:
                return referential_integrity(
                    f"There is no resort record with this resort ID {resort_id}!"
                )
            current = Resort.from_document(document)

            candidate, supplied_rehas, violation = await self._apply_changes(
                current, changes, therapists_to_add, therapists_to_remove
            )
            if candidate is None:
                return self._log_rejection(log, "update_rejected", violation)

            try:
                rehas = await self._rehas.derive_available_rehas(
                    candidate.therapist_id_refs
                )
                if supplied_rehas is not None and supplied_rehas != rehas:
                    return self._log_rejection(
                        log, "update_rejected", frozen_value(REHAS_ARE_DERIVED)
                    )
                candidate = replace(candidate, available_rehas=rehas)

                updates = {
                    field_name: value
                    for field_name, value in candidate.to_document().items()
                    if value != current.to_document()[field_name]
                }
                if not updates:
                    log.debug("update_no_changes")
                    return no_violation(current)
                await self._store.update(RESORTS_COLLECTION, current.key, updates)
            except (DocumentStoreError, RecordNotFoundError) as exc:
                log.error("update_failed", error=str(exc))
                return violation_for_store_error(exc)

            log.info("resort_updated", fields=sorted(updates))
            return no_violation(candidate)

    async def delete_resort(self, resort_id: Any) -> ConstraintViolation:
        """Delete a resort. Nothing references resorts, so nothing cascades.

        Returns:
            NO_VIOLATION carrying the resortId, or the violation.
        """
        with operation_scope():
            log = self._log_operation("delete_resort", resort_id=resort_id)
            violation = check_resort_id_mandatory(resort_id)
            if not violation.ok:
                return self._log_rejection(log, "delete_rejected", violation)
            try:
                await self._store.delete(RESORTS_COLLECTION, str(violation.checked_value))
            except DocumentStoreError as exc:
                log.error("delete_failed", error=str(exc))
                return violation_for_store_error(exc)
            log.info("resort_deleted")
            return no_violation(violation.checked_value)

    async def _apply_changes(
        self,
        current: Resort,
        changes: Mapping[str, Any],
        therapists_to_add: Iterable[Any],
        therapists_to_remove: Iterable[Any],
    ) -> tuple[Resort | None, tuple[int, ...] | None, ConstraintViolation]:
        """Validate submitted changes and build the candidate resort.

        Returns:
            (candidate, supplied availableRehas or None, NO_VIOLATION),
            or (None, None, violation).
        """
        candidate = current
        supplied_rehas: tuple[int, ...] | None = None
        for field_name, raw in changes.items():
            if field_name == RESORT_ID:
                violation = check_resort_id(raw)
                if not violation.ok:
                    return None, None, violation
                if violation.checked_value not in (None, current.resort_id):
                    return None, None, frozen_value("The resort ID must not be changed!")
            elif field_name == CITY:
                violation = check_city(raw)
                if not violation.ok:
                    return None, None, violation
                candidate = replace(candidate, city=violation.checked_value)
            elif field_name == MANAGER_ID:
                reference, _ = to_reference(raw)
                if reference is not None and reference_id(reference) == current.manager_id:
                    continue
                violation = await self._integrity.check_manager_id_as_id_ref(raw)
                if not violation.ok:
                    return None, None, violation
                candidate = replace(candidate, manager_id=violation.checked_value)
            elif field_name == THERAPIST_ID_REFS:
                violation = await self._integrity.check_therapist_id_refs(raw)
                if not violation.ok:
                    return None, None, violation
                candidate = replace(candidate, therapist_id_refs=violation.checked_value)
            elif field_name == AVAILABLE_REHAS:
                if is_absent(raw):
                    continue
                violation = check_available_rehas(raw)
                if not violation.ok:
                    return None, None, violation
                supplied_rehas = violation.checked_value
            else:
                return None, None, range_violation(f"Unknown resort field: {field_name}")

        added: list[int] = []
        for raw in therapists_to_add:
            violation = await self._integrity.check_therapist_id_ref(raw)
            if not violation.ok:
                return None, None, violation
            added.append(violation.checked_value)
        removed: list[int] = []
        for raw in therapists_to_remove:
            reference, violation = to_reference(raw)
            if reference is None:
                return None, None, violation
            removed.append(reference_id(reference))

        if added or removed:
            candidate = replace(
                candidate,
                therapist_id_refs=candidate.with_therapists(
                    tuple(added), tuple(removed)
                ),
            )
        return candidate, supplied_rehas, no_violation(candidate)

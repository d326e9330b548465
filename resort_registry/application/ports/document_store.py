"""Document store port.

This module defines the abstract interface to the remote document
collections. Implementations may use PostgreSQL, in-memory storage, or
other backends.

The consistency services depend only on these operations:
- point read by key (get) and existence check (exists)
- point write by key (set, update, delete)
- query by one equality or array-membership filter, with ordering,
  an inclusive start-at cursor and a limit
- atomic multi-document batch commit (commit_batch, via WriteBatch)

Documents are JSON-serializable dicts. Relationship fields hold plain
key values or arrays of key values, never embedded documents.

Developer Golden Rules:
1. FAIL LOUD - Adapters raise DocumentStoreError on I/O failure
2. ALL OR NOTHING - commit_batch applies every operation or none
3. NO CACHING - Every call reads current state
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class FilterOp(Enum):
    """Supported single-field filter operators."""

    EQUALS = "=="
    ARRAY_CONTAINS = "array-contains"


@dataclass(frozen=True)
class FieldFilter:
    """A single-field query filter.

    Attributes:
        field: Document field name.
        op: Filter operator.
        value: Value compared against the field (or sought in the array).
    """

    field: str
    op: FilterOp
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        """Evaluate the filter against a document in memory."""
        current = document.get(self.field)
        if self.op is FilterOp.EQUALS:
            return current == self.value
        return isinstance(current, list) and self.value in current


@dataclass(frozen=True)
class ArrayRemove:
    """Field transform removing every occurrence of values from an array.

    Used as a value in update mappings; applied against the stored array
    at write time rather than a previously read copy.
    """

    values: tuple[Any, ...]

    def apply(self, current: Any) -> list[Any]:
        if not isinstance(current, list):
            return []
        return [item for item in current if item not in self.values]


class BatchAction(Enum):
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class BatchOperation:
    """One write inside a batch.

    Attributes:
        action: SET replaces the document, UPDATE merges fields into an
            existing document, DELETE removes it.
        collection: Target collection.
        key: Target document key.
        data: Document (SET) or field changes (UPDATE); empty for DELETE.
    """

    action: BatchAction
    collection: str
    key: str
    data: Mapping[str, Any] = field(default_factory=dict)


class DocumentStoreProtocol(Protocol):
    """Protocol for document collection storage operations."""

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read one document.

        Returns:
            A copy of the document, or None if it does not exist.

        Raises:
            DocumentStoreError: If the store cannot be read.
        """
        ...

    async def exists(self, collection: str, key: str) -> bool:
        """Check whether a document exists.

        Raises:
            DocumentStoreError: If the store cannot be read.
        """
        ...

    async def set(
        self, collection: str, key: str, document: Mapping[str, Any]
    ) -> None:
        """Create or replace one document.

        Raises:
            DocumentStoreError: If the write fails.
        """
        ...

    async def update(
        self, collection: str, key: str, changes: Mapping[str, Any]
    ) -> None:
        """Merge field changes into an existing document.

        Values may be ArrayRemove transforms.

        Raises:
            RecordNotFoundError: If the document does not exist.
            DocumentStoreError: If the write fails.
        """
        ...

    async def delete(self, collection: str, key: str) -> None:
        """Delete one document; deleting a missing document is a no-op.

        Raises:
            DocumentStoreError: If the write fails.
        """
        ...

    async def query(
        self,
        collection: str,
        where: FieldFilter | None = None,
        order_by: str | None = None,
        start_at: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Query one collection.

        Args:
            collection: Collection to read.
            where: Optional single-field filter.
            order_by: Field to sort ascending by; documents lacking the
                field are excluded when set.
            start_at: Inclusive lower bound on the order_by value.
                Ignored unless order_by is set.
            limit: Maximum number of documents.

        Returns:
            Matching documents (copies), ordered.

        Raises:
            DocumentStoreError: If the store cannot be read.
        """
        ...

    async def commit_batch(self, operations: Sequence[BatchOperation]) -> None:
        """Apply all operations atomically.

        Raises:
            RecordNotFoundError: If an UPDATE targets a missing document
                (nothing is applied).
            DocumentStoreError: If the commit fails (nothing is applied).
        """
        ...


class WriteBatch:
    """Accumulates writes and commits them together.

    Usage:
        batch = WriteBatch(store)
        batch.update("resorts", "3", {"therapistIdRefs": ArrayRemove((7,))})
        batch.delete("resorts", "4")
        await batch.commit()
    """

    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store
        self._operations: list[BatchOperation] = []
        self._committed = False

    @property
    def operations(self) -> tuple[BatchOperation, ...]:
        return tuple(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def set(self, collection: str, key: str, document: Mapping[str, Any]) -> None:
        self._append(BatchOperation(BatchAction.SET, collection, key, dict(document)))

    def update(self, collection: str, key: str, changes: Mapping[str, Any]) -> None:
        self._append(BatchOperation(BatchAction.UPDATE, collection, key, dict(changes)))

    def delete(self, collection: str, key: str) -> None:
        self._append(BatchOperation(BatchAction.DELETE, collection, key))

    async def commit(self) -> None:
        """Commit the accumulated writes; an empty batch is a no-op."""
        if self._committed:
            raise RuntimeError("WriteBatch already committed")
        self._committed = True
        if self._operations:
            await self._store.commit_batch(self.operations)

    def _append(self, operation: BatchOperation) -> None:
        if self._committed:
            raise RuntimeError("WriteBatch already committed")
        self._operations.append(operation)

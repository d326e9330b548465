"""In-memory document store stub.

Implements DocumentStoreProtocol over nested dicts for development and
testing. Batches are applied to a scratch copy first and swapped in only
when every operation succeeded, giving the same all-or-nothing outcome
as the production store.

Beyond the protocol, the stub offers test helpers:
- seed()/documents() for direct setup and inspection
- configure_failure() to make selected operations raise DocumentStoreError
- a call log and write counter for asserting "nothing was written"

WARNING: NOT for production use.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from resort_registry.application.ports.document_store import (
    ArrayRemove,
    BatchAction,
    BatchOperation,
    DocumentStoreProtocol,
    FieldFilter,
)
from resort_registry.domain.errors import DocumentStoreError, RecordNotFoundError

READ_OPERATIONS = frozenset({"get", "exists", "query"})
WRITE_OPERATIONS = frozenset({"set", "update", "delete", "commit_batch"})


@dataclass
class _FailureRule:
    operation: str
    collection: str | None
    remaining: int | None
    reason: str


class DocumentStoreStub(DocumentStoreProtocol):
    """In-memory implementation of DocumentStoreProtocol.

    Attributes:
        _collections: collection name -> document key -> document.
        calls: (operation, collection) tuples in call order.
        write_count: Number of successful write calls (a batch counts once).
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._failures: list[_FailureRule] = []
        self.calls: list[tuple[str, str | None]] = []
        self.write_count = 0

    def clear(self) -> None:
        """Clear all stored data, failure rules and call history."""
        self._collections.clear()
        self._failures.clear()
        self.calls.clear()
        self.write_count = 0

    def seed(self, collection: str, key: str, document: Mapping[str, Any]) -> None:
        """Store a document directly, bypassing call logging and failures."""
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(
            dict(document)
        )

    def documents(self, collection: str) -> dict[str, dict[str, Any]]:
        """Return a deep copy of one collection for inspection."""
        return copy.deepcopy(self._collections.get(collection, {}))

    def configure_failure(
        self,
        operation: str,
        collection: str | None = None,
        times: int | None = None,
        reason: str = "Simulated store outage",
    ) -> None:
        """Make an operation raise DocumentStoreError.

        Args:
            operation: Protocol method name ("get", "query", "commit_batch", ...).
            collection: Only fail calls touching this collection (None = any).
            times: Fail this many calls, then recover (None = forever).
            reason: Error reason text.
        """
        if operation not in READ_OPERATIONS | WRITE_OPERATIONS:
            raise ValueError(f"Unknown store operation: {operation}")
        self._failures.append(_FailureRule(operation, collection, times, reason))

    def clear_failures(self) -> None:
        self._failures.clear()

    # Protocol implementation

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        self._enter("get", collection)
        document = self._collections.get(collection, {}).get(key)
        return copy.deepcopy(document) if document is not None else None

    async def exists(self, collection: str, key: str) -> bool:
        self._enter("exists", collection)
        return key in self._collections.get(collection, {})

    async def set(
        self, collection: str, key: str, document: Mapping[str, Any]
    ) -> None:
        self._enter("set", collection)
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(
            dict(document)
        )
        self.write_count += 1

    async def update(
        self, collection: str, key: str, changes: Mapping[str, Any]
    ) -> None:
        self._enter("update", collection)
        _apply_update(self._collections, collection, key, changes)
        self.write_count += 1

    async def delete(self, collection: str, key: str) -> None:
        self._enter("delete", collection)
        self._collections.get(collection, {}).pop(key, None)
        self.write_count += 1

    async def query(
        self,
        collection: str,
        where: FieldFilter | None = None,
        order_by: str | None = None,
        start_at: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self._enter("query", collection)
        documents = list(self._collections.get(collection, {}).values())
        if where is not None:
            documents = [d for d in documents if where.matches(d)]
        if order_by is not None:
            documents = [d for d in documents if d.get(order_by) is not None]
            documents.sort(key=lambda d: d[order_by])
            if start_at is not None:
                documents = [d for d in documents if d[order_by] >= start_at]
        if limit is not None:
            documents = documents[:limit]
        return copy.deepcopy(documents)

    async def commit_batch(self, operations: Sequence[BatchOperation]) -> None:
        collections = {op.collection for op in operations}
        for name in sorted(collections) or [None]:
            self._enter("commit_batch", name, log=False)
        self.calls.append(("commit_batch", None))

        scratch = copy.deepcopy(self._collections)
        for op in operations:
            if op.action is BatchAction.SET:
                scratch.setdefault(op.collection, {})[op.key] = copy.deepcopy(
                    dict(op.data)
                )
            elif op.action is BatchAction.UPDATE:
                _apply_update(scratch, op.collection, op.key, op.data)
            else:
                scratch.get(op.collection, {}).pop(op.key, None)
        self._collections = scratch
        self.write_count += 1

    # Internals

    def _enter(self, operation: str, collection: str | None, log: bool = True) -> None:
        if log:
            self.calls.append((operation, collection))
        for rule in self._failures:
            if rule.operation != operation:
                continue
            if rule.collection is not None and rule.collection != collection:
                continue
            if rule.remaining is not None:
                if rule.remaining <= 0:
                    continue
                rule.remaining -= 1
            raise DocumentStoreError(operation, collection, rule.reason)


def _apply_update(
    collections: dict[str, dict[str, dict[str, Any]]],
    collection: str,
    key: str,
    changes: Mapping[str, Any],
) -> None:
    document = collections.get(collection, {}).get(key)
    if document is None:
        raise RecordNotFoundError(collection, key)
    for field_name, value in changes.items():
        if isinstance(value, ArrayRemove):
            document[field_name] = value.apply(document.get(field_name))
        else:
            document[field_name] = copy.deepcopy(value)

"""Read-retrying document store wrapper.

Wraps any DocumentStoreProtocol implementation. Idempotent reads (get,
exists, query) are retried on DocumentStoreError with the configured
delays. Writes and batch commits pass straight through: a write whose
outcome is unknown is never replayed blindly.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

from structlog import get_logger

from resort_registry.application.ports.document_store import (
    BatchOperation,
    DocumentStoreProtocol,
    FieldFilter,
)
from resort_registry.config import RegistryConfig
from resort_registry.domain.errors import DocumentStoreError

logger = get_logger()

T = TypeVar("T")


class RetryingDocumentStore(DocumentStoreProtocol):
    """DocumentStoreProtocol decorator adding read retries.

    Attributes:
        _inner: The wrapped store.
        _delays: Sleep before each retry; len(_delays) + 1 attempts in total.
    """

    def __init__(self, inner: DocumentStoreProtocol, config: RegistryConfig) -> None:
        self._inner = inner
        self._delays = config.retry_delays()
        self._log = logger.bind(component="document_store", wrapper="retrying")

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        return await self._read("get", collection, lambda: self._inner.get(collection, key))

    async def exists(self, collection: str, key: str) -> bool:
        return await self._read(
            "exists", collection, lambda: self._inner.exists(collection, key)
        )

    async def query(
        self,
        collection: str,
        where: FieldFilter | None = None,
        order_by: str | None = None,
        start_at: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        return await self._read(
            "query",
            collection,
            lambda: self._inner.query(
                collection,
                where=where,
                order_by=order_by,
                start_at=start_at,
                limit=limit,
            ),
        )

    async def set(
        self, collection: str, key: str, document: Mapping[str, Any]
    ) -> None:
        await self._inner.set(collection, key, document)

    async def update(
        self, collection: str, key: str, changes: Mapping[str, Any]
    ) -> None:
        await self._inner.update(collection, key, changes)

    async def delete(self, collection: str, key: str) -> None:
        await self._inner.delete(collection, key)

    async def commit_batch(self, operations: Sequence[BatchOperation]) -> None:
        await self._inner.commit_batch(operations)

    async def _read(
        self,
        operation: str,
        collection: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        for attempt, delay in enumerate(self._delays, start=1):
            try:
                return await call()
            except DocumentStoreError as exc:
                self._log.warning(
                    "store_read_retry",
                    operation=operation,
                    collection=collection,
                    attempt=attempt,
                    delay_seconds=delay,
                    error=str(exc),
                )
                await asyncio.sleep(delay)
        return await call()

"""Unit tests for RetryingDocumentStore."""

from unittest.mock import AsyncMock, patch

import pytest

from resort_registry.application.ports.document_store import (
    BatchAction,
    BatchOperation,
)
from resort_registry.config import TEST_REGISTRY_CONFIG, RegistryConfig
from resort_registry.domain.errors import DocumentStoreError
from resort_registry.infrastructure.adapters.persistence import RetryingDocumentStore
from resort_registry.infrastructure.stubs import DocumentStoreStub


@pytest.fixture
def inner() -> DocumentStoreStub:
    store = DocumentStoreStub()
    store.seed("employees", "1", {"employeeId": 1})
    return store


@pytest.fixture
def retrying(inner: DocumentStoreStub) -> RetryingDocumentStore:
    return RetryingDocumentStore(inner, TEST_REGISTRY_CONFIG)


class TestReadRetries:
    """Idempotent reads are retried."""

    @pytest.mark.asyncio
    async def test_get_recovers(
        self, inner: DocumentStoreStub, retrying: RetryingDocumentStore
    ) -> None:
        inner.configure_failure("get", times=2)
        assert await retrying.get("employees", "1") == {"employeeId": 1}
        assert inner.calls.count(("get", "employees")) == 3

    @pytest.mark.asyncio
    async def test_query_recovers(
        self, inner: DocumentStoreStub, retrying: RetryingDocumentStore
    ) -> None:
        inner.configure_failure("query", times=1)
        assert len(await retrying.query("employees", order_by="employeeId")) == 1

    @pytest.mark.asyncio
    async def test_exists_gives_up_after_attempts(
        self, inner: DocumentStoreStub, retrying: RetryingDocumentStore
    ) -> None:
        inner.configure_failure("exists")
        with pytest.raises(DocumentStoreError):
            await retrying.exists("employees", "1")
        assert inner.calls.count(("exists", "employees")) == 3

    @pytest.mark.asyncio
    async def test_backoff_delays(self, inner: DocumentStoreStub) -> None:
        """Delays double with each retry."""
        config = RegistryConfig(read_retry_attempts=3, read_retry_delay_seconds=0.5)
        retrying = RetryingDocumentStore(inner, config)
        inner.configure_failure("get", times=2)

        with patch(
            "resort_registry.infrastructure.adapters.persistence."
            "retrying_document_store.asyncio.sleep",
            new_callable=AsyncMock,
        ) as sleep:
            await retrying.get("employees", "1")

        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_single_attempt(self, inner: DocumentStoreStub) -> None:
        retrying = RetryingDocumentStore(inner, RegistryConfig(read_retry_attempts=1))
        inner.configure_failure("get", times=1)
        with pytest.raises(DocumentStoreError):
            await retrying.get("employees", "1")


class TestWritesPassThrough:
    """Writes are never replayed."""

    @pytest.mark.asyncio
    async def test_failed_set_not_retried(
        self, inner: DocumentStoreStub, retrying: RetryingDocumentStore
    ) -> None:
        inner.configure_failure("set", times=1)
        with pytest.raises(DocumentStoreError):
            await retrying.set("employees", "2", {"employeeId": 2})
        assert inner.calls.count(("set", "employees")) == 1
        assert not await inner.exists("employees", "2")

    @pytest.mark.asyncio
    async def test_failed_batch_not_retried(
        self, inner: DocumentStoreStub, retrying: RetryingDocumentStore
    ) -> None:
        inner.commit_batch = AsyncMock(  # type: ignore[method-assign]
            side_effect=DocumentStoreError("commit_batch", reason="timeout")
        )
        operations = [BatchOperation(BatchAction.DELETE, "employees", "1")]
        with pytest.raises(DocumentStoreError):
            await retrying.commit_batch(operations)
        inner.commit_batch.assert_awaited_once_with(operations)

    @pytest.mark.asyncio
    async def test_writes_delegate(
        self, inner: DocumentStoreStub, retrying: RetryingDocumentStore
    ) -> None:
        await retrying.update("employees", "1", {"firstName": "Anna"})
        await retrying.delete("employees", "1")
        assert inner.write_count == 2

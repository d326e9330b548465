"""Unit tests for registry and database bootstrap wiring."""

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest
import structlog

from resort_registry.bootstrap import (
    build_registry,
    get_document_store,
    get_registry,
    reset_registry,
)
from resort_registry.bootstrap.database import (
    get_database_url,
    mask_password,
    reset_database_bootstrap,
    to_async_url,
)
from resort_registry.config import TEST_REGISTRY_CONFIG, RegistryConfig
from resort_registry.infrastructure.adapters.persistence import RetryingDocumentStore
from resort_registry.infrastructure.stubs import DocumentStoreStub


@pytest.fixture(autouse=True)
def clean_singletons() -> Iterator[None]:
    reset_registry()
    reset_database_bootstrap()
    yield
    reset_registry()
    reset_database_bootstrap()
    structlog.reset_defaults()


class TestBuildRegistry:
    """Tests for build_registry()."""

    def test_services_share_retrying_store(self) -> None:
        stub = DocumentStoreStub()
        registry = build_registry(stub, TEST_REGISTRY_CONFIG)

        assert registry.backing_store is stub
        assert isinstance(registry.store, RetryingDocumentStore)
        assert registry.config is TEST_REGISTRY_CONFIG

    @pytest.mark.asyncio
    async def test_wired_services_work_end_to_end(self) -> None:
        """Sample data loads through the wired services and deletes cascade."""
        stub = DocumentStoreStub()
        registry = build_registry(stub, TEST_REGISTRY_CONFIG)
        await registry.prepare()

        report = await registry.test_data.generate_test_data()
        assert report.rejected == []

        violation = await registry.employees.delete_employee(4)
        assert violation.ok
        assert sorted(stub.documents("resorts")) == ["2", "4"]

    @pytest.mark.asyncio
    async def test_page_size_from_config(self) -> None:
        stub = DocumentStoreStub()
        for employee_id in range(1, 4):
            stub.seed(
                "employees",
                str(employee_id),
                {"employeeId": employee_id, "firstName": "Anna", "lastName": "Schulz",
                 "birthdate": "1985-04-12", "gender": 2, "therapySkills": []},
            )
        config = RegistryConfig(page_size=2, environment="development")
        registry = build_registry(stub, config)

        page = await registry.employees.retrieve_employee_page()

        assert len(page) == 2
        assert page.next_cursor == 3


class TestStoreSelection:
    """Tests for get_document_store() and get_registry()."""

    def test_stub_without_database_url(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            store = get_document_store()
        assert isinstance(store, DocumentStoreStub)

    def test_store_is_singleton(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_document_store() is get_document_store()

    def test_registry_is_singleton(self) -> None:
        with patch.dict(os.environ, {"REGISTRY_ENVIRONMENT": "development"}, clear=True):
            registry = get_registry()
            assert get_registry() is registry
        assert isinstance(registry.backing_store, DocumentStoreStub)
        assert registry.config.environment == "development"


class TestDatabaseUrl:
    """Tests for database URL helpers."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@db:5432/registry", "postgresql+asyncpg://u:p@db:5432/registry"),
            ("postgres://u:p@db/registry", "postgresql+asyncpg://u:p@db/registry"),
            ("postgresql+asyncpg://db/registry", "postgresql+asyncpg://db/registry"),
        ],
    )
    def test_to_async_url(self, url: str, expected: str) -> None:
        assert to_async_url(url) == expected

    def test_mask_password(self) -> None:
        masked = mask_password("postgresql+asyncpg://user:secret@db:5432/registry")
        assert masked == "postgresql+asyncpg://user:***@db:5432/registry"

    def test_mask_password_without_credentials(self) -> None:
        assert mask_password("postgresql+asyncpg://db/registry") == (
            "postgresql+asyncpg://db/registry"
        )

    def test_missing_database_url(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="DATABASE_URL"):
                get_database_url()

    def test_database_url_converted(self) -> None:
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://u:p@db/registry"}):
            assert get_database_url() == "postgresql+asyncpg://u:p@db/registry"

"""Bootstrap wiring for the registry services.

Store selection:
- DATABASE_URL set: PostgresDocumentStore over the SQLAlchemy session factory
- otherwise: in-memory DocumentStoreStub (data does not persist)

Either store is wrapped in RetryingDocumentStore, so every service reads
through the configured retry policy.

Usage:
    registry = get_registry()
    await registry.prepare()
    violation = await registry.employees.add_employee({...})
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from structlog import get_logger

from resort_registry.application.ports.document_store import DocumentStoreProtocol
from resort_registry.application.services.available_rehas_service import (
    AvailableRehasService,
)
from resort_registry.application.services.employee_service import EmployeeService
from resort_registry.application.services.referential_integrity_service import (
    ReferentialIntegrityService,
)
from resort_registry.application.services.resort_service import ResortService
from resort_registry.application.services.test_data_service import TestDataService
from resort_registry.config import RegistryConfig
from resort_registry.infrastructure.adapters.persistence import (
    PostgresDocumentStore,
    RetryingDocumentStore,
)
from resort_registry.infrastructure.observability import configure_structlog
from resort_registry.infrastructure.stubs import DocumentStoreStub

logger = get_logger()

_document_store: DocumentStoreProtocol | None = None
_registry: Registry | None = None


@dataclass(frozen=True)
class Registry:
    """The wired service set sharing one store.

    Attributes:
        config: Configuration the services were built with.
        backing_store: The unwrapped store adapter.
        store: backing_store wrapped with read retries.
    """

    config: RegistryConfig
    backing_store: DocumentStoreProtocol
    store: DocumentStoreProtocol
    integrity: ReferentialIntegrityService
    rehas: AvailableRehasService
    employees: EmployeeService
    resorts: ResortService
    test_data: TestDataService

    async def prepare(self) -> None:
        """Create the backing schema where the store needs one."""
        if isinstance(self.backing_store, PostgresDocumentStore):
            await self.backing_store.ensure_schema()


def build_registry(
    store: DocumentStoreProtocol,
    config: RegistryConfig | None = None,
) -> Registry:
    """Wire all services over one store.

    Args:
        store: Backing document store adapter.
        config: Registry configuration (defaults to the environment).
    """
    config = config or RegistryConfig.from_environment()
    reading_store = RetryingDocumentStore(store, config)
    integrity = ReferentialIntegrityService(reading_store)
    rehas = AvailableRehasService(reading_store)
    employees = EmployeeService(
        reading_store, integrity, rehas, page_size=config.page_size
    )
    resorts = ResortService(reading_store, integrity, rehas, page_size=config.page_size)
    return Registry(
        config=config,
        backing_store=store,
        store=reading_store,
        integrity=integrity,
        rehas=rehas,
        employees=employees,
        resorts=resorts,
        test_data=TestDataService(reading_store, employees, resorts),
    )


def get_document_store() -> DocumentStoreProtocol:
    """Get the process-wide document store adapter.

    Returns the PostgreSQL store if DATABASE_URL is configured,
    otherwise an in-memory stub.
    """
    global _document_store
    if _document_store is None:
        if os.environ.get("DATABASE_URL"):
            from resort_registry.bootstrap.database import get_session_factory

            _document_store = PostgresDocumentStore(get_session_factory())
            logger.info("document_store_initialized", store_type="PostgreSQL")
        else:
            logger.warning(
                "document_store_initialized",
                store_type="InMemoryStub",
                message="DATABASE_URL not set - using in-memory stub (data will not persist)",
            )
            _document_store = DocumentStoreStub()
    return _document_store


def get_registry() -> Registry:
    """Get the process-wide registry, configuring logging on first use."""
    global _registry
    if _registry is None:
        config = RegistryConfig.from_environment()
        configure_structlog(environment=config.environment)
        _registry = build_registry(get_document_store(), config)
    return _registry


def reset_registry() -> None:
    """Reset registry singletons for testing."""
    global _document_store, _registry
    _document_store = None
    _registry = None

"""
Pytest configuration and shared fixtures for resort registry tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/, backed by the in-memory DocumentStoreStub
- Integration tests go in tests/integration/ (PostgreSQL via testcontainers)
"""

import pytest

from resort_registry.application.services import (
    AvailableRehasService,
    EmployeeService,
    ReferentialIntegrityService,
    ResortService,
)
from resort_registry.infrastructure.stubs import DocumentStoreStub
from tests.helpers import FIXED_TODAY


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from resort_registry import __version__

    return __version__


@pytest.fixture
def store() -> DocumentStoreStub:
    """Fresh in-memory document store."""
    return DocumentStoreStub()


@pytest.fixture
def integrity(store: DocumentStoreStub) -> ReferentialIntegrityService:
    return ReferentialIntegrityService(store)


@pytest.fixture
def rehas(store: DocumentStoreStub) -> AvailableRehasService:
    return AvailableRehasService(store)


@pytest.fixture
def employee_service(store: DocumentStoreStub) -> EmployeeService:
    """EmployeeService with a fixed clock."""
    return EmployeeService(store, today=lambda: FIXED_TODAY)


@pytest.fixture
def resort_service(store: DocumentStoreStub) -> ResortService:
    return ResortService(store)

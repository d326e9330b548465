"""
Integration test configuration with testcontainers.

Provides a session-scoped PostgreSQL container and a per-test
PostgresDocumentStore on an emptied documents table.

Container Reuse Pattern:
- The container is started once per test session (scope="session")
- The documents table is truncated before each test (function-scoped fixture)
- The container is automatically cleaned up after all tests complete

Usage:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_example(postgres_store: PostgresDocumentStore) -> None:
        ...

Note: Docker must be running for these fixtures to work.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from resort_registry.bootstrap.database import to_async_url
from resort_registry.infrastructure.adapters.persistence import PostgresDocumentStore
from resort_registry.infrastructure.adapters.persistence.postgres_document_store import (
    TABLE_NAME,
)


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container: PostgresContainer) -> str:
    """Get async-compatible PostgreSQL connection URL.

    testcontainers returns a psycopg2 URL by default; convert it to asyncpg.
    """
    sync_url = postgres_container.get_connection_url()
    return to_async_url(sync_url.replace("postgresql+psycopg2://", "postgresql://"))


@pytest.fixture
async def session_factory(
    postgres_async_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Per-test session factory over a fresh engine."""
    engine = create_async_engine(postgres_async_url, echo=False)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def postgres_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> PostgresDocumentStore:
    """Document store on an empty documents table."""
    store = PostgresDocumentStore(session_factory)
    await store.ensure_schema()
    async with session_factory() as session, session.begin():
        await session.execute(text(f"TRUNCATE {TABLE_NAME}"))
    return store

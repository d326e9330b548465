"""PostgreSQL document store (JSONB via SQLAlchemy async + asyncpg).

All collections share one table; a document is a JSONB body keyed by
(collection, doc_key):

    CREATE TABLE documents (
        collection TEXT  NOT NULL,
        doc_key    TEXT  NOT NULL,
        body       JSONB NOT NULL,
        PRIMARY KEY (collection, doc_key)
    )

SQL Patterns:
    -- equality filter
    WHERE body -> :field = :value            (value bound as jsonb)
    -- array membership filter
    WHERE body -> :field @> :needle          (needle = [value] as jsonb)
    -- ordering with inclusive start-at cursor
    WHERE body -> :order_by >= :start_at ORDER BY body -> :order_by

jsonb comparison orders numbers numerically and strings lexically, so
integer keys sort as integers.

Batches run inside one transaction; updates lock their row with
SELECT ... FOR UPDATE and apply ArrayRemove transforms against the
locked body.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from resort_registry.application.ports.document_store import (
    ArrayRemove,
    BatchAction,
    BatchOperation,
    DocumentStoreProtocol,
    FieldFilter,
    FilterOp,
)
from resort_registry.domain.errors import DocumentStoreError, RecordNotFoundError

logger = get_logger()

TABLE_NAME = "documents"

_CREATE_TABLE = text(f"""
    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
        collection TEXT  NOT NULL,
        doc_key    TEXT  NOT NULL,
        body       JSONB NOT NULL,
        PRIMARY KEY (collection, doc_key)
    )
""")

_SELECT_ONE = text(f"""
    SELECT body FROM {TABLE_NAME}
    WHERE collection = :collection AND doc_key = :doc_key
""")

_SELECT_ONE_FOR_UPDATE = text(f"""
    SELECT body FROM {TABLE_NAME}
    WHERE collection = :collection AND doc_key = :doc_key
    FOR UPDATE
""")

_EXISTS = text(f"""
    SELECT 1 FROM {TABLE_NAME}
    WHERE collection = :collection AND doc_key = :doc_key
""")

_UPSERT = text(f"""
    INSERT INTO {TABLE_NAME} (collection, doc_key, body)
    VALUES (:collection, :doc_key, :body)
    ON CONFLICT (collection, doc_key) DO UPDATE SET body = EXCLUDED.body
""").bindparams(bindparam("body", type_=JSONB))

_REPLACE_BODY = text(f"""
    UPDATE {TABLE_NAME} SET body = :body
    WHERE collection = :collection AND doc_key = :doc_key
""").bindparams(bindparam("body", type_=JSONB))

_DELETE = text(f"""
    DELETE FROM {TABLE_NAME}
    WHERE collection = :collection AND doc_key = :doc_key
""")


def _decode(body: Any) -> dict[str, Any]:
    # asyncpg's jsonb codec normally decodes; plain drivers hand back text
    if isinstance(body, (str, bytes)):
        return json.loads(body)
    return dict(body)


class PostgresDocumentStore(DocumentStoreProtocol):
    """DocumentStoreProtocol over a PostgreSQL JSONB table.

    Attributes:
        _session_factory: SQLAlchemy async session factory.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._log = logger.bind(component="document_store", backend="postgres")

    async def ensure_schema(self) -> None:
        """Create the documents table if it does not exist."""
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(_CREATE_TABLE)
        except (SQLAlchemyError, OSError) as exc:
            raise DocumentStoreError("ensure_schema", None, str(exc)) from exc
        self._log.info("document_schema_ready", table=TABLE_NAME)

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    _SELECT_ONE, {"collection": collection, "doc_key": key}
                )
                row = result.fetchone()
        except (SQLAlchemyError, OSError) as exc:
            raise DocumentStoreError("get", collection, str(exc)) from exc
        return _decode(row[0]) if row else None

    async def exists(self, collection: str, key: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    _EXISTS, {"collection": collection, "doc_key": key}
                )
                return result.fetchone() is not None
        except (SQLAlchemyError, OSError) as exc:
            raise DocumentStoreError("exists", collection, str(exc)) from exc

    async def set(
        self, collection: str, key: str, document: Mapping[str, Any]
    ) -> None:
        await self.commit_batch(
            [BatchOperation(BatchAction.SET, collection, key, dict(document))]
        )

    async def update(
        self, collection: str, key: str, changes: Mapping[str, Any]
    ) -> None:
        await self.commit_batch(
            [BatchOperation(BatchAction.UPDATE, collection, key, dict(changes))]
        )

    async def delete(self, collection: str, key: str) -> None:
        await self.commit_batch([BatchOperation(BatchAction.DELETE, collection, key)])

    async def query(
        self,
        collection: str,
        where: FieldFilter | None = None,
        order_by: str | None = None,
        start_at: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        clauses = ["collection = :collection"]
        params: dict[str, Any] = {"collection": collection}
        jsonb_params: list[str] = []

        if where is not None:
            params["where_field"] = where.field
            if where.op is FilterOp.EQUALS:
                clauses.append("body -> :where_field = :where_value")
                params["where_value"] = where.value
            else:
                clauses.append("body -> :where_field @> :where_value")
                params["where_value"] = [where.value]
            jsonb_params.append("where_value")

        order_sql = "ORDER BY doc_key"
        if order_by is not None:
            params["order_by"] = order_by
            clauses.append("body -> :order_by IS NOT NULL")
            clauses.append("body -> :order_by <> 'null'::jsonb")
            if start_at is not None:
                clauses.append("body -> :order_by >= :start_at")
                params["start_at"] = start_at
                jsonb_params.append("start_at")
            order_sql = "ORDER BY body -> :order_by, doc_key"

        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT :limit"
            params["limit"] = limit

        statement = text(
            f"SELECT body FROM {TABLE_NAME} WHERE {' AND '.join(clauses)} "
            f"{order_sql} {limit_sql}"
        )
        if jsonb_params:
            statement = statement.bindparams(
                *(bindparam(name, type_=JSONB) for name in jsonb_params)
            )

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement, params)
                rows = result.fetchall()
        except (SQLAlchemyError, OSError) as exc:
            raise DocumentStoreError("query", collection, str(exc)) from exc
        return [_decode(row[0]) for row in rows]

    async def commit_batch(self, operations: Sequence[BatchOperation]) -> None:
        if not operations:
            return
        try:
            async with self._session_factory() as session, session.begin():
                for op in operations:
                    await self._apply(session, op)
        except (SQLAlchemyError, OSError) as exc:
            self._log.error(
                "batch_commit_failed",
                operation_count=len(operations),
                error=str(exc),
            )
            raise DocumentStoreError("commit_batch", None, str(exc)) from exc
        self._log.debug("batch_committed", operation_count=len(operations))

    async def _apply(self, session: AsyncSession, op: BatchOperation) -> None:
        keys = {"collection": op.collection, "doc_key": op.key}
        if op.action is BatchAction.SET:
            await session.execute(_UPSERT, {**keys, "body": dict(op.data)})
        elif op.action is BatchAction.DELETE:
            await session.execute(_DELETE, keys)
        else:
            result = await session.execute(_SELECT_ONE_FOR_UPDATE, keys)
            row = result.fetchone()
            if row is None:
                raise RecordNotFoundError(op.collection, op.key)
            body = _decode(row[0])
            for field_name, value in op.data.items():
                if isinstance(value, ArrayRemove):
                    body[field_name] = value.apply(body.get(field_name))
                else:
                    body[field_name] = value
            await session.execute(_REPLACE_BODY, {**keys, "body": body})

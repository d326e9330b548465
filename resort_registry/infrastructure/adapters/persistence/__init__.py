"""Document store adapters."""

from resort_registry.infrastructure.adapters.persistence.postgres_document_store import (
    PostgresDocumentStore,
)
from resort_registry.infrastructure.adapters.persistence.retrying_document_store import (
    RetryingDocumentStore,
)

__all__ = ["PostgresDocumentStore", "RetryingDocumentStore"]

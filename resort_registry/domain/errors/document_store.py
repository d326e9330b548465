"""Document store errors.

Raised by document store adapters. Mutating services convert these into
STORE_UNAVAILABLE / REFERENTIAL_INTEGRITY violations at the operation
boundary; read services let them propagate.
"""

from __future__ import annotations

from resort_registry.domain.exceptions import ResortRegistryError


class DocumentStoreError(ResortRegistryError):
    """Raised when the document store cannot complete a read or write.

    Attributes:
        operation: The store operation that failed (e.g., "get", "commit_batch").
        collection: The collection involved, if any.
    """

    def __init__(
        self,
        operation: str,
        collection: str | None = None,
        reason: str = "",
    ) -> None:
        self.operation = operation
        self.collection = collection
        self.reason = reason
        target = f" on '{collection}'" if collection else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Document store {operation} failed{target}{detail}")


class RecordNotFoundError(ResortRegistryError):
    """Raised when a partial update targets a document that does not exist.

    Attributes:
        collection: Collection that was addressed.
        key: Document key that was not found.
    """

    def __init__(self, collection: str, key: str) -> None:
        self.collection = collection
        self.key = key
        super().__init__(f"No document '{key}' in collection '{collection}'")

"""Domain errors for the resort registry.

All exceptions inherit from ResortRegistryError.
"""

from resort_registry.domain.errors.document_store import (
    DocumentStoreError,
    RecordNotFoundError,
)

__all__: list[str] = ["DocumentStoreError", "RecordNotFoundError"]

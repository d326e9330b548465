"""Application ports - Abstract interfaces for infrastructure adapters.

Available ports:
- DocumentStoreProtocol: Document collection reads, writes, queries and batches
"""

from resort_registry.application.ports.document_store import (
    ArrayRemove,
    BatchAction,
    BatchOperation,
    DocumentStoreProtocol,
    FieldFilter,
    FilterOp,
    WriteBatch,
)

__all__: list[str] = [
    "ArrayRemove",
    "BatchAction",
    "BatchOperation",
    "DocumentStoreProtocol",
    "FieldFilter",
    "FilterOp",
    "WriteBatch",
]

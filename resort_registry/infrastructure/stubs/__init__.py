"""Infrastructure stubs for development and testing.

Available stubs:
- DocumentStoreStub: In-memory document collections with atomic batches
  and injectable failures

WARNING: These stubs are NOT for production use.
Production implementations are in resort_registry/infrastructure/adapters/.
"""

from resort_registry.infrastructure.stubs.document_store_stub import DocumentStoreStub

__all__: list[str] = ["DocumentStoreStub"]

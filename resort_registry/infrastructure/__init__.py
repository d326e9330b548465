"""
Infrastructure layer - adapters, stubs and observability.

- adapters/persistence: PostgreSQL document store, read-retry wrapper
- stubs: In-memory document store for tests and local runs
- observability: structlog configuration, correlation IDs
"""

"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so callers can
depend on services without choosing store adapters themselves.
"""

from resort_registry.bootstrap.registry import (
    Registry,
    build_registry,
    get_document_store,
    get_registry,
    reset_registry,
)

__all__ = [
    "Registry",
    "build_registry",
    "get_document_store",
    "get_registry",
    "reset_registry",
]

"""Observability infrastructure: structured logging and correlation IDs.

Usage:
    from resort_registry.infrastructure.observability import (
        configure_structlog,
        operation_scope,
    )

    configure_structlog(environment="development")
"""

from resort_registry.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    operation_scope,
    set_correlation_id,
)
from resort_registry.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "operation_scope",
    "set_correlation_id",
]

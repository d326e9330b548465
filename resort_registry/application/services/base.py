"""Base service logging mixin.

Every registry service logs through LoggingMixin, so one mutator call
can be followed across services by its correlation_id, and rejected
mutations always carry the violation kind and message.

Usage:
    from resort_registry.application.services.base import LoggingMixin

    class ResortService(LoggingMixin):
        def __init__(self, store: DocumentStoreProtocol) -> None:
            self._store = store
            self._init_logger(collection=RESORTS_COLLECTION)

        async def delete_resort(self, resort_id: int) -> ConstraintViolation:
            log = self._log_operation("delete_resort", resort_id=resort_id)
            violation = check_resort_id_mandatory(resort_id)
            if not violation.ok:
                return self._log_rejection(log, "delete_rejected", violation)
            ...
"""

from __future__ import annotations

import structlog

from resort_registry.domain.models.constraint_violation import ConstraintViolation
from resort_registry.infrastructure.observability.correlation import (
    get_correlation_id,
)


class LoggingMixin:
    """Mixin providing structured logging for registry services.

    The logger is bound with:
    - service: The class name of the service
    - collection: The collection the service owns, when it owns one

    Each operation gets:
    - operation: The name of the operation being performed
    - correlation_id: From context, shared by all lines of one mutator call
    - Any additional context passed to _log_operation()

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, collection: str | None = None) -> None:
        """Bind the service name and, if given, its collection.

        Args:
            collection: Document collection the service reads and writes.
                Services spanning both collections pass None.
        """
        context: dict[str, object] = {"service": type(self).__name__}
        if collection is not None:
            context["collection"] = collection
        self._log = structlog.get_logger().bind(**context)

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create operation-scoped logger with correlation ID.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation and correlation context.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )

    @staticmethod
    def _log_rejection(
        log: structlog.BoundLogger,
        event: str,
        violation: ConstraintViolation,
    ) -> ConstraintViolation:
        """Log a mutation refused by a constraint and hand back the violation."""
        log.info(event, violation=violation.kind.value, detail=violation.message)
        return violation

"""Correlation IDs for tying together the log lines of one operation.

A mutator may span many awaits (reference checks, reverse queries, two
batch commits). The correlation ID lives in a ContextVar so every log
entry emitted along that chain carries the same ID.

Usage:
    with operation_scope() as correlation_id:
        log.info("employee_delete_started")   # carries correlation_id

    # Callers that already track a request ID may set it explicitly:
    set_correlation_id(request_id)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current correlation ID, or "" outside any scope."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


@contextmanager
def operation_scope() -> Iterator[str]:
    """Ensure a correlation ID for the enclosed operation.

    Reuses the caller's ID when one is set; otherwise generates one and
    restores the empty ID on exit, so nested operations (an employee
    update refreshing resorts) share the outer ID.

    Yields:
        The correlation ID in effect.
    """
    current = _correlation_id.get()
    if current:
        yield current
        return
    token = _correlation_id.set(generate_correlation_id())
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding correlation_id to every entry that lacks one."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict

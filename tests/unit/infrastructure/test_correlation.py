"""Unit tests for correlation ID management."""

import asyncio
import re

import pytest

from resort_registry.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    operation_scope,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def clean_correlation_id() -> None:
    set_correlation_id("")


class TestGenerateCorrelationId:
    """Tests for generate_correlation_id function."""

    def test_generate_returns_uuid_format(self) -> None:
        uuid_pattern = re.compile(
            r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
            re.IGNORECASE,
        )
        assert uuid_pattern.match(generate_correlation_id()) is not None

    def test_generate_returns_unique_ids(self) -> None:
        ids = [generate_correlation_id() for _ in range(100)]
        assert len(set(ids)) == 100


class TestOperationScope:
    """Tests for operation_scope()."""

    def test_scope_sets_and_restores(self) -> None:
        """A fresh scope generates an ID and clears it on exit."""
        with operation_scope() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id
        assert get_correlation_id() == ""

    def test_nested_scope_reuses_outer_id(self) -> None:
        with operation_scope() as outer:
            with operation_scope() as inner:
                assert inner == outer
            assert get_correlation_id() == outer

    def test_scope_reuses_caller_id(self) -> None:
        set_correlation_id("request-42")
        with operation_scope() as correlation_id:
            assert correlation_id == "request-42"
        assert get_correlation_id() == "request-42"

    def test_scope_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with operation_scope():
                raise RuntimeError("boom")
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_concurrent_operations_are_isolated(self) -> None:
        """Tasks started outside any scope get their own IDs."""
        results: dict[str, str] = {}

        async def operation(name: str) -> None:
            with operation_scope() as correlation_id:
                await asyncio.sleep(0.01)
                assert get_correlation_id() == correlation_id
                results[name] = correlation_id

        await asyncio.gather(operation("a"), operation("b"), operation("c"))

        assert len(set(results.values())) == 3


class TestCorrelationIdProcessor:
    """Tests for the structlog processor."""

    def test_adds_correlation_id(self) -> None:
        with operation_scope() as correlation_id:
            event_dict = correlation_id_processor(None, "info", {"event": "x"})
        assert event_dict["correlation_id"] == correlation_id

    def test_outside_scope_leaves_entry_alone(self) -> None:
        assert correlation_id_processor(None, "info", {"event": "x"}) == {"event": "x"}

    def test_keeps_explicit_correlation_id(self) -> None:
        with operation_scope():
            event_dict = correlation_id_processor(
                None, "info", {"event": "x", "correlation_id": "given"}
            )
        assert event_dict["correlation_id"] == "given"

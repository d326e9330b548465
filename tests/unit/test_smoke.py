"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys

import pytest


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestDocumentStoreDependencies:
    """Verify database dependencies for the PostgreSQL document store."""

    def test_sqlalchemy_async(self) -> None:
        """SQLAlchemy 2.0+ async mode must be available."""
        from sqlalchemy import __version__ as sa_version
        from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

        major_version = int(sa_version.split(".")[0])
        assert major_version >= 2, f"SQLAlchemy 2.0+ required, got {sa_version}"
        assert AsyncSession is not None
        assert create_async_engine is not None

    def test_asyncpg_import(self) -> None:
        import asyncpg

        assert asyncpg.connect is not None

    def test_jsonb_type(self) -> None:
        from sqlalchemy.dialects.postgresql import JSONB

        assert JSONB is not None


class TestStructuredLogging:
    """Verify structured logging."""

    def test_structlog_import(self) -> None:
        import structlog

        logger = structlog.get_logger()
        assert logger is not None

    def test_structlog_configuration(self) -> None:
        """structlog can be bound with context."""
        import structlog

        bound_logger = structlog.get_logger().bind(
            service="EmployeeService", operation="test"
        )
        assert bound_logger is not None


class TestProjectVersion:
    """Verify project metadata is accessible."""

    def test_version_accessible(self, project_version: str) -> None:
        assert isinstance(project_version, str)
        assert len(project_version) > 0

    def test_version_format(self, project_version: str) -> None:
        """Version must be in semver format."""
        parts = project_version.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {project_version}"


class TestAsyncCapabilities:
    """Verify async/await functionality."""

    @pytest.mark.asyncio
    async def test_async_function_runs(self) -> None:
        import asyncio

        result = await asyncio.sleep(0, result="success")
        assert result == "success"

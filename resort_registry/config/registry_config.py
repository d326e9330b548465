"""Registry configuration.

Environment Variables:
- REGISTRY_PAGE_SIZE: Records per page for cursor pagination (default: 21)
- REGISTRY_READ_RETRY_ATTEMPTS: Total attempts for idempotent reads (default: 3)
- REGISTRY_READ_RETRY_DELAY: Base retry delay in seconds, doubled per attempt (default: 0.2)
- REGISTRY_ENVIRONMENT: 'production' (JSON logs) or 'development' (default: production)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class RegistryConfig:
    """Configuration for the registry services.

    Attributes:
        page_size: Maximum records per page. Default: 21.
        read_retry_attempts: Total attempts (first try included) for
            get/exists/query before the error surfaces. Writes are never
            retried. Default: 3.
        read_retry_delay_seconds: Delay before the first retry; doubled
            for each further retry. Default: 0.2.
        environment: Logging environment. Default: "production".
    """

    page_size: int = 21
    read_retry_attempts: int = 3
    read_retry_delay_seconds: float = 0.2
    environment: str = "production"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.read_retry_attempts < 1:
            raise ValueError(
                f"read_retry_attempts must be at least 1, got {self.read_retry_attempts}"
            )
        if self.read_retry_delay_seconds < 0:
            raise ValueError(
                "read_retry_delay_seconds must be non-negative, "
                f"got {self.read_retry_delay_seconds}"
            )
        if self.environment not in ("production", "development"):
            raise ValueError(
                f"environment must be 'production' or 'development', got {self.environment!r}"
            )

    def retry_delays(self) -> tuple[float, ...]:
        """Delays to sleep before each retry (one fewer than attempts)."""
        return tuple(
            self.read_retry_delay_seconds * (2**attempt)
            for attempt in range(self.read_retry_attempts - 1)
        )

    @classmethod
    def from_environment(cls) -> RegistryConfig:
        """Create config from environment variables with defaults.

        Returns:
            RegistryConfig with values from environment or defaults.
        """
        environment = os.environ.get("REGISTRY_ENVIRONMENT", "production").lower()
        if environment not in ("production", "development"):
            environment = "production"
        return cls(
            page_size=_get_int_env("REGISTRY_PAGE_SIZE", 21),
            read_retry_attempts=_get_int_env("REGISTRY_READ_RETRY_ATTEMPTS", 3),
            read_retry_delay_seconds=_get_float_env("REGISTRY_READ_RETRY_DELAY", 0.2),
            environment=environment,
        )


# Default production config
DEFAULT_REGISTRY_CONFIG = RegistryConfig()

# Testing config: no waiting between read retries
TEST_REGISTRY_CONFIG = RegistryConfig(
    read_retry_attempts=3,
    read_retry_delay_seconds=0.0,
    environment="development",
)

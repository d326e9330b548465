"""Configuration module for the resort registry.

Available Configurations:
- RegistryConfig: Page size, read retry policy, logging environment
"""

from resort_registry.config.registry_config import (
    DEFAULT_REGISTRY_CONFIG,
    TEST_REGISTRY_CONFIG,
    RegistryConfig,
)

__all__ = [
    "RegistryConfig",
    "DEFAULT_REGISTRY_CONFIG",
    "TEST_REGISTRY_CONFIG",
]

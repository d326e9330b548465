"""
Domain layer - entity records, constraint violations and field validation.

This layer contains:
- Entity models (Employee, Resort) and their document mapping
- The ConstraintViolation result type
- Pure, synchronous field validators

CRITICAL: This layer must NOT import from application, infrastructure,
bootstrap or config. Only stdlib imports are allowed.
"""

from resort_registry.domain.exceptions import ResortRegistryError

__all__: list[str] = ["ResortRegistryError"]

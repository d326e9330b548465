"""Application services - use case orchestration.

Available services:
- ReferentialIntegrityService: key uniqueness and reference existence checks
- AvailableRehasService: derived availableRehas computation and reverse lookup
- EmployeeService: employee add/retrieve/page/update/delete
- ResortService: resort add/retrieve/page/update/delete
- PageReader / PageHistory: cursor pagination and caller-side navigation
- TestDataService: bundled sample data load and clear
"""

from resort_registry.application.services.available_rehas_service import (
    AvailableRehasService,
    ReferencingResorts,
)
from resort_registry.application.services.employee_service import EmployeeService
from resort_registry.application.services.page_reader import PageHistory, PageReader
from resort_registry.application.services.referential_integrity_service import (
    ReferentialIntegrityService,
    violation_for_store_error,
)
from resort_registry.application.services.resort_service import ResortService
from resort_registry.application.services.test_data_service import (
    TestDataReport,
    TestDataService,
)

__all__ = [
    "AvailableRehasService",
    "EmployeeService",
    "PageHistory",
    "PageReader",
    "ReferencingResorts",
    "ReferentialIntegrityService",
    "ResortService",
    "TestDataReport",
    "TestDataService",
    "violation_for_store_error",
]

"""Test data management: load bundled fixtures, clear all records.

Fixtures go through the regular mutators, so every record is validated
and every resort's availableRehas is derived. Employees are loaded
before resorts because resorts reference them; clearing runs in the
opposite order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from resort_registry.application.ports.document_store import DocumentStoreProtocol
from resort_registry.application.services.base import LoggingMixin
from resort_registry.application.services.employee_service import EmployeeService
from resort_registry.application.services.resort_service import ResortService
from resort_registry.domain.models.employee import EMPLOYEE_ID, EMPLOYEES_COLLECTION
from resort_registry.domain.models.resort import RESORT_ID, RESORTS_COLLECTION
from resort_registry.infrastructure.observability.correlation import operation_scope

DATA_DIR = Path(__file__).resolve().parents[2] / "data"


def _load_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


@dataclass
class TestDataReport:
    """Outcome of a test data run.

    Attributes:
        employees: Employee records created (or deleted).
        resorts: Resort records created (or deleted).
        rejected: Messages of records that were not processed.
    """

    __test__ = False

    employees: int = 0
    resorts: int = 0
    rejected: list[str] = field(default_factory=list)


class TestDataService(LoggingMixin):
    """Generates and clears sample employees and resorts."""

    __test__ = False

    def __init__(
        self,
        store: DocumentStoreProtocol,
        employees: EmployeeService,
        resorts: ResortService,
        data_dir: Path = DATA_DIR,
    ) -> None:
        self._store = store
        self._employees = employees
        self._resorts = resorts
        self._data_dir = data_dir
        self._init_logger()

    async def generate_test_data(self) -> TestDataReport:
        """Add every fixture employee, then every fixture resort.

        Raises:
            OSError: If a fixture file cannot be read.
        """
        with operation_scope():
            log = self._log_operation("generate_test_data", data_dir=str(self._data_dir))
            report = TestDataReport()

            for slots in _load_json(self._data_dir / "employees.json"):
                violation = await self._employees.add_employee(slots)
                if violation.ok:
                    report.employees += 1
                else:
                    report.rejected.append(f"employee {slots.get(EMPLOYEE_ID)}: {violation}")

            for slots in _load_json(self._data_dir / "resorts.json"):
                violation = await self._resorts.add_resort(slots)
                if violation.ok:
                    report.resorts += 1
                else:
                    report.rejected.append(f"resort {slots.get(RESORT_ID)}: {violation}")

            log.info(
                "test_data_generated",
                employees=report.employees,
                resorts=report.resorts,
                rejected=len(report.rejected),
            )
            return report

    async def clear_data(self) -> TestDataReport:
        """Delete every resort, then every employee, through the mutators.

        Raises:
            DocumentStoreError: If the collections cannot be listed.
        """
        with operation_scope():
            log = self._log_operation("clear_data")
            report = TestDataReport()

            for document in await self._store.query(RESORTS_COLLECTION, order_by=RESORT_ID):
                violation = await self._resorts.delete_resort(document[RESORT_ID])
                if violation.ok:
                    report.resorts += 1
                else:
                    report.rejected.append(f"resort {document[RESORT_ID]}: {violation}")

            for document in await self._store.query(
                EMPLOYEES_COLLECTION, order_by=EMPLOYEE_ID
            ):
                violation = await self._employees.delete_employee(document[EMPLOYEE_ID])
                if violation.ok:
                    report.employees += 1
                else:
                    report.rejected.append(f"employee {document[EMPLOYEE_ID]}: {violation}")

            log.info(
                "test_data_cleared",
                employees=report.employees,
                resorts=report.resorts,
                rejected=len(report.rejected),
            )
            return report

"""Unit tests for TestDataService (bundled sample fixtures)."""

import json
from pathlib import Path

import pytest

from resort_registry.application.services import (
    EmployeeService,
    ResortService,
    TestDataService,
)
from resort_registry.domain.models.employee import EMPLOYEES_COLLECTION
from resort_registry.domain.models.resort import RESORTS_COLLECTION
from resort_registry.infrastructure.stubs import DocumentStoreStub


@pytest.fixture
def test_data(
    store: DocumentStoreStub,
    employee_service: EmployeeService,
    resort_service: ResortService,
) -> TestDataService:
    return TestDataService(store, employee_service, resort_service)


class TestGenerateTestData:
    """Tests for generate_test_data()."""

    @pytest.mark.asyncio
    async def test_loads_all_fixtures(
        self, store: DocumentStoreStub, test_data: TestDataService
    ) -> None:
        report = await test_data.generate_test_data()

        assert report.employees == 8
        assert report.resorts == 4
        assert report.rejected == []
        assert len(store.documents(EMPLOYEES_COLLECTION)) == 8

    @pytest.mark.asyncio
    async def test_resort_rehas_derived(
        self, store: DocumentStoreStub, test_data: TestDataService
    ) -> None:
        await test_data.generate_test_data()

        resorts = store.documents(RESORTS_COLLECTION)
        assert resorts["1"]["availableRehas"] == [1, 2, 5]
        assert resorts["2"]["availableRehas"] == [1, 6, 7]
        assert resorts["3"]["availableRehas"] == [3, 4]
        assert resorts["4"]["availableRehas"] == [2, 4, 5]

    @pytest.mark.asyncio
    async def test_second_run_rejects_duplicates(
        self, test_data: TestDataService
    ) -> None:
        await test_data.generate_test_data()
        report = await test_data.generate_test_data()

        assert report.employees == 0
        assert report.resorts == 0
        assert len(report.rejected) == 12

    @pytest.mark.asyncio
    async def test_invalid_fixture_reported(
        self,
        tmp_path: Path,
        store: DocumentStoreStub,
        employee_service: EmployeeService,
        resort_service: ResortService,
    ) -> None:
        """Records failing validation are reported, the rest still load."""
        employees = [
            {"employeeId": 1, "firstName": "Anna", "lastName": "Schulz",
             "birthdate": "1984-03-12", "gender": 2, "therapySkills": [1]},
            {"employeeId": 2, "firstName": "B4d", "lastName": "Name",
             "birthdate": "1984-03-12", "gender": 2},
        ]
        resorts = [{"resortId": 1, "city": "Cottbus", "managerId": 2}]
        (tmp_path / "employees.json").write_text(json.dumps(employees))
        (tmp_path / "resorts.json").write_text(json.dumps(resorts))

        service = TestDataService(
            store, employee_service, resort_service, data_dir=tmp_path
        )
        report = await service.generate_test_data()

        assert report.employees == 1
        assert report.resorts == 0
        assert report.rejected[0].startswith("employee 2:")
        assert report.rejected[1].startswith("resort 1:")

    @pytest.mark.asyncio
    async def test_missing_fixture_file(
        self,
        tmp_path: Path,
        store: DocumentStoreStub,
        employee_service: EmployeeService,
        resort_service: ResortService,
    ) -> None:
        service = TestDataService(
            store, employee_service, resort_service, data_dir=tmp_path
        )
        with pytest.raises(OSError):
            await service.generate_test_data()


class TestClearData:
    """Tests for clear_data()."""

    @pytest.mark.asyncio
    async def test_clears_everything(
        self, store: DocumentStoreStub, test_data: TestDataService
    ) -> None:
        await test_data.generate_test_data()

        report = await test_data.clear_data()

        assert report.resorts == 4
        assert report.employees == 8
        assert store.documents(EMPLOYEES_COLLECTION) == {}
        assert store.documents(RESORTS_COLLECTION) == {}

    @pytest.mark.asyncio
    async def test_clear_empty_store(self, test_data: TestDataService) -> None:
        report = await test_data.clear_data()
        assert (report.employees, report.resorts) == (0, 0)

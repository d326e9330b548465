"""Unit tests for resort field validators."""

from datetime import date

import pytest

from resort_registry.domain.models.constraint_violation import ViolationKind
from resort_registry.domain.models.employee import Employee
from resort_registry.domain.models.enumerations import Gender
from resort_registry.domain.validation.resort import (
    build_resort,
    check_available_rehas,
    check_city,
    check_manager_id,
    check_resort_id_mandatory,
    check_therapist_id_refs,
)


class TestResortFields:
    """Tests for local resort checks."""

    def test_resort_id_mandatory(self) -> None:
        assert check_resort_id_mandatory(None).kind is ViolationKind.MANDATORY_VALUE
        assert check_resort_id_mandatory("5").checked_value == 5

    @pytest.mark.parametrize(
        ("raw", "kind"),
        [
            (None, ViolationKind.MANDATORY_VALUE),
            ("Bad Saarow", ViolationKind.PATTERN),
            ("C" * 51, ViolationKind.STRING_LENGTH),
        ],
    )
    def test_city(self, raw, kind) -> None:
        assert check_city(raw).kind is kind

    def test_manager_id_is_mandatory(self) -> None:
        assert check_manager_id(None).kind is ViolationKind.MANDATORY_VALUE

    def test_manager_id_syntax_checked_first(self) -> None:
        assert check_manager_id("boss").kind is ViolationKind.RANGE

    def test_manager_reference_forms(self) -> None:
        """A resolved employee or a document mapping yields the plain ID."""
        employee = Employee(9, "Mia", "Fischer", date(1991, 7, 23), Gender.FEMALE, ())
        assert check_manager_id(employee).checked_value == 9
        assert check_manager_id({"employeeId": 9}).checked_value == 9
        assert check_manager_id({"employeeId": 0}).kind is ViolationKind.RANGE

    def test_therapist_refs_normalized(self) -> None:
        """Mixed reference forms collapse to unique IDs in first-seen order."""
        employee = Employee(3, "Mia", "Fischer", date(1991, 7, 23), Gender.FEMALE, (6,))
        violation = check_therapist_id_refs(["2", employee, {"employeeId": 2}, 5])
        assert violation.ok
        assert violation.checked_value == (2, 3, 5)

    def test_therapist_refs_optional(self) -> None:
        assert check_therapist_id_refs(None).checked_value == ()

    def test_therapist_refs_must_be_list(self) -> None:
        assert check_therapist_id_refs(7).kind is ViolationKind.RANGE

    def test_malformed_therapist_ref(self) -> None:
        assert check_therapist_id_refs([1, "x"]).kind is ViolationKind.RANGE

    def test_available_rehas_domain(self) -> None:
        assert check_available_rehas([2, 1]).checked_value == (1, 2)
        assert check_available_rehas([0]).kind is ViolationKind.RANGE


class TestBuildResort:
    """Tests for whole-record construction."""

    def test_builds_resort(self) -> None:
        resort, violation = build_resort(
            {"resortId": "1", "city": "Cottbus", "managerId": "4", "therapistIdRefs": [1, 2]}
        )
        assert violation.ok
        assert resort is not None
        assert resort.resort_id == 1
        assert resort.manager_id == 4
        assert resort.therapist_id_refs == (1, 2)
        assert resort.available_rehas == ()

    def test_missing_manager(self) -> None:
        resort, violation = build_resort({"resortId": 1, "city": "Cottbus"})
        assert resort is None
        assert violation.kind is ViolationKind.MANDATORY_VALUE

"""Tests for change detection and notification deadlines."""

from dataclasses import dataclass, field, replace
from datetime import date

import pytest

from shaho_engine.rules.change_history import (
    NOTIFICATION_FORMS,
    detect_changes,
    format_category,
    format_office,
)
from shaho_engine.rules.notifications import (
    build_qualification_change_alerts,
    calculate_submit_deadline,
)
from shaho_engine.rules.types import ChangeType, EmployeeSnapshot, SnapshotValidationError

EFFECTIVE = date(2025, 4, 1)


def change_types(events):
    return [event.change_type for event in events]


class TestNameChange:
    """Test name change detection."""

    def test_initial_entry_is_not_a_change(self, base_employee):
        old = replace(base_employee, name="")
        new = replace(base_employee, name="田中")
        assert detect_changes(old, new, EFFECTIVE) == []

    def test_rename_fires(self, base_employee):
        old = replace(base_employee, name="田中")
        new = replace(base_employee, name="佐藤")
        events = detect_changes(old, new, EFFECTIVE)

        assert len(events) == 1
        event = events[0]
        assert event.change_type is ChangeType.NAME_CHANGE
        assert event.old_value == "田中"
        assert event.new_value == "佐藤"
        assert event.change_date == EFFECTIVE
        assert event.employee_id == "emp1"
        assert event.notification_forms == NOTIFICATION_FORMS[ChangeType.NAME_CHANGE]

    def test_clearing_name_does_not_fire(self, base_employee):
        assert detect_changes(base_employee, replace(base_employee, name=""), EFFECTIVE) == []


class TestAddressAndGender:
    """Test the fields where set and clear both count."""

    def test_address_set_uses_unset_placeholder(self, base_employee):
        old = replace(base_employee, address="")
        new = replace(base_employee, address="大阪府大阪市1-1")
        (event,) = detect_changes(old, new, EFFECTIVE)

        assert event.change_type is ChangeType.ADDRESS_CHANGE
        assert event.old_value == "(未設定)"
        assert event.new_value == "大阪府大阪市1-1"

    def test_address_cleared(self, base_employee):
        (event,) = detect_changes(base_employee, replace(base_employee, address=""), EFFECTIVE)
        assert event.new_value == "(未設定)"

    def test_both_empty_does_not_fire(self, base_employee):
        old = replace(base_employee, address="", gender="")
        assert detect_changes(old, old, EFFECTIVE) == []

    def test_gender_change(self, base_employee):
        (event,) = detect_changes(base_employee, replace(base_employee, gender="female"), EFFECTIVE)

        assert event.change_type is ChangeType.GENDER_CHANGE
        assert event.old_value == "male"
        assert event.new_value == "female"
        assert len(event.notification_forms) == 2


class TestBirthDateCorrection:
    """Test birth date corrections."""

    def test_correction_fires(self, base_employee):
        new = replace(base_employee, birth_date=date(1990, 1, 2))
        (event,) = detect_changes(base_employee, new, EFFECTIVE)

        assert event.change_type is ChangeType.BIRTHDATE_CORRECTION
        assert event.old_value == "1990-01-01"
        assert event.new_value == "1990-01-02"
        assert event.notification_forms == ("生年月日訂正届（健保・厚年）",)

    def test_initial_entry_is_not_a_correction(self, base_employee):
        old = replace(base_employee, birth_date=None)
        assert detect_changes(old, base_employee, EFFECTIVE) == []


class TestOfficeReassignment:
    """Test office reassignment composites."""

    def test_composite_with_prefecture(self, base_employee):
        new = replace(base_employee, office_number="0002", prefecture="osaka")
        (event,) = detect_changes(base_employee, new, EFFECTIVE)

        assert event.change_type is ChangeType.OFFICE_REASSIGNMENT
        assert event.old_value == "0001 (tokyo)"
        assert event.new_value == "0002 (osaka)"
        assert event.notification_forms == (
            "新しい事業所での資格取得届",
            "元の事業所での資格喪失届",
        )

    def test_prefecture_omitted_when_empty(self, base_employee):
        old = replace(base_employee, prefecture="")
        new = replace(base_employee, office_number="0002", prefecture="")
        (event,) = detect_changes(old, new, EFFECTIVE)

        assert event.old_value == "0001"
        assert event.new_value == "0002"

    def test_unset_office_number(self, base_employee):
        old = replace(base_employee, office_number="", prefecture="tokyo")
        (event,) = detect_changes(old, base_employee, EFFECTIVE)

        assert event.old_value == "(未設定)"
        assert event.new_value == "0001 (tokyo)"

    def test_prefecture_only_change_does_not_fire(self, base_employee):
        new = replace(base_employee, prefecture="osaka")
        assert detect_changes(base_employee, new, EFFECTIVE) == []

    def test_format_office(self):
        assert format_office("", "tokyo") == "(未設定)"
        assert format_office(None, None) == "(未設定)"
        assert format_office("12", None) == "12"


class TestCategoryChange:
    """Test insurance category changes."""

    def test_flag_flip_fires(self, base_employee):
        new = replace(base_employee, is_short_time=True, weekly_hours=25)
        (event,) = detect_changes(base_employee, new, EFFECTIVE)

        assert event.change_type is ChangeType.CATEGORY_CHANGE
        assert event.old_value == "通常加入（週40時間）"
        assert event.new_value == "短時間労働者（週25時間）"
        assert event.notification_forms == ("資格取得届",)

    def test_hours_change_with_both_known_fires(self, base_employee):
        new = replace(base_employee, weekly_hours=35)
        (event,) = detect_changes(base_employee, new, EFFECTIVE)
        assert event.old_value == "通常加入（週40時間）"
        assert event.new_value == "通常加入（週35時間）"

    def test_hours_change_with_unknown_side_does_not_fire(self, base_employee):
        old = replace(base_employee, weekly_hours=None)
        assert detect_changes(old, base_employee, EFFECTIVE) == []

    def test_flag_flip_with_unknown_hours(self, base_employee):
        old = replace(base_employee, weekly_hours=None)
        new = replace(base_employee, is_short_time=True, weekly_hours=None)
        (event,) = detect_changes(old, new, EFFECTIVE)
        assert event.old_value == "通常加入（週?時間）"
        assert event.new_value == "短時間労働者（週?時間）"

    def test_format_category_fractional_hours(self):
        assert format_category(True, 22.5) == "短時間労働者（週22.5時間）"


class TestMultipleChanges:
    """Test independent rules firing together."""

    def test_events_in_rule_order(self, base_employee):
        new = replace(
            base_employee,
            name="佐藤太郎",
            address="大阪府",
            gender="female",
            office_number="0009",
            is_short_time=True,
        )
        events = detect_changes(base_employee, new, EFFECTIVE)

        assert change_types(events) == [
            ChangeType.NAME_CHANGE,
            ChangeType.ADDRESS_CHANGE,
            ChangeType.GENDER_CHANGE,
            ChangeType.OFFICE_REASSIGNMENT,
            ChangeType.CATEGORY_CHANGE,
        ]

    def test_identical_snapshots(self, base_employee):
        assert detect_changes(base_employee, base_employee, EFFECTIVE) == []

    def test_event_serializes_label(self, base_employee):
        (event,) = detect_changes(base_employee, replace(base_employee, gender="female"), EFFECTIVE)
        data = event.to_dict()
        assert data["change_type"] == "gender-change"
        assert data["change_label"] == "性別変更"
        assert data["change_date"] == "2025-04-01"


@dataclass
class StoredChange:
    id: str
    employee_id: str
    change_type: str
    change_date: date
    old_value: str = "a"
    new_value: str = "b"
    notification_forms: list[str] = field(default_factory=lambda: ["資格取得届"])


class TestQualificationChangeAlerts:
    """Test submission deadlines."""

    def test_deadline_is_five_days_after_change(self):
        assert calculate_submit_deadline(date(2025, 4, 28)) == date(2025, 5, 3)

    def test_alerts_sorted_newest_first_with_days_remaining(self):
        records = [
            StoredChange("h1", "emp1", "name-change", date(2025, 4, 1)),
            StoredChange("h2", "emp2", "address-change", date(2025, 4, 3)),
        ]
        alerts = build_qualification_change_alerts(records, today=date(2025, 4, 4))

        assert [a.id for a in alerts] == ["h2", "h1"]
        assert alerts[0].submit_deadline == date(2025, 4, 8)
        assert alerts[0].days_until_deadline == 4
        assert alerts[1].days_until_deadline == 2
        assert alerts[1].details == "a → b"

    def test_overdue_is_negative(self):
        records = [StoredChange("h1", "emp1", "name-change", date(2025, 4, 1))]
        (alert,) = build_qualification_change_alerts(records, today=date(2025, 4, 10))
        assert alert.days_until_deadline == -4

    def test_dismissed_alerts_are_skipped(self):
        records = [StoredChange("h1", "emp1", "name-change", date(2025, 4, 1))]
        assert build_qualification_change_alerts(records, date(2025, 4, 2), dismissed_ids={"h1"}) == []


class TestSnapshotFromDict:
    """Test building snapshots from plain records."""

    def test_camel_case_record(self):
        snapshot = EmployeeSnapshot.from_dict(
            {
                "id": "emp9",
                "name": "山田",
                "birthDate": "1980-05-05",
                "retireDate": None,
                "weeklyWorkHoursCategory": "20-30hours",
                "monthlyWage": 90000,
                "expectedEmploymentMonths": "over-2months",
                "isShortTime": True,
                "officeNumber": "0003",
                "unknownField": "ignored",
            }
        )

        assert snapshot.birth_date == date(1980, 5, 5)
        assert snapshot.retire_date is None
        assert snapshot.weekly_work_hours_category == "20-30hours"
        assert snapshot.expected_employment_months == "over-2months"
        assert snapshot.is_short_time is True
        assert snapshot.address == ""

    def test_malformed_date_is_rejected(self):
        with pytest.raises(SnapshotValidationError) as exc_info:
            EmployeeSnapshot.from_dict({"id": "emp1", "birthDate": "1980/05/05"})

        assert exc_info.value.field_name == "birth_date"
        assert isinstance(exc_info.value, ValueError)

    def test_missing_id_is_rejected(self):
        with pytest.raises(SnapshotValidationError):
            EmployeeSnapshot.from_dict({"name": "山田"})

    def test_round_trip_through_dict(self, base_employee):
        assert EmployeeSnapshot.from_dict(base_employee.to_dict()) == base_employee

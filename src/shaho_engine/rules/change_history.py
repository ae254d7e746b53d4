"""Detection of changes to regulated employee attributes.

Each rule looks at one field (or a field pair) independently, so a single
edit can produce several events. Events are returned in rule order. Nothing
here persists; the change-history service stores what this module returns.
"""

from __future__ import annotations

from datetime import date

from shaho_engine.rules.types import UNSET_LABEL, ChangeEvent, ChangeType, EmployeeSnapshot

SHORT_TIME_LABEL = "短時間労働者"
REGULAR_LABEL = "通常加入"
UNKNOWN_HOURS_LABEL = "?"

NOTIFICATION_FORMS: dict[ChangeType, tuple[str, ...]] = {
    ChangeType.NAME_CHANGE: (
        "被保険者氏名変更届（健保）",
        "厚生年金被保険者氏名変更届",
    ),
    ChangeType.ADDRESS_CHANGE: (
        "被保険者住所変更届（健保）",
        "厚生年金被保険者住所変更届",
    ),
    ChangeType.BIRTHDATE_CORRECTION: ("生年月日訂正届（健保・厚年）",),
    ChangeType.GENDER_CHANGE: (
        "被保険者性別変更届（健保）",
        "厚生年金被保険者性別変更届",
    ),
    ChangeType.OFFICE_REASSIGNMENT: (
        "新しい事業所での資格取得届",
        "元の事業所での資格喪失届",
    ),
    ChangeType.CATEGORY_CHANGE: ("資格取得届",),
}


def format_office(office_number: str | None, prefecture: str | None) -> str:
    """Render an office as ``number (prefecture)``."""
    if not office_number:
        return UNSET_LABEL
    if prefecture:
        return f"{office_number} ({prefecture})"
    return office_number


def format_category(is_short_time: bool, weekly_hours: float | None) -> str:
    """Render an insurance category with its weekly hours."""
    status = SHORT_TIME_LABEL if is_short_time else REGULAR_LABEL
    hours = UNKNOWN_HOURS_LABEL if weekly_hours is None else f"{weekly_hours:g}"
    return f"{status}（週{hours}時間）"


def detect_changes(
    old: EmployeeSnapshot,
    new: EmployeeSnapshot,
    effective_date: date,
) -> list[ChangeEvent]:
    """Diff two snapshots of the same employee.

    Args:
        old: The stored snapshot
        new: The snapshot about to be saved
        effective_date: Date stamped on every emitted event

    Returns:
        Change events, possibly empty
    """
    events: list[ChangeEvent] = []

    def emit(change_type: ChangeType, old_value: str, new_value: str) -> None:
        events.append(
            ChangeEvent(
                employee_id=new.id,
                change_type=change_type,
                change_date=effective_date,
                old_value=old_value,
                new_value=new_value,
                notification_forms=NOTIFICATION_FORMS[change_type],
            )
        )

    # Setting a name for the first time is data entry, not a change
    if old.name and new.name and old.name != new.name:
        emit(ChangeType.NAME_CHANGE, old.name, new.name)

    old_address = old.address or ""
    new_address = new.address or ""
    if old_address != new_address and (old_address or new_address):
        emit(
            ChangeType.ADDRESS_CHANGE,
            old_address or UNSET_LABEL,
            new_address or UNSET_LABEL,
        )

    if old.birth_date and new.birth_date and old.birth_date != new.birth_date:
        emit(
            ChangeType.BIRTHDATE_CORRECTION,
            old.birth_date.isoformat(),
            new.birth_date.isoformat(),
        )

    old_gender = old.gender or ""
    new_gender = new.gender or ""
    if old_gender != new_gender and (old_gender or new_gender):
        emit(
            ChangeType.GENDER_CHANGE,
            old_gender or UNSET_LABEL,
            new_gender or UNSET_LABEL,
        )

    old_office = old.office_number or ""
    new_office = new.office_number or ""
    if old_office != new_office and (old_office or new_office):
        emit(
            ChangeType.OFFICE_REASSIGNMENT,
            format_office(old_office, old.prefecture),
            format_office(new_office, new.prefecture),
        )

    hours_changed = (
        old.weekly_hours is not None
        and new.weekly_hours is not None
        and old.weekly_hours != new.weekly_hours
    )
    if bool(old.is_short_time) != bool(new.is_short_time) or hours_changed:
        emit(
            ChangeType.CATEGORY_CHANGE,
            format_category(bool(old.is_short_time), old.weekly_hours),
            format_category(bool(new.is_short_time), new.weekly_hours),
        )

    return events

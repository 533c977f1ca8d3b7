from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..classyears.model import ClassYear
from ..common.datetime_utils import format_day, midnight
from ..core.enums import AttendanceKind
from ..smallgroups.model import SmallGroup
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceReport:
    """Read-model: a student's attendance measured against official dates."""

    semester: Optional[str]
    total_dates: tuple[date, ...] = ()
    total_bonus_dates: tuple[date, ...] = ()
    current_attendance: tuple[date, ...] = ()
    current_bonus_attendance: tuple[date, ...] = ()
    unverified_days: int = 0
    smallgroup_name: Optional[str] = None
    total_small_dates: tuple[date, ...] = ()
    current_small_attendance: tuple[date, ...] = ()

    @property
    def attendance_count(self) -> int:
        return len(self.current_attendance)

    @property
    def bonus_count(self) -> int:
        return len(self.current_bonus_attendance)

    @property
    def small_count(self) -> int:
        return len(self.current_small_attendance)

    def to_dict(self) -> dict:
        out = {
            "semester": self.semester,
            "totalDates": [format_day(d) for d in self.total_dates],
            "totalBonusDates": [format_day(d) for d in self.total_bonus_dates],
            "currentAttendance": [format_day(d) for d in self.current_attendance],
            "currentBonusAttendance": [format_day(d) for d in self.current_bonus_attendance],
            "attendanceCount": self.attendance_count,
            "bonusCount": self.bonus_count,
            "unverifiedDays": self.unverified_days,
        }
        if self.smallgroup_name is not None:
            out.update(
                {
                    "smallgroup": self.smallgroup_name,
                    "totalSmallDates": [format_day(d) for d in self.total_small_dates],
                    "currentSmallAttendance": [format_day(d) for d in self.current_small_attendance],
                    "smallCount": self.small_count,
                }
            )
        return out


def _as_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return midnight(value)


def _legacy_on(timestamps: Iterable, official: Sequence[date]) -> list[date]:
    # Legacy timestamps only count when they are exactly the start of an official day.
    official_ts = {midnight(d) for d in official}
    return [ts.date() for ts in map(_as_timestamp, timestamps) if ts in official_ts]


def _unique_days(days: Iterable[date]) -> tuple[date, ...]:
    seen: set[date] = set()
    out: list[date] = []
    for d in days:
        if d not in seen:
            seen.add(d)
            out.append(d)
    return tuple(out)


def _pending_days(student: Student, class_year: ClassYear, verified_by_kind: dict) -> set[date]:
    """Days with self-reported attendance that is not verified in the same category."""
    year = student.year_for(class_year.class_year_id)
    unverified = year.unverified if year else []
    pending = set()
    for e in unverified:
        if e.date not in verified_by_kind.get(e.kind, ()):
            pending.add(e.date)
    for kind, official in ((AttendanceKind.REGULAR, class_year.dates), (AttendanceKind.BONUS, class_year.bonus_dates)):
        pending.update(d for d in _legacy_on(student.legacy_unverified, official) if d not in verified_by_kind[kind])
    return pending


def build_attendance_report(
    student: Student,
    class_year: Optional[ClassYear],
    smallgroup: Optional[SmallGroup] = None,
) -> AttendanceReport:
    """Cross-reference a student's attendance with the official dates of `class_year`.

    Legacy timestamps and the structured entries of the class year are
    combined; a day is counted once even if it appears in both. Small-group
    figures are only filled in when `smallgroup` is given.
    """
    if class_year is None:
        return AttendanceReport(semester=None)

    year = student.year_for(class_year.class_year_id)
    verified = list(year.verified) if year else []
    official = set(class_year.dates)
    official_bonus = set(class_year.bonus_dates)

    regular = _legacy_on(student.legacy_attendance, class_year.dates) + [
        e.date for e in verified if e.kind is AttendanceKind.REGULAR and e.date in official
    ]
    bonus = _legacy_on(student.legacy_attendance, class_year.bonus_dates) + [
        e.date for e in verified if e.kind is AttendanceKind.BONUS and e.date in official_bonus
    ]
    verified_by_kind = {AttendanceKind.REGULAR: set(regular), AttendanceKind.BONUS: set(bonus)}

    report = dict(
        semester=class_year.semester,
        total_dates=tuple(class_year.dates),
        total_bonus_dates=tuple(class_year.bonus_dates),
        current_attendance=_unique_days(regular),
        current_bonus_attendance=_unique_days(bonus),
        unverified_days=len(_pending_days(student, class_year, verified_by_kind)),
    )

    if smallgroup is not None:
        group_dates = set(smallgroup.dates)
        small = [e.date for e in verified if e.kind is AttendanceKind.SMALL_GROUP and e.date in group_dates]
        report.update(
            smallgroup_name=smallgroup.name,
            total_small_dates=tuple(smallgroup.dates),
            current_small_attendance=_unique_days(small),
        )

    return AttendanceReport(**report)

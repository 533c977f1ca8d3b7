from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceKind, Bucket, Role


@dataclass(frozen=True)
class AttendanceEntry:
    """One attended day. Time of day is not stored."""

    date: date
    bonus_day: bool = False
    smallgroup: bool = False

    @classmethod
    def for_kind(cls, day: date, kind: AttendanceKind) -> "AttendanceEntry":
        return cls(
            date=day,
            bonus_day=kind is AttendanceKind.BONUS,
            smallgroup=kind is AttendanceKind.SMALL_GROUP,
        )

    @property
    def kind(self) -> AttendanceKind:
        if self.smallgroup:
            return AttendanceKind.SMALL_GROUP
        if self.bonus_day:
            return AttendanceKind.BONUS
        return AttendanceKind.REGULAR

    def matches(self, day: date, kind: AttendanceKind) -> bool:
        return self.date == day and self.kind is kind


@dataclass
class AttendanceYear:
    """A student's attendance for one class year, oldest entry first in each bucket."""

    class_year_id: int
    verified: list[AttendanceEntry] = field(default_factory=list)
    unverified: list[AttendanceEntry] = field(default_factory=list)

    def entries(self, bucket: Bucket) -> list[AttendanceEntry]:
        return self.verified if bucket is Bucket.VERIFIED else self.unverified

    def find_latest(self, bucket: Bucket, day: date, kind: AttendanceKind) -> Optional[AttendanceEntry]:
        for entry in reversed(self.entries(bucket)):
            if entry.matches(day, kind):
                return entry
        return None

    def discard(self, bucket: Bucket, day: date, kind: AttendanceKind) -> bool:
        """Remove every entry of `kind` on `day` from `bucket`. Returns True if any was removed."""
        entries = self.entries(bucket)
        kept = [e for e in entries if not e.matches(day, kind)]
        if len(kept) == len(entries):
            return False
        entries[:] = kept
        return True


@dataclass
class Student:
    """Domain entity: a participating student (or mentor/admin).

    `legacy_attendance` / `legacy_unverified` hold timestamps recorded before
    attendance was tracked per class year; they are read by the report builder
    until `AttendanceService.migrate_legacy_attendance` folds them in.
    """

    student_id: int
    name: str
    email: str
    role: Role = Role.USER
    active: bool = True
    smallgroup_id: Optional[int] = None
    semester_count: int = 0
    attendance_by_year: list[AttendanceYear] = field(default_factory=list)
    legacy_attendance: list[datetime] = field(default_factory=list)
    legacy_unverified: list[datetime] = field(default_factory=list)

    def year_for(self, class_year_id: int) -> Optional[AttendanceYear]:
        for year in reversed(self.attendance_by_year):
            if year.class_year_id == class_year_id:
                return year
        return None

    def ensure_year(self, class_year_id: int) -> AttendanceYear:
        year = self.year_for(class_year_id)
        if year is None:
            year = AttendanceYear(class_year_id=class_year_id)
            self.attendance_by_year.append(year)
        return year

    @property
    def has_legacy_attendance(self) -> bool:
        return bool(self.legacy_attendance or self.legacy_unverified)

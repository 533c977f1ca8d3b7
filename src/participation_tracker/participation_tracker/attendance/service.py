from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..classyears.model import ClassYear
from ..classyears.repository import ClassYearRepository
from ..common.datetime_utils import format_day, midnight, to_day, today_local
from ..common.daycodes import normalize_daycode
from ..core.enums import AttendanceKind, PresenceState, PresenceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..smallgroups.model import SmallGroup
from ..smallgroups.repository import SmallGroupRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from . import presence
from .report import AttendanceReport, build_attendance_report

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        students: StudentRepository,
        class_years: ClassYearRepository,
        smallgroups: SmallGroupRepository,
    ):
        self._students = students
        self._class_years = class_years
        self._smallgroups = smallgroups

    def _get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student does not exist")
        return student

    def _require_current_year(self) -> ClassYear:
        class_year = self._class_years.get_current()
        if not class_year:
            raise ValidationError("There is no current class year")
        return class_year

    def _smallgroup_of(self, student: Student, class_year: Optional[ClassYear]) -> Optional[SmallGroup]:
        """The student's small group, if it belongs to `class_year`."""
        if student.smallgroup_id is None or class_year is None:
            return None
        group = self._smallgroups.get_by_id(student.smallgroup_id)
        if group is None or group.class_year_id != class_year.class_year_id:
            return None
        return group

    def presence(
        self,
        student_id: int,
        *,
        kind: AttendanceKind = AttendanceKind.REGULAR,
        today: Optional[date] = None,
    ) -> PresenceStatus:
        """Today's status for one category. Without a current class year everyone is absent."""
        student = self._get_student(student_id)
        return presence.get_presence(student, self._class_years.get_current(), kind=kind, today=today)

    def list_presence(
        self,
        *,
        kind: AttendanceKind = AttendanceKind.REGULAR,
        today: Optional[date] = None,
    ) -> list[dict]:
        class_year = self._class_years.get_current()
        return [
            {
                "student_id": s.student_id,
                "name": s.name,
                "presence": presence.get_presence(s, class_year, kind=kind, today=today).value,
            }
            for s in self._students.list_active()
        ]

    def set_presence(
        self,
        *,
        current_role: Role,
        student_id: int,
        status: PresenceStatus,
        kind: Optional[AttendanceKind] = None,
        today: Optional[date] = None,
    ) -> PresenceStatus:
        """Mentor action: set a student's status for today and persist it if it changed.

        Returns the student's resulting status in the category of `status`.
        """
        if not Role(current_role).at_least(Role.MENTOR):
            raise AuthorizationError("Only mentors can change attendance")

        try:
            status = PresenceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {status!r}")
        if kind is not None:
            status = status.as_kind(AttendanceKind(kind))

        today = to_day(today) if today is not None else today_local()
        class_year = self._require_current_year()
        student = self._get_student(student_id)

        if presence.set_presence(student, class_year, status, today=today):
            self._students.save_attendance_year(student.student_id, student.ensure_year(class_year.class_year_id))

        return presence.get_presence(student, class_year, kind=status.kind, today=today)

    def submit_daycode(self, student_id: int, code: str, *, today: Optional[date] = None) -> PresenceStatus:
        """Self-report attendance with today's day code.

        A class-year code marks the student unverified (bonus variant for a bonus
        code); the code of the student's small group marks them unverified for
        the small group. A day that a mentor already verified stays verified.
        """
        code = normalize_daycode(code)
        if not code:
            raise ValidationError("Day code must not be empty")

        today = to_day(today) if today is not None else today_local()
        class_year = self._require_current_year()
        student = self._get_student(student_id)

        status: Optional[PresenceStatus] = None
        class_code = class_year.daycode_for(today)
        if class_code and normalize_daycode(class_code.code) == code:
            status = PresenceStatus.UNVERIFIED_BONUS if class_code.bonus_day else PresenceStatus.UNVERIFIED
        else:
            group = self._smallgroup_of(student, class_year)
            group_code = group.daycode_for(today) if group else None
            if group_code and normalize_daycode(group_code.code) == code:
                status = PresenceStatus.UNVERIFIED_SMALL

        if status is None:
            logger.info("Rejected day code from student %s on %s", student.student_id, format_day(today))
            raise ValidationError("Invalid day code")

        current = presence.get_presence(student, class_year, kind=status.kind, today=today)
        if current.state is PresenceState.PRESENT:
            return current

        if presence.set_presence(student, class_year, status, today=today):
            self._students.save_attendance_year(student.student_id, student.ensure_year(class_year.class_year_id))
        return status

    def get_current_attendance(self, student_id: int) -> AttendanceReport:
        student = self._get_student(student_id)
        class_year = self._class_years.get_current()
        return build_attendance_report(student, class_year, self._smallgroup_of(student, class_year))

    def migrate_legacy_attendance(self, *, current_role: Role, student_id: int) -> int:
        """Fold a student's legacy attendance timestamps into the current class year.

        Uses the same exact-timestamp rule as the report, so the report is the
        same before and after. A day listed both as an official and a bonus
        date gets an entry in each category. Timestamps that match no official
        date are dropped with the legacy lists. Returns the number of entries
        added.
        """
        if not Role(current_role).at_least(Role.ADMIN):
            raise AuthorizationError("Only admins can migrate attendance")

        class_year = self._require_current_year()
        student = self._get_student(student_id)
        if not student.has_legacy_attendance:
            return 0

        year = student.ensure_year(class_year.class_year_id)
        added = 0
        dropped = 0

        for ts in student.legacy_attendance:
            kinds = _official_kinds(class_year, ts)
            if not kinds:
                dropped += 1
            for kind in kinds:
                if presence.apply_transition(year, PresenceStatus.of(PresenceState.PRESENT, kind), to_day(ts)):
                    added += 1

        for ts in student.legacy_unverified:
            kinds = _official_kinds(class_year, ts)
            if not kinds:
                dropped += 1
            day = to_day(ts)
            for kind in kinds:
                if presence.presence_in_year(year, day, kind).state is PresenceState.ABSENT:
                    presence.apply_transition(year, PresenceStatus.of(PresenceState.UNVERIFIED, kind), day)
                    added += 1

        student.legacy_attendance = []
        student.legacy_unverified = []
        self._students.complete_legacy_migration(student.student_id, year)

        logger.info(
            "Migrated legacy attendance of student %s into %s: %d entries added, %d timestamps dropped",
            student.student_id,
            class_year.semester,
            added,
            dropped,
        )
        return added


def _official_kinds(class_year: ClassYear, timestamp) -> list[AttendanceKind]:
    # Same exact-match rule the report applies to legacy timestamps.
    if isinstance(timestamp, datetime) and timestamp != midnight(timestamp.date()):
        return []
    day = to_day(timestamp)
    kinds = []
    if class_year.is_official(day):
        kinds.append(AttendanceKind.REGULAR)
    if class_year.is_bonus(day):
        kinds.append(AttendanceKind.BONUS)
    return kinds

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceYear, Student


class StudentRepository(Protocol):
    """Repository interface for students and their attendance.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        """Load a student with every attendance year and the legacy lists."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_smallgroup(self, smallgroup_id: int) -> Sequence[Student]:
        raise NotImplementedError

    def save_attendance_year(self, student_id: int, year: AttendanceYear) -> None:
        """Replace the stored entries of `year.class_year_id` with the given buckets."""

        raise NotImplementedError

    def complete_legacy_migration(self, student_id: int, year: AttendanceYear) -> None:
        """Save `year` and delete the student's legacy attendance in one transaction."""

        raise NotImplementedError

    def set_smallgroup(self, student_id: int, smallgroup_id: Optional[int]) -> bool:
        raise NotImplementedError

    def clear_smallgroup(self, smallgroup_id: int) -> int:
        """Unassign every member of a small group. Returns the number of students updated."""

        raise NotImplementedError

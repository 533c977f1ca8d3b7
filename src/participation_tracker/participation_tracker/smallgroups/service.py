from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..classyears.model import DayCode
from ..classyears.repository import ClassYearRepository
from ..common.datetime_utils import format_day, today_local
from ..common.daycodes import generate_daycode
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import DEFAULT_DAYCODE_LENGTH, MAX_SMALLGROUP_NAME_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import SmallGroup
from .repository import SmallGroupRepository

logger = logging.getLogger(__name__)


class SmallGroupService:
    """Use cases for small groups. Every mutation requires a mentor."""

    def __init__(
        self,
        smallgroups: SmallGroupRepository,
        students: StudentRepository,
        class_years: ClassYearRepository,
        *,
        daycode_length: int = DEFAULT_DAYCODE_LENGTH,
    ):
        self._smallgroups = smallgroups
        self._students = students
        self._class_years = class_years
        self._daycode_length = int(daycode_length)

    @staticmethod
    def _require_mentor(current_role: Role) -> None:
        if not Role(current_role).at_least(Role.MENTOR):
            raise AuthorizationError("Only mentors can manage small groups")

    @staticmethod
    def _clean_name(name: str) -> str:
        name = require_non_empty(name, "Small group name")
        return require_max_length(name, "Small group name", MAX_SMALLGROUP_NAME_LENGTH)

    def get(self, smallgroup_id: int) -> SmallGroup:
        group = self._smallgroups.get_by_id(int(smallgroup_id))
        if not group:
            raise NotFoundError("Small group does not exist")
        return group

    def list_current(self) -> Sequence[SmallGroup]:
        class_year = self._class_years.get_current()
        if not class_year:
            return []
        return self._smallgroups.list_for_class_year(class_year.class_year_id)

    def create(self, *, current_role: Role, name: str) -> int:
        self._require_mentor(current_role)
        name = self._clean_name(name)
        class_year = self._class_years.get_current()
        if not class_year:
            raise ValidationError("Cannot create a small group without a current class year")

        smallgroup_id = self._smallgroups.create(class_year_id=class_year.class_year_id, name=name)
        logger.info("Created small group %r (id=%s) in %s", name, smallgroup_id, class_year.semester)
        return smallgroup_id

    def rename(self, *, current_role: Role, smallgroup_id: int, name: str) -> None:
        self._require_mentor(current_role)
        name = self._clean_name(name)
        self.get(smallgroup_id)
        self._smallgroups.rename(int(smallgroup_id), name)

    def delete(self, *, current_role: Role, smallgroup_id: int) -> None:
        self._require_mentor(current_role)
        self.get(smallgroup_id)
        released = self._students.clear_smallgroup(int(smallgroup_id))
        self._smallgroups.delete(int(smallgroup_id))
        logger.info("Deleted small group id=%s (%d members released)", smallgroup_id, released)

    def members(self, smallgroup_id: int) -> Sequence[Student]:
        self.get(smallgroup_id)
        return self._students.list_by_smallgroup(int(smallgroup_id))

    def add_member(self, *, current_role: Role, smallgroup_id: int, student_id: int) -> None:
        """Assign a student to the group, moving them out of any previous group."""
        self._require_mentor(current_role)
        group = self.get(smallgroup_id)
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student does not exist")
        if student.smallgroup_id == group.smallgroup_id:
            return

        self._students.set_smallgroup(student.student_id, group.smallgroup_id)
        logger.info(
            "Student %s moved from small group %s to %s",
            student.student_id,
            student.smallgroup_id,
            group.smallgroup_id,
        )

    def remove_member(self, *, current_role: Role, smallgroup_id: int, student_id: int) -> None:
        self._require_mentor(current_role)
        self.get(smallgroup_id)
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student does not exist")
        if student.smallgroup_id != int(smallgroup_id):
            raise ValidationError("Student is not a member of this small group")
        self._students.set_smallgroup(student.student_id, None)

    def daycode(self, *, current_role: Role, smallgroup_id: int, today: Optional[date] = None) -> DayCode:
        """Return today's code for the group, generating it and recording today as a meeting date."""
        self._require_mentor(current_role)
        today = today or today_local()
        group = self.get(smallgroup_id)

        existing = group.daycode_for(today)
        if existing:
            return existing

        daycode = DayCode(day=today, code=generate_daycode(self._daycode_length))
        self._smallgroups.add_daycode(group.smallgroup_id, daycode)
        logger.info("Generated day code for small group %r on %s", group.name, format_day(today))
        return daycode

    @staticmethod
    def as_dict(group: SmallGroup, *, members: Sequence[Student] = (), include_daycodes: bool = False) -> dict:
        out = {
            "smallgroup_id": group.smallgroup_id,
            "class_year_id": group.class_year_id,
            "name": group.name,
            "dates": [format_day(d) for d in group.dates],
        }
        if members:
            out["members"] = [{"student_id": s.student_id, "name": s.name} for s in members]
        if include_daycodes:
            out["daycodes"] = [{"date": format_day(dc.day), "code": dc.code} for dc in group.daycodes]
        return out

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_day, today_local
from ..common.daycodes import generate_daycode
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_DAYCODE_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import ClassYear, DayCode
from .repository import ClassYearRepository

logger = logging.getLogger(__name__)


def _require_role(current_role: Role, minimum: Role) -> None:
    if not Role(current_role).at_least(minimum):
        raise AuthorizationError("You do not have permission for this action")


class ClassYearService:
    """Use cases around class years: the current year, its official dates and day codes."""

    def __init__(self, class_years: ClassYearRepository, *, daycode_length: int = DEFAULT_DAYCODE_LENGTH):
        self._class_years = class_years
        self._daycode_length = int(daycode_length)

    def get_current(self) -> Optional[ClassYear]:
        return self._class_years.get_current()

    def require_current(self) -> ClassYear:
        class_year = self._class_years.get_current()
        if not class_year:
            raise NotFoundError("There is no current class year")
        return class_year

    def list_all(self) -> Sequence[ClassYear]:
        return self._class_years.list_all()

    def create(
        self,
        *,
        current_role: Role,
        semester: str,
        dates: Sequence[date] = (),
        bonus_dates: Sequence[date] = (),
        make_current: bool = False,
    ) -> int:
        _require_role(current_role, Role.ADMIN)
        semester = require_non_empty(semester, "Semester")
        if self._class_years.get_by_semester(semester):
            raise ValidationError(f"Class year {semester} already exists")

        class_year_id = self._class_years.create(
            semester=semester,
            dates=sorted(set(dates)),
            bonus_dates=sorted(set(bonus_dates)),
        )
        logger.info("Created class year %s (id=%s)", semester, class_year_id)
        if make_current:
            self._class_years.set_current(class_year_id)
            logger.info("Class year %s is now current", semester)
        return class_year_id

    def set_current(self, *, current_role: Role, class_year_id: int) -> None:
        _require_role(current_role, Role.ADMIN)
        if not self._class_years.set_current(int(class_year_id)):
            raise NotFoundError("Class year does not exist")
        logger.info("Class year id=%s is now current", class_year_id)

    def add_date(self, *, current_role: Role, class_year_id: int, day: date, bonus: bool = False) -> bool:
        _require_role(current_role, Role.MENTOR)
        if not self._class_years.get_by_id(int(class_year_id)):
            raise NotFoundError("Class year does not exist")
        return self._class_years.add_date(int(class_year_id), day, bonus=bonus)

    def remove_date(self, *, current_role: Role, class_year_id: int, day: date, bonus: bool = False) -> None:
        _require_role(current_role, Role.MENTOR)
        if not self._class_years.remove_date(int(class_year_id), day, bonus=bonus):
            raise ValidationError(f"{format_day(day)} is not an official date of this class year")

    def daycode(self, *, current_role: Role, bonus: bool = False, today: Optional[date] = None) -> DayCode:
        """Return today's day code for the current class year, generating one if needed.

        Generating a code also makes today an official (or bonus) date.
        """
        _require_role(current_role, Role.MENTOR)
        today = today or today_local()
        class_year = self.require_current()

        existing = class_year.daycode_for(today)
        if existing:
            return existing

        daycode = DayCode(day=today, code=generate_daycode(self._daycode_length), bonus_day=bool(bonus))
        self._class_years.add_daycode(class_year.class_year_id, daycode)
        logger.info(
            "Generated %sday code for class year %s on %s",
            "bonus " if bonus else "",
            class_year.semester,
            format_day(today),
        )
        return daycode

    @staticmethod
    def as_dict(class_year: ClassYear, *, include_daycodes: bool = False) -> dict:
        out = {
            "class_year_id": class_year.class_year_id,
            "semester": class_year.semester,
            "current": class_year.current,
            "dates": [format_day(d) for d in class_year.dates],
            "bonus_dates": [format_day(d) for d in class_year.bonus_dates],
        }
        if include_daycodes:
            out["daycodes"] = [
                {"date": format_day(dc.day), "code": dc.code, "bonus_day": dc.bonus_day}
                for dc in class_year.daycodes
            ]
        return out

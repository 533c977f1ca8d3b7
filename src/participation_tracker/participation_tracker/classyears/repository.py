from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ClassYear, DayCode


class ClassYearRepository(Protocol):
    def get_current(self) -> Optional[ClassYear]:
        raise NotImplementedError

    def get_by_id(self, class_year_id: int) -> Optional[ClassYear]:
        raise NotImplementedError

    def get_by_semester(self, semester: str) -> Optional[ClassYear]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ClassYear]:
        raise NotImplementedError

    def create(self, *, semester: str, dates: Sequence[date], bonus_dates: Sequence[date]) -> int:
        raise NotImplementedError

    def set_current(self, class_year_id: int) -> bool:
        """Mark one class year current and every other one not current."""

        raise NotImplementedError

    def add_date(self, class_year_id: int, day: date, *, bonus: bool) -> bool:
        """Returns False when the date was already listed."""

        raise NotImplementedError

    def remove_date(self, class_year_id: int, day: date, *, bonus: bool) -> bool:
        raise NotImplementedError

    def add_daycode(self, class_year_id: int, daycode: DayCode) -> None:
        """Store the code and list its day as an official (or bonus) date, in one transaction."""

        raise NotImplementedError

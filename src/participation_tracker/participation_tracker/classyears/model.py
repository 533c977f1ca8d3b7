from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DayCode:
    day: date
    code: str
    bonus_day: bool = False


@dataclass(frozen=True)
class ClassYear:
    """Domain entity: the academic period that scopes official attendance dates."""

    class_year_id: int
    semester: str
    current: bool
    dates: tuple[date, ...] = ()
    bonus_dates: tuple[date, ...] = ()
    daycodes: tuple[DayCode, ...] = ()

    def is_official(self, day: date) -> bool:
        return day in self.dates

    def is_bonus(self, day: date) -> bool:
        return day in self.bonus_dates

    def daycode_for(self, day: date) -> Optional[DayCode]:
        for dc in reversed(self.daycodes):
            if dc.day == day:
                return dc
        return None

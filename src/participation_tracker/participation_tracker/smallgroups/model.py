from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..classyears.model import DayCode


@dataclass(frozen=True)
class SmallGroup:
    """Domain entity: a sub-team with its own meeting dates inside one class year."""

    smallgroup_id: int
    class_year_id: int
    name: str
    dates: tuple[date, ...] = ()
    daycodes: tuple[DayCode, ...] = ()

    def daycode_for(self, day: date) -> Optional[DayCode]:
        for dc in reversed(self.daycodes):
            if dc.day == day:
                return dc
        return None

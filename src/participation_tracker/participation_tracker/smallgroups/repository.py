from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..classyears.model import DayCode
from .model import SmallGroup


class SmallGroupRepository(Protocol):
    def get_by_id(self, smallgroup_id: int) -> Optional[SmallGroup]:
        raise NotImplementedError

    def list_for_class_year(self, class_year_id: int) -> Sequence[SmallGroup]:
        raise NotImplementedError

    def create(self, *, class_year_id: int, name: str) -> int:
        raise NotImplementedError

    def rename(self, smallgroup_id: int, name: str) -> bool:
        raise NotImplementedError

    def delete(self, smallgroup_id: int) -> bool:
        raise NotImplementedError

    def add_daycode(self, smallgroup_id: int, daycode: DayCode) -> None:
        """Store the code and list its day as a meeting date, in one transaction."""

        raise NotImplementedError

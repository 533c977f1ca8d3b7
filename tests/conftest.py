from __future__ import annotations

import copy
import dataclasses
from datetime import date, datetime
from typing import Optional

import pytest

from src.participation_tracker.participation_tracker.attendance.service import AttendanceService
from src.participation_tracker.participation_tracker.classyears.model import ClassYear, DayCode
from src.participation_tracker.participation_tracker.classyears.service import ClassYearService
from src.participation_tracker.participation_tracker.core.enums import Role
from src.participation_tracker.participation_tracker.smallgroups.model import SmallGroup
from src.participation_tracker.participation_tracker.smallgroups.service import SmallGroupService
from src.participation_tracker.participation_tracker.students.model import AttendanceYear, Student
from src.participation_tracker.participation_tracker.students.service import StudentService


class InMemoryStudents:
    """Returns copies so services only see what they explicitly saved."""

    def __init__(self, students=()):
        self._by_id: dict[int, Student] = {s.student_id: copy.deepcopy(s) for s in students}
        self.saved_years: list[tuple[int, AttendanceYear]] = []
        self.cleared_legacy: list[int] = []

    def add(self, student: Student) -> None:
        self._by_id[student.student_id] = copy.deepcopy(student)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        student = self._by_id.get(int(student_id))
        return copy.deepcopy(student) if student else None

    def list_active(self):
        return [copy.deepcopy(s) for s in self._by_id.values() if s.active]

    def list_by_smallgroup(self, smallgroup_id: int):
        return [copy.deepcopy(s) for s in self._by_id.values() if s.smallgroup_id == smallgroup_id]

    def _store_year(self, student_id: int, year: AttendanceYear) -> None:
        stored = self._by_id[int(student_id)]
        stored.attendance_by_year = [y for y in stored.attendance_by_year if y.class_year_id != year.class_year_id]
        stored.attendance_by_year.append(copy.deepcopy(year))
        self.saved_years.append((int(student_id), copy.deepcopy(year)))

    def save_attendance_year(self, student_id: int, year: AttendanceYear) -> None:
        self._store_year(student_id, year)

    def complete_legacy_migration(self, student_id: int, year: AttendanceYear) -> None:
        self._store_year(student_id, year)
        stored = self._by_id[int(student_id)]
        stored.legacy_attendance = []
        stored.legacy_unverified = []
        self.cleared_legacy.append(int(student_id))

    def set_smallgroup(self, student_id: int, smallgroup_id: Optional[int]) -> bool:
        stored = self._by_id.get(int(student_id))
        if not stored:
            return False
        stored.smallgroup_id = smallgroup_id
        return True

    def clear_smallgroup(self, smallgroup_id: int) -> int:
        count = 0
        for s in self._by_id.values():
            if s.smallgroup_id == smallgroup_id:
                s.smallgroup_id = None
                count += 1
        return count


class InMemoryClassYears:
    def __init__(self, class_years=()):
        self._by_id: dict[int, ClassYear] = {c.class_year_id: c for c in class_years}
        self._next_id = max(self._by_id, default=0) + 1

    def get_current(self) -> Optional[ClassYear]:
        for c in self._by_id.values():
            if c.current:
                return c
        return None

    def get_by_id(self, class_year_id: int) -> Optional[ClassYear]:
        return self._by_id.get(int(class_year_id))

    def get_by_semester(self, semester: str) -> Optional[ClassYear]:
        for c in self._by_id.values():
            if c.semester == semester:
                return c
        return None

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda c: c.class_year_id, reverse=True)

    def create(self, *, semester, dates, bonus_dates) -> int:
        class_year_id = self._next_id
        self._next_id += 1
        self._by_id[class_year_id] = ClassYear(
            class_year_id=class_year_id,
            semester=semester,
            current=False,
            dates=tuple(dates),
            bonus_dates=tuple(bonus_dates),
        )
        return class_year_id

    def set_current(self, class_year_id: int) -> bool:
        if int(class_year_id) not in self._by_id:
            return False
        for cid, c in list(self._by_id.items()):
            self._by_id[cid] = dataclasses.replace(c, current=(cid == int(class_year_id)))
        return True

    def _list_date(self, class_year_id: int, day: date, bonus: bool) -> bool:
        c = self._by_id[int(class_year_id)]
        field = "bonus_dates" if bonus else "dates"
        current = getattr(c, field)
        if day in current:
            return False
        self._by_id[c.class_year_id] = dataclasses.replace(c, **{field: tuple(sorted(current + (day,)))})
        return True

    def add_date(self, class_year_id: int, day: date, *, bonus: bool) -> bool:
        return self._list_date(class_year_id, day, bonus)

    def remove_date(self, class_year_id: int, day: date, *, bonus: bool) -> bool:
        c = self._by_id.get(int(class_year_id))
        field = "bonus_dates" if bonus else "dates"
        if not c or day not in getattr(c, field):
            return False
        remaining = tuple(d for d in getattr(c, field) if d != day)
        self._by_id[c.class_year_id] = dataclasses.replace(c, **{field: remaining})
        return True

    def add_daycode(self, class_year_id: int, daycode: DayCode) -> None:
        c = self._by_id[int(class_year_id)]
        self._by_id[c.class_year_id] = dataclasses.replace(c, daycodes=c.daycodes + (daycode,))
        self._list_date(class_year_id, daycode.day, daycode.bonus_day)


class InMemorySmallGroups:
    def __init__(self, groups=()):
        self._by_id: dict[int, SmallGroup] = {g.smallgroup_id: g for g in groups}
        self._next_id = max(self._by_id, default=0) + 1

    def get_by_id(self, smallgroup_id: int) -> Optional[SmallGroup]:
        return self._by_id.get(int(smallgroup_id))

    def list_for_class_year(self, class_year_id: int):
        return sorted(
            (g for g in self._by_id.values() if g.class_year_id == class_year_id),
            key=lambda g: g.name,
        )

    def create(self, *, class_year_id: int, name: str) -> int:
        smallgroup_id = self._next_id
        self._next_id += 1
        self._by_id[smallgroup_id] = SmallGroup(smallgroup_id=smallgroup_id, class_year_id=class_year_id, name=name)
        return smallgroup_id

    def rename(self, smallgroup_id: int, name: str) -> bool:
        g = self._by_id.get(int(smallgroup_id))
        if not g:
            return False
        self._by_id[g.smallgroup_id] = dataclasses.replace(g, name=name)
        return True

    def delete(self, smallgroup_id: int) -> bool:
        return self._by_id.pop(int(smallgroup_id), None) is not None

    def add_daycode(self, smallgroup_id: int, daycode: DayCode) -> None:
        g = self._by_id[int(smallgroup_id)]
        dates = g.dates if daycode.day in g.dates else g.dates + (daycode.day,)
        self._by_id[g.smallgroup_id] = dataclasses.replace(g, daycodes=g.daycodes + (daycode,), dates=dates)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 18, 30, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def class_year() -> ClassYear:
    return ClassYear(
        class_year_id=1,
        semester="spring2024",
        current=True,
        dates=(date(2024, 1, 10), date(2024, 1, 17)),
        bonus_dates=(date(2024, 1, 20),),
        daycodes=(
            DayCode(day=date(2024, 1, 10), code="abc12"),
            DayCode(day=date(2024, 1, 20), code="bon99", bonus_day=True),
        ),
    )


@pytest.fixture
def smallgroup() -> SmallGroup:
    return SmallGroup(
        smallgroup_id=7,
        class_year_id=1,
        name="Observatory",
        dates=(date(2024, 1, 10), date(2024, 1, 12)),
        daycodes=(DayCode(day=date(2024, 1, 10), code="grp77"),),
    )


@pytest.fixture
def student() -> Student:
    return Student(student_id=3, name="Ada", email="ada@example.com", role=Role.USER, smallgroup_id=7)


@pytest.fixture
def students_repo(student) -> InMemoryStudents:
    return InMemoryStudents(
        [
            student,
            Student(student_id=4, name="Grace", email="grace@example.com", role=Role.USER),
            Student(student_id=5, name="Old", email="old@example.com", role=Role.USER, active=False),
        ]
    )


@pytest.fixture
def class_years_repo(class_year) -> InMemoryClassYears:
    return InMemoryClassYears([class_year])


@pytest.fixture
def smallgroups_repo(smallgroup) -> InMemorySmallGroups:
    return InMemorySmallGroups([smallgroup])


@pytest.fixture
def attendance_service(students_repo, class_years_repo, smallgroups_repo) -> AttendanceService:
    return AttendanceService(students_repo, class_years_repo, smallgroups_repo)


@pytest.fixture
def class_year_service(class_years_repo) -> ClassYearService:
    return ClassYearService(class_years_repo, daycode_length=6)


@pytest.fixture
def smallgroup_service(smallgroups_repo, students_repo, class_years_repo) -> SmallGroupService:
    return SmallGroupService(smallgroups_repo, students_repo, class_years_repo, daycode_length=6)


@pytest.fixture
def student_service(students_repo) -> StudentService:
    return StudentService(students_repo)

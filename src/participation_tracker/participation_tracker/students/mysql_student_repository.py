from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Bucket, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    in_clause,
    normalize_mysql_date,
    normalize_mysql_datetime,
)
from .model import AttendanceEntry, AttendanceYear, Student
from .repository import StudentRepository

_STUDENT_COLUMNS = "student_id, name, email, role, is_active, smallgroup_id, semester_count"


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_student(r: dict) -> Student:
        return Student(
            student_id=int(r["student_id"]),
            name=r["name"],
            email=r["email"],
            role=Role(r["role"]),
            active=bool(r.get("is_active", True)),
            smallgroup_id=int(r["smallgroup_id"]) if r.get("smallgroup_id") is not None else None,
            semester_count=int(r.get("semester_count") or 0),
        )

    def _attach_attendance(self, cur, students: list[Student]) -> list[Student]:
        if not students:
            return students
        by_id = {s.student_id: s for s in students}
        ids = list(by_id)

        cur.execute(
            f"""
            SELECT student_id, class_year_id, bucket, day, bonus_day, smallgroup
            FROM attendance_entries
            WHERE student_id IN ({in_clause(ids)})
            ORDER BY student_id ASC, entry_id ASC
            """,
            tuple(ids),
        )
        for r in fetchall(cur):
            student = by_id[int(r["student_id"])]
            year = student.ensure_year(int(r["class_year_id"]))
            year.entries(Bucket(r["bucket"])).append(
                AttendanceEntry(
                    date=normalize_mysql_date(r["day"]),
                    bonus_day=bool(r["bonus_day"]),
                    smallgroup=bool(r["smallgroup"]),
                )
            )

        cur.execute(
            f"""
            SELECT student_id, attended_at, verified
            FROM legacy_attendance
            WHERE student_id IN ({in_clause(ids)})
            ORDER BY student_id ASC, legacy_id ASC
            """,
            tuple(ids),
        )
        for r in fetchall(cur):
            student = by_id[int(r["student_id"])]
            attended_at = normalize_mysql_datetime(r["attended_at"])
            if r["verified"]:
                student.legacy_attendance.append(attended_at)
            else:
                student.legacy_unverified.append(attended_at)

        return students

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM students WHERE student_id=%s",
                (int(student_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return self._attach_attendance(cur, [self._to_student(row)])[0]

    def list_active(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM students WHERE is_active=1 ORDER BY name ASC, student_id ASC"
            )
            students = [self._to_student(r) for r in fetchall(cur)]
            return self._attach_attendance(cur, students)

    def list_by_smallgroup(self, smallgroup_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM students WHERE smallgroup_id=%s ORDER BY name ASC",
                (int(smallgroup_id),),
            )
            students = [self._to_student(r) for r in fetchall(cur)]
            return self._attach_attendance(cur, students)

    @staticmethod
    def _write_year(cur, student_id: int, year: AttendanceYear) -> None:
        rows = [
            (int(student_id), int(year.class_year_id), bucket.value, e.date, int(e.bonus_day), int(e.smallgroup))
            for bucket in (Bucket.VERIFIED, Bucket.UNVERIFIED)
            for e in year.entries(bucket)
        ]
        cur.execute(
            "DELETE FROM attendance_entries WHERE student_id=%s AND class_year_id=%s",
            (int(student_id), int(year.class_year_id)),
        )
        if rows:
            cur.executemany(
                """
                INSERT INTO attendance_entries(student_id, class_year_id, bucket, day, bonus_day, smallgroup)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )

    def save_attendance_year(self, student_id: int, year: AttendanceYear) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write_year(cur, student_id, year)

    def complete_legacy_migration(self, student_id: int, year: AttendanceYear) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write_year(cur, student_id, year)
            cur.execute("DELETE FROM legacy_attendance WHERE student_id=%s", (int(student_id),))

    def set_smallgroup(self, student_id: int, smallgroup_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET smallgroup_id=%s WHERE student_id=%s",
                (int(smallgroup_id) if smallgroup_id is not None else None, int(student_id)),
            )
            return cur.rowcount > 0

    def clear_smallgroup(self, smallgroup_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE students SET smallgroup_id=NULL WHERE smallgroup_id=%s", (int(smallgroup_id),))
            return int(cur.rowcount)

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import ClassYear, DayCode
from .repository import ClassYearRepository


class MySQLClassYearRepository(ClassYearRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, row: Optional[dict]) -> Optional[ClassYear]:
        if not row:
            return None
        class_year_id = int(row["class_year_id"])

        cur.execute(
            """
            SELECT day, bonus_day
            FROM class_year_dates
            WHERE class_year_id=%s
            ORDER BY day ASC
            """,
            (class_year_id,),
        )
        dates: list[date] = []
        bonus_dates: list[date] = []
        for r in fetchall(cur):
            (bonus_dates if r["bonus_day"] else dates).append(normalize_mysql_date(r["day"]))

        cur.execute(
            """
            SELECT day, code, bonus_day
            FROM class_year_daycodes
            WHERE class_year_id=%s
            ORDER BY daycode_id ASC
            """,
            (class_year_id,),
        )
        daycodes = tuple(
            DayCode(day=normalize_mysql_date(r["day"]), code=r["code"], bonus_day=bool(r["bonus_day"]))
            for r in fetchall(cur)
        )

        return ClassYear(
            class_year_id=class_year_id,
            semester=row["semester"],
            current=bool(row["is_current"]),
            dates=tuple(dates),
            bonus_dates=tuple(bonus_dates),
            daycodes=daycodes,
        )

    def get_current(self) -> Optional[ClassYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_year_id, semester, is_current
                FROM class_years
                WHERE is_current=1
                ORDER BY class_year_id DESC
                LIMIT 1
                """
            )
            return self._load(cur, fetchone(cur))

    def get_by_id(self, class_year_id: int) -> Optional[ClassYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_year_id, semester, is_current FROM class_years WHERE class_year_id=%s",
                (int(class_year_id),),
            )
            return self._load(cur, fetchone(cur))

    def get_by_semester(self, semester: str) -> Optional[ClassYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_year_id, semester, is_current FROM class_years WHERE semester=%s",
                (semester,),
            )
            return self._load(cur, fetchone(cur))

    def list_all(self) -> Sequence[ClassYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_year_id, semester, is_current FROM class_years ORDER BY class_year_id DESC")
            rows = fetchall(cur)
            return [self._load(cur, r) for r in rows]

    def create(self, *, semester: str, dates: Sequence[date], bonus_dates: Sequence[date]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO class_years(semester, is_current) VALUES(%s, 0)",
                (semester,),
            )
            class_year_id = int(cur.lastrowid)
            rows = [(class_year_id, d, 0) for d in dates] + [(class_year_id, d, 1) for d in bonus_dates]
            if rows:
                cur.executemany(
                    "INSERT IGNORE INTO class_year_dates(class_year_id, day, bonus_day) VALUES(%s,%s,%s)",
                    rows,
                )
            return class_year_id

    def set_current(self, class_year_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_year_id FROM class_years WHERE class_year_id=%s", (int(class_year_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE class_years SET is_current=(class_year_id=%s)", (int(class_year_id),))
            return True

    def add_date(self, class_year_id: int, day: date, *, bonus: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO class_year_dates(class_year_id, day, bonus_day) VALUES(%s,%s,%s)",
                (int(class_year_id), day, int(bonus)),
            )
            return cur.rowcount > 0

    def remove_date(self, class_year_id: int, day: date, *, bonus: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM class_year_dates WHERE class_year_id=%s AND day=%s AND bonus_day=%s",
                (int(class_year_id), day, int(bonus)),
            )
            return cur.rowcount > 0

    def add_daycode(self, class_year_id: int, daycode: DayCode) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_year_daycodes(class_year_id, day, code, bonus_day)
                VALUES(%s,%s,%s,%s)
                """,
                (int(class_year_id), daycode.day, daycode.code, int(daycode.bonus_day)),
            )
            cur.execute(
                "INSERT IGNORE INTO class_year_dates(class_year_id, day, bonus_day) VALUES(%s,%s,%s)",
                (int(class_year_id), daycode.day, int(daycode.bonus_day)),
            )

from __future__ import annotations

from typing import Optional, Sequence

from ..classyears.model import DayCode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import SmallGroup
from .repository import SmallGroupRepository


class MySQLSmallGroupRepository(SmallGroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, row: Optional[dict]) -> Optional[SmallGroup]:
        if not row:
            return None
        smallgroup_id = int(row["smallgroup_id"])

        cur.execute(
            "SELECT day FROM smallgroup_dates WHERE smallgroup_id=%s ORDER BY day ASC",
            (smallgroup_id,),
        )
        dates = tuple(normalize_mysql_date(r["day"]) for r in fetchall(cur))

        cur.execute(
            "SELECT day, code FROM smallgroup_daycodes WHERE smallgroup_id=%s ORDER BY daycode_id ASC",
            (smallgroup_id,),
        )
        daycodes = tuple(DayCode(day=normalize_mysql_date(r["day"]), code=r["code"]) for r in fetchall(cur))

        return SmallGroup(
            smallgroup_id=smallgroup_id,
            class_year_id=int(row["class_year_id"]),
            name=row["name"],
            dates=dates,
            daycodes=daycodes,
        )

    def get_by_id(self, smallgroup_id: int) -> Optional[SmallGroup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT smallgroup_id, class_year_id, name FROM smallgroups WHERE smallgroup_id=%s",
                (int(smallgroup_id),),
            )
            return self._load(cur, fetchone(cur))

    def list_for_class_year(self, class_year_id: int) -> Sequence[SmallGroup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT smallgroup_id, class_year_id, name
                FROM smallgroups
                WHERE class_year_id=%s
                ORDER BY name ASC
                """,
                (int(class_year_id),),
            )
            rows = fetchall(cur)
            return [self._load(cur, r) for r in rows]

    def create(self, *, class_year_id: int, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO smallgroups(class_year_id, name) VALUES(%s,%s)",
                (int(class_year_id), name),
            )
            return int(cur.lastrowid)

    def rename(self, smallgroup_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE smallgroups SET name=%s WHERE smallgroup_id=%s", (name, int(smallgroup_id)))
            return cur.rowcount > 0

    def delete(self, smallgroup_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM smallgroup_daycodes WHERE smallgroup_id=%s", (int(smallgroup_id),))
            cur.execute("DELETE FROM smallgroup_dates WHERE smallgroup_id=%s", (int(smallgroup_id),))
            cur.execute("DELETE FROM smallgroups WHERE smallgroup_id=%s", (int(smallgroup_id),))
            return cur.rowcount > 0

    def add_daycode(self, smallgroup_id: int, daycode: DayCode) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO smallgroup_daycodes(smallgroup_id, day, code) VALUES(%s,%s,%s)",
                (int(smallgroup_id), daycode.day, daycode.code),
            )
            cur.execute(
                "INSERT IGNORE INTO smallgroup_dates(smallgroup_id, day) VALUES(%s,%s)",
                (int(smallgroup_id), daycode.day),
            )

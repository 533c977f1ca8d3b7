from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceService
from .classyears.mysql_classyear_repository import MySQLClassYearRepository
from .classyears.service import ClassYearService
from .core.constants import DEFAULT_DAYCODE_LENGTH
from .database.connection import DBConfig, DatabaseConnection
from .smallgroups.mysql_smallgroup_repository import MySQLSmallGroupRepository
from .smallgroups.service import SmallGroupService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    students_repo: MySQLStudentRepository
    class_years_repo: MySQLClassYearRepository
    smallgroups_repo: MySQLSmallGroupRepository

    student_service: StudentService
    class_year_service: ClassYearService
    smallgroup_service: SmallGroupService
    attendance_service: AttendanceService


def build_container(*, db_config: dict, daycode_length: int = DEFAULT_DAYCODE_LENGTH) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    students_repo = MySQLStudentRepository(conn)
    class_years_repo = MySQLClassYearRepository(conn)
    smallgroups_repo = MySQLSmallGroupRepository(conn)

    return Container(
        conn=conn,
        students_repo=students_repo,
        class_years_repo=class_years_repo,
        smallgroups_repo=smallgroups_repo,
        student_service=StudentService(students_repo),
        class_year_service=ClassYearService(class_years_repo, daycode_length=daycode_length),
        smallgroup_service=SmallGroupService(
            smallgroups_repo,
            students_repo,
            class_years_repo,
            daycode_length=daycode_length,
        ),
        attendance_service=AttendanceService(students_repo, class_years_repo, smallgroups_repo),
    )

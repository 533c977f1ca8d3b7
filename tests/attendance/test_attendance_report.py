from datetime import date, datetime

from src.participation_tracker.participation_tracker.attendance.report import build_attendance_report
from src.participation_tracker.participation_tracker.students.model import AttendanceEntry, AttendanceYear, Student

JAN_10 = date(2024, 1, 10)
JAN_17 = date(2024, 1, 17)


def _student(**kwargs) -> Student:
    return Student(student_id=1, name="Ada", email="ada@example.com", **kwargs)


def test_legacy_attendance_counts_official_date(class_year):
    student = _student(legacy_attendance=[datetime(2024, 1, 10)])

    report = build_attendance_report(student, class_year)

    assert report.total_dates == (JAN_10, JAN_17)
    assert report.current_attendance == (JAN_10,)
    assert report.attendance_count == 1


def test_attendance_outside_official_dates_is_ignored(class_year):
    student = _student(
        legacy_attendance=[datetime(2024, 1, 11)],
        attendance_by_year=[AttendanceYear(class_year_id=1, verified=[AttendanceEntry(date=date(2024, 1, 12))])],
    )

    report = build_attendance_report(student, class_year)

    assert report.current_attendance == ()
    assert report.attendance_count == 0


def test_legacy_timestamps_must_be_exactly_midnight(class_year):
    student = _student(legacy_attendance=[datetime(2024, 1, 10, 9, 15)])

    assert build_attendance_report(student, class_year).current_attendance == ()


def test_day_in_legacy_and_structured_lists_counts_once(class_year):
    student = _student(
        legacy_attendance=[datetime(2024, 1, 10)],
        attendance_by_year=[
            AttendanceYear(
                class_year_id=1,
                verified=[AttendanceEntry(date=JAN_10), AttendanceEntry(date=JAN_17)],
            )
        ],
    )

    report = build_attendance_report(student, class_year)

    assert report.current_attendance == (JAN_10, JAN_17)


def test_bonus_and_unverified_figures(class_year):
    bonus = date(2024, 1, 20)
    student = _student(
        legacy_attendance=[datetime(2024, 1, 20)],
        attendance_by_year=[
            AttendanceYear(
                class_year_id=1,
                verified=[AttendanceEntry(date=bonus, bonus_day=True)],
                unverified=[AttendanceEntry(date=JAN_17), AttendanceEntry(date=JAN_17, smallgroup=True)],
            )
        ],
    )

    report = build_attendance_report(student, class_year)

    assert report.current_attendance == ()
    assert report.current_bonus_attendance == (bonus,)
    assert report.bonus_count == 1
    assert report.unverified_days == 1


def test_other_class_years_do_not_count(class_year):
    student = _student(
        attendance_by_year=[AttendanceYear(class_year_id=2, verified=[AttendanceEntry(date=JAN_10)])],
    )

    assert build_attendance_report(student, class_year).current_attendance == ()


def test_without_class_year_report_is_empty():
    report = build_attendance_report(_student(legacy_attendance=[datetime(2024, 1, 10)]), None)

    assert report.semester is None
    assert report.attendance_count == 0
    assert report.to_dict()["totalDates"] == []


def test_smallgroup_section_in_dict(class_year, smallgroup):
    student = _student(
        attendance_by_year=[
            AttendanceYear(
                class_year_id=1,
                verified=[
                    AttendanceEntry(date=JAN_10, smallgroup=True),
                    AttendanceEntry(date=JAN_17, smallgroup=True),
                ],
            )
        ],
    )

    data = build_attendance_report(student, class_year, smallgroup).to_dict()

    assert data["smallgroup"] == "Observatory"
    assert data["totalSmallDates"] == ["2024-01-10", "2024-01-12"]
    assert data["currentSmallAttendance"] == ["2024-01-10"]
    assert data["smallCount"] == 1
    assert data["attendanceCount"] == 0


def test_dict_omits_smallgroup_when_student_has_none(class_year):
    data = build_attendance_report(_student(), class_year).to_dict()

    assert "smallgroup" not in data
    assert data["semester"] == "spring2024"
    assert data["totalBonusDates"] == ["2024-01-20"]


def test_legacy_unverified_days_are_pending_until_verified(class_year):
    student = _student(
        legacy_attendance=[datetime(2024, 1, 10)],
        legacy_unverified=[datetime(2024, 1, 10), datetime(2024, 1, 17), datetime(2024, 1, 18)],
    )

    assert build_attendance_report(student, class_year).unverified_days == 1

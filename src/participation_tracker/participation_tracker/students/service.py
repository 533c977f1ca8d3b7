from __future__ import annotations

from ..core.exceptions import NotFoundError
from .model import Student
from .repository import StudentRepository


class StudentService:
    """Use case: read student records for the API."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student does not exist")
        return student

    def get_profile(self, student_id: int) -> dict:
        student = self.get(student_id)
        return {
            "student_id": student.student_id,
            "name": student.name,
            "email": student.email,
            "role": student.role.value,
            "active": student.active,
            "smallgroup_id": student.smallgroup_id,
            "semesters": student.semester_count,
        }

    def list_active(self) -> list[dict]:
        return [
            {
                "student_id": s.student_id,
                "name": s.name,
                "role": s.role.value,
                "smallgroup_id": s.smallgroup_id,
            }
            for s in self._students.list_active()
        ]

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import StudentStatus
from ..core.exceptions import ConflictError, ErrorCode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .duplicates import MERGEABLE_FIELDS
from .model import Student
from .repository import StudentRepository

_COLUMNS = """
    id, name, email, phone, date_of_birth, education_level, grade_level, school_name,
    status, batch_id, sibling_group_id, created_at, updated_at
"""


def _row_to_student(r: dict) -> Student:
    return Student(
        id=str(r["id"]),
        name=r["name"],
        email=r.get("email"),
        phone=r.get("phone"),
        date_of_birth=r.get("date_of_birth"),
        education_level=r.get("education_level"),
        grade_level=r.get("grade_level"),
        school_name=r.get("school_name"),
        status=StudentStatus(r["status"]),
        batch_id=r.get("batch_id"),
        sibling_group_id=r.get("sibling_group_id"),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_with_email(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE email IS NOT NULL AND TRIM(email) <> ''
                ORDER BY created_at DESC
                """
            )
            return [_row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (student_id,))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def get_by_ids(self, student_ids: Sequence[str]) -> Sequence[Student]:
        if not student_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE id IN ({in_clause(student_ids)})",
                tuple(student_ids),
            )
            return [_row_to_student(r) for r in fetchall(cur)]

    def apply_resolution(
        self,
        *,
        keep_id: str,
        updates: Mapping[str, Any],
        delete_ids: Sequence[str],
    ) -> int:
        columns = [c for c in MERGEABLE_FIELDS if c in updates]
        with db_cursor(self._conn_factory) as (_, cur):
            if columns:
                assignments = ", ".join(f"{c}=%s" for c in columns)
                cur.execute(
                    f"UPDATE students SET {assignments} WHERE id=%s",
                    tuple(updates[c] for c in columns) + (keep_id,),
                )
            cur.execute(
                f"DELETE FROM students WHERE id IN ({in_clause(delete_ids)})",
                tuple(delete_ids),
            )
            deleted = int(cur.rowcount)
            if deleted < len(delete_ids):
                raise ConflictError(
                    "Duplicate records changed while resolving. Refresh and try again.",
                    ErrorCode.CONCURRENT_MODIFICATION,
                )
            return deleted

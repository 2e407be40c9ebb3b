from __future__ import annotations

from datetime import datetime
from typing import Optional

import mysql.connector

from ..core.enums import Program, Shift
from ..core.exceptions import ConflictError, ErrorCode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_unique_violation, new_id, to_db_datetime
from .model import ClassEnrollment, DugsiClass, ProgramProfile
from .repository import ClassRepository

_ALREADY_ENROLLED = "Student is already enrolled in a class"


def _row_to_enrollment(r: dict) -> ClassEnrollment:
    return ClassEnrollment(
        id=str(r["id"]),
        class_id=str(r["class_id"]),
        program_profile_id=str(r["program_profile_id"]),
        is_active=bool(r["is_active"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_class(self, class_id: str) -> Optional[DugsiClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, shift, is_active FROM dugsi_classes WHERE id=%s", (class_id,))
            r = fetchone(cur)
            if not r:
                return None
            return DugsiClass(id=str(r["id"]), name=r["name"], shift=Shift(r["shift"]), is_active=bool(r["is_active"]))

    def get_profile(self, profile_id: str) -> Optional[ProgramProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, person_id, program, family_reference_id, status FROM program_profiles WHERE id=%s",
                (profile_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ProgramProfile(
                id=str(r["id"]),
                person_id=str(r["person_id"]),
                program=Program(r["program"]),
                family_reference_id=r.get("family_reference_id"),
                status=r["status"],
            )

    def active_teacher_id(self, class_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id FROM dugsi_class_teachers
                WHERE class_id=%s AND is_active=1
                ORDER BY created_at
                LIMIT 1
                """,
                (class_id,),
            )
            r = fetchone(cur)
            return str(r["teacher_id"]) if r else None

    def enroll(self, *, class_id: str, program_profile_id: str, start_date: datetime) -> ClassEnrollment:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT id, class_id, program_profile_id, is_active, start_date, end_date
                    FROM dugsi_class_enrollments
                    WHERE program_profile_id=%s
                    FOR UPDATE
                    """,
                    (program_profile_id,),
                )
                existing = fetchone(cur)
                if existing and existing["is_active"]:
                    raise ConflictError(_ALREADY_ENROLLED, ErrorCode.ALREADY_ENROLLED)
                if existing:
                    enrollment_id = str(existing["id"])
                    cur.execute(
                        """
                        UPDATE dugsi_class_enrollments
                        SET class_id=%s, is_active=1, start_date=%s, end_date=NULL
                        WHERE id=%s
                        """,
                        (class_id, to_db_datetime(start_date), enrollment_id),
                    )
                else:
                    enrollment_id = new_id()
                    cur.execute(
                        """
                        INSERT INTO dugsi_class_enrollments(id, class_id, program_profile_id, start_date, is_active)
                        VALUES(%s,%s,%s,%s,1)
                        """,
                        (enrollment_id, class_id, program_profile_id, to_db_datetime(start_date)),
                    )
        except mysql.connector.Error as e:
            if is_unique_violation(e):
                raise ConflictError(_ALREADY_ENROLLED, ErrorCode.ALREADY_ENROLLED) from e
            raise
        return ClassEnrollment(
            id=enrollment_id,
            class_id=class_id,
            program_profile_id=program_profile_id,
            is_active=True,
            start_date=start_date,
        )

    def get_enrollment(self, enrollment_id: str) -> Optional[ClassEnrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, class_id, program_profile_id, is_active, start_date, end_date
                FROM dugsi_class_enrollments WHERE id=%s
                """,
                (enrollment_id,),
            )
            r = fetchone(cur)
            return _row_to_enrollment(r) if r else None

    def deactivate_enrollment(self, *, enrollment_id: str, end_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE dugsi_class_enrollments SET is_active=0, end_date=%s WHERE id=%s AND is_active=1",
                (to_db_datetime(end_date), enrollment_id),
            )
            return cur.rowcount > 0

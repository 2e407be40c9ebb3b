from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Shift
from ..core.exceptions import ConflictError, ErrorCode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_unique_violation, new_id, to_db_datetime
from .model import Teacher, TeacherCheckIn
from .repository import CheckInRepository

_CHECKIN_COLUMNS = """
    c.id, c.teacher_id, c.date, c.shift, c.clock_in_time, c.clock_in_lat, c.clock_in_lng, c.clock_in_valid,
    c.clock_out_time, c.clock_out_lat, c.clock_out_lng, c.is_late, c.notes
"""


def _row_to_checkin(r: dict) -> TeacherCheckIn:
    return TeacherCheckIn(
        id=str(r["id"]),
        teacher_id=str(r["teacher_id"]),
        date=r["date"],
        shift=Shift(r["shift"]),
        clock_in_time=r["clock_in_time"],
        clock_in_valid=bool(r["clock_in_valid"]),
        is_late=bool(r["is_late"]),
        clock_in_lat=r.get("clock_in_lat"),
        clock_in_lng=r.get("clock_in_lng"),
        clock_out_time=r.get("clock_out_time"),
        clock_out_lat=r.get("clock_out_lat"),
        clock_out_lng=r.get("clock_out_lng"),
        notes=r.get("notes"),
    )


class MySQLCheckInRepository(CheckInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.id, t.is_active, p.name
                FROM teachers t
                JOIN persons p ON p.id = t.person_id
                WHERE t.id=%s
                """,
                (teacher_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            cur.execute("SELECT shift FROM teacher_shifts WHERE teacher_id=%s ORDER BY shift", (teacher_id,))
            shifts = tuple(Shift(s["shift"]) for s in fetchall(cur))
            return Teacher(id=str(r["id"]), name=r["name"], is_active=bool(r["is_active"]), shifts=shifts)

    def get_checkin(self, check_in_id: str) -> Optional[TeacherCheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CHECKIN_COLUMNS} FROM dugsi_teacher_checkins c WHERE c.id=%s", (check_in_id,))
            r = fetchone(cur)
            return _row_to_checkin(r) if r else None

    def find_checkin(self, *, teacher_id: str, day: date, shift: Shift) -> Optional[TeacherCheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECKIN_COLUMNS} FROM dugsi_teacher_checkins c
                WHERE c.teacher_id=%s AND c.date=%s AND c.shift=%s
                """,
                (teacher_id, day, shift.value),
            )
            r = fetchone(cur)
            return _row_to_checkin(r) if r else None

    def create_checkin(
        self,
        *,
        teacher_id: str,
        day: date,
        shift: Shift,
        clock_in_time: datetime,
        clock_in_valid: bool,
        is_late: bool,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> TeacherCheckIn:
        check_in_id = new_id()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO dugsi_teacher_checkins(
                        id, teacher_id, date, shift, clock_in_time, clock_in_lat, clock_in_lng,
                        clock_in_valid, is_late, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        check_in_id,
                        teacher_id,
                        day,
                        shift.value,
                        to_db_datetime(clock_in_time),
                        lat,
                        lng,
                        int(clock_in_valid),
                        int(is_late),
                        notes,
                    ),
                )
        except mysql.connector.Error as e:
            if is_unique_violation(e):
                raise ConflictError("Already checked in for this shift today", ErrorCode.DUPLICATE_CHECKIN) from e
            raise
        return TeacherCheckIn(
            id=check_in_id,
            teacher_id=teacher_id,
            date=day,
            shift=shift,
            clock_in_time=clock_in_time,
            clock_in_valid=clock_in_valid,
            is_late=is_late,
            clock_in_lat=lat,
            clock_in_lng=lng,
            notes=notes,
        )

    def record_clock_out(
        self,
        *,
        check_in_id: str,
        clock_out_time: datetime,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE dugsi_teacher_checkins
                SET clock_out_time=%s, clock_out_lat=%s, clock_out_lng=%s, notes=COALESCE(%s, notes)
                WHERE id=%s AND clock_out_time IS NULL
                """,
                (to_db_datetime(clock_out_time), lat, lng, notes, check_in_id),
            )
            return cur.rowcount > 0

    def open_checkins_before(self, cutoff: datetime) -> Sequence[TeacherCheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECKIN_COLUMNS} FROM dugsi_teacher_checkins c
                WHERE c.clock_out_time IS NULL AND c.clock_in_time < %s
                ORDER BY c.clock_in_time
                """,
                (to_db_datetime(cutoff),),
            )
            return [_row_to_checkin(r) for r in fetchall(cur)]

    def late_checkins(self, *, start_date: date, end_date: date) -> Sequence[tuple[TeacherCheckIn, str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECKIN_COLUMNS}, p.name AS teacher_name
                FROM dugsi_teacher_checkins c
                JOIN teachers t ON t.id = c.teacher_id
                JOIN persons p ON p.id = t.person_id
                WHERE c.is_late=1 AND c.date BETWEEN %s AND %s
                ORDER BY c.date DESC, c.clock_in_time
                """,
                (start_date, end_date),
            )
            return [(_row_to_checkin(r), r["teacher_name"]) for r in fetchall(cur)]

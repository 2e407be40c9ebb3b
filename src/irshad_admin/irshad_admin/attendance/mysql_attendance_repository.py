from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, ErrorCode, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_unique_violation, new_id, to_db_datetime
from .model import AttendanceRecord, AttendanceSession, HistoryEntry, RecordInput
from .repository import AttendanceRepository, SessionGuard

_SESSION_COLUMNS = "s.id, s.date, s.class_id, s.teacher_id, s.is_closed, s.notes, s.created_at"


def _row_to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        id=str(r["id"]),
        date=r["date"],
        class_id=str(r["class_id"]),
        teacher_id=str(r["teacher_id"]),
        is_closed=bool(r["is_closed"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


def _filters(class_id: Optional[str], start_date: Optional[date], end_date: Optional[date]) -> tuple[str, list]:
    where: list[str] = []
    params: list = []
    if class_id:
        where.append("s.class_id=%s")
        params.append(class_id)
    if start_date:
        where.append("s.date >= %s")
        params.append(start_date)
    if end_date:
        where.append("s.date <= %s")
        params.append(end_date)
    return (" WHERE " + " AND ".join(where)) if where else "", params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_session(
        self,
        *,
        class_id: str,
        session_date: date,
        teacher_id: str,
        notes: Optional[str] = None,
    ) -> AttendanceSession:
        session_id = new_id()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO dugsi_attendance_sessions(id, date, class_id, teacher_id, notes, is_closed)
                    VALUES(%s,%s,%s,%s,%s,0)
                    """,
                    (session_id, session_date, class_id, teacher_id, notes),
                )
        except mysql.connector.Error as e:
            if is_unique_violation(e):
                raise ConflictError(
                    "A session already exists for this class on this date", ErrorCode.DUPLICATE_SESSION
                ) from e
            raise
        return AttendanceSession(
            id=session_id, date=session_date, class_id=class_id, teacher_id=teacher_id, notes=notes
        )

    def get_session(self, session_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM dugsi_attendance_sessions s WHERE s.id=%s", (session_id,))
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def list_sessions(
        self,
        *,
        class_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[tuple[AttendanceSession, Optional[str], int]]:
        where, params = _filters(class_id, start_date, end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}, c.name AS class_name,
                       (SELECT COUNT(*) FROM dugsi_attendance_records r WHERE r.session_id = s.id) AS record_count
                FROM dugsi_attendance_sessions s
                LEFT JOIN dugsi_classes c ON c.id = s.class_id
                {where}
                ORDER BY s.date DESC, c.name
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [(_row_to_session(r), r.get("class_name"), int(r["record_count"] or 0)) for r in fetchall(cur)]

    def mark_records(
        self,
        *,
        session_id: str,
        records: Sequence[RecordInput],
        marked_at: datetime,
        guard: SessionGuard,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM dugsi_attendance_sessions s WHERE s.id=%s FOR UPDATE",
                (session_id,),
            )
            r = fetchone(cur)
            if not r:
                raise NotFoundError("Session not found", ErrorCode.SESSION_NOT_FOUND)
            guard(_row_to_session(r))

            stamp = to_db_datetime(marked_at)
            for rec in records:
                cur.execute(
                    """
                    INSERT INTO dugsi_attendance_records(
                        id, session_id, program_profile_id, status, lesson_completed,
                        surah_name, ayat_from, ayat_to, lesson_notes, notes, marked_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status),
                        lesson_completed=VALUES(lesson_completed),
                        surah_name=VALUES(surah_name),
                        ayat_from=VALUES(ayat_from),
                        ayat_to=VALUES(ayat_to),
                        lesson_notes=VALUES(lesson_notes),
                        notes=VALUES(notes),
                        marked_at=VALUES(marked_at)
                    """,
                    (
                        new_id(),
                        session_id,
                        rec.program_profile_id,
                        rec.status.value,
                        int(rec.lesson_completed),
                        rec.surah_name,
                        rec.ayat_from,
                        rec.ayat_to,
                        rec.lesson_notes,
                        rec.notes,
                        stamp,
                    ),
                )
            return len(records)

    def close_session(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE dugsi_attendance_sessions SET is_closed=1 WHERE id=%s AND is_closed=0", (session_id,))
            return cur.rowcount > 0

    def delete_session(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # records go with it (ON DELETE CASCADE)
            cur.execute("DELETE FROM dugsi_attendance_sessions WHERE id=%s", (session_id,))
            return cur.rowcount > 0

    def list_records(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, session_id, program_profile_id, status, lesson_completed, surah_name,
                       ayat_from, ayat_to, lesson_notes, notes, marked_at
                FROM dugsi_attendance_records
                WHERE session_id=%s
                ORDER BY marked_at
                """,
                (session_id,),
            )
            return [
                AttendanceRecord(
                    id=str(r["id"]),
                    session_id=str(r["session_id"]),
                    program_profile_id=str(r["program_profile_id"]),
                    status=AttendanceStatus(r["status"]),
                    marked_at=r["marked_at"],
                    lesson_completed=bool(r["lesson_completed"]),
                    surah_name=r.get("surah_name"),
                    ayat_from=r.get("ayat_from"),
                    ayat_to=r.get("ayat_to"),
                    lesson_notes=r.get("lesson_notes"),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]

    def status_counts(
        self,
        *,
        class_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Mapping[AttendanceStatus, int]:
        where, params = _filters(class_id, start_date, end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.status, COUNT(*) AS n
                FROM dugsi_attendance_records r
                JOIN dugsi_attendance_sessions s ON s.id = r.session_id
                {where}
                GROUP BY r.status
                """,
                tuple(params),
            )
            return {AttendanceStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}

    def student_history(self, program_profile_id: str, *, limit: int = 50) -> Sequence[HistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id AS session_id, s.date, s.class_id, r.status, r.lesson_completed,
                       r.surah_name, r.ayat_from, r.ayat_to
                FROM dugsi_attendance_records r
                JOIN dugsi_attendance_sessions s ON s.id = r.session_id
                WHERE r.program_profile_id=%s
                ORDER BY s.date DESC
                LIMIT %s
                """,
                (program_profile_id, int(limit)),
            )
            return [
                HistoryEntry(
                    session_id=str(r["session_id"]),
                    date=r["date"],
                    class_id=str(r["class_id"]),
                    status=AttendanceStatus(r["status"]),
                    lesson_completed=bool(r["lesson_completed"]),
                    surah_name=r.get("surah_name"),
                    ayat_from=r.get("ayat_from"),
                    ayat_to=r.get("ayat_to"),
                )
                for r in fetchall(cur)
            ]

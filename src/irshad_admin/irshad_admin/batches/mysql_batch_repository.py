from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Batch
from .repository import BatchRepository


def _row_to_batch(r: dict) -> Batch:
    return Batch(
        id=str(r["id"]),
        name=r["name"],
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
        student_count=int(r.get("student_count") or 0),
    )


class MySQLBatchRepository(BatchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_with_counts(self) -> Sequence[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT b.id, b.name, b.start_date, b.end_date,
                       COUNT(s.id) AS student_count
                FROM batches b
                LEFT JOIN students s ON s.batch_id = b.id AND s.status <> 'withdrawn'
                GROUP BY b.id, b.name, b.start_date, b.end_date
                ORDER BY b.start_date DESC, b.name
                """
            )
            return [_row_to_batch(r) for r in fetchall(cur)]

    def get_by_id(self, batch_id: str) -> Optional[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT b.id, b.name, b.start_date, b.end_date,
                       (SELECT COUNT(*) FROM students s
                        WHERE s.batch_id = b.id AND s.status <> 'withdrawn') AS student_count
                FROM batches b
                WHERE b.id=%s
                """,
                (batch_id,),
            )
            r = fetchone(cur)
            return _row_to_batch(r) if r else None

    def _lock_student(self, cur, student_id: str) -> Optional[dict]:
        cur.execute("SELECT id, batch_id FROM students WHERE id=%s FOR UPDATE", (student_id,))
        return fetchone(cur)

    def assign_student(self, *, student_id: str, batch_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._lock_student(cur, student_id):
                return False
            cur.execute("UPDATE students SET batch_id=%s WHERE id=%s", (batch_id, student_id))
            return True

    def move_student(self, *, student_id: str, from_batch_id: str, to_batch_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            r = self._lock_student(cur, student_id)
            if not r or r.get("batch_id") != from_batch_id:
                return False
            cur.execute("UPDATE students SET batch_id=%s WHERE id=%s", (to_batch_id, student_id))
            return True

    def unassign_student(self, student_id: str) -> tuple[bool, Optional[str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            r = self._lock_student(cur, student_id)
            if not r:
                return False, None
            cur.execute("UPDATE students SET batch_id=NULL WHERE id=%s", (student_id,))
            return True, r.get("batch_id")

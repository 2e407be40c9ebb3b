from __future__ import annotations

from ..core.enums import Program, StudentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import BillingRepository


class MySQLBillingRepository(BillingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count_active_dugsi_children(self, family_reference_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n FROM program_profiles
                WHERE family_reference_id=%s AND program=%s AND status <> %s
                """,
                (family_reference_id, Program.DUGSI.value, StudentStatus.WITHDRAWN.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

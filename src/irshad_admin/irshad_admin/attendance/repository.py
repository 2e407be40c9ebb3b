from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceSession, HistoryEntry, RecordInput

SessionGuard = Callable[[AttendanceSession], None]


class AttendanceRepository(Protocol):
    def create_session(
        self,
        *,
        class_id: str,
        session_date: date,
        teacher_id: str,
        notes: Optional[str] = None,
    ) -> AttendanceSession:
        """Raises ConflictError(DUPLICATE_SESSION) when (class, date) already has a session."""

        raise NotImplementedError

    def get_session(self, session_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def list_sessions(
        self,
        *,
        class_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[tuple[AttendanceSession, Optional[str], int]]:
        """Rows of (session, class name, record count), newest date first."""

        raise NotImplementedError

    def mark_records(
        self,
        *,
        session_id: str,
        records: Sequence[RecordInput],
        marked_at: datetime,
        guard: SessionGuard,
    ) -> int:
        """Lock the session, run ``guard`` on it, then upsert every record.

        Either all records are written or none.
        """

        raise NotImplementedError

    def close_session(self, session_id: str) -> bool:
        raise NotImplementedError

    def delete_session(self, session_id: str) -> bool:
        raise NotImplementedError

    def list_records(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def status_counts(
        self,
        *,
        class_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Mapping[AttendanceStatus, int]:
        raise NotImplementedError

    def student_history(self, program_profile_id: str, *, limit: int = 50) -> Sequence[HistoryEntry]:
        raise NotImplementedError

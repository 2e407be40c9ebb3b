from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from itsdangerous import BadSignature, URLSafeTimedSerializer

from ..classes.service import ClassService
from ..common.datetime_utils import Clock, local_now, now_utc
from ..common.logger import get_service_logger, kv
from ..core.constants import CHECKIN_TOKEN_SALT, DEFAULT_CHECKIN_TOKEN_MAX_AGE, DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ErrorCode, NotFoundError, ValidationError
from .lifecycle import is_effectively_closed, is_weekend
from .model import (
    AttendanceSession,
    AttendanceStats,
    CheckinToken,
    HistoryEntry,
    MarkResult,
    RecordInput,
    SessionDetail,
    SessionView,
)
from .repository import AttendanceRepository


def attendance_rate(counts: dict) -> float:
    total = sum(counts.values())
    if not total:
        return 0.0
    attended = counts.get(AttendanceStatus.PRESENT, 0) + counts.get(AttendanceStatus.LATE, 0)
    return round(attended / total * 100, 1)


class AttendanceService:
    """Weekend attendance sessions for Dugsi classes.

    Closed state is never trusted from storage alone: every read and write
    recomputes it from the clock in the configured time zone.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassService,
        *,
        secret_key: str,
        clock: Clock = now_utc,
        timezone: str = "UTC",
        token_max_age: int = DEFAULT_CHECKIN_TOKEN_MAX_AGE,
        public_base_url: str = "",
        logger: Optional[logging.Logger] = None,
    ):
        self._attendance = attendance
        self._classes = classes
        self._clock = clock
        self._tz = ZoneInfo(timezone)
        self._tokens = URLSafeTimedSerializer(secret_key, salt=CHECKIN_TOKEN_SALT)
        self._token_max_age = int(token_max_age)
        self._public_base_url = public_base_url.rstrip("/")
        self._log = logger or get_service_logger("attendance")

    def _today(self) -> date:
        return local_now(self._clock, self._tz).date()

    def is_closed(self, session: AttendanceSession) -> bool:
        return is_effectively_closed(is_closed=session.is_closed, session_date=session.date, today=self._today())

    def _ensure_open(self, session: AttendanceSession) -> None:
        if self.is_closed(session):
            raise ValidationError("Session is closed", ErrorCode.SESSION_CLOSED)

    def _require_session(self, session_id: str) -> AttendanceSession:
        session = self._attendance.get_session(session_id)
        if not session:
            raise NotFoundError("Session not found", ErrorCode.SESSION_NOT_FOUND)
        return session

    def _view(self, session: AttendanceSession, *, class_name: Optional[str] = None, record_count: int = 0) -> SessionView:
        return SessionView(
            id=session.id,
            date=session.date,
            class_id=session.class_id,
            class_name=class_name,
            teacher_id=session.teacher_id,
            is_closed=session.is_closed,
            is_effectively_closed=self.is_closed(session),
            record_count=record_count,
            notes=session.notes,
        )

    def create_session(self, *, class_id: str, session_date: date, notes: Optional[str] = None) -> AttendanceSession:
        if not is_weekend(session_date):
            raise ValidationError("Sessions can only be created on Saturday or Sunday", ErrorCode.INVALID_DAY)

        self._classes.get_class(class_id)
        teacher_id = self._classes.active_teacher_for_class(class_id)
        if not teacher_id:
            raise ValidationError("No teacher assigned to this class", ErrorCode.NO_TEACHER_ASSIGNED)

        session = self._attendance.create_session(
            class_id=class_id, session_date=session_date, teacher_id=teacher_id, notes=notes
        )
        self._log.info("SESSION_CREATED %s", kv(session_id=session.id, class_id=class_id, date=session_date))
        return session

    def mark_attendance(self, *, session_id: str, records: Sequence[RecordInput]) -> MarkResult:
        self._require_session(session_id)
        unique = list({r.program_profile_id: r for r in records}.values())
        count = self._attendance.mark_records(
            session_id=session_id,
            records=unique,
            marked_at=self._clock(),
            guard=self._ensure_open,
        )
        self._log.info("ATTENDANCE_MARKED %s", kv(session_id=session_id, records=count))
        return MarkResult(session_id=session_id, record_count=count)

    def close_session(self, session_id: str) -> SessionView:
        session = self._require_session(session_id)
        self._ensure_open(session)
        if not self._attendance.close_session(session_id):
            raise ValidationError("Session is closed", ErrorCode.SESSION_CLOSED)
        self._log.info("SESSION_CLOSED %s", kv(session_id=session_id))
        return self._view(replace(session, is_closed=True))

    def delete_session(self, session_id: str) -> str:
        if not self._attendance.delete_session(session_id):
            raise NotFoundError("Session not found", ErrorCode.SESSION_NOT_FOUND)
        self._log.info("SESSION_DELETED %s", kv(session_id=session_id))
        return session_id

    def list_sessions(
        self,
        *,
        class_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[SessionView]:
        rows = self._attendance.list_sessions(
            class_id=class_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=(max(page, 1) - 1) * limit,
        )
        return [self._view(s, class_name=name, record_count=n) for s, name, n in rows]

    def get_session(self, session_id: str) -> SessionDetail:
        session = self._require_session(session_id)
        records = tuple(self._attendance.list_records(session_id))
        return SessionDetail(session=self._view(session, record_count=len(records)), records=records)

    def get_stats(
        self,
        *,
        class_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AttendanceStats:
        counts = dict(self._attendance.status_counts(class_id=class_id, start_date=start_date, end_date=end_date))
        return AttendanceStats(
            total=sum(counts.values()),
            present=counts.get(AttendanceStatus.PRESENT, 0),
            absent=counts.get(AttendanceStatus.ABSENT, 0),
            late=counts.get(AttendanceStatus.LATE, 0),
            excused=counts.get(AttendanceStatus.EXCUSED, 0),
            attendance_rate=attendance_rate(counts),
        )

    def student_history(self, program_profile_id: str, *, limit: int = DEFAULT_PAGE_SIZE) -> list[HistoryEntry]:
        return list(self._attendance.student_history(program_profile_id, limit=limit))

    def issue_checkin_token(self, session_id: str) -> CheckinToken:
        session = self._require_session(session_id)
        self._ensure_open(session)
        token = self._tokens.dumps({"session_id": session.id})
        return CheckinToken(
            session_id=session.id,
            token=token,
            url=f"{self._public_base_url}/api/attendance/checkin/{token}",
            expires_in=self._token_max_age,
        )

    def check_in_with_token(self, *, token: str, program_profile_id: str) -> MarkResult:
        try:
            payload = self._tokens.loads(token, max_age=self._token_max_age)
        except BadSignature as e:
            raise ValidationError("Check-in code is invalid or has expired", ErrorCode.INVALID_TOKEN) from e
        session_id = str(payload.get("session_id", "")) if isinstance(payload, dict) else ""
        if not session_id:
            raise ValidationError("Check-in code is invalid or has expired", ErrorCode.INVALID_TOKEN)
        return self.mark_attendance(
            session_id=session_id,
            records=[RecordInput(program_profile_id=program_profile_id, status=AttendanceStatus.PRESENT)],
        )

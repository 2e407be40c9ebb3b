from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .model import RecordInput
from .schemas import (
    CreateSessionCommand,
    MarkAttendanceCommand,
    SessionFilters,
    StatsFilters,
    TokenCheckinCommand,
)
from .service import AttendanceService

_log = get_service_logger("attendance.actions")


def _session_paths(session_id: str) -> list[str]:
    return ["/dugsi/attendance", f"/dugsi/attendance/{session_id}"]


def create_session(service: AttendanceService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(CreateSessionCommand, payload)
        return service.create_session(class_id=cmd.class_id, session_date=cmd.date, notes=cmd.notes)

    return run_action(_do, logger=_log, name="create_session", invalidate=lambda s: _session_paths(s.id))


def mark_attendance(service: AttendanceService, session_id: str, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(MarkAttendanceCommand, payload)
        records = [RecordInput(**r.model_dump()) for r in cmd.records]
        return service.mark_attendance(session_id=session_id, records=records)

    return run_action(_do, logger=_log, name="mark_attendance", invalidate=_session_paths(session_id))


def close_session(service: AttendanceService, session_id: str) -> ActionResult:
    return run_action(
        lambda: service.close_session(session_id),
        logger=_log,
        name="close_session",
        invalidate=_session_paths(session_id),
    )


def delete_session(service: AttendanceService, session_id: str) -> ActionResult:
    return run_action(
        lambda: service.delete_session(session_id),
        logger=_log,
        name="delete_session",
        invalidate=_session_paths(session_id),
    )


def list_sessions(service: AttendanceService, query: Any) -> ActionResult:
    def _do():
        f = parse_payload(SessionFilters, query)
        return service.list_sessions(
            class_id=f.class_id, start_date=f.start_date, end_date=f.end_date, page=f.page, limit=f.limit
        )

    return run_action(_do, logger=_log, name="list_sessions")


def get_session(service: AttendanceService, session_id: str) -> ActionResult:
    return run_action(lambda: service.get_session(session_id), logger=_log, name="get_session")


def get_stats(service: AttendanceService, query: Any) -> ActionResult:
    def _do():
        f = parse_payload(StatsFilters, query)
        return service.get_stats(class_id=f.class_id, start_date=f.start_date, end_date=f.end_date)

    return run_action(_do, logger=_log, name="attendance_stats")


def student_history(service: AttendanceService, program_profile_id: str) -> ActionResult:
    return run_action(lambda: service.student_history(program_profile_id), logger=_log, name="student_history")


def issue_checkin_token(service: AttendanceService, session_id: str) -> ActionResult:
    return run_action(lambda: service.issue_checkin_token(session_id), logger=_log, name="issue_checkin_token")


def check_in_with_token(service: AttendanceService, token: str, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(TokenCheckinCommand, payload)
        return service.check_in_with_token(token=token, program_profile_id=cmd.program_profile_id)

    return run_action(
        _do,
        logger=_log,
        name="check_in_with_token",
        invalidate=lambda r: _session_paths(r.session_id),
    )

from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .schemas import AdminClockInCommand, ClockInCommand, ClockOutCommand, LateReportQuery
from .service import TeacherCheckInService

_log = get_service_logger("checkins.actions")
_PATHS = ["/dugsi/teachers/checkins"]


def clock_in(service: TeacherCheckInService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(ClockInCommand, payload)
        return service.clock_in(teacher_id=cmd.teacher_id, shift=cmd.shift, lat=cmd.latitude, lng=cmd.longitude)

    return run_action(_do, logger=_log, name="teacher_clock_in", invalidate=_PATHS)


def clock_out(service: TeacherCheckInService, check_in_id: str, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(ClockOutCommand, payload)
        return service.clock_out(check_in_id=check_in_id, lat=cmd.latitude, lng=cmd.longitude)

    return run_action(_do, logger=_log, name="teacher_clock_out", invalidate=_PATHS)


def admin_clock_in(service: TeacherCheckInService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(AdminClockInCommand, payload)
        return service.admin_clock_in(teacher_id=cmd.teacher_id, shift=cmd.shift, reason=cmd.reason)

    return run_action(_do, logger=_log, name="teacher_admin_clock_in", invalidate=_PATHS)


def auto_clock_out(service: TeacherCheckInService) -> ActionResult:
    return run_action(service.auto_clock_out_stale, logger=_log, name="teacher_auto_clock_out", invalidate=_PATHS)


def late_report(service: TeacherCheckInService, query: Any) -> ActionResult:
    def _do():
        q = parse_payload(LateReportQuery, query)
        return service.late_report(start_date=q.start_date, end_date=q.end_date)

    return run_action(_do, logger=_log, name="teacher_late_report")

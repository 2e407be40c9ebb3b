from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import Clock, local_now, now_utc
from ..common.logger import get_service_logger, kv
from ..core.constants import (
    CHECKIN_WINDOW_MINUTES_AFTER,
    CHECKIN_WINDOW_MINUTES_BEFORE,
    GEOFENCE_RADIUS_METERS,
    LATE_GRACE_PERIOD_MINUTES,
    MAX_SHIFT_HOURS,
    MIN_ADMIN_REASON_LENGTH,
    SHIFT_START_TIMES,
)
from ..core.enums import Shift
from ..core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from .geo import center_configured, is_within_radius
from .model import AutoClockOutResult, CheckInWindow, LateArrival, Teacher, TeacherCheckIn
from .repository import CheckInRepository

AUTO_CLOCK_OUT_NOTE = "Auto clock-out: exceeded maximum shift duration"
MANUAL_CHECKIN_PREFIX = "Manual check-in: "


def _append_note(existing: Optional[str], note: str) -> str:
    return f"{existing}\n{note}" if existing else note


class TeacherCheckInService:
    """Geofenced teacher clock-in/out for the weekend Dugsi shifts."""

    def __init__(
        self,
        checkins: CheckInRepository,
        *,
        center_lat: float = 0.0,
        center_lng: float = 0.0,
        radius_meters: float = GEOFENCE_RADIUS_METERS,
        grace_minutes: int = LATE_GRACE_PERIOD_MINUTES,
        clock: Clock = now_utc,
        timezone: str = "UTC",
        logger: Optional[logging.Logger] = None,
    ):
        self._checkins = checkins
        self._center = (float(center_lat), float(center_lng))
        self._radius = float(radius_meters)
        self._grace = timedelta(minutes=int(grace_minutes))
        self._clock = clock
        self._tz = ZoneInfo(timezone)
        self._log = logger or get_service_logger("checkins")

    def _shift_start(self, day: date, shift: Shift) -> datetime:
        return datetime.combine(day, SHIFT_START_TIMES[shift], tzinfo=self._tz)

    def _local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(self._tz)

    def window_status(self, shift: Shift) -> CheckInWindow:
        now = local_now(self._clock, self._tz)
        start = self._shift_start(now.date(), shift)
        opens = start - timedelta(minutes=CHECKIN_WINDOW_MINUTES_BEFORE)
        closes = start + timedelta(minutes=CHECKIN_WINDOW_MINUTES_AFTER)
        return CheckInWindow(shift=shift, shift_start=start, opens_at=opens, closes_at=closes, is_open=opens <= now <= closes)

    def _require_teacher(self, teacher_id: str, shift: Shift) -> Teacher:
        teacher = self._checkins.get_teacher(teacher_id)
        if not teacher or not teacher.is_active:
            raise NotFoundError("Teacher not found", ErrorCode.TEACHER_NOT_FOUND)
        if shift not in teacher.shifts:
            raise ValidationError(f"Teacher is not assigned to the {shift.value} shift", ErrorCode.INVALID_SHIFT)
        return teacher

    def _ensure_not_checked_in(self, teacher_id: str, day: date, shift: Shift) -> None:
        if self._checkins.find_checkin(teacher_id=teacher_id, day=day, shift=shift):
            raise ConflictError("Already checked in for this shift today", ErrorCode.DUPLICATE_CHECKIN)

    def location_valid(self, lat: float, lng: float) -> bool:
        center_lat, center_lng = self._center
        if not center_configured(center_lat, center_lng):
            self._log.warning("Geofence center is not configured; location check fails for every check-in")
            return False
        return is_within_radius(lat, lng, center_lat=center_lat, center_lng=center_lng, radius_meters=self._radius)

    def is_late(self, clock_in_time: datetime, shift: Shift) -> bool:
        local = self._local(clock_in_time)
        return local > self._shift_start(local.date(), shift) + self._grace

    def clock_in(self, *, teacher_id: str, shift: Shift, lat: float, lng: float) -> TeacherCheckIn:
        self._require_teacher(teacher_id, shift)
        window = self.window_status(shift)
        if not window.is_open:
            raise ValidationError(
                f"Check-in for the {shift.value} shift is open from {window.opens_at:%H:%M} to {window.closes_at:%H:%M}",
                ErrorCode.CHECKIN_WINDOW_CLOSED,
            )

        now = self._clock()
        day = self._local(now).date()
        self._ensure_not_checked_in(teacher_id, day, shift)

        valid = self.location_valid(lat, lng)
        late = self.is_late(now, shift)
        checkin = self._checkins.create_checkin(
            teacher_id=teacher_id,
            day=day,
            shift=shift,
            clock_in_time=now,
            clock_in_valid=valid,
            is_late=late,
            lat=lat,
            lng=lng,
        )
        self._log.info(
            "TEACHER_CLOCKED_IN %s",
            kv(teacher_id=teacher_id, shift=shift.value, valid=valid, late=late),
        )
        return checkin

    def admin_clock_in(self, *, teacher_id: str, shift: Shift, reason: str) -> TeacherCheckIn:
        reason = (reason or "").strip()
        if len(reason) < MIN_ADMIN_REASON_LENGTH:
            raise ValidationError(
                f"A reason of at least {MIN_ADMIN_REASON_LENGTH} characters is required",
                ErrorCode.REASON_REQUIRED,
            )
        self._require_teacher(teacher_id, shift)

        now = self._clock()
        day = self._local(now).date()
        self._ensure_not_checked_in(teacher_id, day, shift)

        checkin = self._checkins.create_checkin(
            teacher_id=teacher_id,
            day=day,
            shift=shift,
            clock_in_time=now,
            clock_in_valid=False,
            is_late=self.is_late(now, shift),
            notes=f"{MANUAL_CHECKIN_PREFIX}{reason}",
        )
        self._log.info("TEACHER_MANUAL_CLOCK_IN %s", kv(teacher_id=teacher_id, shift=shift.value))
        return checkin

    def clock_out(self, *, check_in_id: str, lat: Optional[float] = None, lng: Optional[float] = None) -> TeacherCheckIn:
        checkin = self._checkins.get_checkin(check_in_id)
        if not checkin:
            raise NotFoundError("Check-in not found", ErrorCode.CHECKIN_NOT_FOUND)
        if checkin.clock_out_time is not None:
            raise ConflictError("Already clocked out", ErrorCode.ALREADY_CLOCKED_OUT)

        now = self._clock()
        if not self._checkins.record_clock_out(check_in_id=check_in_id, clock_out_time=now, lat=lat, lng=lng):
            raise ConflictError("Already clocked out", ErrorCode.ALREADY_CLOCKED_OUT)
        self._log.info("TEACHER_CLOCKED_OUT %s", kv(check_in_id=check_in_id, teacher_id=checkin.teacher_id))
        return replace(checkin, clock_out_time=now, clock_out_lat=lat, clock_out_lng=lng)

    def auto_clock_out_stale(self) -> AutoClockOutResult:
        max_shift = timedelta(hours=MAX_SHIFT_HOURS)
        now = self._clock()
        closed: list[str] = []
        for checkin in self._checkins.open_checkins_before(now - max_shift):
            clock_out = self._local(checkin.clock_in_time) + max_shift
            if self._checkins.record_clock_out(
                check_in_id=checkin.id,
                clock_out_time=clock_out,
                notes=_append_note(checkin.notes, AUTO_CLOCK_OUT_NOTE),
            ):
                closed.append(checkin.id)
        if closed:
            self._log.info("TEACHER_AUTO_CLOCKED_OUT %s", kv(count=len(closed)))
        return AutoClockOutResult(closed_count=len(closed), check_in_ids=tuple(closed))

    def late_report(self, *, start_date: date, end_date: date) -> list[LateArrival]:
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        out: list[LateArrival] = []
        for checkin, name in self._checkins.late_checkins(start_date=start_date, end_date=end_date):
            local = self._local(checkin.clock_in_time)
            start = self._shift_start(local.date(), checkin.shift)
            out.append(
                LateArrival(
                    check_in_id=checkin.id,
                    teacher_id=checkin.teacher_id,
                    teacher_name=name,
                    date=checkin.date,
                    shift=checkin.shift,
                    clock_in_time=checkin.clock_in_time,
                    minutes_late=max(0, int((local - start).total_seconds() // 60)),
                )
            )
        return out

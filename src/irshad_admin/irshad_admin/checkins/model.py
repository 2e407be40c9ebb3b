from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Shift


@dataclass(frozen=True)
class Teacher:
    id: str
    name: str
    is_active: bool
    shifts: tuple[Shift, ...] = ()


@dataclass(frozen=True)
class TeacherCheckIn:
    id: str
    teacher_id: str
    date: date
    shift: Shift
    clock_in_time: datetime
    clock_in_valid: bool
    is_late: bool
    clock_in_lat: Optional[float] = None
    clock_in_lng: Optional[float] = None
    clock_out_time: Optional[datetime] = None
    clock_out_lat: Optional[float] = None
    clock_out_lng: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class LateArrival:
    check_in_id: str
    teacher_id: str
    teacher_name: str
    date: date
    shift: Shift
    clock_in_time: datetime
    minutes_late: int


@dataclass(frozen=True)
class AutoClockOutResult:
    closed_count: int
    check_in_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class CheckInWindow:
    shift: Shift
    shift_start: datetime
    opens_at: datetime
    closes_at: datetime
    is_open: bool

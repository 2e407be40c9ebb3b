from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Shift
from .model import Teacher, TeacherCheckIn


class CheckInRepository(Protocol):
    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_checkin(self, check_in_id: str) -> Optional[TeacherCheckIn]:
        raise NotImplementedError

    def find_checkin(self, *, teacher_id: str, day: date, shift: Shift) -> Optional[TeacherCheckIn]:
        raise NotImplementedError

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
        """Raises ConflictError(DUPLICATE_CHECKIN) on (teacher, date, shift) collisions."""

        raise NotImplementedError

    def record_clock_out(
        self,
        *,
        check_in_id: str,
        clock_out_time: datetime,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """False when the check-in is missing or already clocked out."""

        raise NotImplementedError

    def open_checkins_before(self, cutoff: datetime) -> Sequence[TeacherCheckIn]:
        raise NotImplementedError

    def late_checkins(self, *, start_date: date, end_date: date) -> Sequence[tuple[TeacherCheckIn, str]]:
        """Late check-ins in range with the teacher's display name."""

        raise NotImplementedError

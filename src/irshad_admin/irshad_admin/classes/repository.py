from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import ClassEnrollment, DugsiClass, ProgramProfile


class ClassRepository(Protocol):
    def get_class(self, class_id: str) -> Optional[DugsiClass]:
        raise NotImplementedError

    def get_profile(self, profile_id: str) -> Optional[ProgramProfile]:
        raise NotImplementedError

    def active_teacher_id(self, class_id: str) -> Optional[str]:
        raise NotImplementedError

    def enroll(self, *, class_id: str, program_profile_id: str, start_date: datetime) -> ClassEnrollment:
        """Create (or reactivate) the profile's enrollment.

        Raises ConflictError(ALREADY_ENROLLED) when the profile already has an active one.
        """

        raise NotImplementedError

    def get_enrollment(self, enrollment_id: str) -> Optional[ClassEnrollment]:
        raise NotImplementedError

    def deactivate_enrollment(self, *, enrollment_id: str, end_date: datetime) -> bool:
        raise NotImplementedError

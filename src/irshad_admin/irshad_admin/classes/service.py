from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import Clock, now_utc
from ..common.logger import get_service_logger, kv
from ..core.enums import Program
from ..core.exceptions import ErrorCode, NotFoundError, ValidationError
from .model import ClassEnrollment, DugsiClass
from .repository import ClassRepository


class ClassService:
    def __init__(
        self,
        classes: ClassRepository,
        *,
        clock: Clock = now_utc,
        logger: Optional[logging.Logger] = None,
    ):
        self._classes = classes
        self._clock = clock
        self._log = logger or get_service_logger("classes")

    def get_class(self, class_id: str) -> DugsiClass:
        klass = self._classes.get_class(class_id)
        if not klass:
            raise NotFoundError("Class not found", ErrorCode.CLASS_NOT_FOUND)
        return klass

    def active_teacher_for_class(self, class_id: str) -> Optional[str]:
        return self._classes.active_teacher_id(class_id)

    def assign_student_to_class(self, *, class_id: str, program_profile_id: str) -> ClassEnrollment:
        profile = self._classes.get_profile(program_profile_id)
        if not profile:
            raise NotFoundError("Student profile not found", ErrorCode.PROFILE_NOT_FOUND)
        if profile.program != Program.DUGSI:
            raise ValidationError("Only Dugsi students can be assigned to a class", ErrorCode.NOT_DUGSI_PROFILE)

        klass = self.get_class(class_id)
        if not klass.is_active:
            raise ValidationError("Class is not active", ErrorCode.CLASS_INACTIVE)

        enrollment = self._classes.enroll(
            class_id=class_id, program_profile_id=program_profile_id, start_date=self._clock()
        )
        self._log.info("CLASS_ENROLLED %s", kv(class_id=class_id, profile_id=program_profile_id))
        return enrollment

    def remove_student_from_class(self, *, enrollment_id: str) -> ClassEnrollment:
        enrollment = self._classes.get_enrollment(enrollment_id)
        if not enrollment or not enrollment.is_active:
            raise NotFoundError("Active enrollment not found", ErrorCode.ENROLLMENT_NOT_FOUND)
        end = self._clock()
        if not self._classes.deactivate_enrollment(enrollment_id=enrollment_id, end_date=end):
            raise NotFoundError("Active enrollment not found", ErrorCode.ENROLLMENT_NOT_FOUND)
        self._log.info("CLASS_UNENROLLED %s", kv(enrollment_id=enrollment_id, class_id=enrollment.class_id))
        return ClassEnrollment(
            id=enrollment.id,
            class_id=enrollment.class_id,
            program_profile_id=enrollment.program_profile_id,
            is_active=False,
            start_date=enrollment.start_date,
            end_date=end,
        )

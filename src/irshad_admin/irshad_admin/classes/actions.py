from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .schemas import AssignClassCommand
from .service import ClassService

_log = get_service_logger("classes.actions")


def _class_paths(enrollment) -> list[str]:
    return ["/dugsi/classes", f"/dugsi/classes/{enrollment.class_id}"]


def assign_student(service: ClassService, class_id: str, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(AssignClassCommand, payload)
        return service.assign_student_to_class(class_id=class_id, program_profile_id=cmd.program_profile_id)

    return run_action(_do, logger=_log, name="assign_student_to_class", invalidate=_class_paths)


def remove_student(service: ClassService, enrollment_id: str) -> ActionResult:
    return run_action(
        lambda: service.remove_student_from_class(enrollment_id=enrollment_id),
        logger=_log,
        name="remove_student_from_class",
        invalidate=_class_paths,
    )

from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .schemas import StudentIdsCommand, TransferStudentsCommand
from .service import BatchService

_log = get_service_logger("batches.actions")


def _batch_paths(*batch_ids: str) -> list[str]:
    return ["/batches"] + [f"/batches/{b}" for b in batch_ids if b]


def list_batches(service: BatchService) -> ActionResult:
    return run_action(service.list_batches, logger=_log, name="list_batches")


def get_batch(service: BatchService, batch_id: str) -> ActionResult:
    return run_action(lambda: service.get_batch(batch_id), logger=_log, name="get_batch")


def assign_students(service: BatchService, batch_id: str, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(StudentIdsCommand, payload)
        return service.assign_students(batch_id=batch_id, student_ids=cmd.student_ids)

    return run_action(_do, logger=_log, name="assign_students", invalidate=lambda r: _batch_paths(r.batch_id))


def transfer_students(service: BatchService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(TransferStudentsCommand, payload)
        return service.transfer_students(
            from_batch_id=cmd.from_batch_id, to_batch_id=cmd.to_batch_id, student_ids=cmd.student_ids
        )

    return run_action(
        _do,
        logger=_log,
        name="transfer_students",
        invalidate=lambda r: _batch_paths(r.from_batch_id, r.to_batch_id),
    )


def unassign_students(service: BatchService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(StudentIdsCommand, payload)
        return service.unassign_students(student_ids=cmd.student_ids)

    return run_action(_do, logger=_log, name="unassign_students", invalidate=lambda r: _batch_paths(*r.affected_batch_ids))

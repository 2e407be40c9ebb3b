from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..common.logger import get_service_logger, kv
from ..core.exceptions import ErrorCode, NotFoundError, ValidationError
from .model import AssignResult, Batch, TransferResult, UnassignResult
from .repository import BatchRepository


def _unique(ids: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class BatchService:
    """Bulk cohort placement. Each student is processed on its own; one bad id never aborts the rest."""

    def __init__(self, batches: BatchRepository, *, logger: Optional[logging.Logger] = None):
        self._batches = batches
        self._log = logger or get_service_logger("batches")

    def list_batches(self) -> list[Batch]:
        return list(self._batches.list_with_counts())

    def get_batch(self, batch_id: str) -> Batch:
        batch = self._batches.get_by_id(batch_id)
        if not batch:
            raise NotFoundError("Batch not found", ErrorCode.BATCH_NOT_FOUND)
        return batch

    def _each(self, student_ids: Sequence[str], op: Callable[[str], bool], action: str) -> tuple[int, list[str]]:
        done = 0
        failed: list[str] = []
        for sid in _unique(student_ids):
            try:
                ok = op(sid)
            except Exception:
                self._log.exception("%s failed %s", action, kv(student_id=sid))
                ok = False
            if ok:
                done += 1
            else:
                failed.append(sid)
        return done, failed

    def assign_students(self, *, batch_id: str, student_ids: Sequence[str]) -> AssignResult:
        self.get_batch(batch_id)
        assigned, failed = self._each(
            student_ids,
            lambda sid: self._batches.assign_student(student_id=sid, batch_id=batch_id),
            "assign",
        )
        self._log.info("STUDENTS_ASSIGNED %s", kv(batch_id=batch_id, assigned=assigned, failed=len(failed)))
        return AssignResult(batch_id=batch_id, assigned_count=assigned, failed_assignments=tuple(failed))

    def transfer_students(self, *, from_batch_id: str, to_batch_id: str, student_ids: Sequence[str]) -> TransferResult:
        if from_batch_id == to_batch_id:
            raise ValidationError("Source and destination batches must be different", ErrorCode.SAME_BATCH)
        self.get_batch(from_batch_id)
        self.get_batch(to_batch_id)
        moved, failed = self._each(
            student_ids,
            lambda sid: self._batches.move_student(
                student_id=sid, from_batch_id=from_batch_id, to_batch_id=to_batch_id
            ),
            "transfer",
        )
        self._log.info(
            "STUDENTS_TRANSFERRED %s",
            kv(from_batch_id=from_batch_id, to_batch_id=to_batch_id, moved=moved, failed=len(failed)),
        )
        return TransferResult(
            from_batch_id=from_batch_id,
            to_batch_id=to_batch_id,
            transferred_count=moved,
            failed_transfers=tuple(failed),
        )

    def unassign_students(self, *, student_ids: Sequence[str]) -> UnassignResult:
        touched: set[str] = set()

        def _unassign(sid: str) -> bool:
            found, previous = self._batches.unassign_student(sid)
            if previous:
                touched.add(previous)
            return found

        done, failed = self._each(student_ids, _unassign, "unassign")
        self._log.info("STUDENTS_UNASSIGNED %s", kv(unassigned=done, failed=len(failed)))
        return UnassignResult(
            unassigned_count=done,
            failed_unassignments=tuple(failed),
            affected_batch_ids=tuple(sorted(touched)),
        )

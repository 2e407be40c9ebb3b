from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, now_utc
from ..common.logger import get_service_logger, kv
from ..core.exceptions import DomainError, ErrorCode, NotFoundError, ValidationError
from .duplicates import find_duplicate_groups, plan_merge
from .model import BatchResolveResult, DuplicateGroup, FailedGroup, ResolutionResult
from .repository import StudentRepository
from .schemas import ResolveDuplicatesCommand


class DuplicateService:
    def __init__(
        self,
        students: StudentRepository,
        *,
        clock: Clock = now_utc,
        logger: Optional[logging.Logger] = None,
    ):
        self._students = students
        self._clock = clock
        self._log = logger or get_service_logger("duplicates")

    def find_duplicates(self) -> list[DuplicateGroup]:
        return find_duplicate_groups(self._students.list_with_email(), now=self._clock())

    def resolve_duplicates(
        self,
        *,
        keep_id: str,
        delete_ids: Sequence[str],
        merge_data: bool = False,
    ) -> ResolutionResult:
        """Delete ``delete_ids`` and optionally fill empty fields of ``keep_id`` from them.

        All preconditions are checked before anything is written; the merge
        update and the deletes commit together or not at all.
        """
        delete_ids = list(dict.fromkeys(delete_ids))
        if not delete_ids:
            raise ValidationError("No duplicate records selected for deletion", ErrorCode.NO_DUPLICATES_SELECTED)
        if keep_id in delete_ids:
            raise ValidationError("Cannot delete the record you want to keep", ErrorCode.CANNOT_DELETE_KEEP_RECORD)

        keep = self._students.get_by_id(keep_id)
        if not keep:
            raise NotFoundError("Student record to keep not found", ErrorCode.KEEP_RECORD_NOT_FOUND)

        found = {s.id: s for s in self._students.get_by_ids(delete_ids)}
        missing = [sid for sid in delete_ids if sid not in found]
        if missing:
            raise NotFoundError(
                f"Some duplicate records not found: {', '.join(missing)}",
                ErrorCode.DUPLICATE_RECORD_NOT_FOUND,
                details={"missing_ids": missing},
            )

        candidates = [found[sid] for sid in delete_ids]
        updates = plan_merge(keep, candidates, delete_ids) if merge_data else {}
        self._students.apply_resolution(keep_id=keep_id, updates=updates, delete_ids=delete_ids)

        batch_ids = sorted({s.batch_id for s in [keep, *candidates] if s.batch_id})
        self._log.info(
            "DUPLICATES_RESOLVED %s",
            kv(keep_id=keep_id, deleted=len(delete_ids), merged=",".join(updates) or None),
        )
        return ResolutionResult(
            keep_id=keep_id,
            deleted_ids=tuple(delete_ids),
            merged_fields=tuple(updates),
            affected_batch_ids=tuple(batch_ids),
        )

    def batch_resolve(self, groups: Sequence[ResolveDuplicatesCommand]) -> BatchResolveResult:
        resolved = 0
        failed: list[FailedGroup] = []
        batch_ids: set[str] = set()
        for g in groups:
            try:
                result = self.resolve_duplicates(
                    keep_id=g.keep_id, delete_ids=g.delete_ids, merge_data=g.merge_data
                )
            except DomainError as e:
                failed.append(FailedGroup(keep_id=g.keep_id, error=e.message))
                continue
            except Exception:
                self._log.exception("batch resolve failed for group %s", kv(keep_id=g.keep_id))
                failed.append(FailedGroup(keep_id=g.keep_id, error="Unexpected error"))
                continue
            resolved += 1
            batch_ids.update(result.affected_batch_ids)
        return BatchResolveResult(
            resolved_count=resolved,
            failed_groups=tuple(failed),
            affected_batch_ids=tuple(sorted(batch_ids)),
        )

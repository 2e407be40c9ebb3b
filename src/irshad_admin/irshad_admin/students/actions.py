from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .schemas import BatchResolveCommand, ResolveDuplicatesCommand
from .service import DuplicateService

_log = get_service_logger("students.actions")


def _invalidated_paths(result) -> list[str]:
    return ["/students/duplicates", "/batches"] + [f"/batches/{b}" for b in result.affected_batch_ids]


def find_duplicates(service: DuplicateService) -> ActionResult:
    return run_action(service.find_duplicates, logger=_log, name="find_duplicates")


def resolve_duplicates(service: DuplicateService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(ResolveDuplicatesCommand, payload)
        return service.resolve_duplicates(keep_id=cmd.keep_id, delete_ids=cmd.delete_ids, merge_data=cmd.merge_data)

    return run_action(_do, logger=_log, name="resolve_duplicates", invalidate=_invalidated_paths)


def batch_resolve(service: DuplicateService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(BatchResolveCommand, payload)
        return service.batch_resolve(cmd.groups)

    return run_action(_do, logger=_log, name="batch_resolve_duplicates", invalidate=_invalidated_paths)

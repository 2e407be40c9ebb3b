from __future__ import annotations

from typing import Any

from ..common.actions import ActionResult, run_action
from ..common.logger import get_service_logger
from ..common.validators import parse_payload
from .schemas import LinkSiblingsCommand, SiblingPairCommand
from .service import SiblingService

_log = get_service_logger("siblings.actions")


def _pair_paths(rel) -> list[str]:
    return [f"/persons/{rel.person1_id}", f"/persons/{rel.person2_id}"]


def link(service: SiblingService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(LinkSiblingsCommand, payload)
        return service.link(person_a=cmd.person1_id, person_b=cmd.person2_id, method=cmd.detection_method)

    return run_action(_do, logger=_log, name="link_siblings", invalidate=lambda r: _pair_paths(r.relationship))


def unlink(service: SiblingService, payload: Any) -> ActionResult:
    def _do():
        cmd = parse_payload(SiblingPairCommand, payload)
        return service.unlink(person_a=cmd.person1_id, person_b=cmd.person2_id)

    return run_action(_do, logger=_log, name="unlink_siblings", invalidate=_pair_paths)


def siblings_of(service: SiblingService, person_id: str) -> ActionResult:
    return run_action(lambda: service.siblings_of(person_id), logger=_log, name="siblings_of")

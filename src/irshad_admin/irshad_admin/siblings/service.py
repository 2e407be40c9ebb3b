from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..common.logger import get_service_logger, kv
from ..core.enums import DetectionMethod
from ..core.exceptions import ErrorCode, NotFoundError, ValidationError
from .model import LinkResult, Sibling, SiblingRelationship
from .repository import SiblingRepository


def canonical_pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a < b else (b, a)


class SiblingService:
    def __init__(self, siblings: SiblingRepository, *, logger: Optional[logging.Logger] = None):
        self._siblings = siblings
        self._log = logger or get_service_logger("siblings")

    def link(self, *, person_a: str, person_b: str, method: DetectionMethod = DetectionMethod.MANUAL) -> LinkResult:
        if person_a == person_b:
            raise ValidationError("A person cannot be their own sibling", ErrorCode.SELF_SIBLING)
        p1, p2 = canonical_pair(person_a, person_b)

        missing = {p1, p2} - self._siblings.existing_person_ids([p1, p2])
        if missing:
            raise NotFoundError(f"Person not found: {', '.join(sorted(missing))}")

        existing = self._siblings.find_pair(p1, p2)
        if existing and existing.is_active:
            return LinkResult(relationship=existing, already_linked=True)
        if existing:
            self._siblings.set_active(existing.id, True)
            self._log.info("SIBLINGS_RELINKED %s", kv(relationship_id=existing.id))
            return LinkResult(relationship=replace(existing, is_active=True))

        rel = self._siblings.create(person1_id=p1, person2_id=p2, detection_method=method)
        self._log.info("SIBLINGS_LINKED %s", kv(relationship_id=rel.id, method=method.value))
        return LinkResult(relationship=rel)

    def unlink(self, *, person_a: str, person_b: str) -> SiblingRelationship:
        existing = self._siblings.find_pair(*canonical_pair(person_a, person_b))
        if not existing or not existing.is_active:
            raise NotFoundError("Sibling relationship not found", ErrorCode.RELATIONSHIP_NOT_FOUND)
        self._siblings.set_active(existing.id, False)
        self._log.info("SIBLINGS_UNLINKED %s", kv(relationship_id=existing.id))
        return replace(existing, is_active=False)

    def siblings_of(self, person_id: str) -> list[Sibling]:
        return list(self._siblings.siblings_of(person_id))

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DetectionMethod
from .model import Sibling, SiblingRelationship


class SiblingRepository(Protocol):
    def existing_person_ids(self, person_ids: Sequence[str]) -> set[str]:
        raise NotImplementedError

    def find_pair(self, person1_id: str, person2_id: str) -> Optional[SiblingRelationship]:
        """Callers pass the canonical ordering."""

        raise NotImplementedError

    def create(self, *, person1_id: str, person2_id: str, detection_method: DetectionMethod) -> SiblingRelationship:
        raise NotImplementedError

    def set_active(self, relationship_id: str, is_active: bool) -> bool:
        raise NotImplementedError

    def siblings_of(self, person_id: str) -> Sequence[Sibling]:
        raise NotImplementedError

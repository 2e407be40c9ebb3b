from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import DetectionMethod


@dataclass(frozen=True)
class SiblingRelationship:
    """Undirected edge stored with ``person1_id < person2_id``."""

    id: str
    person1_id: str
    person2_id: str
    detection_method: DetectionMethod
    is_active: bool = True


@dataclass(frozen=True)
class LinkResult:
    relationship: SiblingRelationship
    already_linked: bool = False


@dataclass(frozen=True)
class Sibling:
    person_id: str
    name: str
    relationship_id: str
    detection_method: DetectionMethod

from __future__ import annotations

from ..common.schemas import CommandModel, RecordId
from ..core.enums import DetectionMethod


class SiblingPairCommand(CommandModel):
    person1_id: RecordId
    person2_id: RecordId


class LinkSiblingsCommand(SiblingPairCommand):
    detection_method: DetectionMethod = DetectionMethod.MANUAL

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .tuition import RateBreakdown


@dataclass(frozen=True)
class FamilyRate:
    family_reference_id: str
    child_count: int
    rate: int
    formatted: str
    description: str
    breakdown: RateBreakdown
    override_warning: Optional[str] = None


@dataclass(frozen=True)
class MahadRate:
    rate: int
    formatted: str

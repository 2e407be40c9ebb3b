from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Program, Shift


@dataclass(frozen=True)
class DugsiClass:
    id: str
    name: str
    shift: Shift
    is_active: bool


@dataclass(frozen=True)
class ProgramProfile:
    """A person's membership in one program."""

    id: str
    person_id: str
    program: Program
    family_reference_id: Optional[str]
    status: str


@dataclass(frozen=True)
class ClassEnrollment:
    id: str
    class_id: str
    program_profile_id: str
    is_active: bool
    start_date: datetime
    end_date: Optional[datetime] = None

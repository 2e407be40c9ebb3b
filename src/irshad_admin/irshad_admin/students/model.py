from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import StudentStatus


@dataclass(frozen=True)
class Student:
    """Legacy Mahad student record (one row per registration)."""

    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    date_of_birth: Optional[date]
    education_level: Optional[str]
    grade_level: Optional[str]
    school_name: Optional[str]
    status: StudentStatus
    batch_id: Optional[str]
    sibling_group_id: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DuplicateGroup:
    """Read-model: students sharing one normalized email, newest first."""

    email: str
    count: int
    keep_record: Student
    duplicate_records: tuple[Student, ...]
    has_sibling_group: bool
    has_recent_activity: bool
    last_updated: datetime


@dataclass(frozen=True)
class ResolutionResult:
    keep_id: str
    deleted_ids: tuple[str, ...]
    merged_fields: tuple[str, ...]
    affected_batch_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class FailedGroup:
    keep_id: str
    error: str


@dataclass(frozen=True)
class BatchResolveResult:
    resolved_count: int
    failed_groups: tuple[FailedGroup, ...] = field(default_factory=tuple)
    affected_batch_ids: tuple[str, ...] = ()

    def failure_message(self) -> Optional[str]:
        if not self.failed_groups:
            return None
        return f"{len(self.failed_groups)} duplicate group(s) could not be resolved"

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceSession:
    """One class meeting on one weekend day. ``is_closed`` is the explicit flag only."""

    id: str
    date: date
    class_id: str
    teacher_id: str
    is_closed: bool = False
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionView:
    """Read-model for listings; closed state already resolved against the clock."""

    id: str
    date: date
    class_id: str
    class_name: Optional[str]
    teacher_id: str
    is_closed: bool
    is_effectively_closed: bool
    record_count: int = 0
    notes: Optional[str] = None


@dataclass(frozen=True)
class RecordInput:
    program_profile_id: str
    status: AttendanceStatus
    lesson_completed: bool = False
    surah_name: Optional[str] = None
    ayat_from: Optional[int] = None
    ayat_to: Optional[int] = None
    lesson_notes: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    id: str
    session_id: str
    program_profile_id: str
    status: AttendanceStatus
    marked_at: datetime
    lesson_completed: bool = False
    surah_name: Optional[str] = None
    ayat_from: Optional[int] = None
    ayat_to: Optional[int] = None
    lesson_notes: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class SessionDetail:
    session: SessionView
    records: tuple[AttendanceRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MarkResult:
    session_id: str
    record_count: int


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: float


@dataclass(frozen=True)
class HistoryEntry:
    session_id: str
    date: date
    class_id: str
    status: AttendanceStatus
    lesson_completed: bool
    surah_name: Optional[str] = None
    ayat_from: Optional[int] = None
    ayat_to: Optional[int] = None


@dataclass(frozen=True)
class CheckinToken:
    session_id: str
    token: str
    url: str
    expires_in: int

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, Optional

from pydantic import Field, StringConstraints, field_validator, model_validator

from ..common.schemas import CommandModel, RecordId
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus

Note = Annotated[str, StringConstraints(max_length=1000)]


class CreateSessionCommand(CommandModel):
    class_id: RecordId
    date: date
    notes: Optional[Note] = None

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value):
        # timestamps are truncated to their UTC calendar day
        if isinstance(value, str) and "T" in value:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.date()
        return value


class RecordCommand(CommandModel):
    program_profile_id: RecordId
    status: AttendanceStatus
    lesson_completed: bool = False
    surah_name: Optional[Annotated[str, StringConstraints(max_length=100)]] = None
    ayat_from: Optional[int] = Field(default=None, ge=1)
    ayat_to: Optional[int] = Field(default=None, ge=1)
    lesson_notes: Optional[Note] = None
    notes: Optional[Note] = None

    @model_validator(mode="after")
    def _ayat_range(self):
        if self.ayat_from is not None and self.ayat_to is not None and self.ayat_from > self.ayat_to:
            raise ValueError("ayat_from must not be greater than ayat_to")
        return self


class MarkAttendanceCommand(CommandModel):
    records: list[RecordCommand] = Field(min_length=1, max_length=200)


class SessionFilters(CommandModel):
    class_id: Optional[RecordId] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=100)


class StatsFilters(CommandModel):
    class_id: Optional[RecordId] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TokenCheckinCommand(CommandModel):
    program_profile_id: RecordId

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field

from ..common.schemas import CommandModel, RecordId
from ..core.enums import Shift


class ClockInCommand(CommandModel):
    teacher_id: RecordId
    shift: Shift
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ClockOutCommand(CommandModel):
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class AdminClockInCommand(CommandModel):
    teacher_id: RecordId
    shift: Shift
    # length rule has its own error code, enforced by the service
    reason: str = ""


class LateReportQuery(CommandModel):
    start_date: date
    end_date: date

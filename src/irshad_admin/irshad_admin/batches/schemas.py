from __future__ import annotations

from pydantic import Field

from ..common.schemas import CommandModel, RecordId
from ..core.constants import MAX_BULK_STUDENTS


class StudentIdsCommand(CommandModel):
    student_ids: list[RecordId] = Field(min_length=1, max_length=MAX_BULK_STUDENTS)


class TransferStudentsCommand(StudentIdsCommand):
    from_batch_id: RecordId
    to_batch_id: RecordId

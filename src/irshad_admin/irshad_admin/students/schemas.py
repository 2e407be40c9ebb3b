from __future__ import annotations

from pydantic import Field

from ..common.schemas import CommandModel, RecordId
from ..core.constants import MAX_BULK_STUDENTS


class ResolveDuplicatesCommand(CommandModel):
    keep_id: RecordId
    # emptiness is a business rule with its own message, checked by the service
    delete_ids: list[RecordId] = Field(default_factory=list, max_length=MAX_BULK_STUDENTS)
    merge_data: bool = False


class BatchResolveCommand(CommandModel):
    groups: list[ResolveDuplicatesCommand] = Field(min_length=1, max_length=MAX_BULK_STUDENTS)

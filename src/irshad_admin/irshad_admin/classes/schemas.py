from __future__ import annotations

from ..common.schemas import CommandModel, RecordId


class AssignClassCommand(CommandModel):
    program_profile_id: RecordId

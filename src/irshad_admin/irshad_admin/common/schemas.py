from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

RecordId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class CommandModel(BaseModel):
    """Inbound payload; accepts ``snake_case`` and ``camelCase`` keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        frozen=True,
    )

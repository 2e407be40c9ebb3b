from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from ..core.exceptions import InputValidationError

M = TypeVar("M", bound=BaseModel)


def format_schema_errors(exc: SchemaError) -> list[str]:
    out: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "Invalid value")
        out.append(f"{loc}: {msg}" if loc else msg)
    return out


def parse_payload(schema: Type[M], data: Any) -> M:
    """Validate an inbound payload; shape errors never reach the database."""
    if data is None:
        data = {}
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        raise InputValidationError(format_schema_errors(e)) from e

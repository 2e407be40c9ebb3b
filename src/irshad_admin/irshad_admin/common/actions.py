"""Action handler boundary.

Every service call exposed to the outside goes through ``run_action`` which
flattens input errors, domain errors, store constraint violations and
unexpected faults into one result envelope.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar, Union

import mysql.connector

from ..core.exceptions import DomainError, ErrorCode, InputValidationError
from ..database.mysql_base import map_db_error
from .signals import revalidate

T = TypeVar("T")

GENERIC_FAILURE = "Something went wrong. Please try again."

Invalidation = Union[Iterable[str], Callable[[Any], Iterable[str]], None]


def jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [jsonable(v) for v in value]
    return value


@dataclass
class ActionResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    errors: Optional[list[str]] = None
    code: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = jsonable(self.data)
        if self.error is not None:
            out["error"] = self.error
        if self.errors is not None:
            out["errors"] = list(self.errors)
        if self.code is not None:
            out["code"] = self.code
        return out

    @property
    def http_status(self) -> int:
        if self.success or self.data is not None:
            return 200
        if self.code is None:
            return 500
        if self.code.endswith("NOT_FOUND"):
            return 404
        if self.code.startswith(("DUPLICATE_", "ALREADY_")) or self.code in (
            ErrorCode.UNIQUE_CONSTRAINT,
            ErrorCode.CONCURRENT_MODIFICATION,
        ):
            return 409
        return 400


def ok(data: T = None) -> ActionResult[T]:
    return ActionResult(success=True, data=data)


def fail(error: DomainError) -> ActionResult:
    if isinstance(error, InputValidationError):
        return ActionResult(success=False, error=error.message, errors=error.errors, code=error.code)
    return ActionResult(success=False, error=error.message, code=error.code)


def run_action(
    fn: Callable[[], T],
    *,
    logger: logging.Logger,
    name: str,
    invalidate: Invalidation = None,
) -> ActionResult[T]:
    try:
        data = fn()
    except DomainError as e:
        logger.info("%s rejected code=%s message=%s", name, e.code, e.message)
        return fail(e)
    except mysql.connector.Error as e:
        mapped = map_db_error(e)
        if mapped is None:
            logger.exception("%s failed with a database error", name)
            return ActionResult(success=False, error=GENERIC_FAILURE)
        logger.warning("%s hit constraint code=%s", name, mapped.code)
        return fail(mapped)
    except Exception:
        logger.exception("%s failed", name)
        return ActionResult(success=False, error=GENERIC_FAILURE)

    paths = invalidate(data) if callable(invalidate) else (invalidate or ())
    revalidate(name, paths)

    failure = getattr(data, "failure_message", None)
    message = failure() if callable(failure) else None
    if message:
        return ActionResult(success=False, data=data, error=message)
    return ok(data)

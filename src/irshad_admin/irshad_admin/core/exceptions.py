from __future__ import annotations

from typing import Any, Optional, Sequence


class ErrorCode:
    """Machine-readable codes carried by domain errors."""

    # attendance
    CLASS_NOT_FOUND = "CLASS_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_CLOSED = "SESSION_CLOSED"
    DUPLICATE_SESSION = "DUPLICATE_SESSION"
    NO_TEACHER_ASSIGNED = "NO_TEACHER_ASSIGNED"
    INVALID_DAY = "INVALID_DAY"
    INVALID_TOKEN = "INVALID_TOKEN"

    # duplicates
    NO_DUPLICATES_SELECTED = "NO_DUPLICATES_SELECTED"
    CANNOT_DELETE_KEEP_RECORD = "CANNOT_DELETE_KEEP_RECORD"
    KEEP_RECORD_NOT_FOUND = "KEEP_RECORD_NOT_FOUND"
    DUPLICATE_RECORD_NOT_FOUND = "DUPLICATE_RECORD_NOT_FOUND"

    # batches
    BATCH_NOT_FOUND = "BATCH_NOT_FOUND"
    SAME_BATCH = "SAME_BATCH"

    # classes
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    NOT_DUGSI_PROFILE = "NOT_DUGSI_PROFILE"
    CLASS_INACTIVE = "CLASS_INACTIVE"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"
    ENROLLMENT_NOT_FOUND = "ENROLLMENT_NOT_FOUND"

    # teacher check-in
    TEACHER_NOT_FOUND = "TEACHER_NOT_FOUND"
    INVALID_SHIFT = "INVALID_SHIFT"
    CHECKIN_WINDOW_CLOSED = "CHECKIN_WINDOW_CLOSED"
    DUPLICATE_CHECKIN = "DUPLICATE_CHECKIN"
    CHECKIN_NOT_FOUND = "CHECKIN_NOT_FOUND"
    ALREADY_CLOCKED_OUT = "ALREADY_CLOCKED_OUT"
    REASON_REQUIRED = "REASON_REQUIRED"

    # siblings
    SELF_SIBLING = "SELF_SIBLING"
    RELATIONSHIP_NOT_FOUND = "RELATIONSHIP_NOT_FOUND"

    # generic / store
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNIQUE_CONSTRAINT = "UNIQUE_CONSTRAINT"
    FOREIGN_KEY_CONSTRAINT = "FOREIGN_KEY_CONSTRAINT"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"


class DomainError(Exception):
    """Base exception for business rule violations."""

    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})


class ValidationError(DomainError):
    """Raised when input data is valid in shape but violates a domain rule."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    default_code = ErrorCode.RECORD_NOT_FOUND


class ConflictError(DomainError):
    """Raised when a write collides with existing data (unique keys, races)."""

    default_code = ErrorCode.UNIQUE_CONSTRAINT


class InputValidationError(DomainError):
    """Raised when an inbound payload fails schema validation."""

    def __init__(self, errors: Sequence[str]):
        super().__init__("Invalid input", ErrorCode.VALIDATION_ERROR)
        self.errors = list(errors)

from __future__ import annotations

from enum import Enum


class Program(str, Enum):
    """Programs a person can hold a profile in."""

    MAHAD = "MAHAD_PROGRAM"
    DUGSI = "DUGSI_PROGRAM"


class AttendanceStatus(str, Enum):
    """Weekend attendance outcome stored per student and session."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class Shift(str, Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"


class StudentStatus(str, Enum):
    REGISTERED = "registered"
    ENROLLED = "enrolled"
    ON_LEAVE = "on_leave"
    WITHDRAWN = "withdrawn"


class DetectionMethod(str, Enum):
    MANUAL = "MANUAL"
    AUTOMATIC = "AUTOMATIC"


class GraduationStatus(str, Enum):
    NON_GRADUATE = "NON_GRADUATE"
    GRADUATE = "GRADUATE"


class PaymentFrequency(str, Enum):
    MONTHLY = "MONTHLY"
    BI_MONTHLY = "BI_MONTHLY"


class BillingType(str, Enum):
    FULL_TIME = "FULL_TIME"
    FULL_TIME_SCHOLARSHIP = "FULL_TIME_SCHOLARSHIP"
    PART_TIME = "PART_TIME"
    EXEMPT = "EXEMPT"

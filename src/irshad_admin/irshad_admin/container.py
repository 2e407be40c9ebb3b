from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .batches.mysql_batch_repository import MySQLBatchRepository
from .batches.service import BatchService
from .billing.mysql_billing_repository import MySQLBillingRepository
from .billing.service import BillingService
from .checkins.mysql_checkin_repository import MySQLCheckInRepository
from .checkins.service import TeacherCheckInService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.service import ClassService
from .common.datetime_utils import Clock, now_utc
from .core.constants import DEFAULT_CHECKIN_TOKEN_MAX_AGE, GEOFENCE_RADIUS_METERS
from .database.connection import DBConfig, DatabaseConnection
from .siblings.mysql_sibling_repository import MySQLSiblingRepository
from .siblings.service import SiblingService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import DuplicateService


@dataclass(frozen=True)
class Container:
    duplicate_service: DuplicateService
    batch_service: BatchService
    class_service: ClassService
    attendance_service: AttendanceService
    checkin_service: TeacherCheckInService
    billing_service: BillingService
    sibling_service: SiblingService

    conn: Optional[DatabaseConnection] = None


def build_container(*, db_config: dict, settings: Any = None, clock: Clock = now_utc) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tz = str(getattr(settings, "ATTENDANCE_TIMEZONE", "UTC"))

    class_service = ClassService(MySQLClassRepository(conn), clock=clock)
    attendance_service = AttendanceService(
        MySQLAttendanceRepository(conn),
        class_service,
        secret_key=str(getattr(settings, "SECRET_KEY", "dev-secret-key")),
        clock=clock,
        timezone=tz,
        token_max_age=int(getattr(settings, "CHECKIN_TOKEN_MAX_AGE", DEFAULT_CHECKIN_TOKEN_MAX_AGE)),
        public_base_url=str(getattr(settings, "PUBLIC_BASE_URL", "")),
    )
    checkin_service = TeacherCheckInService(
        MySQLCheckInRepository(conn),
        center_lat=float(getattr(settings, "CENTER_LAT", 0.0)),
        center_lng=float(getattr(settings, "CENTER_LNG", 0.0)),
        radius_meters=float(getattr(settings, "GEOFENCE_RADIUS_METERS", GEOFENCE_RADIUS_METERS)),
        clock=clock,
        timezone=tz,
    )

    return Container(
        duplicate_service=DuplicateService(MySQLStudentRepository(conn), clock=clock),
        batch_service=BatchService(MySQLBatchRepository(conn)),
        class_service=class_service,
        attendance_service=attendance_service,
        checkin_service=checkin_service,
        billing_service=BillingService(MySQLBillingRepository(conn)),
        sibling_service=SiblingService(MySQLSiblingRepository(conn)),
        conn=conn,
    )

"""In-memory stand-ins for the MySQL repositories.

Each fake stages its writes and applies them only when the whole call
succeeds, matching the commit/rollback behaviour of ``db_cursor``.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from src.irshad_admin.irshad_admin.attendance.model import AttendanceRecord, AttendanceSession, HistoryEntry
from src.irshad_admin.irshad_admin.attendance.service import AttendanceService
from src.irshad_admin.irshad_admin.batches.model import Batch
from src.irshad_admin.irshad_admin.batches.service import BatchService
from src.irshad_admin.irshad_admin.billing.service import BillingService
from src.irshad_admin.irshad_admin.checkins.model import Teacher, TeacherCheckIn
from src.irshad_admin.irshad_admin.checkins.service import TeacherCheckInService
from src.irshad_admin.irshad_admin.classes.model import ClassEnrollment, DugsiClass, ProgramProfile
from src.irshad_admin.irshad_admin.classes.service import ClassService
from src.irshad_admin.irshad_admin.container import Container
from src.irshad_admin.irshad_admin.core.enums import Program, Shift, StudentStatus
from src.irshad_admin.irshad_admin.core.exceptions import ConflictError, ErrorCode, NotFoundError
from src.irshad_admin.irshad_admin.siblings.model import Sibling, SiblingRelationship
from src.irshad_admin.irshad_admin.siblings.service import SiblingService
from src.irshad_admin.irshad_admin.students.duplicates import MERGEABLE_FIELDS
from src.irshad_admin.irshad_admin.students.model import Student
from src.irshad_admin.irshad_admin.students.service import DuplicateService

CENTER = (44.9778, -93.2650)


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def _ids(prefix: str):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def make_student(
    student_id: str,
    *,
    email: Optional[str],
    created_at: datetime,
    updated_at: Optional[datetime] = None,
    batch_id: Optional[str] = None,
    sibling_group_id: Optional[str] = None,
    **fields,
) -> Student:
    base = dict(
        id=student_id,
        name=fields.pop("name", f"Student {student_id}"),
        email=email,
        phone=None,
        date_of_birth=None,
        education_level=None,
        grade_level=None,
        school_name=None,
        status=StudentStatus.REGISTERED,
        batch_id=batch_id,
        sibling_group_id=sibling_group_id,
        created_at=created_at,
        updated_at=updated_at or created_at,
    )
    base.update(fields)
    return Student(**base)


class InMemoryStudents:
    def __init__(self, students=()):
        self.students: dict[str, Student] = {s.id: s for s in students}
        self.resolutions = 0

    def list_with_email(self):
        return [s for s in self.students.values() if s.email and s.email.strip()]

    def get_by_id(self, student_id):
        return self.students.get(student_id)

    def get_by_ids(self, student_ids):
        return [self.students[i] for i in student_ids if i in self.students]

    def apply_resolution(self, *, keep_id, updates, delete_ids):
        staged = dict(self.students)
        if updates:
            staged[keep_id] = replace(staged[keep_id], **{k: v for k, v in updates.items() if k in MERGEABLE_FIELDS})
        deleted = 0
        for sid in delete_ids:
            if staged.pop(sid, None) is not None:
                deleted += 1
        if deleted < len(delete_ids):
            raise ConflictError("Duplicate records changed while resolving", ErrorCode.CONCURRENT_MODIFICATION)
        self.students = staged
        self.resolutions += 1
        return deleted


class InMemoryBatches:
    def __init__(self, batches=(), placements=None, broken_ids=()):
        self.batches: dict[str, Batch] = {b.id: b for b in batches}
        # student id -> batch id (None when unassigned)
        self.placements: dict[str, Optional[str]] = dict(placements or {})
        self.broken_ids = set(broken_ids)

    def _check(self, student_id):
        if student_id in self.broken_ids:
            raise RuntimeError("connection reset")

    def list_with_counts(self):
        return [
            replace(b, student_count=sum(1 for v in self.placements.values() if v == b.id))
            for b in sorted(self.batches.values(), key=lambda b: b.name)
        ]

    def get_by_id(self, batch_id):
        return self.batches.get(batch_id)

    def assign_student(self, *, student_id, batch_id):
        self._check(student_id)
        if student_id not in self.placements:
            return False
        self.placements[student_id] = batch_id
        return True

    def move_student(self, *, student_id, from_batch_id, to_batch_id):
        self._check(student_id)
        if self.placements.get(student_id, object()) != from_batch_id:
            return False
        self.placements[student_id] = to_batch_id
        return True

    def unassign_student(self, student_id):
        self._check(student_id)
        if student_id not in self.placements:
            return False, None
        previous = self.placements[student_id]
        self.placements[student_id] = None
        return True, previous


class InMemoryClasses:
    def __init__(self, classes=(), profiles=(), teachers=None):
        self.classes: dict[str, DugsiClass] = {c.id: c for c in classes}
        self.profiles: dict[str, ProgramProfile] = {p.id: p for p in profiles}
        self.teachers: dict[str, str] = dict(teachers or {})
        self.enrollments: dict[str, ClassEnrollment] = {}
        self._next_id = _ids("E")

    def get_class(self, class_id):
        return self.classes.get(class_id)

    def get_profile(self, profile_id):
        return self.profiles.get(profile_id)

    def active_teacher_id(self, class_id):
        return self.teachers.get(class_id)

    def enroll(self, *, class_id, program_profile_id, start_date):
        existing = next((e for e in self.enrollments.values() if e.program_profile_id == program_profile_id), None)
        if existing and existing.is_active:
            raise ConflictError("Student is already enrolled in a class", ErrorCode.ALREADY_ENROLLED)
        enrollment_id = existing.id if existing else self._next_id()
        enrollment = ClassEnrollment(
            id=enrollment_id,
            class_id=class_id,
            program_profile_id=program_profile_id,
            is_active=True,
            start_date=start_date,
        )
        self.enrollments[enrollment_id] = enrollment
        return enrollment

    def get_enrollment(self, enrollment_id):
        return self.enrollments.get(enrollment_id)

    def deactivate_enrollment(self, *, enrollment_id, end_date):
        e = self.enrollments.get(enrollment_id)
        if not e or not e.is_active:
            return False
        self.enrollments[enrollment_id] = replace(e, is_active=False, end_date=end_date)
        return True


class InMemoryAttendance:
    def __init__(self, known_profiles=None, class_names=None):
        self.sessions: dict[str, AttendanceSession] = {}
        # (session id, profile id) -> record
        self.records: dict[tuple[str, str], AttendanceRecord] = {}
        self.known_profiles = set(known_profiles) if known_profiles is not None else None
        self.class_names = dict(class_names or {})
        self._next_session = _ids("S")
        self._next_record = _ids("R")

    def create_session(self, *, class_id, session_date, teacher_id, notes=None):
        if any(s.class_id == class_id and s.date == session_date for s in self.sessions.values()):
            raise ConflictError("A session already exists for this class on this date", ErrorCode.DUPLICATE_SESSION)
        session = AttendanceSession(
            id=self._next_session(), date=session_date, class_id=class_id, teacher_id=teacher_id, notes=notes
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id):
        return self.sessions.get(session_id)

    def list_sessions(self, *, class_id=None, start_date=None, end_date=None, limit=50, offset=0):
        rows = [
            s
            for s in self.sessions.values()
            if (not class_id or s.class_id == class_id)
            and (not start_date or s.date >= start_date)
            and (not end_date or s.date <= end_date)
        ]
        rows.sort(key=lambda s: s.date, reverse=True)
        return [
            (s, self.class_names.get(s.class_id), sum(1 for (sid, _) in self.records if sid == s.id))
            for s in rows[offset : offset + limit]
        ]

    def mark_records(self, *, session_id, records, marked_at, guard):
        session = self.sessions.get(session_id)
        if not session:
            raise NotFoundError("Session not found", ErrorCode.SESSION_NOT_FOUND)
        guard(session)
        staged = dict(self.records)
        for rec in records:
            if self.known_profiles is not None and rec.program_profile_id not in self.known_profiles:
                raise ConflictError("Unknown profile", ErrorCode.FOREIGN_KEY_CONSTRAINT)
            key = (session_id, rec.program_profile_id)
            previous = staged.get(key)
            staged[key] = AttendanceRecord(
                id=previous.id if previous else self._next_record(),
                session_id=session_id,
                program_profile_id=rec.program_profile_id,
                status=rec.status,
                marked_at=marked_at,
                lesson_completed=rec.lesson_completed,
                surah_name=rec.surah_name,
                ayat_from=rec.ayat_from,
                ayat_to=rec.ayat_to,
                lesson_notes=rec.lesson_notes,
                notes=rec.notes,
            )
        self.records = staged
        return len(records)

    def close_session(self, session_id):
        s = self.sessions.get(session_id)
        if not s or s.is_closed:
            return False
        self.sessions[session_id] = replace(s, is_closed=True)
        return True

    def delete_session(self, session_id):
        if self.sessions.pop(session_id, None) is None:
            return False
        self.records = {k: v for k, v in self.records.items() if k[0] != session_id}
        return True

    def list_records(self, session_id):
        return [r for (sid, _), r in self.records.items() if sid == session_id]

    def status_counts(self, *, class_id=None, start_date=None, end_date=None):
        counts: dict = {}
        for (sid, _), r in self.records.items():
            s = self.sessions[sid]
            if class_id and s.class_id != class_id:
                continue
            if start_date and s.date < start_date:
                continue
            if end_date and s.date > end_date:
                continue
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    def student_history(self, program_profile_id, *, limit=50):
        out = []
        for (sid, pid), r in self.records.items():
            if pid != program_profile_id:
                continue
            s = self.sessions[sid]
            out.append(
                HistoryEntry(
                    session_id=sid,
                    date=s.date,
                    class_id=s.class_id,
                    status=r.status,
                    lesson_completed=r.lesson_completed,
                    surah_name=r.surah_name,
                    ayat_from=r.ayat_from,
                    ayat_to=r.ayat_to,
                )
            )
        out.sort(key=lambda h: h.date, reverse=True)
        return out[:limit]


class InMemoryCheckIns:
    def __init__(self, teachers=()):
        self.teachers: dict[str, Teacher] = {t.id: t for t in teachers}
        self.checkins: dict[str, TeacherCheckIn] = {}
        self._next_id = _ids("CI")

    def get_teacher(self, teacher_id):
        return self.teachers.get(teacher_id)

    def get_checkin(self, check_in_id):
        return self.checkins.get(check_in_id)

    def find_checkin(self, *, teacher_id, day, shift):
        return next(
            (c for c in self.checkins.values() if c.teacher_id == teacher_id and c.date == day and c.shift == shift),
            None,
        )

    def create_checkin(self, *, teacher_id, day, shift, clock_in_time, clock_in_valid, is_late, lat=None, lng=None, notes=None):
        if self.find_checkin(teacher_id=teacher_id, day=day, shift=shift):
            raise ConflictError("Already checked in for this shift today", ErrorCode.DUPLICATE_CHECKIN)
        c = TeacherCheckIn(
            id=self._next_id(),
            teacher_id=teacher_id,
            date=day,
            shift=shift,
            clock_in_time=clock_in_time,
            clock_in_valid=clock_in_valid,
            is_late=is_late,
            clock_in_lat=lat,
            clock_in_lng=lng,
            notes=notes,
        )
        self.checkins[c.id] = c
        return c

    def record_clock_out(self, *, check_in_id, clock_out_time, lat=None, lng=None, notes=None):
        c = self.checkins.get(check_in_id)
        if not c or c.clock_out_time is not None:
            return False
        self.checkins[check_in_id] = replace(
            c, clock_out_time=clock_out_time, clock_out_lat=lat, clock_out_lng=lng, notes=notes or c.notes
        )
        return True

    def open_checkins_before(self, cutoff):
        return [c for c in self.checkins.values() if c.clock_out_time is None and c.clock_in_time < cutoff]

    def late_checkins(self, *, start_date, end_date):
        return [
            (c, self.teachers[c.teacher_id].name)
            for c in self.checkins.values()
            if c.is_late and start_date <= c.date <= end_date
        ]


class InMemoryBilling:
    def __init__(self, children_by_family=None):
        self.children_by_family = dict(children_by_family or {})

    def count_active_dugsi_children(self, family_reference_id):
        return self.children_by_family.get(family_reference_id, 0)


class InMemorySiblings:
    def __init__(self, people=None):
        # person id -> name
        self.people: dict[str, str] = dict(people or {})
        self.relationships: dict[str, SiblingRelationship] = {}
        self._next_id = _ids("SR")

    def existing_person_ids(self, person_ids):
        return {p for p in person_ids if p in self.people}

    def find_pair(self, person1_id, person2_id):
        return next(
            (r for r in self.relationships.values() if r.person1_id == person1_id and r.person2_id == person2_id),
            None,
        )

    def create(self, *, person1_id, person2_id, detection_method):
        if self.find_pair(person1_id, person2_id):
            raise ConflictError("duplicate pair", ErrorCode.UNIQUE_CONSTRAINT)
        rel = SiblingRelationship(
            id=self._next_id(), person1_id=person1_id, person2_id=person2_id, detection_method=detection_method
        )
        self.relationships[rel.id] = rel
        return rel

    def set_active(self, relationship_id, is_active):
        rel = self.relationships.get(relationship_id)
        if not rel:
            return False
        self.relationships[relationship_id] = replace(rel, is_active=is_active)
        return True

    def siblings_of(self, person_id):
        out = []
        for r in self.relationships.values():
            if not r.is_active or person_id not in (r.person1_id, r.person2_id):
                continue
            other = r.person2_id if r.person1_id == person_id else r.person1_id
            out.append(
                Sibling(person_id=other, name=self.people[other], relationship_id=r.id, detection_method=r.detection_method)
            )
        return sorted(out, key=lambda s: s.name)


def dugsi_profile(profile_id: str, *, family: Optional[str] = None) -> ProgramProfile:
    return ProgramProfile(
        id=profile_id, person_id=f"P-{profile_id}", program=Program.DUGSI, family_reference_id=family, status="enrolled"
    )


def build_services(clock, *, students=None, batches=None, classes=None, attendance=None, checkins=None, billing=None, siblings=None):
    """Container wired to in-memory repositories; unspecified repos start empty."""
    class_repo = classes or InMemoryClasses(
        classes=[DugsiClass(id="C1", name="Juz Amma", shift=Shift.MORNING, is_active=True)],
        teachers={"C1": "T1"},
    )
    class_service = ClassService(class_repo, clock=clock)
    return Container(
        duplicate_service=DuplicateService(students or InMemoryStudents(), clock=clock),
        batch_service=BatchService(batches or InMemoryBatches()),
        class_service=class_service,
        attendance_service=AttendanceService(
            attendance or InMemoryAttendance(),
            class_service,
            secret_key="test-secret",
            clock=clock,
            public_base_url="http://testserver",
        ),
        checkin_service=TeacherCheckInService(
            checkins or InMemoryCheckIns(),
            center_lat=CENTER[0],
            center_lng=CENTER[1],
            clock=clock,
        ),
        billing_service=BillingService(billing or InMemoryBilling()),
        sibling_service=SiblingService(siblings or InMemorySiblings()),
    )


def utc(y: int, m: int, d: int, hh: int = 0, mm: int = 0) -> datetime:
    return datetime(y, m, d, hh, mm, tzinfo=timezone.utc)

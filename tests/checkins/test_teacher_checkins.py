from __future__ import annotations

from datetime import date

import pytest

from src.irshad_admin.irshad_admin.checkins.geo import haversine_meters, is_within_radius
from src.irshad_admin.irshad_admin.checkins.model import Teacher
from src.irshad_admin.irshad_admin.checkins.service import AUTO_CLOCK_OUT_NOTE, TeacherCheckInService
from src.irshad_admin.irshad_admin.core.enums import Shift
from src.irshad_admin.irshad_admin.core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from tests.fakes import CENTER, InMemoryCheckIns, MutableClock, utc

LAT, LNG = CENTER


@pytest.fixture
def clock():
    return MutableClock(utc(2025, 1, 4, 8, 33))


@pytest.fixture
def repo():
    return InMemoryCheckIns(
        teachers=[
            Teacher(id="T1", name="Ustad Abdi", is_active=True, shifts=(Shift.MORNING,)),
            Teacher(id="T2", name="Macalin Fadumo", is_active=True, shifts=(Shift.MORNING, Shift.AFTERNOON)),
        ]
    )


@pytest.fixture
def svc(repo, clock):
    return TeacherCheckInService(repo, center_lat=LAT, center_lng=LNG, clock=clock)


def test_haversine_distance():
    assert haversine_meters(LAT, LNG, LAT, LNG) == 0
    # one thousandth of a degree of latitude is roughly 111 m
    assert 110 < haversine_meters(LAT, LNG, LAT + 0.001, LNG) < 112
    assert not is_within_radius(LAT, LNG, center_lat=0, center_lng=0, radius_meters=10_000_000)


def test_on_time_clock_in_at_the_center(svc):
    checkin = svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT, lng=LNG)

    assert checkin.clock_in_valid is True
    assert checkin.is_late is False
    assert checkin.date == date(2025, 1, 4)


def test_late_and_far_away_clock_in_is_still_recorded(svc, clock):
    clock.advance(minutes=10)

    checkin = svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT + 0.01, lng=LNG)

    assert checkin.is_late is True
    assert checkin.clock_in_valid is False


def test_second_clock_in_same_shift_is_rejected(svc):
    svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT, lng=LNG)

    with pytest.raises(ConflictError) as e:
        svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT, lng=LNG)

    assert e.value.code == ErrorCode.DUPLICATE_CHECKIN


def test_clock_in_outside_window(svc, clock):
    clock.advance(hours=2)

    with pytest.raises(ValidationError) as e:
        svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT, lng=LNG)

    assert e.value.code == ErrorCode.CHECKIN_WINDOW_CLOSED


def test_clock_in_for_unassigned_shift_or_unknown_teacher(svc):
    with pytest.raises(ValidationError) as e:
        svc.clock_in(teacher_id="T1", shift=Shift.AFTERNOON, lat=LAT, lng=LNG)
    assert e.value.code == ErrorCode.INVALID_SHIFT

    with pytest.raises(NotFoundError) as e:
        svc.clock_in(teacher_id="T404", shift=Shift.MORNING, lat=LAT, lng=LNG)
    assert e.value.code == ErrorCode.TEACHER_NOT_FOUND


def test_unset_center_makes_every_location_invalid(repo, clock):
    svc = TeacherCheckInService(repo, clock=clock)

    checkin = svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=0.0, lng=0.0)

    assert checkin.clock_in_valid is False


def test_admin_clock_in_needs_a_reason_and_ignores_window(svc, clock):
    with pytest.raises(ValidationError) as e:
        svc.admin_clock_in(teacher_id="T2", shift=Shift.AFTERNOON, reason=" ")
    assert e.value.code == ErrorCode.REASON_REQUIRED

    clock.advance(hours=8)
    assert not svc.window_status(Shift.AFTERNOON).is_open
    checkin = svc.admin_clock_in(teacher_id="T2", shift=Shift.AFTERNOON, reason="Phone died")

    assert checkin.clock_in_valid is False
    assert checkin.notes == "Manual check-in: Phone died"


def test_clock_out_once(svc, repo, clock):
    checkin = svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT, lng=LNG)
    clock.advance(hours=3)

    out = svc.clock_out(check_in_id=checkin.id, lat=LAT, lng=LNG)

    assert out.clock_out_time == utc(2025, 1, 4, 11, 33)
    assert repo.checkins[checkin.id].clock_out_time == out.clock_out_time
    with pytest.raises(ConflictError) as e:
        svc.clock_out(check_in_id=checkin.id)
    assert e.value.code == ErrorCode.ALREADY_CLOCKED_OUT
    with pytest.raises(NotFoundError):
        svc.clock_out(check_in_id="CI404")


def test_stale_check_ins_are_closed_at_the_shift_limit(svc, repo, clock):
    checkin = svc.clock_in(teacher_id="T1", shift=Shift.MORNING, lat=LAT, lng=LNG)
    clock.advance(hours=7)

    result = svc.auto_clock_out_stale()

    assert result.check_in_ids == (checkin.id,)
    closed = repo.checkins[checkin.id]
    assert closed.clock_out_time == utc(2025, 1, 4, 14, 33)
    assert closed.notes == AUTO_CLOCK_OUT_NOTE
    assert svc.auto_clock_out_stale().closed_count == 0


def test_late_report_lists_minutes_late(svc, clock):
    clock.advance(minutes=22)
    svc.clock_in(teacher_id="T2", shift=Shift.MORNING, lat=LAT, lng=LNG)

    report = svc.late_report(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))

    assert [(r.teacher_name, r.minutes_late) for r in report] == [("Macalin Fadumo", 25)]
    with pytest.raises(ValidationError):
        svc.late_report(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))

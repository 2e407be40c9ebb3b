from __future__ import annotations

from datetime import date

import pytest
from itsdangerous import URLSafeTimedSerializer

from src.irshad_admin.irshad_admin.core.constants import CHECKIN_TOKEN_SALT
from src.irshad_admin.irshad_admin.core.enums import AttendanceStatus
from src.irshad_admin.irshad_admin.core.exceptions import ErrorCode, ValidationError
from tests.fakes import MutableClock, build_services

SATURDAY = date(2025, 1, 4)


@pytest.fixture
def svc(fixed_now):
    return build_services(MutableClock(fixed_now)).attendance_service


def test_token_marks_student_present(svc):
    session = svc.create_session(class_id="C1", session_date=SATURDAY)

    issued = svc.issue_checkin_token(session.id)
    result = svc.check_in_with_token(token=issued.token, program_profile_id="p1")

    assert issued.url == f"http://testserver/api/attendance/checkin/{issued.token}"
    assert result.session_id == session.id
    assert svc.get_session(session.id).records[0].status == AttendanceStatus.PRESENT


def test_forged_or_garbled_token_is_rejected(svc):
    session = svc.create_session(class_id="C1", session_date=SATURDAY)
    forged = URLSafeTimedSerializer("other-secret", salt=CHECKIN_TOKEN_SALT).dumps({"session_id": session.id})

    for token in (forged, "not-a-token"):
        with pytest.raises(ValidationError) as e:
            svc.check_in_with_token(token=token, program_profile_id="p1")
        assert e.value.code == ErrorCode.INVALID_TOKEN
    assert svc.get_session(session.id).records == ()


def test_no_token_for_closed_session(svc):
    session = svc.create_session(class_id="C1", session_date=SATURDAY)
    svc.close_session(session.id)

    with pytest.raises(ValidationError) as e:
        svc.issue_checkin_token(session.id)

    assert e.value.code == ErrorCode.SESSION_CLOSED

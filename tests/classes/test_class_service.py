from __future__ import annotations

import pytest

from src.irshad_admin.irshad_admin.classes.model import DugsiClass, ProgramProfile
from src.irshad_admin.irshad_admin.classes.service import ClassService
from src.irshad_admin.irshad_admin.core.enums import Program, Shift
from src.irshad_admin.irshad_admin.core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from tests.fakes import InMemoryClasses, MutableClock, dugsi_profile


@pytest.fixture
def repo():
    return InMemoryClasses(
        classes=[
            DugsiClass(id="C1", name="Juz Amma", shift=Shift.MORNING, is_active=True),
            DugsiClass(id="C9", name="Archived", shift=Shift.AFTERNOON, is_active=False),
        ],
        profiles=[
            dugsi_profile("d1"),
            ProgramProfile(id="m1", person_id="P-m1", program=Program.MAHAD, family_reference_id=None, status="enrolled"),
        ],
    )


@pytest.fixture
def svc(repo, fixed_now):
    return ClassService(repo, clock=MutableClock(fixed_now))


def test_enroll_and_remove(svc, repo, fixed_now):
    enrollment = svc.assign_student_to_class(class_id="C1", program_profile_id="d1")

    assert enrollment.is_active and enrollment.start_date == fixed_now

    removed = svc.remove_student_from_class(enrollment_id=enrollment.id)

    assert removed.is_active is False
    assert removed.end_date == fixed_now
    assert repo.enrollments[enrollment.id].is_active is False


def test_second_active_enrollment_is_rejected(svc):
    svc.assign_student_to_class(class_id="C1", program_profile_id="d1")

    with pytest.raises(ConflictError) as e:
        svc.assign_student_to_class(class_id="C1", program_profile_id="d1")

    assert e.value.code == ErrorCode.ALREADY_ENROLLED


def test_removed_student_can_be_enrolled_again(svc, repo):
    first = svc.assign_student_to_class(class_id="C1", program_profile_id="d1")
    svc.remove_student_from_class(enrollment_id=first.id)

    again = svc.assign_student_to_class(class_id="C1", program_profile_id="d1")

    assert again.id == first.id and again.is_active
    assert len(repo.enrollments) == 1


@pytest.mark.parametrize(
    "class_id, profile_id, error, code",
    [
        ("C1", "missing", NotFoundError, ErrorCode.PROFILE_NOT_FOUND),
        ("C1", "m1", ValidationError, ErrorCode.NOT_DUGSI_PROFILE),
        ("nope", "d1", NotFoundError, ErrorCode.CLASS_NOT_FOUND),
        ("C9", "d1", ValidationError, ErrorCode.CLASS_INACTIVE),
    ],
)
def test_assign_rejections(svc, repo, class_id, profile_id, error, code):
    with pytest.raises(error) as e:
        svc.assign_student_to_class(class_id=class_id, program_profile_id=profile_id)

    assert e.value.code == code
    assert repo.enrollments == {}


def test_remove_unknown_enrollment(svc):
    with pytest.raises(NotFoundError) as e:
        svc.remove_student_from_class(enrollment_id="E404")
    assert e.value.code == ErrorCode.ENROLLMENT_NOT_FOUND

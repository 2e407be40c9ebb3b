from __future__ import annotations

from datetime import timedelta

from src.irshad_admin.irshad_admin.students.duplicates import find_duplicate_groups, normalize_email
from src.irshad_admin.irshad_admin.students.service import DuplicateService
from tests.fakes import InMemoryStudents, MutableClock, make_student, utc


def test_normalize_email_trims_and_lowercases():
    assert normalize_email("  Hodan.Ali@Example.COM ") == "hodan.ali@example.com"
    assert normalize_email("   ") is None
    assert normalize_email(None) is None


def test_groups_by_normalized_email_and_drops_singletons(fixed_now):
    students = [
        make_student("s1", email="a@x.com", created_at=utc(2024, 1, 1)),
        make_student("s2", email=" A@X.com", created_at=utc(2024, 2, 1)),
        make_student("s3", email="b@x.com", created_at=utc(2024, 3, 1)),
        make_student("s4", email=None, created_at=utc(2024, 3, 1)),
        make_student("s5", email="", created_at=utc(2024, 3, 1)),
    ]

    groups = find_duplicate_groups(students, now=fixed_now)

    assert [g.email for g in groups] == ["a@x.com"]
    assert groups[0].count == 2
    for g in groups:
        assert g.count >= 2
        assert {normalize_email(s.email) for s in (g.keep_record, *g.duplicate_records)} == {g.email}


def test_newest_record_is_kept(fixed_now):
    students = [
        make_student("old", email="a@x.com", created_at=utc(2023, 5, 1)),
        make_student("new", email="a@x.com", created_at=utc(2024, 5, 1)),
        make_student("mid", email="a@x.com", created_at=utc(2024, 1, 1)),
    ]

    (group,) = find_duplicate_groups(students, now=fixed_now)

    assert group.keep_record.id == "new"
    assert [s.id for s in group.duplicate_records] == ["mid", "old"]


def test_equal_timestamps_keep_store_order(fixed_now):
    same = utc(2024, 1, 1)
    students = [
        make_student("first", email="a@x.com", created_at=same),
        make_student("second", email="a@x.com", created_at=same),
    ]

    (group,) = find_duplicate_groups(students, now=fixed_now)

    assert group.keep_record.id == "first"


def test_group_flags(fixed_now):
    students = [
        make_student("s1", email="a@x.com", created_at=utc(2023, 1, 1), updated_at=fixed_now - timedelta(days=45)),
        make_student(
            "s2",
            email="a@x.com",
            created_at=utc(2023, 2, 1),
            updated_at=fixed_now - timedelta(days=3),
            sibling_group_id="G1",
        ),
        make_student("s3", email="b@x.com", created_at=utc(2023, 1, 1), updated_at=fixed_now - timedelta(days=90)),
        make_student("s4", email="b@x.com", created_at=utc(2023, 2, 1), updated_at=fixed_now - timedelta(days=31)),
    ]

    a, b = find_duplicate_groups(students, now=fixed_now)

    assert a.has_sibling_group is True
    assert a.has_recent_activity is True
    assert a.last_updated == fixed_now - timedelta(days=3)
    assert b.has_sibling_group is False
    assert b.has_recent_activity is False


def test_service_detection_does_not_mutate(fixed_now):
    repo = InMemoryStudents(
        [
            make_student("s1", email="a@x.com", created_at=utc(2024, 1, 1)),
            make_student("s2", email="a@x.com", created_at=utc(2024, 2, 1)),
        ]
    )
    svc = DuplicateService(repo, clock=MutableClock(fixed_now))

    groups = svc.find_duplicates()

    assert len(groups) == 1
    assert set(repo.students) == {"s1", "s2"}
    assert repo.resolutions == 0

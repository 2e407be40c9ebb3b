from __future__ import annotations

import pytest

from src.irshad_admin.irshad_admin.core.exceptions import ErrorCode, NotFoundError, ValidationError
from src.irshad_admin.irshad_admin.siblings.service import SiblingService, canonical_pair
from tests.fakes import InMemorySiblings


@pytest.fixture
def repo():
    return InMemorySiblings(people={"a": "Amina", "b": "Bilal", "c": "Cali"})


@pytest.fixture
def svc(repo):
    return SiblingService(repo)


def test_pair_is_stored_in_canonical_order(svc):
    assert canonical_pair("b", "a") == ("a", "b")

    result = svc.link(person_a="b", person_b="a")

    assert (result.relationship.person1_id, result.relationship.person2_id) == ("a", "b")
    assert result.already_linked is False


def test_linking_twice_reports_existing_edge(svc, repo):
    first = svc.link(person_a="a", person_b="b")
    second = svc.link(person_a="b", person_b="a")

    assert second.already_linked is True
    assert second.relationship.id == first.relationship.id
    assert len(repo.relationships) == 1


def test_unlink_then_relink_reuses_the_edge(svc, repo):
    first = svc.link(person_a="a", person_b="c")
    svc.unlink(person_a="c", person_b="a")

    assert svc.siblings_of("a") == []

    again = svc.link(person_a="a", person_b="c")
    assert again.relationship.id == first.relationship.id
    assert again.relationship.is_active is True
    assert len(repo.relationships) == 1


def test_siblings_seen_from_either_side(svc):
    svc.link(person_a="a", person_b="b")
    svc.link(person_a="c", person_b="a")

    assert [s.name for s in svc.siblings_of("a")] == ["Bilal", "Cali"]
    assert [s.person_id for s in svc.siblings_of("b")] == ["a"]


def test_rejections(svc):
    with pytest.raises(ValidationError) as e:
        svc.link(person_a="a", person_b="a")
    assert e.value.code == ErrorCode.SELF_SIBLING

    with pytest.raises(NotFoundError):
        svc.link(person_a="a", person_b="zzz")

    with pytest.raises(NotFoundError) as e:
        svc.unlink(person_a="a", person_b="b")
    assert e.value.code == ErrorCode.RELATIONSHIP_NOT_FOUND

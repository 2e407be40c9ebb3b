"""Pure duplicate detection and merge planning over student records."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Sequence

from ..core.constants import DUPLICATE_ACTIVITY_WINDOW_DAYS
from .model import DuplicateGroup, Student

MERGEABLE_FIELDS = ("phone", "date_of_birth", "education_level", "grade_level", "school_name")


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    value = email.strip().lower()
    return value or None


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def find_duplicate_groups(students: Iterable[Student], *, now: datetime) -> list[DuplicateGroup]:
    by_email: dict[str, list[Student]] = defaultdict(list)
    for s in students:
        key = normalize_email(s.email)
        if key:
            by_email[key].append(s)

    cutoff = _aware(now) - timedelta(days=DUPLICATE_ACTIVITY_WINDOW_DAYS)
    groups: list[DuplicateGroup] = []
    for email in sorted(by_email):
        members = by_email[email]
        if len(members) < 2:
            continue
        # sorted() is stable: equal timestamps keep store order
        ordered = sorted(members, key=lambda s: _aware(s.created_at), reverse=True)
        groups.append(
            DuplicateGroup(
                email=email,
                count=len(ordered),
                keep_record=ordered[0],
                duplicate_records=tuple(ordered[1:]),
                has_sibling_group=any(s.sibling_group_id for s in ordered),
                has_recent_activity=any(_aware(s.updated_at) >= cutoff for s in ordered),
                last_updated=max(s.updated_at for s in ordered),
            )
        )
    return groups


def merge_order(candidates: Sequence[Student], delete_ids: Sequence[str]) -> list[Student]:
    """Most recently created first; caller order breaks ties."""
    position = {sid: i for i, sid in enumerate(delete_ids)}
    return sorted(
        candidates,
        key=lambda s: (-_aware(s.created_at).timestamp(), position.get(s.id, len(position))),
    )


def plan_merge(keep: Student, candidates: Sequence[Student], delete_ids: Sequence[str]) -> dict[str, Any]:
    """Values to copy onto ``keep``; populated keep fields are never touched."""
    updates: dict[str, Any] = {}
    ordered = merge_order(candidates, delete_ids)
    for field_name in MERGEABLE_FIELDS:
        if not is_blank(getattr(keep, field_name)):
            continue
        for candidate in ordered:
            value = getattr(candidate, field_name)
            if not is_blank(value):
                updates[field_name] = value
                break
    return updates

"""Weekend session window rules.

A session is writable until the end of its weekend: a Saturday session stays
open through Sunday, a Sunday session through the same day. After that it is
closed whether or not anyone pressed "close".
"""

from __future__ import annotations

from datetime import date, timedelta

SATURDAY = 5
SUNDAY = 6


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def window_end_date(session_date: date) -> date:
    if session_date.weekday() == SATURDAY:
        return session_date + timedelta(days=1)
    return session_date


def is_effectively_closed(*, is_closed: bool, session_date: date, today: date) -> bool:
    """``today`` is the calendar date in the attendance time zone."""
    return bool(is_closed) or today > window_end_date(session_date)

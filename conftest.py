from __future__ import annotations

from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Saturday morning
    return datetime(2025, 1, 4, 10, 0, 0, tzinfo=timezone.utc)

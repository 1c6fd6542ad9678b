from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fanout.utils import ensure_utc, format_time_ago, to_storage_datetime

REFERENCE = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3), "3h ago"),
        (timedelta(days=2), "2d ago"),
        (timedelta(days=45), "2024-01-25"),
    ],
)
def test_format_time_ago(age, expected):
    assert format_time_ago(REFERENCE - age, now=REFERENCE) == expected


def test_storage_datetimes_are_naive_utc():
    local = datetime(2024, 3, 10, 14, 0, tzinfo=timezone(timedelta(hours=2)))

    stored = to_storage_datetime(local)

    assert stored == datetime(2024, 3, 10, 12, 0)
    assert ensure_utc(stored) == REFERENCE

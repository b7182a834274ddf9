from __future__ import annotations

from datetime import timedelta

import pytest

from movie_feed.core.durations import DurationError, parse_duration, whole_days


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("5m", timedelta(minutes=5)),
        ("5h", timedelta(hours=5)),
        ("52w", timedelta(weeks=52)),
        ("3 days", timedelta(days=3)),
        ("1h 30m", timedelta(hours=1, minutes=30)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("250ms", timedelta(milliseconds=250)),
        ("1M", timedelta(seconds=2_630_016)),
        ("1y", timedelta(days=365, hours=6)),
        ("  10sec ", timedelta(seconds=10)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "5", "h", "5 fortnights", "-5m", "1.5h"])
def test_parse_duration_rejects(text):
    with pytest.raises(DurationError):
        parse_duration(text)


def test_whole_days():
    assert whole_days(timedelta(days=2, hours=23)) == timedelta(days=2)
    assert whole_days(timedelta(hours=5)) == timedelta()

"""Parsing of human friendly durations such as ``5h``, ``52w`` or ``2 months``."""
from __future__ import annotations

from datetime import timedelta


class DurationError(ValueError):
    """Raised when a duration string cannot be parsed."""


# Units are matched case-sensitively: ``m`` is minutes and ``M`` is months.
_UNITS: dict[str, timedelta] = {}


def _register(delta: timedelta, *names: str) -> None:
    for name in names:
        _UNITS[name] = delta


_register(timedelta(microseconds=0.001), "nanos", "nsec", "ns")
_register(timedelta(microseconds=1), "micros", "usec", "us")
_register(timedelta(milliseconds=1), "millis", "msec", "ms")
_register(timedelta(seconds=1), "seconds", "second", "secs", "sec", "s")
_register(timedelta(minutes=1), "minutes", "minute", "mins", "min", "m")
_register(timedelta(hours=1), "hours", "hour", "hrs", "hr", "h")
_register(timedelta(days=1), "days", "day", "d")
_register(timedelta(weeks=1), "weeks", "week", "w")
# 30.44 days and 365.25 days respectively
_register(timedelta(seconds=2_630_016), "months", "month", "M")
_register(timedelta(seconds=31_557_600), "years", "year", "y")


def _supported_units() -> str:
    return ", ".join(sorted(_UNITS))


def parse_duration(text: str) -> timedelta:
    """Parse ``text`` into a :class:`~datetime.timedelta`.

    The grammar is a sequence of ``<integer><unit>`` pairs with optional
    whitespace between them, for example ``1h 30m`` or ``1h30m``.
    """

    value = text.strip()
    if not value:
        raise DurationError("value was empty")

    total = timedelta()
    index = 0
    length = len(value)
    while index < length:
        while index < length and value[index].isspace():
            index += 1
        if index >= length:
            break

        start = index
        while index < length and value[index].isascii() and value[index].isdigit():
            index += 1
        if start == index:
            raise DurationError(f"expected number at {start}")
        number = int(value[start:index])

        while index < length and value[index].isspace():
            index += 1

        unit_start = index
        while index < length and value[index].isalpha():
            index += 1
        unit = value[unit_start:index]
        if not unit:
            raise DurationError("time unit needed, for example 5sec or 5ms")

        delta = _UNITS.get(unit)
        if delta is None:
            raise DurationError(f"unknown time unit {unit!r}, supported units: {_supported_units()}")

        try:
            total += delta * number
        except OverflowError as exc:
            raise DurationError("number is too large") from exc

    return total


def whole_days(delta: timedelta) -> timedelta:
    """Drop any sub-day component from ``delta``."""

    return timedelta(days=delta.days)


__all__ = ["DurationError", "parse_duration", "whole_days"]

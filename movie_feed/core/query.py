"""Query string arguments accepted by the combined credits feed."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional, TypeVar

from movie_feed.core.durations import DurationError, parse_duration, whole_days
from movie_feed.core.logging import get_logger

logger = get_logger("core.query")

DEFAULT_SIZE = 20
MAX_SIZE = 50
USIZE_MAX = 2**64 - 1

T = TypeVar("T")


class QueryArgsError(ValueError):
    """Raised when the query string cannot be turned into :class:`QueryArgs`."""


# ----------------------------------------------------------------------
# size
# ----------------------------------------------------------------------
def parse_size(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_SIZE
    if raw == "":
        raise QueryArgsError("size: cannot parse integer from empty string")
    digits = raw[1:] if raw.startswith("+") else raw
    if not (digits and digits.isascii() and digits.isdigit()):
        raise QueryArgsError("size: invalid digit found in string")
    value = int(digits)
    if value > USIZE_MAX:
        raise QueryArgsError("size: number too large to fit in target type")
    if value == 0:
        raise QueryArgsError("size: invalid value: integer `0`, expected a nonzero usize")
    if value > MAX_SIZE:
        raise QueryArgsError("size: size must not exceed the max size")
    return value


# ----------------------------------------------------------------------
# sort order
# ----------------------------------------------------------------------
class SortOrder(str, Enum):
    DESCENDING = "Descending"
    ASCENDING = "Ascending"

    @classmethod
    def parse(cls, raw: str | None) -> "SortOrder":
        if raw is None:
            return cls.DESCENDING
        try:
            return cls(raw)
        except ValueError:
            raise QueryArgsError(
                f"sort_order: unknown variant `{raw}`, expected `Descending` or `Ascending`"
            ) from None

    def sort(self, items: Iterable[T], key: Callable[[T], Optional[date]]) -> list[T]:
        """Return ``items`` sorted by release date, keeping ties in input order.

        Descending lists undated items first followed by the newest dates,
        ascending lists the oldest dates first and undated items last.
        """

        def descending(item: T) -> tuple[int, int]:
            value = key(item)
            return (0, 0) if value is None else (1, -value.toordinal())

        def ascending(item: T) -> tuple[int, int]:
            value = key(item)
            return (1, 0) if value is None else (0, value.toordinal())

        return sorted(items, key=descending if self is SortOrder.DESCENDING else ascending)


# ----------------------------------------------------------------------
# release status
# ----------------------------------------------------------------------
def _shift(today: date, delta: timedelta, sign: int) -> date | None:
    try:
        return today + whole_days(delta) * sign
    except OverflowError:
        return None


def _before_max_time_until_release(release: date, today: date, bound: timedelta | None) -> bool:
    if bound is None:
        return True
    limit = _shift(today, bound, 1)
    return limit is not None and release < limit


def _after_max_age(release: date, today: date, bound: timedelta | None) -> bool:
    if bound is None:
        return True
    limit = _shift(today, bound, -1)
    return limit is not None and release >= limit


class ReleaseStatus:
    """Base class of the release status filters selected by ``release_status``."""

    TAG: str = ""

    def check(self, release_date: date | None, today: date) -> bool:
        raise NotImplementedError

    @staticmethod
    def parse(params: Mapping[str, str]) -> "ReleaseStatus":
        """Build the filter named by ``release_status``.

        A missing or unknown tag, or a malformed duration, selects the default
        :class:`HasReleaseDate` filter.
        """

        tag = params.get("release_status")
        variant = _VARIANTS.get(tag or "")
        if variant is None:
            if tag is not None:
                logger.debug("unknown release_status %r, using the default", tag)
            return HasReleaseDate()

        try:
            status = variant.from_params(params)
        except DurationError as exc:
            logger.debug("invalid duration for release_status %s: %s", tag, exc)
            return HasReleaseDate()
        status.validate()
        return status

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "ReleaseStatus":
        return cls()

    def validate(self) -> None:
        return None


def _duration(params: Mapping[str, str], name: str) -> timedelta | None:
    raw = params.get(name)
    return None if raw is None else parse_duration(raw)


@dataclass(frozen=True)
class Unreleased(ReleaseStatus):
    """Undated credits, or credits releasing after today within ``max_time_until_release``."""

    TAG = "Unreleased"

    max_time_until_release: timedelta | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "Unreleased":
        return cls(max_time_until_release=_duration(params, "max_time_until_release"))

    def check(self, release_date: date | None, today: date) -> bool:
        if release_date is None:
            return True
        if release_date <= today:
            return False
        return _before_max_time_until_release(release_date, today, self.max_time_until_release)


@dataclass(frozen=True)
class Released(ReleaseStatus):
    """Credits released on or before today, optionally bounded by age."""

    TAG = "Released"

    max_age: timedelta | None = None
    min_age: timedelta | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "Released":
        return cls(max_age=_duration(params, "max_age"), min_age=_duration(params, "min_age"))

    def validate(self) -> None:
        if self.max_age is not None and self.min_age is not None and self.max_age < self.min_age:
            raise QueryArgsError("max_age must be larger than min_age")

    def check(self, release_date: date | None, today: date) -> bool:
        if release_date is None or release_date > today:
            return False
        if not _after_max_age(release_date, today, self.max_age):
            return False
        if self.min_age is not None:
            limit = _shift(today, self.min_age, -1)
            if limit is None or release_date > limit:
                return False
        return True


@dataclass(frozen=True)
class HasReleaseDate(ReleaseStatus):
    """Any dated credit, optionally bounded on either side of today."""

    TAG = "HasReleaseDate"

    max_time_until_release: timedelta | None = None
    max_age: timedelta | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "HasReleaseDate":
        return cls(
            max_time_until_release=_duration(params, "max_time_until_release"),
            max_age=_duration(params, "max_age"),
        )

    def check(self, release_date: date | None, today: date) -> bool:
        if release_date is None:
            return False
        return _before_max_time_until_release(
            release_date, today, self.max_time_until_release
        ) and _after_max_age(release_date, today, self.max_age)


@dataclass(frozen=True)
class NoReleaseDate(ReleaseStatus):
    TAG = "NoReleaseDate"

    def check(self, release_date: date | None, today: date) -> bool:
        return release_date is None


@dataclass(frozen=True)
class All(ReleaseStatus):
    TAG = "All"

    def check(self, release_date: date | None, today: date) -> bool:
        return True


_VARIANTS: dict[str, type[ReleaseStatus]] = {
    variant.TAG: variant for variant in (Unreleased, Released, HasReleaseDate, NoReleaseDate, All)
}


# ----------------------------------------------------------------------
# combined
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QueryArgs:
    size: int = DEFAULT_SIZE
    release_status: ReleaseStatus = field(default_factory=HasReleaseDate)
    sort_order: SortOrder = SortOrder.DESCENDING

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "QueryArgs":
        return cls(
            size=parse_size(params.get("size")),
            release_status=ReleaseStatus.parse(params),
            sort_order=SortOrder.parse(params.get("sort_order")),
        )


__all__ = [
    "All",
    "DEFAULT_SIZE",
    "HasReleaseDate",
    "MAX_SIZE",
    "NoReleaseDate",
    "QueryArgs",
    "QueryArgsError",
    "ReleaseStatus",
    "Released",
    "SortOrder",
    "Unreleased",
    "parse_size",
]

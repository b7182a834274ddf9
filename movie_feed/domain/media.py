"""Small value types shared by the TMDB models."""
from __future__ import annotations

from enum import Enum, IntEnum

TMDB_SITE_URL = "https://www.themoviedb.org/"
IMDB_SITE_URL = "https://www.imdb.com/"


class MediaType(str, Enum):
    MOVIE = "movie"
    TV = "tv"

    @classmethod
    def parse(cls, value: str | None) -> "MediaType | None":
        """Parse a TMDB ``media_type`` value, returning ``None`` when unknown."""

        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return "Movie" if self is MediaType.MOVIE else "TV"

    @property
    def url_prefix(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.label


class CreditType(str, Enum):
    CAST = "Cast"
    CREW = "Crew"

    def __str__(self) -> str:
        return self.value


class Gender(IntEnum):
    NOT_SPECIFIED = 0
    FEMALE = 1
    MALE = 2
    NON_BINARY = 3

    @classmethod
    def from_code(cls, code: object) -> "Gender":
        try:
            return cls(int(code))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return cls.NOT_SPECIFIED


__all__ = ["CreditType", "Gender", "IMDB_SITE_URL", "MediaType", "TMDB_SITE_URL"]

"""Domain layer definitions."""

from .credits import (
    CombinedCredits,
    Credit,
    MovieCast,
    MovieCrew,
    PersonDetails,
    TvCast,
    TvCrew,
)
from .genres import Genre
from .media import CreditType, Gender, MediaType

__all__ = [
    "CombinedCredits",
    "Credit",
    "CreditType",
    "Gender",
    "Genre",
    "MediaType",
    "MovieCast",
    "MovieCrew",
    "PersonDetails",
    "TvCast",
    "TvCrew",
]

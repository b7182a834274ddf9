"""Models for TMDB person details and combined credits."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar, Iterator, Optional, Protocol, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from movie_feed.core.logging import get_logger
from movie_feed.domain.genres import Genre
from movie_feed.domain.media import IMDB_SITE_URL, TMDB_SITE_URL, CreditType, Gender, MediaType

logger = get_logger("domain.credits")


def parse_release_date(value: Any) -> date | None:
    """Parse a TMDB ``YYYY-MM-DD`` date, mapping empty or malformed values to ``None``."""

    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _empty_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value:
        return None
    return value


class Credit(Protocol):
    """Read-only view shared by cast and crew credits of either media type."""

    id: int

    @property
    def title(self) -> str: ...

    @property
    def original_title(self) -> str: ...

    @property
    def release_date(self) -> date | None: ...

    @property
    def genres(self) -> list[Genre]: ...

    @property
    def media_type(self) -> MediaType: ...

    @property
    def credit_type(self) -> CreditType: ...

    @property
    def tmdb_media_url(self) -> str: ...

    overview: Optional[str]
    original_language: str
    credit_id: Optional[str]


class PersonDetails(BaseModel):
    """Subset of ``GET /3/person/{id}`` used by the feed."""

    adult: bool = True
    also_known_as: list[str] = Field(default_factory=list)
    biography: Optional[str] = None
    birthday: Optional[date] = None
    deathday: Optional[date] = None
    gender: Gender = Gender.NOT_SPECIFIED
    homepage: Optional[str] = None
    id: int = 0
    imdb_id: Optional[str] = None
    known_for_department: str
    name: str
    place_of_birth: Optional[str] = None
    popularity: float = 0.0
    profile_path: Optional[str] = None

    @field_validator("birthday", "deathday", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> date | None:
        return parse_release_date(value)

    @field_validator("gender", mode="before")
    @classmethod
    def _parse_gender(cls, value: Any) -> Gender:
        return Gender.from_code(value)

    @field_validator("imdb_id", "homepage", mode="before")
    @classmethod
    def _blank_optional(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @property
    def tmdb_url(self) -> str:
        return f"{TMDB_SITE_URL}person/{self.id}"

    @property
    def imdb_url(self) -> str | None:
        if not self.imdb_id:
            return None
        return f"{IMDB_SITE_URL}name/{self.imdb_id}"


class _CreditBase(BaseModel):
    MEDIA_TYPE: ClassVar[MediaType]
    CREDIT_TYPE: ClassVar[CreditType]
    TITLE_FIELDS: ClassVar[tuple[str, str]]
    DATE_FIELD: ClassVar[str]

    id: int
    genre_ids: list[int] = Field(default_factory=list)
    overview: Optional[str] = None
    original_language: str = ""
    credit_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_titles(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        primary, secondary = cls.TITLE_FIELDS
        data = dict(data)
        first = _empty_to_none(data.get(primary))
        second = _empty_to_none(data.get(secondary))
        if first is None and second is None:
            raise ValueError(f"missing field `{primary} or {secondary}`")
        data[primary] = first if first is not None else second
        data[secondary] = second if second is not None else first
        data[cls.DATE_FIELD] = parse_release_date(data.get(cls.DATE_FIELD))
        data.pop("media_type", None)
        return data

    @field_validator("overview", "credit_id", mode="before")
    @classmethod
    def _blank_optional(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @field_validator("original_language", mode="before")
    @classmethod
    def _language(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def media_type(self) -> MediaType:
        return self.MEDIA_TYPE

    @property
    def credit_type(self) -> CreditType:
        return self.CREDIT_TYPE

    @property
    def genres(self) -> list[Genre]:
        lookup = Genre.movie if self.MEDIA_TYPE is MediaType.MOVIE else Genre.tv
        return [lookup(genre_id) for genre_id in self.genre_ids]

    @property
    def tmdb_media_url(self) -> str:
        return f"{TMDB_SITE_URL}{self.MEDIA_TYPE.url_prefix}/{self.id}"


class _MovieCredit(_CreditBase):
    MEDIA_TYPE: ClassVar[MediaType] = MediaType.MOVIE
    TITLE_FIELDS: ClassVar[tuple[str, str]] = ("title", "original_title")
    DATE_FIELD: ClassVar[str] = "release_date"

    title: str
    original_title: str
    release_date: Optional[date] = None


class _TvCredit(_CreditBase):
    MEDIA_TYPE: ClassVar[MediaType] = MediaType.TV
    TITLE_FIELDS: ClassVar[tuple[str, str]] = ("name", "original_name")
    DATE_FIELD: ClassVar[str] = "first_air_date"

    name: str
    original_name: str
    first_air_date: Optional[date] = None

    @property
    def title(self) -> str:
        return self.name

    @property
    def original_title(self) -> str:
        return self.original_name

    @property
    def release_date(self) -> date | None:
        return self.first_air_date


class _CastFields(BaseModel):
    CREDIT_TYPE: ClassVar[CreditType] = CreditType.CAST

    character: Optional[str] = None

    @field_validator("character", mode="before")
    @classmethod
    def _blank_character(cls, value: Any) -> Any:
        return _empty_to_none(value)


class _CrewFields(BaseModel):
    CREDIT_TYPE: ClassVar[CreditType] = CreditType.CREW

    department: str
    job: str


class MovieCast(_CastFields, _MovieCredit):
    pass


class TvCast(_CastFields, _TvCredit):
    pass


class MovieCrew(_CrewFields, _MovieCredit):
    pass


class TvCrew(_CrewFields, _TvCredit):
    pass


CastCredit = Union[MovieCast, TvCast]
CrewCredit = Union[MovieCrew, TvCrew]

_CAST_MODELS: dict[MediaType, type[_CreditBase]] = {MediaType.MOVIE: MovieCast, MediaType.TV: TvCast}
_CREW_MODELS: dict[MediaType, type[_CreditBase]] = {MediaType.MOVIE: MovieCrew, MediaType.TV: TvCrew}


def discern_media_type(entry: dict[str, Any]) -> MediaType | None:
    """Return the media type of a raw credit, inferring it from its keys when absent."""

    raw = entry.get("media_type")
    if raw is not None:
        return MediaType.parse(str(raw))
    if "title" in entry or "original_title" in entry:
        return MediaType.MOVIE
    if "name" in entry or "original_name" in entry:
        return MediaType.TV
    return None


def _parse_credits(entries: Any, models: dict[MediaType, type[_CreditBase]]) -> Any:
    if not isinstance(entries, list):
        return entries

    parsed: list[Any] = []
    for entry in entries:
        if not isinstance(entry, dict):
            parsed.append(entry)
            continue
        media_type = discern_media_type(entry)
        if media_type is None:
            logger.warning(
                "Skipping credit %s: unable to discern the media type (%r)",
                entry.get("id"),
                entry.get("media_type"),
            )
            continue
        parsed.append(models[media_type].model_validate(entry))
    return parsed


class CombinedCredits(BaseModel):
    """Payload of ``GET /3/person/{id}/combined_credits``."""

    id: Optional[int] = None
    cast: list[CastCredit] = Field(default_factory=list)
    crew: list[CrewCredit] = Field(default_factory=list)

    @field_validator("cast", mode="before")
    @classmethod
    def _parse_cast(cls, value: Any) -> Any:
        return _parse_credits(value, _CAST_MODELS)

    @field_validator("crew", mode="before")
    @classmethod
    def _parse_crew(cls, value: Any) -> Any:
        return _parse_credits(value, _CREW_MODELS)

    def all_credits(self) -> Iterator[Credit]:
        """Yield every cast credit followed by every crew credit."""

        yield from self.cast
        yield from self.crew


__all__ = [
    "CastCredit",
    "CombinedCredits",
    "Credit",
    "CrewCredit",
    "MovieCast",
    "MovieCrew",
    "PersonDetails",
    "TvCast",
    "TvCrew",
    "discern_media_type",
    "parse_release_date",
]

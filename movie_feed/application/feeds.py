"""Application service that turns TMDB credits into RSS channels."""
from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Callable

from movie_feed.core.logging import get_logger
from movie_feed.core.query import QueryArgs
from movie_feed.core.rss import RSS_DOCS_URL, Category, Channel, Guid, Item
from movie_feed.core.sanitise import sanitise_text
from movie_feed.domain import CombinedCredits, Credit, CreditType, PersonDetails
from movie_feed.infrastructure import TmdbClient
from movie_feed.infrastructure.tmdb import DEFAULT_CACHE_TTL

logger = get_logger("application.feeds")

GENERATOR = "Movie Feed"
LAST_BUILD_DATE_FORMAT = "%a, %d %b %Y %H:%M %Z"
RELEASE_DATE_FORMAT = "%d-%b-%Y"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def credit_guid(credit: Credit) -> Guid:
    """Stable, non-permalink identifier for a credit."""

    release_date = credit.release_date.isoformat() if credit.release_date else ""
    fingerprint = "\x1f".join(
        [
            str(credit.id),
            credit.title,
            release_date,
            credit.media_type.value,
            credit.credit_type.value,
        ]
    )
    digest = hashlib.sha256(fingerprint.encode("utf-8")).digest()
    return Guid(value=str(int.from_bytes(digest[:8], "big")), permalink=False)


def credit_item(credit: Credit) -> Item:
    """Render a single credit as an RSS item."""

    categories = [Category(sanitise_text(credit.media_type.label))]

    parts = ["<p>"]
    if credit.credit_type is CreditType.CAST:
        character = getattr(credit, "character", None)
        parts.append("Character: ")
        if character is None:
            parts.append("TBA")
        else:
            parts.append(character)
            categories.append(Category(sanitise_text(character)))
    else:
        parts.append(f"Department: {credit.department}<br>Job: {credit.job}")  # type: ignore[attr-defined]

    genres = credit.genres
    parts.append("<br>Genres: ")
    parts.append(", ".join(genre.name for genre in genres))
    categories.extend(Category(genre.name) for genre in genres)

    parts.append(f"<br>Language: {credit.original_language}")
    parts.append("<br>Release Date: ")
    parts.append(credit.release_date.strftime(RELEASE_DATE_FORMAT) if credit.release_date else "TBA")

    if credit.overview:
        parts.append(f"</p><p>{credit.overview}</p>")

    return Item(
        title=credit.title,
        link=credit.tmdb_media_url,
        description=sanitise_text("".join(parts)),
        categories=categories,
        guid=credit_guid(credit),
    )


class FeedService:
    """Builds the combined credits channel for a person."""

    def __init__(
        self,
        tmdb: TmdbClient,
        *,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._tmdb = tmdb
        self._cache_ttl = cache_ttl
        self._clock = clock

    def select_credits(self, credits: CombinedCredits, query: QueryArgs, now: datetime) -> list[Credit]:
        today = now.astimezone(timezone.utc).date()
        matching = [
            credit
            for credit in credits.all_credits()
            if query.release_status.check(credit.release_date, today)
        ]
        ordered = query.sort_order.sort(matching, key=lambda credit: credit.release_date)
        return ordered[: query.size]

    def build_channel(
        self,
        person: PersonDetails,
        credits: CombinedCredits,
        query: QueryArgs,
    ) -> Channel:
        now = self._clock()
        items = [credit_item(credit) for credit in self.select_credits(credits, query, now)]

        return Channel(
            title=sanitise_text(f"{person.name} - Combined Credits"),
            link=person.tmdb_url,
            description=sanitise_text(person.biography) if person.biography else "",
            last_build_date=now.astimezone(timezone.utc).strftime(LAST_BUILD_DATE_FORMAT),
            generator=GENERATOR,
            docs=RSS_DOCS_URL,
            # RSS ttl is expressed in minutes
            ttl=max(self._cache_ttl // 60, 1) if self._cache_ttl > 0 else None,
            items=items,
        )

    async def combined_credits_feed(self, person_id: int, query: QueryArgs) -> Channel:
        person = await self._tmdb.get_person_details(person_id)
        credits = await self._tmdb.get_combined_credits(person_id)
        logger.debug(
            "building feed for person %s from %d cast and %d crew credits",
            person_id,
            len(credits.cast),
            len(credits.crew),
        )
        return self.build_channel(person, credits, query)


_service: FeedService | None = None


def configure_feed_service(service: FeedService | None) -> None:
    """Install the feed service used by the HTTP routes."""

    global _service
    _service = service


def get_feed_service() -> FeedService:
    """Return the singleton feed service for the process."""

    if _service is None:
        raise RuntimeError("feed service has not been configured")
    return _service


__all__ = [
    "FeedService",
    "configure_feed_service",
    "credit_guid",
    "credit_item",
    "get_feed_service",
    "utc_now",
]

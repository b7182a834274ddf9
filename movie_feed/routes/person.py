from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from movie_feed.application import FeedService, get_feed_service
from movie_feed.core.logging import get_logger
from movie_feed.core.query import QueryArgs, QueryArgsError
from movie_feed.core.rss import RSS_CONTENT_TYPE
from movie_feed.infrastructure import RequestError, TmdbError

logger = get_logger("routes.person")

router = APIRouter(prefix="/person", tags=["person"])

PERSON_ID_MIN = -(2**31)
PERSON_ID_MAX = 2**31 - 1


class PersonIdError(ValueError):
    """Raised when the path segment is not a 32-bit person id."""


def parse_person_id(raw: str) -> int:
    digits = raw[1:] if raw[:1] in ("+", "-") else raw
    if not (digits and digits.isascii() and digits.isdigit()):
        raise PersonIdError(f"Invalid URL: Cannot parse `{raw}` to a `i32`")
    value = int(raw)
    if not PERSON_ID_MIN <= value <= PERSON_ID_MAX:
        raise PersonIdError(f"Invalid URL: Cannot parse `{raw}` to a `i32`")
    return value


def tmdb_error_response(error: RequestError) -> Response:
    """Map a failed TMDB request onto the response returned to the client."""

    if isinstance(error, TmdbError):
        level = error.kind.log_level
        if level is not None:
            logger.log(level, "%s", error)
        return PlainTextResponse(
            f"error received from tmdb: {error.message}",
            status_code=error.status_code,
        )

    logger.warning("%s", error)
    return Response(status_code=500)


@router.get("/{person_id}/combined_credits")
async def combined_credits(
    person_id: str,
    request: Request,
    service: FeedService = Depends(get_feed_service),
) -> Response:
    try:
        tmdb_id = parse_person_id(person_id)
    except PersonIdError as exc:
        return PlainTextResponse(str(exc), status_code=400)

    try:
        query = QueryArgs.from_query(request.query_params)
    except QueryArgsError as exc:
        return PlainTextResponse(f"Failed to deserialize query string: {exc}", status_code=400)

    try:
        channel = await service.combined_credits_feed(tmdb_id, query)
    except RequestError as exc:
        return tmdb_error_response(exc)

    return Response(content=channel.to_xml(), media_type=RSS_CONTENT_TYPE)

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import PERSON_ID, TOKEN, FakeTmdb
from movie_feed.domain import Gender, MediaType, MovieCast, TvCast, TvCrew
from movie_feed.infrastructure import (
    TmdbClient,
    TmdbError,
    TmdbErrorKind,
    TmdbTransportError,
    UnknownTmdbError,
)


def test_person_details_request_and_parse(tmdb_client: TmdbClient, fake_tmdb: FakeTmdb):
    details = asyncio.run(tmdb_client.get_person_details(PERSON_ID))

    request = fake_tmdb.requests[0]
    assert str(request.url) == "https://tmdb.test/3/person/19498"
    assert request.headers["authorization"] == f"Bearer {TOKEN}"

    assert details.name == "Jon Bernthal"
    assert details.gender is Gender.MALE
    assert details.birthday.isoformat() == "1976-09-20"
    assert details.deathday is None
    assert details.tmdb_url == "https://www.themoviedb.org/person/19498"
    assert details.imdb_url == "https://www.imdb.com/name/nm1256532"


def test_combined_credits_parse(tmdb_client: TmdbClient):
    credits = asyncio.run(tmdb_client.get_combined_credits(PERSON_ID))

    assert credits.id == PERSON_ID
    # the "person" entry cannot be mapped to a movie or show and is skipped
    assert [credit.id for credit in credits.cast] == [100, 200, 101, 102, 201, 103, 104, 202]
    assert [credit.id for credit in credits.crew] == [105, 203, 106]

    inferred = credits.cast[3]
    assert isinstance(inferred, MovieCast)
    assert inferred.title == "The Accountant 2"

    show = credits.cast[7]
    assert isinstance(show, TvCast)
    assert show.media_type is MediaType.TV
    assert show.title == "Show Original"

    assert isinstance(credits.crew[1], TvCrew)
    assert credits.crew[2].title == "Original Only"
    assert credits.crew[2].release_date is None


def test_results_are_cached(tmdb_client: TmdbClient, fake_tmdb: FakeTmdb):
    async def scenario():
        first = await tmdb_client.get_combined_credits(PERSON_ID)
        second = await tmdb_client.get_combined_credits(PERSON_ID)
        await tmdb_client.get_person_details(PERSON_ID)
        await tmdb_client.get_person_details(PERSON_ID)
        return first, second

    first, second = asyncio.run(scenario())

    assert first is second
    assert fake_tmdb.paths() == ["/3/person/19498/combined_credits", "/3/person/19498"]


def test_concurrent_requests_share_one_upstream_call(tmdb_client: TmdbClient, fake_tmdb: FakeTmdb):
    async def scenario():
        return await asyncio.gather(*(tmdb_client.get_person_details(PERSON_ID) for _ in range(5)))

    results = asyncio.run(scenario())

    assert len(fake_tmdb.requests) == 1
    assert all(result is results[0] for result in results)


def test_errors_are_not_cached(tmdb_client: TmdbClient, fake_tmdb: FakeTmdb):
    async def scenario():
        for _ in range(2):
            with pytest.raises(TmdbError):
                await tmdb_client.get_person_details(6)

    asyncio.run(scenario())

    assert len(fake_tmdb.requests) == 2


def test_cache_can_be_disabled(http_client: httpx.AsyncClient, fake_tmdb: FakeTmdb):
    client = TmdbClient(TOKEN, api_url="https://tmdb.test", http_client=http_client, cache_ttl=0)

    async def scenario():
        await client.get_person_details(PERSON_ID)
        await client.get_person_details(PERSON_ID)

    asyncio.run(scenario())

    assert len(fake_tmdb.requests) == 2


def test_documented_error_is_mapped(tmdb_client: TmdbClient):
    with pytest.raises(TmdbError) as excinfo:
        asyncio.run(tmdb_client.get_person_details(6))

    assert excinfo.value.kind is TmdbErrorKind.INVALID_ID
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Invalid id: The pre-requisite id is invalid or not found."


def test_invalid_token_is_reported(http_client: httpx.AsyncClient):
    client = TmdbClient("wrong", api_url="https://tmdb.test/", http_client=http_client)

    with pytest.raises(TmdbError) as excinfo:
        asyncio.run(client.get_person_details(PERSON_ID))

    assert excinfo.value.kind is TmdbErrorKind.INVALID_API_KEY


def test_unknown_status_is_reported(tmdb_client: TmdbClient, fake_tmdb: FakeTmdb):
    fake_tmdb.fail_with = httpx.Response(418, text="teapot")

    with pytest.raises(UnknownTmdbError) as excinfo:
        asyncio.run(tmdb_client.get_person_details(PERSON_ID))

    assert excinfo.value.status_code == 418
    assert excinfo.value.tmdb_code is None


def test_invalid_body_is_a_transport_error(tmdb_client: TmdbClient, fake_tmdb: FakeTmdb):
    fake_tmdb.fail_with = httpx.Response(200, json={"id": 1})

    with pytest.raises(TmdbTransportError):
        asyncio.run(tmdb_client.get_person_details(PERSON_ID))


def test_connection_failure_is_a_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = TmdbClient(TOKEN, http_client=http_client)

    with pytest.raises(TmdbTransportError):
        asyncio.run(client.get_combined_credits(PERSON_ID))


def test_api_url_must_be_absolute():
    with pytest.raises(ValueError):
        TmdbClient(TOKEN, api_url="tmdb.test/")

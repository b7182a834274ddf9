from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from movie_feed.application import configure_feed_service
from movie_feed.infrastructure import TmdbClient, configure_tmdb_client

ASSETS = Path(__file__).resolve().parent / "assets" / "tmdb"
TOKEN = "test-token"
PERSON_ID = 19498
FIXED_NOW = datetime(2025, 5, 21, 18, 20, 44, tzinfo=timezone.utc)

# person ids that make the fake API answer with a documented TMDB error
ERROR_RESPONSES: dict[int, tuple[int, int]] = {
    6: (404, 6),
    7: (401, 7),
    25: (429, 25),
}


def load_asset(relative: str) -> dict:
    return json.loads((ASSETS / relative).read_text(encoding="utf-8"))


class FakeTmdb:
    """Stand-in for the TMDB API served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.fail_with: httpx.Response | None = None

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401, json={"status_code": 7, "status_message": "Invalid API key"})
        if self.fail_with is not None:
            return self.fail_with

        parts = request.url.path.strip("/").split("/")
        if len(parts) < 3 or parts[:2] != ["3", "person"] or not parts[2].isdigit():
            return httpx.Response(404, json={"status_code": 34, "success": False})

        person_id = int(parts[2])
        if person_id in ERROR_RESPONSES:
            status, code = ERROR_RESPONSES[person_id]
            return httpx.Response(status, json={"status_code": code, "success": False})

        relative = "/".join(parts[1:]) + ".json"
        if not (ASSETS / relative).exists():
            return httpx.Response(404, json={"status_code": 34, "success": False})
        return httpx.Response(200, json=load_asset(relative))


@pytest.fixture()
def fake_tmdb() -> FakeTmdb:
    return FakeTmdb()


@pytest.fixture()
def http_client(fake_tmdb: FakeTmdb) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_tmdb.handler))


@pytest.fixture()
def tmdb_client(http_client: httpx.AsyncClient) -> TmdbClient:
    return TmdbClient(TOKEN, api_url="https://tmdb.test/", http_client=http_client)


@pytest.fixture(autouse=True)
def reset_singletons():
    yield
    configure_feed_service(None)
    configure_tmdb_client(None)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.upper().startswith("MOVIE_FEED"):
            monkeypatch.delenv(key, raising=False)

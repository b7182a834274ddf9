"""Client for the TMDB v3 HTTP API."""
from __future__ import annotations

from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from movie_feed.core.logging import get_logger
from movie_feed.domain import CombinedCredits, PersonDetails

from .cache import AsyncTtlCache
from .tmdb_errors import TmdbTransportError, error_from_response

DEFAULT_API_URL = "https://api.themoviedb.org/"
API_VERSION = "3"
DEFAULT_CACHE_TTL = 3600

logger = get_logger("infrastructure.tmdb")

M = TypeVar("M", bound=BaseModel)


class TmdbClient:
    """Async client for the TMDB v3 API with per-endpoint response caching."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        if not token:
            raise ValueError("token must not be empty")
        parsed = httpx.URL(api_url)
        if not parsed.scheme or not parsed.host:
            raise ValueError("api_url must include scheme and host")

        self._token = token
        self._base_url = f"{api_url.rstrip('/')}/{API_VERSION}/"
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None
        self._person_cache: AsyncTtlCache[int, PersonDetails] = AsyncTtlCache(cache_ttl)
        self._credits_cache: AsyncTtlCache[int, CombinedCredits] = AsyncTtlCache(cache_ttl)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }

    async def _get(self, path: str, model: type[M]) -> M:
        url = f"{self._base_url}{path.lstrip('/')}"
        try:
            response = await self._client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise TmdbTransportError(f"request to tmdb failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise error_from_response(response)

        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise TmdbTransportError(f"unable to decode response from {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def get_person_details(self, person_id: int) -> PersonDetails:
        async def load() -> PersonDetails:
            logger.debug("cache miss for person %s", person_id)
            return await self._get(f"person/{person_id}", PersonDetails)

        return await self._person_cache.get_or_load(person_id, load)

    async def get_combined_credits(self, person_id: int) -> CombinedCredits:
        async def load() -> CombinedCredits:
            logger.debug("cache miss for combined credits of person %s", person_id)
            return await self._get(f"person/{person_id}/combined_credits", CombinedCredits)

        return await self._credits_cache.get_or_load(person_id, load)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


_client: TmdbClient | None = None


def configure_tmdb_client(client: TmdbClient | None) -> None:
    """Install the TMDB client used by the feed service."""

    global _client
    _client = client


def get_tmdb_client() -> TmdbClient:
    """Return the currently configured TMDB client."""

    if _client is None:
        raise RuntimeError("TMDB client has not been configured")
    return _client


__all__ = [
    "API_VERSION",
    "DEFAULT_API_URL",
    "TmdbClient",
    "configure_tmdb_client",
    "get_tmdb_client",
]

"""Infrastructure adapters for talking to TMDB."""

from .cache import AsyncTtlCache
from .tmdb import TmdbClient, configure_tmdb_client, get_tmdb_client
from .tmdb_errors import (
    RequestError,
    TmdbError,
    TmdbErrorKind,
    TmdbTransportError,
    UnknownTmdbError,
    error_from_response,
)

__all__ = [
    "AsyncTtlCache",
    "RequestError",
    "TmdbClient",
    "TmdbError",
    "TmdbErrorKind",
    "TmdbTransportError",
    "UnknownTmdbError",
    "configure_tmdb_client",
    "error_from_response",
    "get_tmdb_client",
]

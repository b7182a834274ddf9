from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from movie_feed.application import FeedService, configure_feed_service
from movie_feed.application.feeds import utc_now
from movie_feed.core.client_ip import resolve_client_ip
from movie_feed.core.config import Settings, load_settings
from movie_feed.core.logging import get_logger
from movie_feed.infrastructure import TmdbClient, configure_tmdb_client
from movie_feed.routes import ok, person

REQUEST_ID_HEADER = "x-request-id"

logger = get_logger("api")


class TimeoutMiddleware:
    """Answer with 408 when the wrapped app does not respond within ``timeout`` seconds."""

    def __init__(self, app: ASGIApp, timeout: float) -> None:
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("request %s %s timed out", scope.get("method"), scope.get("path"))
            if not response_started:
                await Response(status_code=408)(scope, receive, send)


def create_app(
    settings: Settings | None = None,
    *,
    tmdb_client: TmdbClient | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    settings = settings or load_settings()

    if tmdb_client is None:
        tmdb_client = TmdbClient(
            settings.token,
            api_url=settings.tmdb_api_url,
            cache_ttl=settings.cache_ttl,
        )
    service = FeedService(tmdb_client, cache_ttl=settings.cache_ttl, clock=clock or utc_now)
    configure_tmdb_client(tmdb_client)
    configure_feed_service(service)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await tmdb_client.close()

    app = FastAPI(title="Movie Feed", version="0.1.2", lifespan=lifespan)

    client_ip_source = settings.api.client_ip_source

    app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout)

    @app.middleware("http")
    async def request_context(request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        peer = request.client.host if request.client else None
        client_ip = resolve_client_ip(client_ip_source, request.headers, peer)
        request.state.request_id = request_id
        request.state.client_ip = client_ip

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug(
            "request id=%s method=%s path=%s ip=%s status=%s latency=%.1fms",
            request_id,
            request.method,
            request.url.path,
            client_ip or "unknown",
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    app.include_router(ok.router)
    app.include_router(person.router)

    return app

"""Command line entrypoint: ``python -m movie_feed``."""
from __future__ import annotations

import sys

import uvicorn

from movie_feed.app import create_app
from movie_feed.core.config import ConfigError, load_settings
from movie_feed.core.logging import configure_logging, get_logger

logger = get_logger()


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging("INFO")
        logger.error("invalid configuration: %s", exc)
        return 1

    configure_logging(settings.log_level)
    app = create_app(settings)

    host = str(settings.api.listen_address)
    port = settings.api.listen_port
    logger.info("Listening for API requests on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower(), log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())

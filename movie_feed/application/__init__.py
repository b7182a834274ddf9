"""Application services."""

from .feeds import FeedService, configure_feed_service, get_feed_service

__all__ = [
    "FeedService",
    "configure_feed_service",
    "get_feed_service",
]

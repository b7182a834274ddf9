"""HTML sanitising for text that ends up inside feed documents."""
from __future__ import annotations

import nh3

ALLOWED_TAGS: frozenset[str] = frozenset({"br", "p"})


def sanitise_text(text: str) -> str:
    """Convert newlines to ``<br>`` and strip every tag except ``<br>`` and ``<p>``."""

    return nh3.clean(text.replace("\n", "<br>"), tags=set(ALLOWED_TAGS), attributes={})


__all__ = ["ALLOWED_TAGS", "sanitise_text"]

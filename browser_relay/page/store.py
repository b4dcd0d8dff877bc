"""Holder for the single page snapshot shared by fetch and extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageSnapshot:
    """Raw markup of the currently loaded page and where it came from."""

    url: str
    markup: str


@dataclass(frozen=True)
class PageDigest:
    """Plain-text view of a page handed to the summarizer."""

    url: str
    title: str = ""
    content: str = ""


class PageStore:
    """At most one snapshot; each successful fetch replaces the previous one."""

    def __init__(self) -> None:
        self._snapshot: PageSnapshot | None = None

    def current(self) -> PageSnapshot | None:
        return self._snapshot

    def replace(self, snapshot: PageSnapshot) -> None:
        self._snapshot = snapshot
        logger.debug("page snapshot replaced", extra={"url": snapshot.url, "size": len(snapshot.markup)})

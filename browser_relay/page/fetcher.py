"""Page fetcher: plain HTTP GET via httpx, feeding the page store."""

from __future__ import annotations

import logging

import httpx

from .html import build_digest
from .store import PageDigest, PageSnapshot, PageStore

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Fetches pages over HTTP; failures are logged and reported as ``None``."""

    def __init__(self, client: httpx.AsyncClient, store: PageStore) -> None:
        self._client = client
        self._store = store

    async def _get(self, url: str) -> str | None:
        try:
            response = await self._client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.text
        except Exception:
            logger.warning("page fetch failed for %s", url, exc_info=True)
            return None

    async def fetch(self, url: str) -> PageSnapshot | None:
        """Download *url* and make it the current page snapshot."""
        logger.info("fetching page", extra={"url": url})
        markup = await self._get(url)
        if markup is None:
            return None

        snapshot = PageSnapshot(url=url, markup=markup)
        self._store.replace(snapshot)
        logger.info("page snapshot stored", extra={"url": url, "size": len(markup)})
        return snapshot

    async def digest(self, url: str) -> PageDigest | None:
        """Fetch *url* afresh and reduce it to a text digest.

        The page store is left untouched.
        """
        markup = await self._get(url)
        if markup is None:
            return None
        try:
            return build_digest(url, markup)
        except Exception:
            logger.warning("digest build failed for %s", url, exc_info=True)
            return None

"""Page submodule: snapshot store, fetching, extraction and analysis."""

from __future__ import annotations

import httpx

from .extract import ExtractionOutcome, Extractor
from .fetcher import ContentFetcher
from .store import PageDigest, PageSnapshot, PageStore
from .summarize import AISummarizer

__all__ = [
    "AISummarizer",
    "ContentFetcher",
    "ExtractionOutcome",
    "Extractor",
    "PageDigest",
    "PageSnapshot",
    "PageStore",
    "build_page_stack",
]


def build_page_stack(
    client: httpx.AsyncClient,
    summarizer: AISummarizer,
) -> tuple[PageStore, ContentFetcher, Extractor]:
    """Wire a fresh page store to a fetcher and an extractor sharing it."""
    store = PageStore()
    fetcher = ContentFetcher(client, store)
    extractor = Extractor(store, fetcher, summarizer)
    return store, fetcher, extractor

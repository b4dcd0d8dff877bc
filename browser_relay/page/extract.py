"""Keyword-driven structured extraction from the current page snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from bs4 import BeautifulSoup

from browser_relay.api.schemas import ExtractionResult, Image, Link

from .fetcher import ContentFetcher
from .html import parse, text_of
from .store import PageStore
from .summarize import AISummarizer

logger = logging.getLogger(__name__)

MAX_LINKS = 20
MAX_IMAGES = 10
MAX_PARAGRAPHS = 10
MAX_LISTS = 5
MIN_PARAGRAPH_CHARS = 20

NO_PAGE_ERROR = "Please open a webpage first"
NO_DIGEST_MESSAGE = "AI analysis failed: page content unavailable"

AI_KEYWORDS = ("ai", "analyze")


@dataclass(frozen=True)
class ExtractionOutcome:
    success: bool
    data: ExtractionResult | None = None
    error: str = ""

    @classmethod
    def ok(cls, data: ExtractionResult) -> ExtractionOutcome:
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> ExtractionOutcome:
        return cls(success=False, error=error)


def extract_headings(soup: BeautifulSoup) -> dict[str, Any]:
    h1 = soup.find("h1")
    return {
        "title": text_of(h1) if h1 is not None else "",
        "all_headings": [text_of(h) for h in soup.find_all(["h1", "h2", "h3"])],
    }


def extract_links(soup: BeautifulSoup) -> dict[str, Any]:
    anchors = soup.find_all("a", limit=MAX_LINKS)
    return {"links": [Link(text=text_of(a), href=a.get("href")) for a in anchors]}


def extract_images(soup: BeautifulSoup) -> dict[str, Any]:
    images = soup.find_all("img", limit=MAX_IMAGES)
    return {"images": [Image(alt=img.get("alt"), src=img.get("src")) for img in images]}


def extract_tables(soup: BeautifulSoup) -> dict[str, Any]:
    tables = [
        [[text_of(cell) for cell in row.find_all(["td", "th"])] for row in table.find_all("tr")]
        for table in soup.find_all("table")
    ]
    return {"tables": tables}


def extract_paragraphs(soup: BeautifulSoup) -> dict[str, Any]:
    paragraphs: list[str] = []
    for p in soup.find_all("p"):
        text = text_of(p)
        if len(text) > MIN_PARAGRAPH_CHARS:
            paragraphs.append(text)
            if len(paragraphs) == MAX_PARAGRAPHS:
                break
    return {"paragraphs": paragraphs}


def extract_lists(soup: BeautifulSoup) -> dict[str, Any]:
    lists = soup.find_all(["ul", "ol"], limit=MAX_LISTS)
    return {"lists": [[text_of(li) for li in lst.find_all("li")] for lst in lists]}


# Each strategy fires when any of its keywords occurs in the lowercased
# instruction. Strategies are cumulative, not exclusive.
STRATEGIES: tuple[tuple[tuple[str, ...], Callable[[BeautifulSoup], dict[str, Any]]], ...] = (
    (("title",), extract_headings),
    (("link",), extract_links),
    (("image",), extract_images),
    (("table",), extract_tables),
    (("paragraph", "content"), extract_paragraphs),
    (("list",), extract_lists),
)


def wants_ai_analysis(instruction: str, fields: dict[str, Any]) -> bool:
    lowered = instruction.lower()
    return not fields or any(keyword in lowered for keyword in AI_KEYWORDS)


class Extractor:
    """Runs the keyword-selected strategies against the current snapshot."""

    def __init__(self, store: PageStore, fetcher: ContentFetcher, summarizer: AISummarizer) -> None:
        self._store = store
        self._fetcher = fetcher
        self._summarizer = summarizer

    async def extract(self, instruction: str) -> ExtractionOutcome:
        # Captured once: a navigation finishing mid-extraction must not change
        # the markup or the URL this result is attributed to.
        snapshot = self._store.current()
        if snapshot is None:
            return ExtractionOutcome.failed(NO_PAGE_ERROR)

        logger.info("extraction started", extra={"url": snapshot.url, "instruction": instruction[:100]})
        try:
            soup = parse(snapshot.markup)
            lowered = instruction.lower()
            fields: dict[str, Any] = {}
            for keywords, strategy in STRATEGIES:
                if any(keyword in lowered for keyword in keywords):
                    fields.update(strategy(soup))

            if wants_ai_analysis(instruction, fields):
                fields["ai_analysis"] = await self._analyze(instruction, snapshot.url)

            result = ExtractionResult(
                **fields,
                url=snapshot.url,
                timestamp=datetime.now(timezone.utc),
            )
        except Exception as exc:
            logger.warning("extraction failed", extra={"url": snapshot.url}, exc_info=True)
            return ExtractionOutcome.failed(str(exc) or type(exc).__name__)

        logger.info(
            "extraction completed",
            extra={"url": snapshot.url, "fields": sorted(fields)},
        )
        return ExtractionOutcome.ok(result)

    async def _analyze(self, instruction: str, url: str) -> str:
        digest = await self._fetcher.digest(url)
        if digest is None:
            return NO_DIGEST_MESSAGE
        return await self._summarizer.summarize(instruction, digest)

"""HTML parsing helpers built on BeautifulSoup."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from .store import PageDigest

NOISE_TAGS = ("script", "style", "nav", "footer", "header")
CONTENT_SELECTORS = ("main", "article", ".content", "#content", "body")
MAX_DIGEST_CHARS = 5000

_WHITESPACE_RE = re.compile(r"\s+")


def parse(markup: str) -> BeautifulSoup:
    """Parse *markup* and drop elements whose text must never be extracted."""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(list(NOISE_TAGS)):
        tag.decompose()
    return soup


def text_of(element) -> str:
    return element.get_text().strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def build_digest(url: str, markup: str) -> PageDigest:
    """Reduce a page to its title and main text, capped at MAX_DIGEST_CHARS."""
    soup = parse(markup)

    title = ""
    h1 = soup.find("h1")
    if h1 is not None:
        title = text_of(h1)
    if not title and soup.title is not None:
        title = text_of(soup.title)

    content = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            content = element.get_text(separator=" ")
            break

    return PageDigest(
        url=url,
        title=title,
        content=collapse_whitespace(content)[:MAX_DIGEST_CHARS],
    )

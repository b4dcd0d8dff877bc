"""Task classification: which path a free-text command takes."""

from __future__ import annotations

import re
from urllib.parse import quote

EXTRACTION_KEYWORDS = ("extract", "analyze page")

# A token either carries its own scheme or is a bare host/search term.
_TOKEN = r"([a-zA-Z][a-zA-Z0-9+.-]*://\S+|[a-zA-Z0-9.-]+(?:\.[a-zA-Z]{2,})?)"

NAVIGATION_PATTERNS = (
    re.compile(r"(?:open|visit|search|go to|navigate)\s*" + _TOKEN, re.IGNORECASE),
    re.compile(r"(?:open|visit)\s*([^\s]+)", re.IGNORECASE),
)

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

SEARCH_URL = "https://wikipedia.org/wiki/{term}"


def is_extraction(task: str) -> bool:
    lowered = task.lower()
    return any(keyword in lowered for keyword in EXTRACTION_KEYWORDS)


def match_navigation(task: str) -> str | None:
    """Return the navigation target token in *task*, or ``None``."""
    for pattern in NAVIGATION_PATTERNS:
        match = pattern.search(task)
        if match:
            return match.group(1)
    return None


def resolve_url(token: str) -> str:
    """Turn a navigation token into an absolute URL.

    ``example.com`` becomes ``https://example.com``; a token without a dot is
    treated as a search term and looked up on Wikipedia.
    """
    if _SCHEME_RE.match(token):
        return token
    if "." in token:
        return f"https://{token}"
    return SEARCH_URL.format(term=quote(token, safe=""))

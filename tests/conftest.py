"""Fixtures — fake WebSocket clients, page store, mocked HTTP."""

import json
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from starlette.websockets import WebSocketState

from browser_relay.page import ContentFetcher, Extractor, PageSnapshot, PageStore
from browser_relay.relay.bus import EventBus


class FakeConnection:
    """Stands in for a Starlette WebSocket on the bus."""

    def __init__(self, *, open: bool = True, fail: bool = False) -> None:
        state = WebSocketState.CONNECTED if open else WebSocketState.DISCONNECTED
        self.client_state = state
        self.application_state = state
        self.fail = fail
        self.sent: list[str] = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(data)

    @property
    def events(self) -> list[dict]:
        return [json.loads(s) for s in self.sent]

    @property
    def types(self) -> list[str]:
        return [e["type"] for e in self.events]


def page_html(body: str, title: str = "Test Page") -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def bus(connection: FakeConnection) -> EventBus:
    bus = EventBus()
    bus.register(connection)
    return bus


@pytest.fixture
def page_store() -> PageStore:
    return PageStore()


@pytest.fixture
def pages() -> dict[str, str]:
    """URL -> markup served by the mocked HTTP transport; unknown URLs 404."""
    return {}


@pytest_asyncio.fixture
async def http_client(pages: dict[str, str]):
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        markup = pages.get(url, pages.get(url.rstrip("/")))
        if markup is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=markup, headers={"content-type": "text/html"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    yield client
    await client.aclose()


@pytest.fixture
def fetcher(http_client: httpx.AsyncClient, page_store: PageStore) -> ContentFetcher:
    return ContentFetcher(http_client, page_store)


@pytest.fixture
def load_page(page_store: PageStore) -> Callable[[str, str], PageSnapshot]:
    def _load(url: str, markup: str) -> PageSnapshot:
        snapshot = PageSnapshot(url=url, markup=markup)
        page_store.replace(snapshot)
        return snapshot

    return _load


@pytest.fixture
def summarizer() -> MagicMock:
    mock = MagicMock()
    mock.summarize = AsyncMock(return_value='{"summary": "stub"}')
    return mock


@pytest.fixture
def extractor(page_store: PageStore, fetcher: ContentFetcher, summarizer: MagicMock) -> Extractor:
    return Extractor(page_store, fetcher, summarizer)

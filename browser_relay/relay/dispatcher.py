"""Command dispatcher: classifies tasks and relays their events to the bus."""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Coroutine, Mapping, Protocol

from browser_relay.api.schemas import BrowserNavigateEvent, ExtractionResultEvent
from browser_relay.page import ContentFetcher, Extractor
from browser_relay.relay.bus import EventBus
from browser_relay.relay.events import assistant_message, complete_event, error_event
from browser_relay.relay.routing import is_extraction, match_navigation, resolve_url

logger = logging.getLogger(__name__)

NAVIGATION_TIPS = (
    "💡 Tip: After the page loads, you can say:\n"
    '- "extract titles"\n'
    '- "extract links"\n'
    '- "extract images"\n'
    '- "analyze this page"'
)


class TaskAgent(Protocol):
    def run_task(self, task: str, model: str) -> AsyncIterator[Mapping[str, Any]]: ...


@dataclass(frozen=True)
class Route:
    """A classification rule: the first route whose predicate holds wins."""

    name: str
    matches: Callable[[str], bool]
    handle: Callable[[str], Awaitable[None]]


class CommandDispatcher:
    """Turns one free-text task into an ordered sequence of bus events.

    ``dispatch`` never raises. Every path ends in exactly one terminal
    event: ``complete`` on success, or ``error`` (with no ``complete``
    after it) when the path fails unexpectedly.
    """

    def __init__(
        self,
        bus: EventBus,
        fetcher: ContentFetcher,
        extractor: Extractor,
        agent: TaskAgent,
        agent_model: str = "gpt-4o-mini",
    ) -> None:
        self._bus = bus
        self._fetcher = fetcher
        self._extractor = extractor
        self._agent = agent
        self._agent_model = agent_model
        self._background: set[asyncio.Task[Any]] = set()
        self._routes = (
            Route("extraction", is_extraction, self._extract),
            Route("navigation", lambda task: match_navigation(task) is not None, self._navigate),
            Route("agent", lambda task: True, self._delegate),
        )

    def classify(self, task: str) -> Route:
        return next(route for route in self._routes if route.matches(task))

    async def dispatch(self, task: str) -> None:
        logger.info("task received", extra={"task": task[:100]})
        try:
            await self._bus.broadcast(assistant_message(f"Command received: {task}"))
            route = self.classify(task)
            logger.debug("task classified", extra={"route": route.name})
            await route.handle(task)
        except Exception as exc:
            logger.exception("dispatch failed", extra={"task": task[:100]})
            await self._bus.broadcast(error_event(exc))

    # --- navigation ---

    async def _navigate(self, task: str) -> None:
        token = match_navigation(task)
        if token is None:
            raise ValueError(f"No navigation target in {task!r}")
        url = resolve_url(token)
        logger.info("navigation resolved", extra={"token": token, "url": url})

        await self._bus.broadcast(BrowserNavigateEvent(url=url))
        self.spawn(self._fetcher.fetch(url), name=f"prefetch {url}")
        await self._bus.broadcast(assistant_message(f"✅ Opening {url}\n\n{NAVIGATION_TIPS}"))
        await self._bus.broadcast(complete_event())

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        """Run *coro* as a tracked background task; failures are logged."""
        task = asyncio.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            logger.info("background task cancelled", extra={"task_name": task.get_name()})
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "background task failed",
                extra={"task_name": task.get_name()},
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def aclose(self) -> None:
        """Cancel outstanding background tasks and wait for them to settle."""
        pending = list(self._background)
        for task in pending:
            task.cancel()
        if pending:
            logger.info("cancelling background tasks", extra={"count": len(pending)})
            await asyncio.gather(*pending, return_exceptions=True)

    # --- extraction ---

    async def _extract(self, task: str) -> None:
        outcome = await self._extractor.extract(task)
        if outcome.success and outcome.data is not None:
            await self._bus.broadcast(ExtractionResultEvent(data=outcome.data))
            pretty = json.dumps(outcome.data.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
            await self._bus.broadcast(assistant_message(f"✅ Data extraction completed!\n\n{pretty}"))
        else:
            logger.info("extraction unavailable", extra={"error": outcome.error})
            await self._bus.broadcast(assistant_message(f"❌ Extraction failed: {outcome.error}"))
        await self._bus.broadcast(complete_event())

    # --- agent delegation ---

    async def _delegate(self, task: str) -> None:
        try:
            stream = self._agent.run_task(task, self._agent_model)
        except Exception as exc:
            logger.exception("agent task could not be started")
            await self._bus.broadcast(error_event(exc))
            return

        forwarded = 0
        try:
            async with aclosing(stream) as events:
                async for event in events:
                    forwarded += 1
                    await self._bus.broadcast(event)
        except Exception as exc:
            logger.exception("agent stream failed", extra={"events": forwarded})
            await self._bus.broadcast(error_event(exc))
            return

        logger.info("agent task relayed", extra={"events": forwarded})
        await self._bus.broadcast(complete_event())

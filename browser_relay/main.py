"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI

from browser_relay.agent.runner import AgentRunner
from browser_relay.api.routes import router
from browser_relay.config import get_settings
from browser_relay.logging_config import setup_logging
from browser_relay.page import AISummarizer, build_page_stack
from browser_relay.relay.bus import EventBus
from browser_relay.relay.dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)

SUPPORTED_COMMANDS = (
    "open webpage: open wikipedia.org",
    "extract data: extract titles",
    "ai analysis: analyze this page",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting browser relay")

    # Fails fast without a provider credential
    agent = AgentRunner(settings.openai_api_key, provider=settings.llm_provider)

    http_client = httpx.AsyncClient(timeout=settings.fetch_timeout_seconds)
    summarizer = AISummarizer(
        api_key=settings.openai_api_key,
        model=settings.summary_model,
        max_tokens=settings.summary_max_tokens,
    )
    _, fetcher, extractor = build_page_stack(http_client, summarizer)

    bus = EventBus()
    dispatcher = CommandDispatcher(
        bus=bus,
        fetcher=fetcher,
        extractor=extractor,
        agent=agent,
        agent_model=settings.agent_model,
    )

    app.state.settings = settings
    app.state.bus = bus
    app.state.dispatcher = dispatcher

    logger.info(
        "browser relay ready",
        extra={
            "llm_provider": settings.llm_provider,
            "agent_model": settings.agent_model,
            "summary_model": settings.summary_model,
            "supported_commands": list(SUPPORTED_COMMANDS),
        },
    )

    yield

    logger.info("shutting down browser relay")
    await dispatcher.aclose()
    await http_client.aclose()


app = FastAPI(title="Browser Relay", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

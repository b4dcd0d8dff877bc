"""Event construction and serialization helpers for the relay."""

from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import BaseModel

from browser_relay.api.schemas import (
    ChatMessage,
    CompleteEvent,
    ErrorEvent,
    Event,
    MessageEvent,
    TextContent,
)

# Agent-runtime events are opaque mappings and are relayed as-is.
Outbound = Event | Mapping[str, Any]


def assistant_message(text: str) -> MessageEvent:
    """Wrap plain text in an assistant chat message event."""
    return MessageEvent(message=ChatMessage(role="assistant", content=[TextContent(text=text)]))


def error_event(exc: BaseException | str) -> ErrorEvent:
    return ErrorEvent(error=str(exc) or type(exc).__name__)


def complete_event() -> CompleteEvent:
    return CompleteEvent()


def serialize(event: Outbound) -> str:
    """Render an outbound event as the JSON text frame sent to clients."""
    if isinstance(event, BaseModel):
        return event.model_dump_json(by_alias=True)
    return json.dumps(event, default=str)

"""WebSocket endpoint: client registration and task intake."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse

from browser_relay.api.schemas import ConnectedEvent
from browser_relay.relay.bus import EventBus
from browser_relay.relay.dispatcher import CommandDispatcher
from browser_relay.relay.events import error_event, serialize

logger = logging.getLogger(__name__)

router = APIRouter()


def _task_text(message: dict[str, Any]) -> str:
    """Decode an inbound frame into the task text."""
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is None:
        raise ValueError("Empty WebSocket frame")
    return data.decode("utf-8")


async def _handle_message(websocket: WebSocket, dispatcher: CommandDispatcher, message: dict[str, Any]) -> None:
    try:
        task = _task_text(message)
        logger.info("task message received", extra={"task": task[:100]})
        await dispatcher.dispatch(task)
    except Exception as exc:
        # Reported to the sender only, not broadcast.
        logger.exception("error processing message")
        try:
            await websocket.send_text(serialize(error_event(exc)))
        except Exception:
            logger.warning("could not report error to client", exc_info=True)


@router.get("/")
async def upgrade_required() -> PlainTextResponse:
    return PlainTextResponse("Expected WebSocket upgrade request", status_code=400)


@router.websocket("/")
async def command_socket(websocket: WebSocket) -> None:
    bus: EventBus = websocket.app.state.bus
    dispatcher: CommandDispatcher = websocket.app.state.dispatcher

    await websocket.accept()
    bus.register(websocket)
    logger.info("websocket client connected", extra={"client": str(websocket.client)})
    try:
        await websocket.send_text(serialize(ConnectedEvent()))
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            # Not awaited: a slow task must not hold up later ones.
            dispatcher.spawn(_handle_message(websocket, dispatcher, message), name="dispatch")
    except WebSocketDisconnect:
        logger.info("websocket client disconnected")
    except Exception:
        logger.warning("websocket connection error", exc_info=True)
    finally:
        bus.unregister(websocket)

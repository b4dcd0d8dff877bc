"""Broadcast channel over the set of connected WebSocket clients."""

from __future__ import annotations

import logging
from typing import Protocol

from starlette.websockets import WebSocketState

from browser_relay.relay.events import Outbound, serialize

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """The part of a Starlette ``WebSocket`` the bus relies on."""

    client_state: WebSocketState
    application_state: WebSocketState

    async def send_text(self, data: str) -> None: ...


def is_open(connection: Connection) -> bool:
    return (
        connection.client_state == WebSocketState.CONNECTED
        and connection.application_state == WebSocketState.CONNECTED
    )


class EventBus:
    """Holds the connected clients and fans events out to all of them."""

    def __init__(self) -> None:
        self._connections: set[Connection] = set()

    def __len__(self) -> int:
        return len(self._connections)

    def register(self, connection: Connection) -> None:
        self._connections.add(connection)
        logger.info("client registered", extra={"clients": len(self._connections)})

    def unregister(self, connection: Connection) -> None:
        """Remove *connection*; removing an unknown connection is a no-op."""
        self._connections.discard(connection)
        logger.info("client unregistered", extra={"clients": len(self._connections)})

    async def broadcast(self, event: Outbound) -> None:
        """Serialize *event* once and deliver it to every open connection.

        A failing connection is logged and dropped; the others still receive
        the event and nothing is raised to the caller.
        """
        payload = serialize(event)
        # Connections may (un)register while we await sends below.
        for connection in list(self._connections):
            if not is_open(connection):
                continue
            try:
                await connection.send_text(payload)
            except Exception:
                logger.warning("broadcast to client failed", exc_info=True)
                self._connections.discard(connection)

from __future__ import annotations

import logging
from typing import Any, Protocol

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Outbound side of one client connection, as seen by the relay."""

    @property
    def is_open(self) -> bool: ...

    async def send(self, message: dict[str, Any]) -> bool: ...


class WebSocketConnection:
    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, message: dict[str, Any]) -> bool:
        if not self.is_open:
            return False
        try:
            await self.websocket.send_json(message)
        except (RuntimeError, WebSocketDisconnect) as exc:
            # Peer went away between the state check and the write
            logger.debug("Send to closed websocket skipped: %s", exc)
            return False
        return True

    def __repr__(self) -> str:
        return f"WebSocketConnection(client={self.websocket.client})"

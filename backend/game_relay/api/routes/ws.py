import logging

from fastapi import APIRouter, Depends, WebSocket

from game_relay.api.dependencies import get_relay
from game_relay.realtime.connection import WebSocketConnection
from game_relay.realtime.engine import RelayEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/")
async def relay_socket(websocket: WebSocket, relay: RelayEngine = Depends(get_relay)) -> None:
    await websocket.accept()
    session = relay.open_session(WebSocketConnection(websocket))
    logger.debug("Relay connection opened: %s client=%s", session.connection_id, websocket.client)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                raw = frame.get("bytes")
            if raw is None:
                continue
            await relay.receive(session, raw)
    except Exception:
        logger.exception("Relay connection %s failed", session.connection_id)
        raise
    finally:
        await relay.disconnect(session)
        logger.debug("Relay connection closed: %s", session.connection_id)

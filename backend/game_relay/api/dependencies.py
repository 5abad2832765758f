from fastapi import WebSocket

from game_relay.realtime.engine import RelayEngine


def get_relay(websocket: WebSocket) -> RelayEngine:
    return websocket.app.state.relay


__all__ = ["RelayEngine", "get_relay"]

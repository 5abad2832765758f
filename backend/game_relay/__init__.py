"""In-memory WebSocket relay for multiplayer game rooms."""

__version__ = "0.1.0"

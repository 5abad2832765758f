"""Room membership and broadcast fan-out for the relay."""

from .connection import Connection, WebSocketConnection  # noqa: F401
from .engine import RelayEngine  # noqa: F401
from .registry import RoomRegistry  # noqa: F401
from .session import ConnectionSession, SessionState  # noqa: F401

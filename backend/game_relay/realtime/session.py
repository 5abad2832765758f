from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from uuid import uuid4

from game_relay.realtime.connection import Connection


class SessionState(str, Enum):
    UNJOINED = "unjoined"
    JOINED = "joined"
    TERMINATED = "terminated"


@dataclass(eq=False)
class ConnectionSession:
    """Per-connection relay state.

    A session starts ``UNJOINED``, is bound to one ``(room_id, player_id)``
    by its first valid join and ends ``TERMINATED`` on leave or disconnect.
    The binding is never reassigned.
    """

    connection: Connection
    connection_id: str = field(default_factory=lambda: uuid4().hex)
    state: SessionState = SessionState.UNJOINED
    room_id: Optional[str] = None
    player_id: Optional[str] = None

    @property
    def is_joined(self) -> bool:
        return self.state == SessionState.JOINED

    @property
    def is_terminated(self) -> bool:
        return self.state == SessionState.TERMINATED

    def bind(self, room_id: str, player_id: str) -> None:
        if self.state != SessionState.UNJOINED:
            raise ValueError(f"Session {self.connection_id} is already {self.state.value}")
        self.room_id = room_id
        self.player_id = player_id
        self.state = SessionState.JOINED

    def terminate(self) -> tuple[Optional[str], Optional[str]]:
        """Mark the session terminated and return the binding it held.

        Returns ``(None, None)`` if the session never joined or was already
        terminated, so callers have nothing to clean up.
        """

        was_joined = self.state == SessionState.JOINED
        self.state = SessionState.TERMINATED
        if not was_joined:
            return None, None
        return self.room_id, self.player_id

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from game_relay.realtime.connection import Connection
from game_relay.realtime.registry import RoomRegistry
from game_relay.realtime.session import ConnectionSession, SessionState
from game_relay.schemas.messages import (
    ForwardedMessage,
    JoinMessage,
    LeaveMessage,
    MessageDecodeError,
    RelayMessage,
    decode_message,
    join_announcement,
)

logger = logging.getLogger(__name__)


class RelayEngine:
    """Routes inbound frames to the other members of the sender's room."""

    def __init__(self, registry: Optional[RoomRegistry] = None) -> None:
        self.registry = registry if registry is not None else RoomRegistry()
        self._sessions: Dict[str, ConnectionSession] = {}

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def open_session(self, connection: Connection) -> ConnectionSession:
        session = ConnectionSession(connection=connection)
        self._sessions[session.connection_id] = session
        return session

    def get_session(self, connection_id: str) -> Optional[ConnectionSession]:
        return self._sessions.get(connection_id)

    async def receive(self, session: ConnectionSession, raw: str | bytes) -> None:
        try:
            message = decode_message(raw)
        except MessageDecodeError as exc:
            logger.debug("Dropping malformed frame from %s: %s", session.connection_id, exc)
            return
        await self.dispatch(session, message)

    async def dispatch(self, session: ConnectionSession, message: RelayMessage) -> None:
        if isinstance(message, JoinMessage):
            await self._handle_join(session, message)
        elif isinstance(message, LeaveMessage):
            await self._handle_leave(session, message)
        elif isinstance(message, ForwardedMessage):
            await self._handle_forward(session, message)
        else:
            logger.debug("Ignoring unrecognized message type %r from %s", message.type, session.connection_id)

    async def broadcast(self, room_id: str, message: dict[str, Any], sender_id: Optional[str]) -> int:
        members = await self.registry.members_of(room_id)
        recipients = [
            (player_id, handle)
            for player_id, handle in members.items()
            if player_id != sender_id and handle.is_open
        ]
        if not recipients:
            return 0

        results = await asyncio.gather(
            *(handle.send(message) for _, handle in recipients),
            return_exceptions=True,
        )
        delivered = 0
        for (player_id, _), result in zip(recipients, results):
            if isinstance(result, BaseException):
                logger.debug("Delivery to %s in room %s failed: %r", player_id, room_id, result)
            elif result:
                delivered += 1
        return delivered

    async def disconnect(self, session: ConnectionSession) -> None:
        """Cleanup for a connection the transport reports closed or errored."""

        await self._release(session)
        self._sessions.pop(session.connection_id, None)

    async def _handle_join(self, session: ConnectionSession, message: JoinMessage) -> None:
        if not message.is_complete:
            logger.debug("Ignoring join without roomId/playerId from %s", session.connection_id)
            return
        if session.state != SessionState.UNJOINED:
            logger.debug(
                "Ignoring join for %s/%s: session %s is %s",
                message.room_id,
                message.player_id,
                session.connection_id,
                session.state.value,
            )
            return

        room_id, player_id = message.room_id, message.player_id
        session.bind(room_id, player_id)
        displaced = await self.registry.add_member(room_id, player_id, session.connection)
        if displaced is not None and displaced is not session.connection:
            logger.info("Player %s joined room %s from a new connection, replacing the old one", player_id, room_id)
        logger.debug("Player %s joined room %s (%s)", player_id, room_id, session.connection_id)

        await self.broadcast(room_id, join_announcement(room_id, player_id), player_id)

    async def _handle_leave(self, session: ConnectionSession, message: LeaveMessage) -> None:
        if not session.is_joined:
            return
        # Others must still see the sender as a member while the leave goes out
        await self.broadcast(session.room_id, message.payload, session.player_id)
        await self._release(session)

    async def _handle_forward(self, session: ConnectionSession, message: ForwardedMessage) -> None:
        if not session.is_joined:
            logger.debug("Ignoring %s from unjoined connection %s", message.type, session.connection_id)
            return
        await self.broadcast(session.room_id, message.payload, session.player_id)

    async def _release(self, session: ConnectionSession) -> None:
        room_id, player_id = session.terminate()
        if room_id is None or player_id is None:
            return
        removed = await self.registry.remove_member(room_id, player_id, session.connection)
        if removed:
            logger.debug("Player %s left room %s (%s)", player_id, room_id, session.connection_id)

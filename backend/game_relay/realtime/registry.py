from __future__ import annotations

import asyncio
from typing import Dict, Optional

from game_relay.realtime.connection import Connection

RoomMembers = Dict[str, Connection]


class RoomRegistry:
    """Room id -> {player id -> connection}, guarded by a single lock.

    A room only exists while it has at least one member, and a player id is
    a member of at most one room.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, RoomMembers] = {}
        self._player_rooms: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    def ensure_room(self, room_id: str) -> RoomMembers:
        """Return the live member mapping for ``room_id``, creating it if absent.

        Caller must hold the registry lock and add a member before releasing
        it, otherwise an empty room would be left behind.
        """

        room = self._rooms.get(room_id)
        if room is None:
            room = {}
            self._rooms[room_id] = room
        return room

    async def add_member(self, room_id: str, player_id: str, handle: Connection) -> Optional[Connection]:
        async with self._lock:
            previous_room = self._player_rooms.get(player_id)
            displaced: Optional[Connection] = None
            if previous_room is not None and previous_room != room_id:
                displaced = self._discard(previous_room, player_id)
            room = self.ensure_room(room_id)
            displaced = room.get(player_id, displaced)
            room[player_id] = handle
            self._player_rooms[player_id] = room_id
            return displaced

    async def remove_member(self, room_id: str, player_id: str, handle: Optional[Connection] = None) -> bool:
        async with self._lock:
            room = self._rooms.get(room_id)
            if not room:
                return False
            current = room.get(player_id)
            if current is None:
                return False
            if handle is not None and current is not handle:
                return False
            self._discard(room_id, player_id)
            return True

    async def members_of(self, room_id: str) -> RoomMembers:
        async with self._lock:
            return dict(self._rooms.get(room_id, {}))

    async def room_of(self, player_id: str) -> Optional[str]:
        async with self._lock:
            return self._player_rooms.get(player_id)

    async def snapshot(self) -> dict[str, list[str]]:
        async with self._lock:
            return {room_id: sorted(members) for room_id, members in self._rooms.items()}

    async def room_count(self) -> int:
        async with self._lock:
            return len(self._rooms)

    def _discard(self, room_id: str, player_id: str) -> Optional[Connection]:
        room = self._rooms.get(room_id)
        if room is None:
            return None
        handle = room.pop(player_id, None)
        if self._player_rooms.get(player_id) == room_id:
            self._player_rooms.pop(player_id, None)
        if not room:
            self._rooms.pop(room_id, None)
        return handle

"""Tests for the room registry."""
from __future__ import annotations

import asyncio

from tests.fakes import FakeConnection


async def test_add_member_creates_room(registry):
    conn = FakeConnection("c1")
    displaced = await registry.add_member("r1", "p1", conn)

    assert displaced is None
    assert await registry.members_of("r1") == {"p1": conn}
    assert await registry.snapshot() == {"r1": ["p1"]}


async def test_members_of_missing_room_is_empty(registry):
    assert await registry.members_of("nowhere") == {}
    assert await registry.room_count() == 0


async def test_members_of_returns_a_copy(registry):
    await registry.add_member("r1", "p1", FakeConnection())
    members = await registry.members_of("r1")
    members.clear()

    assert list(await registry.members_of("r1")) == ["p1"]


async def test_last_member_leaving_deletes_room(registry):
    await registry.add_member("r1", "p1", FakeConnection("c1"))
    await registry.add_member("r1", "p2", FakeConnection("c2"))

    assert await registry.remove_member("r1", "p1") is True
    assert await registry.snapshot() == {"r1": ["p2"]}

    assert await registry.remove_member("r1", "p2") is True
    assert await registry.snapshot() == {}
    assert await registry.room_of("p2") is None


async def test_remove_member_misses_are_noops(registry):
    await registry.add_member("r1", "p1", FakeConnection())

    assert await registry.remove_member("r2", "p1") is False
    assert await registry.remove_member("r1", "ghost") is False
    assert await registry.snapshot() == {"r1": ["p1"]}


async def test_same_player_id_overwrites_handle(registry):
    old, new = FakeConnection("old"), FakeConnection("new")
    await registry.add_member("r1", "p1", old)
    displaced = await registry.add_member("r1", "p1", new)

    assert displaced is old
    assert await registry.members_of("r1") == {"p1": new}


async def test_player_moves_out_of_previous_room(registry):
    old, new = FakeConnection("old"), FakeConnection("new")
    await registry.add_member("r1", "p1", old)
    await registry.add_member("r1", "p2", FakeConnection())
    displaced = await registry.add_member("r2", "p1", new)

    assert displaced is old
    assert await registry.snapshot() == {"r1": ["p2"], "r2": ["p1"]}
    assert await registry.room_of("p1") == "r2"


async def test_remove_with_stale_handle_keeps_newer_binding(registry):
    old, new = FakeConnection("old"), FakeConnection("new")
    await registry.add_member("r1", "p1", old)
    await registry.add_member("r1", "p1", new)

    assert await registry.remove_member("r1", "p1", old) is False
    assert await registry.members_of("r1") == {"p1": new}

    assert await registry.remove_member("r1", "p1", new) is True
    assert await registry.room_count() == 0


async def test_room_exists_iff_it_has_members(registry):
    ops = [
        ("add", "a", "p1"),
        ("add", "a", "p2"),
        ("add", "b", "p3"),
        ("remove", "a", "p1"),
        ("add", "b", "p2"),
        ("remove", "b", "p3"),
        ("remove", "b", "p2"),
        ("remove", "b", "p2"),
        ("add", "c", "p1"),
    ]
    for op, room_id, player_id in ops:
        if op == "add":
            await registry.add_member(room_id, player_id, FakeConnection(player_id))
        else:
            await registry.remove_member(room_id, player_id)
        snapshot = await registry.snapshot()
        assert all(members for members in snapshot.values())

    assert await registry.snapshot() == {"c": ["p1"]}


async def test_concurrent_joins_and_leaves_leave_no_empty_rooms(registry):
    async def churn(player_id: str) -> None:
        conn = FakeConnection(player_id)
        for _ in range(20):
            await registry.add_member("lobby", player_id, conn)
            await asyncio.sleep(0)
            await registry.remove_member("lobby", player_id, conn)

    await asyncio.gather(*(churn(f"p{i}") for i in range(10)))

    assert await registry.snapshot() == {}


def test_ensure_room_returns_live_mapping(registry):
    room = registry.ensure_room("r1")
    room["p1"] = FakeConnection()

    assert registry.ensure_room("r1") is room

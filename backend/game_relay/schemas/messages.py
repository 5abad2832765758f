"""Wire messages understood by the relay.

Every frame is a JSON object with a ``type`` discriminator. The relay only
looks at ``type`` plus ``roomId``/``playerId`` on ``join``; everything else
is opaque and forwarded exactly as received.
"""
from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter, ValidationError

ForwardedType = Literal[
    "state_update",
    "action_request",
    "turn_update",
    "lobby_state",
    "ready_update",
    "color_update",
    "chat",
    "countdown",
    "start_game",
]

FORWARDED_TYPES: frozenset[str] = frozenset(get_args(ForwardedType))
KNOWN_TYPES: frozenset[str] = FORWARDED_TYPES | {"join", "leave"}


class MessageDecodeError(ValueError):
    """Raised when a frame is not a well-formed relay message."""


class RelayMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def payload(self) -> dict[str, Any]:
        """The JSON object exactly as the client sent it."""
        return self._payload


class JoinMessage(RelayMessage):
    type: Literal["join"]
    room_id: Optional[str] = Field(default=None, alias="roomId")
    player_id: Optional[str] = Field(default=None, alias="playerId")

    @property
    def is_complete(self) -> bool:
        return bool(self.room_id) and bool(self.player_id)


class LeaveMessage(RelayMessage):
    type: Literal["leave"]


class ForwardedMessage(RelayMessage):
    type: ForwardedType


class UnrecognizedMessage(RelayMessage):
    type: Any = None


InboundMessage = Annotated[
    Union[JoinMessage, LeaveMessage, ForwardedMessage],
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[Union[JoinMessage, LeaveMessage, ForwardedMessage]] = TypeAdapter(InboundMessage)


def decode_message(raw: str | bytes) -> RelayMessage:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MessageDecodeError("payload is not valid JSON") from exc
    except RecursionError as exc:
        raise MessageDecodeError("payload is nested too deeply") from exc

    if not isinstance(data, dict):
        raise MessageDecodeError(f"expected a JSON object, got {type(data).__name__}")

    kind = data.get("type")
    if isinstance(kind, str) and kind in KNOWN_TYPES:
        try:
            message: RelayMessage = _inbound_adapter.validate_python(data)
        except ValidationError as exc:
            raise MessageDecodeError(f"invalid {kind!r} message: {exc.error_count()} error(s)") from exc
    else:
        message = UnrecognizedMessage(type=kind)

    message._payload = data
    return message


def join_announcement(room_id: str, player_id: str) -> dict[str, str]:
    """The message other room members see when ``player_id`` joins."""

    return {"type": "join", "playerId": player_id, "roomId": room_id}


__all__ = [
    "FORWARDED_TYPES",
    "KNOWN_TYPES",
    "ForwardedMessage",
    "ForwardedType",
    "JoinMessage",
    "LeaveMessage",
    "MessageDecodeError",
    "RelayMessage",
    "UnrecognizedMessage",
    "decode_message",
    "join_announcement",
]

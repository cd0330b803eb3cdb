"""Lobby message definitions and JSON codec.

Messages travel as JSON envelopes ``{"type": ..., "payload": {...}}``:

- JOIN_REQUEST: client -> host, ``{code, playerName}``
- PLAYER_UPDATE: host -> clients, ``{players, gameName, maxPlayers}``
- START_GAME: host -> clients, ``{playerCount}``

The engine never sees these messages; it only receives the final player
count from START_GAME.
"""

import json
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from clue_engine.errors import ClueError

DEFAULT_MAX_PLAYERS = 4


class ProtocolError(ClueError):
    """A lobby message could not be decoded."""


class LobbyMessage(BaseModel):
    """Base class for lobby messages."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_type: ClassVar[str] = ""


class JoinRequest(LobbyMessage):
    """Client asks to join the lobby with a code."""

    message_type: ClassVar[str] = "JOIN_REQUEST"

    code: str
    player_name: str = Field(alias="playerName")


class PlayerUpdate(LobbyMessage):
    """Host broadcasts the current player list."""

    message_type: ClassVar[str] = "PLAYER_UPDATE"

    players: list[str]
    game_name: str = Field(default="", alias="gameName")
    max_players: int = Field(default=DEFAULT_MAX_PLAYERS, alias="maxPlayers")


class StartGame(LobbyMessage):
    """Host starts the game."""

    message_type: ClassVar[str] = "START_GAME"

    player_count: int = Field(alias="playerCount")


MESSAGE_TYPES: dict[str, type[LobbyMessage]] = {
    cls.message_type: cls for cls in (JoinRequest, PlayerUpdate, StartGame)
}


def encode_message(message: LobbyMessage) -> str:
    """Encode a message to a JSON envelope."""
    return json.dumps(
        {"type": message.message_type, "payload": message.model_dump(by_alias=True)},
        ensure_ascii=False,
    )


def decode_message(raw: str) -> LobbyMessage:
    """Decode a JSON envelope.

    Raises:
        ProtocolError: If the envelope, type or payload is invalid
    """
    try:
        envelope = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise ProtocolError("Envelope must be an object")

    cls = MESSAGE_TYPES.get(envelope.get("type"))
    if cls is None:
        raise ProtocolError(f"Unknown message type: {envelope.get('type')!r}")

    try:
        return cls.model_validate(envelope.get("payload") or {})
    except PydanticValidationError as e:
        raise ProtocolError(f"Invalid {cls.message_type} payload: {e}") from e

"""Same-device lobby simulation."""

from .bus import BroadcastBus, Subscription
from .lobby import LobbyClient, LobbyHost, generate_code, normalize_code
from .protocol import (
    JoinRequest,
    LobbyMessage,
    PlayerUpdate,
    ProtocolError,
    StartGame,
    decode_message,
    encode_message,
)

__all__ = [
    "BroadcastBus",
    "JoinRequest",
    "LobbyClient",
    "LobbyHost",
    "LobbyMessage",
    "PlayerUpdate",
    "ProtocolError",
    "StartGame",
    "Subscription",
    "decode_message",
    "encode_message",
    "generate_code",
    "normalize_code",
]

"""Host and client sides of the same-device lobby."""

import logging
import random
from abc import ABC, abstractmethod
from typing import Callable

from clue_engine.game.events import EventKind, Notifier

from .bus import BroadcastBus, Subscription
from .protocol import (
    DEFAULT_MAX_PLAYERS,
    JoinRequest,
    LobbyMessage,
    PlayerUpdate,
    ProtocolError,
    StartGame,
    decode_message,
    encode_message,
)

logger = logging.getLogger(__name__)

CODE_PREFIX = "DET-"
DEFAULT_HOST_NAME = "Détective (Hôte)"
DEFAULT_GAME_NAME = "Affaire en cours"


def generate_code(rng: random.Random | None = None) -> str:
    """Generate a lobby code such as DET-4821."""
    rng = rng or random.Random()
    return f"{CODE_PREFIX}{rng.randint(1000, 9999)}"


def normalize_code(code: str) -> str:
    return code.strip().upper()


class _LobbyPeer(ABC):
    """Shared subscription handling."""

    def __init__(self, bus: BroadcastBus, notifier: Notifier | None = None):
        self.bus = bus
        self.notifier = notifier or Notifier()
        self._subscription: Subscription | None = None

    def _connect(self) -> None:
        if self._subscription is None:
            self._subscription = self.bus.subscribe(self._on_raw)

    def _send(self, message: LobbyMessage) -> None:
        if self._subscription is None:
            raise RuntimeError("Not connected to the lobby channel")
        self._subscription.post(encode_message(message))

    def _on_raw(self, raw: str) -> None:
        try:
            message = decode_message(raw)
        except ProtocolError as e:
            logger.warning(f"Dropping lobby message: {e}")
            return
        self.on_message(message)

    @abstractmethod
    def on_message(self, message: LobbyMessage) -> None:
        """Handle a decoded message from another peer."""
        pass

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None


class LobbyHost(_LobbyPeer):
    """Hosts a lobby: admits players by code and starts the game."""

    def __init__(
        self,
        bus: BroadcastBus,
        game_name: str = DEFAULT_GAME_NAME,
        max_players: int = DEFAULT_MAX_PLAYERS,
        host_name: str = DEFAULT_HOST_NAME,
        rng: random.Random | None = None,
        notifier: Notifier | None = None,
    ):
        """Initialize host.

        Args:
            bus: Channel shared with clients
            game_name: Name shown to clients
            max_players: Capacity including the host
            host_name: Host's own entry in the player list
            rng: Random source for the lobby code
            notifier: Receives a NOTIFICATION when a player joins
        """
        super().__init__(bus, notifier)
        self.rng = rng or random.Random()
        self.game_name = game_name
        self.max_players = max_players
        self.host_name = host_name
        self.code = generate_code(self.rng)
        self.players: list[str] = []

    def new_code(self) -> str:
        self.code = generate_code(self.rng)
        return self.code

    def open(self) -> None:
        """Open the waiting room and announce it."""
        self._connect()
        self.players = [self.host_name]
        self._broadcast_players()
        logger.info(f"Lobby {self.code} open ({self.game_name})")

    def on_message(self, message: LobbyMessage) -> None:
        if isinstance(message, JoinRequest):
            self._handle_join(message)

    def _handle_join(self, request: JoinRequest) -> None:
        if normalize_code(request.code) != normalize_code(self.code):
            logger.debug(f"Join with wrong code {request.code!r} ignored")
            return
        if len(self.players) >= self.max_players:
            logger.debug(f"Lobby full, {request.player_name} not admitted")
            return

        if request.player_name not in self.players:
            self.players.append(request.player_name)
            self.notifier.notify(EventKind.NOTIFICATION)
            logger.info(f"{request.player_name} joined lobby {self.code}")
        # Re-broadcast for known names too, in case the client reloaded
        self._broadcast_players()

    def _broadcast_players(self) -> None:
        self._send(
            PlayerUpdate(
                players=list(self.players),
                game_name=self.game_name,
                max_players=self.max_players,
            )
        )

    def start(self) -> int:
        """Start the game for everyone in the lobby.

        Returns:
            Number of players to deal for
        """
        count = len(self.players)
        self._send(StartGame(player_count=count))
        logger.info(f"Lobby {self.code} starting with {count} players")
        return count


class LobbyClient(_LobbyPeer):
    """Joins a hosted lobby and mirrors its state."""

    def __init__(
        self,
        bus: BroadcastBus,
        player_name: str | None = None,
        rng: random.Random | None = None,
        notifier: Notifier | None = None,
        on_start: Callable[[int], None] | None = None,
    ):
        """Initialize client.

        Args:
            bus: Channel shared with the host
            player_name: Name to join with (random "Rival n" if None)
            rng: Random source for the default name
            notifier: Receives SUCCESS when the host starts the game
            on_start: Called with the player count when the game starts
        """
        super().__init__(bus, notifier)
        rng = rng or random.Random()
        self.player_name = player_name or f"Rival {rng.randint(0, 999)}"
        self.on_start = on_start

        self.players: list[str] = []
        self.game_name = ""
        self.max_players = DEFAULT_MAX_PLAYERS
        self.player_count: int | None = None

    def join(self, code: str) -> None:
        """Send a join request for a lobby code."""
        self._connect()
        self._send(JoinRequest(code=code, player_name=self.player_name))
        # Show ourselves until the host answers
        if not self.players:
            self.players = [self.player_name]

    def on_message(self, message: LobbyMessage) -> None:
        if isinstance(message, PlayerUpdate):
            self.players = list(message.players)
            self.game_name = message.game_name or self.game_name
            self.max_players = message.max_players or DEFAULT_MAX_PLAYERS
        elif isinstance(message, StartGame):
            self.player_count = message.player_count
            self.notifier.notify(EventKind.SUCCESS)
            if self.on_start:
                self.on_start(message.player_count)

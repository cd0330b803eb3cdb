"""Game state models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .card import CATEGORY_ORDER, Card, Hypothesis
from .player import Player


class GamePhase(str, Enum):
    """Phase of a game. WON and LOST are terminal."""

    SETUP = "SETUP"
    PLAYING = "PLAYING"
    WON = "WON"
    LOST = "LOST"

    @property
    def is_over(self) -> bool:
        return self in (GamePhase.WON, GamePhase.LOST)


class Difficulty(str, Enum):
    """Difficulty offered in the lobby."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class LogKind(str, Enum):
    """Kind of log entry (drives styling in the log panel)."""

    INFO = "info"
    ALERT = "alert"
    SUCCESS = "success"
    DEDUCTION = "deduction"


class LogEntry(BaseModel, frozen=True):
    """Single line of the game log."""

    turn: int
    message: str
    kind: LogKind = LogKind.INFO
    timestamp: datetime = Field(default_factory=datetime.now)


class Solution(BaseModel, frozen=True):
    """The hidden answer: one card per category."""

    suspect: Card
    location: Card
    weapon: Card

    def cards(self) -> list[Card]:
        """Get the three cards in category order."""
        return [self.suspect, self.location, self.weapon]

    def card_ids(self) -> set[str]:
        return {c.id for c in self.cards()}

    def matches(self, hypothesis: Hypothesis) -> bool:
        """Check a hypothesis against the solution, category by category."""
        for category, answer in zip(CATEGORY_ORDER, self.cards()):
            guess = hypothesis.slot(category)
            if guess is None or guess.id != answer.id:
                return False
        return True

    def __str__(self) -> str:
        return f"{self.suspect}, {self.location}, {self.weapon}"


class Refutation(BaseModel, frozen=True):
    """Outcome of a suggestion.

    shown_card must only be revealed to the suggester (and is known to the
    refuter who showed it); use visible_to() before handing it to a player.
    """

    refuted: bool = False
    suggester_index: int | None = None
    by_player_index: int | None = None
    shown_card: Card | None = None

    def visible_to(self, viewer_index: int) -> "Refutation":
        """Get the outcome as seen by a seat, hiding the card from bystanders."""
        if viewer_index in (self.suggester_index, self.by_player_index):
            return self
        return self.model_copy(update={"shown_card": None})


class PendingRefutation(BaseModel, frozen=True):
    """A computer's suggestion waiting for the human to pick a card to show."""

    suggester_index: int
    refuter_index: int
    hypothesis: Hypothesis
    matches: list[Card]


class GameState(BaseModel):
    """Authoritative state of one game. Mutated only by the engine."""

    game_number: int = 0
    phase: GamePhase = GamePhase.SETUP
    solution: Solution | None = None
    players: list[Player] = Field(default_factory=list)

    current_player_index: int = 0
    turn_count: int = 0

    log: list[LogEntry] = Field(default_factory=list)
    last_refutation: Refutation | None = None
    pending_refutation: PendingRefutation | None = None

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def reset_for_new_game(self) -> None:
        """Reset state for a new game."""
        self.game_number += 1
        self.phase = GamePhase.SETUP
        self.solution = None
        self.players = []
        self.current_player_index = 0
        self.turn_count = 0
        self.log = []
        self.last_refutation = None
        self.pending_refutation = None

    def __str__(self) -> str:
        parts = [f"Game {self.game_number}, Turn {self.turn_count}", f"[{self.phase.value}]"]
        player = self.current_player
        if player is not None:
            parts.append(f"{player.name}'s turn")
        if self.pending_refutation is not None:
            parts.append("[WAITING FOR REFUTATION]")
        return " ".join(parts)

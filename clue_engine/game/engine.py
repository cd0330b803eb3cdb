"""Turn engine for the deduction game."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable

from clue_engine.config import Config
from clue_engine.errors import ValidationError
from clue_engine.logging import GameLogger
from clue_engine.models.card import Card, Hypothesis
from clue_engine.models.catalog import CardCatalog
from clue_engine.models.game_state import (
    GamePhase,
    GameState,
    LogEntry,
    LogKind,
    PendingRefutation,
    Refutation,
)
from clue_engine.models.player import Player

from .dealer import deal
from .events import EventKind, Notifier
from .notebook import Notebook
from .policy import OpponentPolicy, policy_for
from .resolver import RefuterCandidate, accept_shown_card, find_refuter
from .validator import ActionValidator, ValidationResult

logger = logging.getLogger(__name__)

HUMAN_INDEX = 0
DEFAULT_LAST_MESSAGE = "Jeu commencé"


@dataclass
class ActionResult:
    """Outcome of an engine operation."""

    is_valid: bool
    error_message: str = ""
    refutation: Refutation | None = None
    pending: PendingRefutation | None = None
    phase: GamePhase | None = None

    @classmethod
    def rejected(cls, validation: ValidationResult) -> ActionResult:
        return cls(is_valid=False, error_message=validation.error_message)

    def __bool__(self) -> bool:
        return self.is_valid


class GameEngine:
    """State machine for one table: SETUP -> PLAYING -> WON | LOST.

    All mutation of GameState goes through the public operations below.
    Every operation either applies fully or is rejected without touching
    state or log.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        config: Config | None = None,
        policy: OpponentPolicy | None = None,
        notifier: Notifier | None = None,
        game_logger: GameLogger | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize game engine.

        Args:
            catalog: Card catalog to deal from
            config: Configuration (uses defaults if not provided)
            policy: Policy for computer players (from difficulty if not provided)
            notifier: Receives feedback events (sound cues)
            game_logger: GameLogger instance for replay logging
            rng: Random source (seeded from config if not provided)
        """
        self.catalog = catalog
        self.config = config or Config()
        self.rng = rng or random.Random(self.config.game.seed)
        self.policy = policy or policy_for(self.config.game.difficulty)
        self.notifier = notifier or Notifier()
        self.game_logger = game_logger

        self.state = GameState()
        self.notebook = Notebook()

        # Snapshot taken at start(); library edits do not reach a running game
        self._game_catalog = catalog.copy()
        self.validator = ActionValidator(self._game_catalog)

        self._on_log: Callable[[LogEntry], None] | None = None
        self._on_game_end: Callable[[GamePhase], None] | None = None

    def set_callbacks(
        self,
        on_log: Callable[[LogEntry], None] | None = None,
        on_game_end: Callable[[GamePhase], None] | None = None,
    ) -> None:
        """Set event callbacks.

        Args:
            on_log: Called for every appended log entry
            on_game_end: Called once when the game reaches WON or LOST
        """
        self._on_log = on_log
        self._on_game_end = on_game_end

    # --- Read helpers ---

    @property
    def players(self) -> list[Player]:
        return self.state.players

    @property
    def current_player(self) -> Player | None:
        return self.state.current_player

    @property
    def human(self) -> Player | None:
        if not self.state.players:
            return None
        return self.state.players[HUMAN_INDEX]

    @property
    def is_human_turn(self) -> bool:
        player = self.current_player
        return player is not None and not player.is_computer

    @property
    def game_catalog(self) -> CardCatalog:
        """Catalog the current game was dealt from."""
        return self._game_catalog

    def cleared_cards(self) -> list[Card]:
        """Cards the human has ruled out in the notebook, in catalog order."""
        cleared = self.notebook.cleared_ids()
        return [c for c in self._game_catalog if c.id in cleared]

    def last_log_message(self) -> str:
        if not self.state.log:
            return DEFAULT_LAST_MESSAGE
        return self.state.log[-1].message

    def refutation_for(self, viewer_index: int) -> Refutation | None:
        """Last refutation as seen by a seat (shown card hidden from others)."""
        if self.state.last_refutation is None:
            return None
        return self.state.last_refutation.visible_to(viewer_index)

    # --- Setup ---

    def start(self, num_players: int | None = None) -> None:
        """Deal a new game and enter PLAYING.

        Args:
            num_players: Number of seats (uses config if not specified)

        Raises:
            SetupError: If the catalog or player count cannot make a game
        """
        num_players = num_players or self.config.game.num_players
        game_catalog = self.catalog.copy()

        # Deal before touching state so a SetupError leaves the old game intact
        result = deal(game_catalog, num_players, self.rng)

        self.state.reset_for_new_game()
        self.notebook.reset()
        self._game_catalog = game_catalog
        self.validator = ActionValidator(game_catalog)

        players = [
            Player(
                player_id=HUMAN_INDEX,
                name=self.config.game.human_name,
                is_computer=False,
                hand=result.hands[HUMAN_INDEX],
            )
        ]
        for i in range(1, num_players):
            players.append(
                Player(
                    player_id=i,
                    name=f"{self.config.game.rival_name_prefix} {i}",
                    is_computer=True,
                    hand=result.hands[i],
                )
            )

        self.state.solution = result.solution
        self.state.players = players
        self.state.current_player_index = HUMAN_INDEX

        distribution = ", ".join(f"{p.name}: {len(p.hand)}" for p in players)
        self._log(f"Enquête démarrée avec {num_players} joueurs.")
        self._log(f"Distribution ({result.deck_size} cartes) : {distribution}")

        self.state.phase = GamePhase.PLAYING
        self.state.turn_count = 1

        if self.game_logger:
            self.game_logger.log_game_start(
                self.state.game_number, result.solution, players
            )

        logger.info(
            f"Game {self.state.game_number} started with {num_players} players"
        )

    # --- Turn actions ---

    def suggest(
        self,
        hypothesis: Hypothesis | None,
        player_index: int | None = None,
    ) -> ActionResult:
        """Make a suggestion for the current player.

        Other players are asked clockwise; the first one holding a named
        card shows one of them to the suggester. If that player is human, the
        engine waits for respond_to_refutation() instead of choosing.

        Does not end the turn.

        Args:
            hypothesis: Complete hypothesis
            player_index: Acting seat (None means the current player)

        Returns:
            ActionResult with the refutation, or the pending human refutation
        """
        validation = self.validator.validate_action(self.state, hypothesis, player_index)
        if not validation:
            logger.debug(f"Suggestion rejected: {validation.error_message}")
            return ActionResult.rejected(validation)

        suggester_index = self.state.current_player_index
        suggester = self.players[suggester_index]

        if suggester.is_computer:
            self._log(f"{suggester.name} enquête : {hypothesis}")
        else:
            self._log(
                f"Vous enquêtez : {hypothesis.suspect} avec {hypothesis.weapon} "
                f"à {hypothesis.location}",
                LogKind.DEDUCTION,
            )
        if self.game_logger:
            self.game_logger.log_suggestion(
                self.state.game_number,
                self.state.turn_count,
                suggester_index,
                hypothesis,
            )

        candidate = find_refuter(hypothesis, suggester_index, self.players)
        if candidate is None:
            refutation = Refutation(refuted=False, suggester_index=suggester_index)
            self._record_refutation(refutation)
            return ActionResult(is_valid=True, refutation=refutation)

        refuter = self.players[candidate.player_index]
        if not refuter.is_computer:
            pending = PendingRefutation(
                suggester_index=suggester_index,
                refuter_index=candidate.player_index,
                hypothesis=hypothesis,
                matches=candidate.matches,
            )
            self.state.pending_refutation = pending
            self.notifier.notify(EventKind.ALERT)
            logger.debug(
                f"Waiting for {refuter.name} to refute {suggester.name} "
                f"({len(candidate.matches)} matching cards)"
            )
            return ActionResult(is_valid=True, pending=pending)

        shown = self.policy.choose_card_to_show(candidate.matches, hypothesis, self.rng)
        refutation = accept_shown_card(candidate, shown.id)
        self._record_refutation(refutation)
        return ActionResult(is_valid=True, refutation=refutation)

    def respond_to_refutation(self, card_id: str) -> ActionResult:
        """Show the card the human chose for a pending refutation.

        If the suggestion came from a computer, its turn ends here.

        Args:
            card_id: One of the pending matching cards

        Returns:
            ActionResult with the refutation
        """
        pending = self.state.pending_refutation
        if self.state.phase != GamePhase.PLAYING or pending is None:
            return ActionResult(is_valid=False, error_message="No refutation pending")

        candidate = RefuterCandidate(
            suggester_index=pending.suggester_index,
            player_index=pending.refuter_index,
            matches=pending.matches,
        )
        try:
            refutation = accept_shown_card(candidate, card_id)
        except ValidationError as e:
            return ActionResult(is_valid=False, error_message=str(e))

        self.state.pending_refutation = None
        self._record_refutation(refutation)

        if self.players[pending.suggester_index].is_computer:
            self.end_turn()

        return ActionResult(is_valid=True, refutation=refutation)

    def accuse(
        self,
        hypothesis: Hypothesis | None,
        player_index: int | None = None,
    ) -> ActionResult:
        """Accuse: compare a hypothesis with the solution and end the game.

        Allowed at any point of the current player's turn.

        Args:
            hypothesis: Complete hypothesis
            player_index: Acting seat (None means the current player)

        Returns:
            ActionResult with the final phase
        """
        validation = self.validator.validate_action(self.state, hypothesis, player_index)
        if not validation:
            logger.debug(f"Accusation rejected: {validation.error_message}")
            return ActionResult.rejected(validation)

        accuser_index = self.state.current_player_index
        accuser = self.players[accuser_index]
        correct = self.state.solution.matches(hypothesis)

        self._log(f"{accuser.name} accuse : {hypothesis}", LogKind.DEDUCTION)
        if self.game_logger:
            self.game_logger.log_accusation(
                self.state.game_number,
                self.state.turn_count,
                accuser_index,
                hypothesis,
                correct,
            )

        if correct:
            self.state.phase = GamePhase.WON
            if accuser.is_computer:
                self._log(f"CORRECT ! {accuser.name} a résolu le mystère !", LogKind.SUCCESS)
            else:
                self._log("CORRECT ! Vous avez résolu le mystère !", LogKind.SUCCESS)
            self.notifier.notify(EventKind.SUCCESS)
        else:
            self.state.phase = GamePhase.LOST
            if accuser.is_computer:
                self._log(
                    f"FAUX ! {accuser.name} s'est trompé, le coupable s'est échappé...",
                    LogKind.ALERT,
                )
            else:
                self._log("FAUX ! Le coupable s'est échappé...", LogKind.ALERT)
            self.notifier.notify(EventKind.FAILURE)

        logger.info(
            f"Game {self.state.game_number} over: {self.state.phase.value} "
            f"after {self.state.turn_count} turns"
        )
        if self.game_logger:
            self.game_logger.log_game_end(
                self.state.game_number,
                self.state.phase,
                self.state.solution,
                self.state.turn_count,
            )
        if self._on_game_end:
            self._on_game_end(self.state.phase)

        return ActionResult(is_valid=True, phase=self.state.phase)

    def end_turn(self) -> ActionResult:
        """Pass the turn to the next seat."""
        validation = self.validator.validate_turn(self.state)
        if not validation:
            logger.debug(f"End turn rejected: {validation.error_message}")
            return ActionResult.rejected(validation)

        self.state.current_player_index = (
            self.state.current_player_index + 1
        ) % self.state.num_players
        self.state.turn_count += 1

        if self.game_logger:
            self.game_logger.log_turn_end(
                self.state.game_number,
                self.state.turn_count,
                self.state.current_player_index,
            )
        return ActionResult(is_valid=True)

    def play_computer_turn(self) -> ActionResult:
        """Play a whole turn for the current computer player.

        The policy picks a suggestion which goes through suggest() like a
        human one. The turn then ends, unless the human has to choose a card
        to show, in which case respond_to_refutation() ends it.
        """
        validation = self.validator.validate_turn(self.state)
        if not validation:
            return ActionResult.rejected(validation)

        player = self.current_player
        if not player.is_computer:
            return ActionResult(
                is_valid=False,
                error_message=f"{player.name} is not a computer player",
            )

        hypothesis = self.policy.choose_hypothesis(self._game_catalog, player, self.rng)
        result = self.suggest(hypothesis)
        if not result:
            logger.warning(
                f"Policy produced an invalid suggestion for {player.name}: "
                f"{result.error_message}"
            )
            return result

        if result.pending is None:
            self.end_turn()
        return result

    # --- Internals ---

    def _record_refutation(self, refutation: Refutation) -> None:
        """Store a resolved refutation and report it to the right audience."""
        self.state.last_refutation = refutation
        suggester = self.players[refutation.suggester_index]

        if not refutation.refuted:
            if suggester.is_computer:
                self._log(f"Personne n'a réfuté l'hypothèse de {suggester.name}.")
            else:
                self._log("Personne n'a pu réfuter votre suggestion.", LogKind.SUCCESS)
                self.notifier.notify(EventKind.SUCCESS)
        else:
            refuter = self.players[refutation.by_player_index]
            card = refutation.shown_card
            if not suggester.is_computer:
                self._log(f"{refuter.name} a réfuté en montrant : {card.name}", LogKind.ALERT)
                self.notebook.auto_clear(card.id)
                self.notifier.notify(EventKind.ALERT)
            elif not refuter.is_computer:
                self._log(
                    f"Vous avez montré : {card.name} à {suggester.name}.",
                    LogKind.DEDUCTION,
                )
            else:
                # Bystanders only learn that a card changed hands
                self._log(
                    f"{refuter.name} a montré une carte à {suggester.name}.",
                    LogKind.ALERT,
                )

        if self.game_logger:
            self.game_logger.log_refutation(
                self.state.game_number,
                self.state.turn_count,
                refutation,
            )

    def _log(self, message: str, kind: LogKind = LogKind.INFO) -> None:
        """Append an entry to the game log."""
        entry = LogEntry(turn=self.state.turn_count, message=message, kind=kind)
        self.state.log.append(entry)
        if self._on_log:
            self._on_log(entry)

    def append_log(self, message: str, kind: LogKind = LogKind.INFO) -> None:
        """Append an external message (e.g. a hint) to the game log."""
        self._log(message, kind)

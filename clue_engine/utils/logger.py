"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

from clue_engine.models.card import CATEGORY_ORDER, CATEGORY_STYLES

if TYPE_CHECKING:
    from clue_engine.game.notebook import Notebook
    from clue_engine.models.card import Card, Hypothesis
    from clue_engine.models.catalog import CardCatalog
    from clue_engine.models.game_state import GameState, LogEntry, PendingRefutation, Refutation
    from clue_engine.models.player import Player


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def card_label(card: "Card") -> str:
    """Short label with the category tag, e.g. "[Arme] Corde"."""
    return f"[{CATEGORY_STYLES[card.category].label}] {card.name}"


class GameDisplay:
    """Display game state to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show every player's hand (spoilers)
        """
        self.show_hands = show_hands

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_game_start(self, state: "GameState") -> None:
        """Print game start message."""
        self.print_separator()
        print(f"GAME {state.game_number} - {state.num_players} players")
        self.print_separator()

    def print_flavor(self, text: str) -> None:
        print(f"\n  « {text} »\n")

    def print_log_entry(self, entry: "LogEntry") -> None:
        """Print one game log line."""
        print(f"[T{entry.turn:>2}] {entry.message}")

    def print_turn(self, state: "GameState") -> None:
        """Print turn header."""
        player = state.current_player
        print(f"\nTurn {state.turn_count}: {player.name}")

    def print_hand(self, player: "Player") -> None:
        """Print a player's own cards."""
        print(f"Your cards ({len(player.hand)}):")
        for card in player.hand:
            print(f"  {card_label(card)}")

    def print_hands(self, players: list["Player"]) -> None:
        """Print hands for all players (if show_hands is enabled)."""
        if not self.show_hands:
            return

        print("\nHands:")
        for player in players:
            names = ", ".join(c.name for c in player.hand)
            print(f"  P{player.player_id} {player.name}: {names}")

    def print_choices(self, catalog: "CardCatalog", notebook: "Notebook") -> None:
        """Print the catalog grouped by category with notebook marks."""
        for category in CATEGORY_ORDER:
            style = CATEGORY_STYLES[category]
            print(f"{style.label}:")
            for i, card in enumerate(catalog.by_category(category), 1):
                mark = notebook.status(card.id).value
                print(f"  {style.code}{i}. {card.name:<30} ({mark})")

    def print_suggestion_result(
        self,
        hypothesis: "Hypothesis",
        refutation: "Refutation",
        players: list["Player"],
    ) -> None:
        """Print the outcome of the human's suggestion."""
        print(f"\nHypothesis: {hypothesis}")
        if refutation.refuted:
            refuter = players[refutation.by_player_index]
            print(f"  -> {refuter.name} showed you: {card_label(refutation.shown_card)}")
        else:
            print("  -> Nobody could refute!")

    def print_refutation_request(
        self,
        pending: "PendingRefutation",
        players: list["Player"],
    ) -> None:
        """Ask the human which card to show."""
        suggester = players[pending.suggester_index]
        print(f"\n{suggester.name} suggests: {pending.hypothesis}")
        print("You must show one of:")
        for i, card in enumerate(pending.matches, 1):
            print(f"  {i}. {card_label(card)}")

    def print_game_end(self, state: "GameState", conclusion: str = "") -> None:
        """Print game end results."""
        self.print_separator()
        print(f"Game {state.game_number} finished: {state.phase.value}")
        print(f"Solution: {state.solution}")
        if conclusion:
            self.print_flavor(conclusion)
        self.print_separator()

    def print_final_results(self, results: dict[str, int]) -> None:
        """Print results over several games."""
        self.print_separator()
        print("FINAL RESULTS")
        self.print_separator()
        for phase, count in sorted(results.items()):
            print(f"  {phase}: {count}")

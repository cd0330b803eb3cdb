"""Formatters for game log output."""

from typing import Sequence

from clue_engine.models.card import CATEGORY_STYLES, Card, Hypothesis
from clue_engine.models.game_state import Refutation, Solution
from clue_engine.models.player import Player


def format_card(card: Card) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Category code and card id (e.g., "S:s3").
    """
    return f"{CATEGORY_STYLES[card.category].code}:{card.id}"


def format_cards(cards: Sequence[Card]) -> str:
    """Format cards to comma-separated string.

    Args:
        cards: Cards to format.

    Returns:
        Comma-separated card strings (e.g., "S:s1,L:l4").
        Empty string if no cards.
    """
    return ",".join(format_card(c) for c in cards)


def format_hypothesis(hypothesis: Hypothesis | Solution) -> str:
    """Format a hypothesis or solution in category order."""
    return format_cards(hypothesis.cards())


def format_hands(players: Sequence[Player]) -> dict[str, str]:
    """Format all players' hands to dict.

    Args:
        players: Players in seat order.

    Returns:
        Dict mapping player_id (as string) to formatted hand string.
    """
    return {str(p.player_id): format_cards(p.hand) for p in players}


def format_refutation(refutation: Refutation) -> dict[str, object]:
    """Format a refutation outcome for the replay log."""
    return {
        "refuted": refutation.refuted,
        "by": refutation.by_player_index,
        "card": format_card(refutation.shown_card) if refutation.shown_card else "",
    }

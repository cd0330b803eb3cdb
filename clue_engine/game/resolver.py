"""Refutation resolution.

A suggestion is checked against the other players in clockwise order,
starting with the seat after the suggester. The first player holding at
least one of the named cards must refute, even if a later player holds
more of them. Only the suggester learns which card was shown.

When the refuter is the human, resolution is split in two steps:
find_refuter() exposes the matching cards so the player can choose,
then accept_shown_card() records the choice. resolve() runs both steps
with an automatic choice.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from clue_engine.errors import ValidationError
from clue_engine.models.card import Card, Hypothesis
from clue_engine.models.game_state import Refutation
from clue_engine.models.player import Player

# (matches, hypothesis, rng) -> card to show
CardChooser = Callable[[list[Card], Hypothesis, random.Random], Card]


@dataclass
class RefuterCandidate:
    """Nearest player able to refute a suggestion."""

    suggester_index: int
    player_index: int
    matches: list[Card] = field(default_factory=list)


def matching_cards(hand: Sequence[Card], hypothesis: Hypothesis) -> list[Card]:
    """Get the cards of a hand named by a hypothesis, in hand order."""
    wanted = hypothesis.card_ids()
    return [c for c in hand if c.id in wanted]


def refutation_order(suggester_index: int, num_players: int) -> list[int]:
    """Get seat indices to ask, clockwise from the suggester (excluded)."""
    return [(suggester_index + i) % num_players for i in range(1, num_players)]


def random_choice(matches: list[Card], hypothesis: Hypothesis, rng: random.Random) -> Card:
    """Default card chooser: uniform among the matches."""
    return rng.choice(matches)


def find_refuter(
    hypothesis: Hypothesis,
    suggester_index: int,
    players: Sequence[Player],
) -> RefuterCandidate | None:
    """Find the nearest player able to refute.

    Args:
        hypothesis: Complete hypothesis
        suggester_index: Seat of the suggesting player
        players: All players in seat order

    Returns:
        RefuterCandidate, or None if nobody holds a named card
    """
    for index in refutation_order(suggester_index, len(players)):
        matches = matching_cards(players[index].hand, hypothesis)
        if matches:
            return RefuterCandidate(
                suggester_index=suggester_index,
                player_index=index,
                matches=matches,
            )
    return None


def accept_shown_card(candidate: RefuterCandidate, card_id: str) -> Refutation:
    """Record the card a refuter chose to show.

    Raises:
        ValidationError: If the card is not one of the refuter's matches
    """
    for card in candidate.matches:
        if card.id == card_id:
            return Refutation(
                refuted=True,
                suggester_index=candidate.suggester_index,
                by_player_index=candidate.player_index,
                shown_card=card,
            )
    raise ValidationError(f"Card {card_id!r} cannot refute this suggestion")


def resolve(
    hypothesis: Hypothesis,
    suggester_index: int,
    players: Sequence[Player],
    rng: random.Random | None = None,
    chooser: CardChooser | None = None,
) -> Refutation:
    """Resolve a suggestion with an automatic card choice.

    Args:
        hypothesis: Complete hypothesis
        suggester_index: Seat of the suggesting player
        players: All players in seat order
        rng: Random source for the card pick
        chooser: Picks the card to show among the matches (uniform if None)

    Returns:
        Refutation outcome
    """
    candidate = find_refuter(hypothesis, suggester_index, players)
    if candidate is None:
        return Refutation(refuted=False, suggester_index=suggester_index)

    rng = rng or random.Random()
    chooser = chooser or random_choice
    shown = chooser(candidate.matches, hypothesis, rng)
    return accept_shown_card(candidate, shown.id)

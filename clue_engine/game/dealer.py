"""Solution drawing and card dealing."""

import logging
import random
from dataclasses import dataclass

from clue_engine.errors import SetupError
from clue_engine.models.card import CATEGORY_ORDER, Card
from clue_engine.models.catalog import CardCatalog
from clue_engine.models.game_state import Solution

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4


@dataclass
class Deal:
    """Result of setting up a game."""

    solution: Solution
    hands: list[list[Card]]

    @property
    def deck_size(self) -> int:
        return sum(len(h) for h in self.hands)


def draw_solution(
    catalog: CardCatalog,
    rng: random.Random | None = None,
) -> tuple[Solution, list[Card]]:
    """Pick one hidden card per category.

    Args:
        catalog: Card catalog (not modified)
        rng: Random source (module random if not provided)

    Returns:
        Tuple of (solution, remaining cards in catalog order)

    Raises:
        SetupError: If a category has no cards
    """
    rng = rng or random.Random()

    picked: list[Card] = []
    for category in CATEGORY_ORDER:
        candidates = catalog.by_category(category)
        if not candidates:
            raise SetupError(f"No {category.value} cards in catalog")
        picked.append(rng.choice(candidates))

    solution = Solution(suspect=picked[0], location=picked[1], weapon=picked[2])
    hidden = solution.card_ids()
    remaining = [c for c in catalog if c.id not in hidden]
    return solution, remaining


def deal(
    catalog: CardCatalog,
    num_players: int,
    rng: random.Random | None = None,
) -> Deal:
    """Draw the solution and deal the rest of the catalog.

    The remaining cards are shuffled together and dealt one at a time
    starting from player 0, so earlier seats may hold one card more.

    Args:
        catalog: Card catalog (not modified)
        num_players: Number of seats (2-4)
        rng: Random source

    Returns:
        Deal with the solution and one hand per seat

    Raises:
        SetupError: If the player count is unsupported or a category is empty
    """
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise SetupError(
            f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, "
            f"got {num_players}"
        )

    rng = rng or random.Random()
    solution, deck = draw_solution(catalog, rng)
    rng.shuffle(deck)

    hands: list[list[Card]] = [[] for _ in range(num_players)]
    for i, card in enumerate(deck):
        hands[i % num_players].append(card)

    logger.debug(
        f"Dealt {len(deck)} cards to {num_players} players: "
        f"{[len(h) for h in hands]}"
    )
    return Deal(solution=solution, hands=hands)

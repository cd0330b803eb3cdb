"""Opponent policies for computer-controlled players.

Defines the interface every simulated opponent implements, plus the
baseline random policy.
"""

import random
from abc import ABC, abstractmethod
from typing import Callable

from clue_engine.models.card import CATEGORY_ORDER, Card, Hypothesis
from clue_engine.models.catalog import CardCatalog
from clue_engine.models.game_state import Difficulty
from clue_engine.models.player import Player


class OpponentPolicy(ABC):
    """Abstract base class for computer players.

    A policy decides what a computer suggests on its turn and which card it
    shows when it has to refute.
    """

    @abstractmethod
    def choose_hypothesis(
        self,
        catalog: CardCatalog,
        player: Player,
        rng: random.Random,
    ) -> Hypothesis:
        """Choose a suggestion for this turn.

        Args:
            catalog: Card catalog
            player: The computer player whose turn it is
            rng: Random source

        Returns:
            Complete Hypothesis
        """
        pass

    def choose_card_to_show(
        self,
        matches: list[Card],
        hypothesis: Hypothesis,
        rng: random.Random,
    ) -> Card:
        """Choose which matching card to reveal when refuting.

        Defaults to a uniform pick. Override for a smarter refuter.
        """
        return rng.choice(matches)


class RandomPolicy(OpponentPolicy):
    """Suggests one uniformly random card per category.

    Ignores its own hand and everything it has been shown.
    """

    def choose_hypothesis(
        self,
        catalog: CardCatalog,
        player: Player,
        rng: random.Random,
    ) -> Hypothesis:
        picks = [rng.choice(catalog.by_category(category)) for category in CATEGORY_ORDER]
        return Hypothesis(suspect=picks[0], location=picks[1], weapon=picks[2])


PolicyFactory = Callable[[], OpponentPolicy]

# Every difficulty currently plays the same baseline
_POLICIES: dict[Difficulty, PolicyFactory] = {
    Difficulty.EASY: RandomPolicy,
    Difficulty.MEDIUM: RandomPolicy,
    Difficulty.HARD: RandomPolicy,
}


def register_policy(difficulty: Difficulty, factory: PolicyFactory) -> None:
    """Use a different policy for a difficulty level."""
    _POLICIES[Difficulty(difficulty)] = factory


def policy_for(difficulty: Difficulty | str = Difficulty.MEDIUM) -> OpponentPolicy:
    """Create the policy registered for a difficulty level."""
    return _POLICIES[Difficulty(difficulty)]()

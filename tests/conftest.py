"""Shared fixtures."""

import pytest

from clue_engine.game.policy import OpponentPolicy
from clue_engine.models.card import Card, CardCategory, Hypothesis
from clue_engine.models.catalog import CardCatalog, load_catalog
from clue_engine.models.game_state import Solution


def make_card(card_id: str, category: CardCategory, name: str | None = None) -> Card:
    return Card(id=card_id, category=category, name=name or card_id.upper())


@pytest.fixture
def catalog():
    """The bundled 24-card catalog."""
    return load_catalog()


@pytest.fixture
def small_catalog():
    """Three cards per category."""
    cards = []
    for prefix, category in (
        ("s", CardCategory.SUSPECT),
        ("l", CardCategory.LOCATION),
        ("w", CardCategory.WEAPON),
    ):
        cards.extend(make_card(f"{prefix}{i}", category) for i in range(1, 4))
    return CardCatalog(cards)


class FixedPolicy(OpponentPolicy):
    """Always suggests the same cards."""

    def __init__(self, hypothesis=None):
        self.hypothesis = hypothesis

    def choose_hypothesis(self, catalog, player, rng):
        return self.hypothesis


def triple(catalog, suspect, location, weapon):
    return Hypothesis(
        suspect=catalog.get(suspect),
        location=catalog.get(location),
        weapon=catalog.get(weapon),
    )


def rig(engine, solution, hands):
    """Replace the dealt solution and hands of a started game."""
    catalog = engine.game_catalog
    engine.state.solution = Solution(
        suspect=catalog.get(solution[0]),
        location=catalog.get(solution[1]),
        weapon=catalog.get(solution[2]),
    )
    for player, card_ids in zip(engine.players, hands):
        player.hand = [catalog.get(card_id) for card_id in card_ids]

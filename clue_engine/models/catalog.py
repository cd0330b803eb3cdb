"""Card catalog: the ordered library of playable cards."""

from pathlib import Path
from typing import Iterable, Iterator

import yaml

from clue_engine.errors import CatalogError

from .card import Card, CardCategory

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "cards.yaml"

CUSTOM_ID_PREFIX = "custom-"


class CardCatalog:
    """Ordered collection of cards with unique ids.

    The engine only reads from a catalog. Library edits (add, replace,
    remove) are meant for the card library screen and never affect a game
    that has already been dealt.
    """

    def __init__(self, cards: Iterable[Card] | None = None):
        """Initialize catalog.

        Args:
            cards: Initial cards, in display order.

        Raises:
            CatalogError: If two cards share an id.
        """
        self._cards: dict[str, Card] = {}
        for card in cards or []:
            self.add(card)

    def add(self, card: Card) -> None:
        """Append a card to the catalog."""
        if card.id in self._cards:
            raise CatalogError(f"Duplicate card id: {card.id}")
        self._cards[card.id] = card

    def replace(self, card: Card) -> None:
        """Replace the card with the same id, keeping its position."""
        if card.id not in self._cards:
            raise CatalogError(f"Unknown card id: {card.id}")
        self._cards[card.id] = card

    def remove(self, card_id: str) -> Card:
        """Remove and return a card."""
        try:
            return self._cards.pop(card_id)
        except KeyError:
            raise CatalogError(f"Unknown card id: {card_id}") from None

    def get(self, card_id: str) -> Card | None:
        """Get a card by id."""
        return self._cards.get(card_id)

    def by_category(self, category: CardCategory) -> list[Card]:
        """Get all cards of a category, in catalog order."""
        return [c for c in self._cards.values() if c.category == category]

    def new_card_id(self) -> str:
        """Generate an id not used by any card in the catalog."""
        n = len(self._cards) + 1
        while f"{CUSTOM_ID_PREFIX}{n}" in self._cards:
            n += 1
        return f"{CUSTOM_ID_PREFIX}{n}"

    def copy(self) -> "CardCatalog":
        """Create a shallow copy (cards are immutable)."""
        return CardCatalog(self._cards.values())

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards.values()))

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        if isinstance(card_id, Card):
            card_id = card_id.id
        return card_id in self._cards

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{cat.value}={len(self.by_category(cat))}" for cat in CardCategory
        )
        return f"CardCatalog({counts})"


def load_catalog(path: Path | str | None = None) -> CardCatalog:
    """Load a catalog from a YAML file.

    The file holds either a list of card mappings or a mapping with a
    ``cards`` key.

    Args:
        path: Path to the catalog file. If None, uses the bundled catalog.

    Returns:
        CardCatalog in file order.
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH

    with open(catalog_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("cards")
    return CardCatalog(Card(**entry) for entry in data or [])

"""Card and Hypothesis models."""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from clue_engine.errors import ValidationError


class CardCategory(str, Enum):
    """Card category. Every game hides exactly one card of each."""

    SUSPECT = "SUSPECT"
    LOCATION = "LOCATION"
    WEAPON = "WEAPON"


# Order used for solutions, hypotheses and display
CATEGORY_ORDER = (CardCategory.SUSPECT, CardCategory.LOCATION, CardCategory.WEAPON)


class CategoryStyle(BaseModel, frozen=True):
    """Presentation descriptor for a category."""

    label: str
    color: str
    code: str


CATEGORY_STYLES: dict[CardCategory, CategoryStyle] = {
    CardCategory.SUSPECT: CategoryStyle(label="Suspect", color="blue", code="S"),
    CardCategory.LOCATION: CategoryStyle(label="Lieu", color="red", code="L"),
    CardCategory.WEAPON: CategoryStyle(label="Arme", color="yellow", code="W"),
}


class Card(BaseModel, frozen=True):
    """Single catalog entry. Referenced by id, never mutated."""

    id: str
    category: CardCategory
    name: str
    description: str = ""
    icon: str = ""
    image_url: str | None = None
    alt_name: str | None = None  # Secondary display name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Card({self.id!r}, {self.category.value})"


class Hypothesis(BaseModel, frozen=True):
    """A (suspect, location, weapon) triple.

    Fields may be left empty while the player is still choosing; only
    complete hypotheses are accepted by the engine.
    """

    suspect: Card | None = None
    location: Card | None = None
    weapon: Card | None = None

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Hypothesis":
        """Build a hypothesis from cards given in any order.

        Raises:
            ValidationError: If a category is missing or repeated.
        """
        slots: dict[CardCategory, Card] = {}
        for card in cards:
            if card.category in slots:
                raise ValidationError(f"Two {card.category.value} cards given")
            slots[card.category] = card
        missing = [c.value for c in CATEGORY_ORDER if c not in slots]
        if missing:
            raise ValidationError(f"Missing categories: {', '.join(missing)}")
        return cls(
            suspect=slots[CardCategory.SUSPECT],
            location=slots[CardCategory.LOCATION],
            weapon=slots[CardCategory.WEAPON],
        )

    @property
    def is_complete(self) -> bool:
        """Check that all three categories are chosen."""
        return None not in (self.suspect, self.location, self.weapon)

    def cards(self) -> list[Card]:
        """Get the chosen cards in category order."""
        return [c for c in (self.suspect, self.location, self.weapon) if c is not None]

    def card_ids(self) -> set[str]:
        """Get ids of the chosen cards."""
        return {c.id for c in self.cards()}

    def slot(self, category: CardCategory) -> Card | None:
        """Get the card chosen for a category."""
        return {
            CardCategory.SUSPECT: self.suspect,
            CardCategory.LOCATION: self.location,
            CardCategory.WEAPON: self.weapon,
        }[category]

    def __str__(self) -> str:
        return ", ".join(str(c) for c in self.cards()) or "(empty)"

"""Game models."""

from .card import (
    CATEGORY_ORDER,
    CATEGORY_STYLES,
    Card,
    CardCategory,
    CategoryStyle,
    Hypothesis,
)
from .catalog import CardCatalog, load_catalog
from .game_state import (
    Difficulty,
    GamePhase,
    GameState,
    LogEntry,
    LogKind,
    PendingRefutation,
    Refutation,
    Solution,
)
from .player import Player

__all__ = [
    "CATEGORY_ORDER",
    "CATEGORY_STYLES",
    "Card",
    "CardCatalog",
    "CardCategory",
    "CategoryStyle",
    "Difficulty",
    "GamePhase",
    "GameState",
    "Hypothesis",
    "LogEntry",
    "LogKind",
    "PendingRefutation",
    "Player",
    "Refutation",
    "Solution",
    "load_catalog",
]

"""Game logic."""

from .dealer import Deal, deal, draw_solution
from .engine import ActionResult, GameEngine
from .events import CallbackNotifier, EventKind, Notifier
from .notebook import Notebook, NoteStatus
from .policy import OpponentPolicy, RandomPolicy, policy_for, register_policy
from .resolver import RefuterCandidate, accept_shown_card, find_refuter, resolve
from .session import GameSession
from .validator import ActionValidator, ValidationResult

__all__ = [
    "ActionResult",
    "ActionValidator",
    "CallbackNotifier",
    "Deal",
    "EventKind",
    "GameEngine",
    "GameSession",
    "Notebook",
    "NoteStatus",
    "Notifier",
    "OpponentPolicy",
    "RandomPolicy",
    "RefuterCandidate",
    "ValidationResult",
    "accept_shown_card",
    "deal",
    "draw_solution",
    "find_refuter",
    "policy_for",
    "register_policy",
    "resolve",
]

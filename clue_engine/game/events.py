"""Side-effect events the engine reports to its surroundings (sounds, toasts)."""

from enum import Enum
from typing import Callable


class EventKind(str, Enum):
    """Kind of feedback event."""

    CLICK = "click"
    ALERT = "alert"
    SUCCESS = "success"
    FAILURE = "failure"
    NOTIFICATION = "notification"


class Notifier:
    """Receives feedback events. The base class ignores them."""

    def notify(self, kind: EventKind) -> None:
        pass


class CallbackNotifier(Notifier):
    """Forwards events to a callable."""

    def __init__(self, callback: Callable[[EventKind], None]):
        self._callback = callback

    def notify(self, kind: EventKind) -> None:
        self._callback(kind)

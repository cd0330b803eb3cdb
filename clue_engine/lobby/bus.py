"""Same-process broadcast channel standing in for cross-tab messaging."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class Subscription:
    """Handle returned by BroadcastBus.subscribe()."""

    def __init__(self, bus: "BroadcastBus", listener: Listener):
        self._bus = bus
        self.listener = listener
        self.closed = False

    def post(self, raw: str) -> None:
        """Send to every other subscriber of the bus."""
        if self.closed:
            raise RuntimeError("Subscription is closed")
        self._bus.publish(raw, sender=self)

    def close(self) -> None:
        if not self.closed:
            self._bus.unsubscribe(self)
            self.closed = True


class BroadcastBus:
    """Named channel delivering each message to all subscribers but the sender.

    Delivery is synchronous and in subscription order.
    """

    def __init__(self, name: str = "detective_lobby"):
        self.name = name
        self._subscriptions: list[Subscription] = []

    def subscribe(self, listener: Listener) -> Subscription:
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, raw: str, sender: Subscription | None = None) -> int:
        """Deliver a message.

        Returns:
            Number of listeners reached
        """
        receivers = [s for s in self._subscriptions if s is not sender]
        for subscription in receivers:
            subscription.listener(raw)
        logger.debug(f"[{self.name}] delivered to {len(receivers)} listeners")
        return len(receivers)

    def __len__(self) -> int:
        return len(self._subscriptions)

"""Handle-based event channels for dirty/clean notifications."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count

logger = logging.getLogger(__name__)

EventHandler = Callable[[], None]

_subscription_ids = count(1)


@dataclass(frozen=True)
class Subscription:
    """Token returned by ``EventChannel.subscribe``.

    Each subscription must be released exactly once through
    ``EventChannel.unsubscribe``.
    """

    channel: str
    id: int = field(default_factory=lambda: next(_subscription_ids))


@dataclass
class EventChannel:
    """Ordered list of handlers fired for a single event."""

    name: str
    _handlers: dict[int, EventHandler] = field(default_factory=dict)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: EventHandler) -> Subscription:
        """Register a handler and return its subscription handle."""
        subscription = Subscription(channel=self.name)
        self._handlers[subscription.id] = handler
        logger.debug("Subscribed %s to %s", subscription.id, self.name)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Release a subscription. Returns False if it was not active."""
        if subscription.channel != self.name:
            return False
        removed = self._handlers.pop(subscription.id, None) is not None
        if removed:
            logger.debug("Unsubscribed %s from %s", subscription.id, self.name)
        return removed

    def emit(self) -> None:
        """Invoke handlers in subscription order."""
        for handler in list(self._handlers.values()):
            handler()

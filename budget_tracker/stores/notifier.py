"""
Change Notifier

Stores report every successful mutation here; subscribers (the
presentation layer, the audit logger, an auto-save hook) are called
synchronously, in subscription order, on the caller's thread.
There is no queueing or debouncing.
"""

from typing import Callable

import structlog

from budget_tracker.models.results import StoreChange


ChangeCallback = Callable[[StoreChange], None]

logger = structlog.get_logger(__name__)


class ChangeNotifier:
    """Ordered list of change subscribers."""

    def __init__(self):
        self._subscribers: list[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """
        Register a subscriber.

        Returns a function that removes this subscription.
        Subscribing the same callback twice registers it twice.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: ChangeCallback) -> bool:
        """Remove one registration of callback. Returns False if it was not registered."""
        try:
            self._subscribers.remove(callback)
        except ValueError:
            return False
        return True

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def notify(self, change: StoreChange) -> None:
        """Deliver a change to every subscriber. Subscriber errors propagate to the mutating caller."""
        logger.debug("store_changed", kind=change.kind.value, subscribers=len(self._subscribers))
        for callback in list(self._subscribers):
            callback(change)

"""
Event Notifier - Thread-safe publish/subscribe with a latest value.

Subscribers register under an identity of their choosing and use the
same identity to unsubscribe. A new subscriber is immediately called
with the latest event, so it never has to poll for the current state.

Example:
    notifier = EventNotifier([])
    notifier.subscribe(panel, panel.set_applications)
    notifier.notify(applications)
    notifier.unsubscribe(panel)
"""

import threading
from typing import Callable, Dict, Generic, Hashable, TypeVar

T = TypeVar("T")


class EventNotifier(Generic[T]):
    """Manages listeners interested in events of type T."""

    def __init__(self, initial_value: T):
        self._lock = threading.RLock()
        self._listeners: Dict[Hashable, Callable[[T], None]] = {}
        self._latest_event = initial_value

    @property
    def latest_event(self) -> T:
        with self._lock:
            return self._latest_event

    def notify(self, event: T) -> None:
        """Record an event and deliver it to every listener."""
        with self._lock:
            self._latest_event = event
            for listener in list(self._listeners.values()):
                listener(event)

    def subscribe(self, subscriber_id: Hashable, listener: Callable[[T], None]) -> None:
        """
        Register a listener and deliver the latest event to it.

        Subscribing again with the same id replaces the listener.
        """
        with self._lock:
            self._listeners[subscriber_id] = listener
            listener(self._latest_event)

    def unsubscribe(self, subscriber_id: Hashable) -> None:
        with self._lock:
            self._listeners.pop(subscriber_id, None)

    def unsubscribe_all(self) -> None:
        with self._lock:
            self._listeners.clear()

    def has_listeners(self) -> bool:
        with self._lock:
            return bool(self._listeners)

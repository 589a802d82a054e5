"""
plugins/event_system.py
Publish/subscribe channel between the host loop and plugins.
The host publishes "on_tick" every frame; plugins subscribe to drive their timers.
"""
from typing import Any, Callable, Dict, List

from engine.utils.logger import Logger


class EventSystem:
    """
    Subscribers are called in subscription order with (event_type, data).

    A failing subscriber is logged and does not stop delivery to the rest.
    """

    def __init__(self):
        self.subscribers: Dict[str, List[Callable]] = {}
        self.last_event_data: Dict[str, Any] = {}

    def subscribe(self, event_type: str, callback: Callable) -> None:
        callbacks = self.subscribers.setdefault(event_type, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        callbacks = self.subscribers.get(event_type)
        if not callbacks or callback not in callbacks:
            return
        callbacks.remove(callback)
        if not callbacks:
            self.subscribers.pop(event_type)

    def unsubscribe_owner(self, owner: Any) -> int:
        """Removes every bound-method subscription belonging to `owner`. Returns how many were removed."""
        removed = 0
        for event_type in list(self.subscribers):
            kept = [cb for cb in self.subscribers[event_type] if getattr(cb, "__self__", None) is not owner]
            removed += len(self.subscribers[event_type]) - len(kept)
            if kept:
                self.subscribers[event_type] = kept
            else:
                self.subscribers.pop(event_type)
        return removed

    def publish(self, event_type: str, data: Any = None) -> int:
        """
        Publish an event.

        Returns:
            The number of subscribers that handled the event without raising.
        """
        self.last_event_data[event_type] = data
        delivered = 0
        # Copy: a callback may (un)subscribe while we iterate
        for callback in list(self.subscribers.get(event_type, [])):
            try:
                callback(event_type, data)
                delivered += 1
            except Exception as e:
                Logger.exception("EventSystem", f"Error in event callback for {event_type}", e)
        return delivered

    def get_last_event_data(self, event_type: str, default: Any = None) -> Any:
        return self.last_event_data.get(event_type, default)

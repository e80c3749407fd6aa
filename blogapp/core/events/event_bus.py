"""Simple in-process event bus."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

EventHandler = Callable[[Any], None]

# Subscribing to this type receives every published event.
ALL_EVENTS = "*"


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventHandler]] = {}

    def subscribe(self, event_type: str, handler: EventHandler) -> Callable[[], None]:
        handlers = self._subscribers.setdefault(event_type, [])
        handlers.append(handler)

        def _unsubscribe() -> None:
            self.unsubscribe(event_type, handler)

        return _unsubscribe

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Any) -> None:
        # Copy so handlers may unsubscribe while being notified.
        handlers = list(self._subscribers.get(event.event_type, []))
        handlers += self._subscribers.get(ALL_EVENTS, [])
        for handler in handlers:
            handler(event)

    def subscriber_count(self, event_type: str = ALL_EVENTS) -> int:
        return len(self._subscribers.get(event_type, []))

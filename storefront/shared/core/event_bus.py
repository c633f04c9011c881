from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, TypeAlias

EventPayload: TypeAlias = Dict[str, Any]
EventHandler: TypeAlias = Callable[[EventPayload], None]
Unsubscribe: TypeAlias = Callable[[], None]


class EventBus:
    """Process-wide signal relay.

    Delivery is synchronous and follows registration order. Nothing is
    buffered: a subscriber registered after a publish never sees it.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._logger = logging.getLogger(__name__)

    def subscribe(self, topic: str, handler: EventHandler) -> Unsubscribe:
        """Register a handler for a topic and return its unsubscribe handle."""
        if handler not in self._subscribers[topic]:
            self._subscribers[topic].append(handler)

        def _unsubscribe() -> None:
            self.unsubscribe(topic, handler)

        return _unsubscribe

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        """Remove a handler from a topic."""
        if handler in self._subscribers.get(topic, []):
            self._subscribers[topic].remove(handler)

    def publish(self, topic: str, payload: Optional[EventPayload] = None) -> None:
        """Publish a signal to all current subscribers."""
        handlers = list(self._subscribers.get(topic, []))

        if not handlers:
            self._logger.debug(f"No subscribers for topic '{topic}'")
            return

        self._logger.debug(f"Publishing to topic '{topic}' with {len(handlers)} handler(s)")
        for handler in handlers:
            self._safe_dispatch(topic, handler, dict(payload or {}))

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    def _safe_dispatch(
        self,
        topic: str,
        handler: EventHandler,
        payload: EventPayload,
    ) -> None:
        """Dispatch wrapper to keep one handler failure from stopping the bus."""
        handler_name = getattr(handler, "__name__", str(handler))
        try:
            handler(payload)
        except Exception as exc:
            self._logger.exception(
                f"EventBus handler error in '{handler_name}' for topic '{topic}'",
                exc_info=exc,
            )

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._subscribers.clear()

"""Owned, cancelable timers keyed by entity id."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


class TimerRegistry:
    """Schedules at most one pending callback per key on an asyncio loop.

    Scheduling a key that already has a pending timer replaces it, and
    cancelling an entity's key guarantees its callback never fires.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._handles: Dict[Hashable, asyncio.TimerHandle] = {}

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def schedule(self, key: Hashable, delay: float, callback: Callable[[], None]) -> bool:
        """Run ``callback`` after ``delay`` seconds unless cancelled first.

        Returns:
            False when no event loop is available to own the timer
        """
        self.cancel(key)

        loop = self._resolve_loop()
        if loop is None:
            logger.warning(f"No event loop available, timer '{key}' was not scheduled")
            return False

        def _fire() -> None:
            self._handles.pop(key, None)
            callback()

        self._handles[key] = loop.call_later(delay, _fire)
        return True

    def cancel(self, key: Hashable) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    def is_pending(self, key: Hashable) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)

"""Network Status Monitor.

Combines host connectivity with ``network-error`` signals into a single
banner decision. Offline always wins over the transient error banner.
"""

from __future__ import annotations

from typing import List, Optional

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus, EventPayload, Unsubscribe
from storefront.shared.core.timers import TimerRegistry
from storefront.shared.domain.models import Banner, NetworkState

from .base import ObservableStore

OFFLINE_MESSAGE = "You are offline. Please check your internet connection."
NETWORK_ERROR_MESSAGE = "Network error. Please try again."

_TRANSIENT_TIMER = "transient-error"


class NetworkStatusMonitor(ObservableStore):
    def __init__(
        self,
        event_bus: EventBus,
        error_banner_seconds: float = 5.0,
        is_offline: bool = False,
        timers: Optional[TimerRegistry] = None,
    ) -> None:
        super().__init__()
        self.bus = event_bus
        self.error_banner_seconds = error_banner_seconds
        self.timers = timers or TimerRegistry()
        self.state = NetworkState(is_offline=is_offline)
        self._subscriptions: List[Unsubscribe] = [
            self.bus.subscribe(events.TOPIC_NETWORK_ERROR, self._handle_network_error),
            self.bus.subscribe(events.TOPIC_ONLINE, self._handle_online),
            self.bus.subscribe(events.TOPIC_OFFLINE, self._handle_offline),
        ]

    # --- Derived display ---

    @property
    def is_offline(self) -> bool:
        return self.state.is_offline

    @property
    def transient_error_active(self) -> bool:
        return self.state.transient_error_active

    @property
    def banner(self) -> Optional[Banner]:
        return self.state.banner

    @property
    def banner_message(self) -> Optional[str]:
        if self.banner is Banner.OFFLINE:
            return OFFLINE_MESSAGE
        if self.banner is Banner.NETWORK_ERROR:
            return NETWORK_ERROR_MESSAGE
        return None

    # --- Transitions ---

    def handle_offline(self) -> None:
        self._set(is_offline=True)

    def handle_online(self) -> None:
        self.timers.cancel(_TRANSIENT_TIMER)
        self._set(is_offline=False, transient_error_active=False)

    def handle_network_error(self) -> None:
        """Show the transient banner; a repeat restarts the countdown."""
        if self.state.is_offline:
            return
        self.timers.schedule(_TRANSIENT_TIMER, self.error_banner_seconds, self._expire_transient_error)
        self._set(transient_error_active=True)

    def dismiss(self) -> None:
        """User closed the transient error banner."""
        self.timers.cancel(_TRANSIENT_TIMER)
        self._set(transient_error_active=False)

    def close(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()
        self.timers.cancel_all()

    def _expire_transient_error(self) -> None:
        self._set(transient_error_active=False)

    def _set(self, **changes: bool) -> None:
        updated = self.state.model_copy(update=changes)
        if updated == self.state:
            return
        self.state = updated
        self._logger.debug(f"Network state: offline={updated.is_offline} transient_error={updated.transient_error_active}")
        self._commit()

    # --- Bus handlers ---

    def _handle_network_error(self, payload: EventPayload) -> None:
        self.handle_network_error()

    def _handle_online(self, payload: EventPayload) -> None:
        self.handle_online()

    def _handle_offline(self, payload: EventPayload) -> None:
        self.handle_offline()

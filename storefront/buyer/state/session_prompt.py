"""State behind the session-expired modal."""

from __future__ import annotations

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus, EventPayload

from .auth_store import AuthStore
from .base import ObservableStore


class SessionExpiredPrompt(ObservableStore):
    """Shown when ``session-expired`` fires; offers sign-in or guest mode."""

    def __init__(self, event_bus: EventBus, auth: AuthStore, sign_in_route: str = "/buyer/sign-in") -> None:
        super().__init__()
        self.auth = auth
        self.sign_in_route = sign_in_route
        self.visible = False
        self.reason: str | None = None
        self._unsubscribe = event_bus.subscribe(events.TOPIC_SESSION_EXPIRED, self._handle_session_expired)

    def sign_in(self) -> str:
        """Hide the prompt and return the route to navigate to."""
        self._hide()
        return self.sign_in_route

    def continue_as_guest(self) -> None:
        self._hide()
        self.auth.set_guest_mode(True)

    def close(self) -> None:
        self._unsubscribe()

    def _hide(self) -> None:
        self.visible = False
        self._commit()

    def _handle_session_expired(self, payload: EventPayload) -> None:
        self.visible = True
        self.reason = payload.get("reason")
        self._commit()

"""Auth Session Store.

Holds the current user and the session deadline. The store never talks
to the network: the API boundary reports unauthorized responses through
``mark_expired`` and the store broadcasts ``session-expired`` on the bus.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, List, Literal, Optional, Union

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.domain.models import (
    AccountLockInfo,
    AuthSnapshot,
    FieldError,
    Session,
    SessionInfo,
    User,
    VerificationPending,
    utcnow,
)
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage

from .base import ObservableStore

Clock = Callable[[], datetime]
SessionTTL = Union[float, int, timedelta]


class AuthStore(ObservableStore[AuthSnapshot]):
    snapshot_model = AuthSnapshot

    def __init__(
        self,
        event_bus: EventBus,
        storage: Optional[LocalStorage] = None,
        storage_key: str = "auth-storage",
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(storage, storage_key)
        self.bus = event_bus
        self._clock = clock or utcnow

        self.user: Optional[User] = None
        self.expires_at: Optional[datetime] = None
        self.is_guest = True
        self.error: Optional[str] = None
        self.field_error: Optional[FieldError] = None
        self._expiry_signalled = False
        self.account_lock: Optional[AccountLockInfo] = None
        self.sessions: List[SessionInfo] = []
        self.verification_pending = VerificationPending()

        snapshot = self._load_snapshot()
        if snapshot is not None:
            self.user = snapshot.user
            self.expires_at = snapshot.expires_at
            self.is_guest = snapshot.is_guest

    # --- Queries ---

    def is_authenticated(self) -> bool:
        return self.user is not None and self.expires_at is not None and self._clock() < self.expires_at

    def is_account_locked(self) -> bool:
        """True while a backend-reported lockout is in force."""
        lock = self.account_lock
        if lock is None or not lock.is_locked:
            return False
        return lock.locked_until is None or self._clock() < lock.locked_until

    def is_session_expired(self) -> bool:
        if self.expires_at is None:
            return True
        return self.expires_at <= self._clock()

    @property
    def session(self) -> Session:
        return Session(
            user=self.user,
            is_authenticated=self.is_authenticated(),
            is_guest=self.is_guest,
            expires_at=self.expires_at,
            error=self.error,
        )

    def snapshot(self) -> AuthSnapshot:
        return AuthSnapshot(user=self.user, expires_at=self.expires_at, is_guest=self.is_guest)

    # --- Mutations ---

    def login(self, user: User, session_ttl: SessionTTL) -> bool:
        """Start a session for ``user`` lasting ``session_ttl`` (seconds or timedelta)."""
        ttl = _as_timedelta(session_ttl)
        if ttl is None:
            self.field_error = FieldError(field="session_ttl", message="Session lifetime must be positive")
            self._logger.debug(f"Rejected login for {user.id}: {self.field_error.message}")
            return False

        self.user = user
        self.expires_at = self._clock() + ttl
        self.is_guest = False
        self.error = None
        self.field_error = None
        self._expiry_signalled = False
        self.account_lock = None
        self.verification_pending = VerificationPending()
        self._logger.info(f"User {user.id} logged in, session expires at {self.expires_at.isoformat()}")
        self._commit()
        return True

    def logout(self) -> None:
        """End the session voluntarily. Does not raise ``session-expired``."""
        if self.user is not None:
            self._logger.info(f"User {self.user.id} logged out")
        self._reset_state()
        self._commit()

    def logout_all_devices(self) -> None:
        """Forget every listed device session and end the local one."""
        self._logger.info(f"Signing out {len(self.sessions)} device session(s)")
        self.logout()

    def refresh_session(self, session_ttl: SessionTTL) -> bool:
        """Extend the current session deadline."""
        ttl = _as_timedelta(session_ttl)
        if self.user is None or ttl is None:
            return False
        self.expires_at = self._clock() + ttl
        self.error = None
        self._expiry_signalled = False
        self._commit()
        return True

    def update_user(self, **changes: Any) -> bool:
        """Apply a partial update to the logged-in user record."""
        if self.user is None:
            return False
        changes.setdefault("updated_at", self._clock())
        self.user = self.user.model_copy(update=changes)
        self._commit()
        return True

    def mark_expired(self, reason: str = "Session expired") -> None:
        """Invalidate the session after an external check failed.

        The user snapshot stays for display; ``session-expired`` goes out
        once until the next login or logout.
        """
        if self._expiry_signalled:
            self._logger.debug(f"Session already marked expired, ignoring: {reason}")
            return

        self._expiry_signalled = True
        self.expires_at = None
        self.error = reason
        self._logger.warning(f"Session expired: {reason}")
        self._commit()
        self.bus.publish(events.TOPIC_SESSION_EXPIRED, events.create_session_expired_event(reason))

    def check_expiry(self) -> bool:
        """Detect a session whose deadline has passed and mark it expired.

        Returns:
            True if this call marked the session expired
        """
        if self.user is None or self.expires_at is None or self._expiry_signalled:
            return False
        if self._clock() < self.expires_at:
            return False
        self.mark_expired("Session expired")
        return True

    def set_account_lock(self, lock: Optional[AccountLockInfo]) -> None:
        self.account_lock = lock
        if lock is not None and lock.is_locked:
            self._logger.warning(f"Account locked after {lock.failed_attempts} failed attempt(s)")
        self._commit()

    def set_sessions(self, sessions: List[SessionInfo]) -> None:
        self.sessions = list(sessions)
        self._commit()

    def set_verification_pending(
        self, type: Optional[Literal["email", "mobile"]], value: Optional[str]
    ) -> None:
        """Track the email or mobile number awaiting an OTP; None clears it."""
        self.verification_pending = VerificationPending(type=type, value=value)
        self._commit()

    def set_guest_mode(self, is_guest: bool) -> None:
        self.is_guest = is_guest
        self._commit()

    def clear_error(self) -> None:
        self.error = None
        self.field_error = None
        self._commit()

    def reset(self) -> None:
        self._reset_state()
        self._commit()

    def _reset_state(self) -> None:
        self.user = None
        self.expires_at = None
        self.is_guest = True
        self.error = None
        self.field_error = None
        self._expiry_signalled = False
        self.account_lock = None
        self.sessions = []
        self.verification_pending = VerificationPending()


def _as_timedelta(value: SessionTTL) -> Optional[timedelta]:
    ttl = value if isinstance(value, timedelta) else timedelta(seconds=value)
    if ttl <= timedelta(0):
        return None
    return ttl

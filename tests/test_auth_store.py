"""Tests for the auth session store."""

from datetime import timedelta

from storefront.buyer.state.auth_store import AuthStore
from storefront.shared.core import events
from storefront.shared.domain.models import AccountLockInfo, SessionInfo


def test_starts_as_guest(bus, clock):
    auth = AuthStore(bus, clock=clock)

    assert auth.is_authenticated() is False
    assert auth.session.is_guest is True
    assert auth.session.user is None


def test_login_sets_deadline_and_authenticates(bus, clock, user):
    auth = AuthStore(bus, clock=clock)

    assert auth.login(user, 3600) is True

    assert auth.is_authenticated() is True
    assert auth.expires_at == clock.now + timedelta(seconds=3600)
    session = auth.session
    assert session.user.full_name == "Asha Rao"
    assert session.is_guest is False
    assert session.error is None


def test_login_accepts_timedelta(bus, clock, user):
    auth = AuthStore(bus, clock=clock)
    auth.login(user, timedelta(minutes=5))
    assert auth.expires_at == clock.now + timedelta(minutes=5)


def test_login_rejects_non_positive_ttl(bus, clock, user):
    auth = AuthStore(bus, clock=clock)

    assert auth.login(user, 0) is False

    assert auth.user is None
    assert auth.field_error.field == "session_ttl"


def test_is_authenticated_follows_the_clock(bus, clock, user):
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 60)

    clock.advance(59)
    assert auth.is_authenticated() is True
    clock.advance(1)
    assert auth.is_authenticated() is False
    assert auth.is_session_expired() is True


def test_logout_never_signals_expiry(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 60)

    auth.logout()

    assert auth.user is None
    assert auth.expires_at is None
    assert auth.is_authenticated() is False
    assert expired == []


def test_mark_expired_keeps_user_and_records_reason(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 3600)

    auth.mark_expired("token rejected")

    assert auth.is_authenticated() is False
    assert auth.user == user
    assert auth.error == "token rejected"
    assert expired == [{"reason": "token rejected"}]


def test_mark_expired_publishes_once_until_next_login(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 3600)

    auth.mark_expired("first")
    auth.mark_expired("second")
    assert len(expired) == 1
    assert auth.error == "first"

    auth.login(user, 3600)
    auth.mark_expired("again")
    assert len(expired) == 2


def test_check_expiry_detects_passed_deadline(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 10)

    assert auth.check_expiry() is False
    clock.advance(10)
    assert auth.check_expiry() is True
    assert auth.check_expiry() is False
    assert len(expired) == 1
    assert auth.error == "Session expired"


def test_is_authenticated_has_no_side_effects(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 10)
    clock.advance(20)

    assert auth.is_authenticated() is False
    assert expired == []
    assert auth.error is None


def test_refresh_session_extends_deadline(bus, clock, user):
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 10)
    clock.advance(5)

    assert auth.refresh_session(60) is True
    clock.advance(30)
    assert auth.is_authenticated() is True


def test_refresh_session_requires_a_user(bus, clock):
    auth = AuthStore(bus, clock=clock)
    assert auth.refresh_session(60) is False


def test_update_user_recomputes_full_name(bus, clock, user):
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 60)

    auth.update_user(last_name="Iyer")

    assert auth.user.full_name == "Asha Iyer"
    assert auth.user.updated_at == clock.now


def test_listeners_notified_after_commit(bus, clock, user):
    auth = AuthStore(bus, clock=clock)
    observed = []
    unsubscribe = auth.subscribe(lambda store: observed.append(store.is_authenticated()))

    auth.login(user, 60)
    auth.logout()
    unsubscribe()
    auth.login(user, 60)

    assert observed == [True, False]


def test_session_survives_reload(bus, clock, user, storage):
    AuthStore(bus, storage=storage, clock=clock).login(user, 3600)

    restored = AuthStore(bus, storage=storage, clock=clock)

    assert restored.user.id == "u1"
    assert restored.is_authenticated() is True


def test_stale_persisted_session_is_not_authenticated(bus, clock, user, storage):
    AuthStore(bus, storage=storage, clock=clock).login(user, 60)
    clock.advance(120)

    restored = AuthStore(bus, storage=storage, clock=clock)

    assert restored.user is not None
    assert restored.is_authenticated() is False


def test_corrupt_session_falls_back_to_guest(bus, clock, storage):
    storage.set_item("auth-storage", "{not json")

    auth = AuthStore(bus, storage=storage, clock=clock)

    assert auth.user is None
    assert auth.is_guest is True


def test_account_lock_lapses_with_the_clock(bus, clock):
    auth = AuthStore(bus, clock=clock)
    auth.set_account_lock(
        AccountLockInfo(is_locked=True, locked_until=clock.now + timedelta(minutes=15), failed_attempts=5)
    )

    assert auth.is_account_locked() is True

    clock.advance(15 * 60)
    assert auth.is_account_locked() is False


def test_lock_without_deadline_holds_until_cleared(bus, clock):
    auth = AuthStore(bus, clock=clock)
    auth.set_account_lock(AccountLockInfo(is_locked=True, failed_attempts=5))

    clock.advance(24 * 3600)
    assert auth.is_account_locked() is True

    auth.set_account_lock(None)
    assert auth.is_account_locked() is False


def test_login_clears_lock_and_pending_verification(bus, clock, user):
    auth = AuthStore(bus, clock=clock)
    auth.set_account_lock(AccountLockInfo(is_locked=False, failed_attempts=2))
    auth.set_verification_pending("mobile", "+919800000000")
    assert auth.verification_pending.type == "mobile"

    auth.login(user, 3600)

    assert auth.account_lock is None
    assert auth.verification_pending.type is None
    assert auth.verification_pending.value is None


def test_logout_all_devices_forgets_sessions(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 3600)
    auth.set_sessions(
        [
            SessionInfo(id="s1", device="Pixel 8", browser="Chrome", is_current=True),
            SessionInfo(id="s2", device="MacBook", browser="Safari"),
        ]
    )
    assert len(auth.sessions) == 2

    auth.logout_all_devices()

    assert auth.sessions == []
    assert auth.user is None
    assert auth.is_authenticated() is False
    assert expired == []


def test_security_state_is_not_persisted(bus, clock, user, storage):
    auth = AuthStore(bus, storage, clock=clock)
    auth.login(user, 3600)
    auth.set_sessions([SessionInfo(id="s1", device="Pixel 8")])
    auth.set_verification_pending("email", "asha@example.com")

    restored = AuthStore(bus, storage, clock=clock)

    assert restored.is_authenticated() is True
    assert restored.sessions == []
    assert restored.verification_pending.type is None

"""Tests for the store container and cross-store coordination."""

from storefront.buyer.state import Store
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core import events
from storefront.shared.core.configuration import StorageConfig, SystemConfig
from storefront.shared.domain.models import Banner


def test_create_builds_fresh_instances(bus):
    first = Store.create(bus)
    second = Store.create(bus)

    assert first.cart is not second.cart
    assert first.checkout is not second.checkout
    assert first.checkout.current_step.value == "address"
    first.close()
    second.close()


def test_session_expired_shows_prompt(bus, clock, user):
    store = Store.create(bus, clock=clock)
    store.auth.login(user, 60)

    store.auth.mark_expired("token rejected")

    assert store.session_prompt.visible is True
    assert store.session_prompt.reason == "token rejected"
    store.close()


def test_prompt_sign_in_and_guest_continuation(bus, clock, user):
    store = Store.create(bus, clock=clock)
    store.auth.login(user, 60)
    store.auth.mark_expired("expired")

    assert store.session_prompt.sign_in() == "/buyer/sign-in"
    assert store.session_prompt.visible is False

    store.auth.login(user, 60)
    store.auth.mark_expired("expired again")
    store.session_prompt.continue_as_guest()
    assert store.session_prompt.visible is False
    assert store.auth.is_guest is True
    store.close()


def test_logout_does_not_show_prompt(bus, clock, user):
    store = Store.create(bus, clock=clock)
    store.auth.login(user, 60)

    store.auth.logout()

    assert store.session_prompt.visible is False
    store.close()


def test_connectivity_signals_reach_monitor(bus):
    store = Store.create(bus)

    bus.publish(events.TOPIC_OFFLINE)
    assert store.network.banner is Banner.OFFLINE
    bus.publish(events.TOPIC_ONLINE)
    assert store.network.banner is None
    store.close()


def test_stores_hydrate_from_configured_keys(bus, storage, make_product, user, clock):
    config = SystemConfig(storage=StorageConfig(cart_key="cart-v2", wishlist_key="wl-v2", auth_key="auth-v2"))
    store = Store.create(bus, config, storage=storage, clock=clock)
    store.cart.add_item("p1", make_product(), 2, 100)
    store.wishlist.add_to_wishlist(make_product("p2", 300))
    store.auth.login(user, 600)

    assert set(storage.keys()) == {"cart-v2", "wl-v2", "auth-v2"}

    restored = Store.create(EventBus(), config, storage=storage, clock=clock)
    assert restored.cart.subtotal() == 200
    assert restored.wishlist.is_in_wishlist("p2") is True
    assert restored.auth.is_authenticated() is True


def test_close_releases_bus_subscriptions(bus):
    store = Store.create(bus)

    store.close()

    assert bus.subscriber_count(events.TOPIC_SESSION_EXPIRED) == 0
    assert bus.subscriber_count(events.TOPIC_NETWORK_ERROR) == 0

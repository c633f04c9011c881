"""Shared fixtures for the storefront state tests."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.shared.core.event_bus import EventBus
from storefront.shared.domain.models import Product, User
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage


class FakeClock:
    """Manually advanced time source."""

    def __init__(self):
        self.now = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    store = LocalStorage(":memory:").open()
    yield store
    store.close()


@pytest.fixture
def make_product():
    def _make(product_id: str = "p1", price: float = 100.0, **extra) -> Product:
        return Product(id=product_id, name=f"Product {product_id}", price=price, **extra)
    return _make


@pytest.fixture
def user():
    return User(id="u1", email="asha@example.com", first_name="Asha", last_name="Rao")


@pytest.fixture
def signals(bus):
    """Record every payload published on the interesting topics."""
    received = {}

    def _watch(topic):
        received.setdefault(topic, [])
        bus.subscribe(topic, lambda payload: received[topic].append(payload))
        return received[topic]

    return _watch

"""Store container.

Builds one instance of every buyer store around a shared event bus. The
container is created once at application start and handed to whatever
needs it; there is no module-level singleton, so tests can build a fresh
container each time.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from storefront.shared.core.configuration import SystemConfig
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.timers import TimerRegistry
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage

from .auth_store import AuthStore, Clock
from .cart_store import CartStore
from .checkout_store import CheckoutStore
from .network_status import NetworkStatusMonitor
from .session_prompt import SessionExpiredPrompt
from .ui_store import NotificationStore
from .wishlist_store import WishlistStore


class Store:
    """Holds the buyer state stores.

    Usage:
        # During app initialization
        store = Store.create(EventBus(), config)

        # In any UI component handed the container
        store.cart.add_item("p1", product, 1, product.price)
    """

    def __init__(
        self,
        event_bus: EventBus,
        auth: AuthStore,
        cart: CartStore,
        wishlist: WishlistStore,
        notifications: NotificationStore,
        network: NetworkStatusMonitor,
        session_prompt: SessionExpiredPrompt,
        storage: Optional[LocalStorage] = None,
        checkout: Optional[CheckoutStore] = None,
    ) -> None:
        """Initialize store with already-built stores.

        Note: Prefer Store.create(), which wires everything from config.
        """
        self.bus = event_bus
        self.auth = auth
        self.cart = cart
        self.wishlist = wishlist
        self.notifications = notifications
        self.network = network
        self.session_prompt = session_prompt
        self.storage = storage
        self.checkout = checkout or CheckoutStore()

    @classmethod
    def create(
        cls,
        event_bus: EventBus,
        config: Optional[SystemConfig] = None,
        storage: Optional[LocalStorage] = None,
        clock: Optional[Clock] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> "Store":
        """Build every store from configuration.

        Args:
            event_bus: The shared event bus instance
            config: System configuration, defaults when omitted
            storage: Local storage to hydrate from; opened from
                ``config.storage.db_path`` when omitted
            clock: Time source for session expiry
            loop: Event loop owning toast and banner timers

        Returns:
            The wired store container
        """
        config = config or SystemConfig()
        if storage is None:
            storage = LocalStorage(config.storage.db_path)
        storage.open()

        auth = AuthStore(event_bus, storage, config.storage.auth_key, clock=clock)
        return cls(
            event_bus=event_bus,
            auth=auth,
            cart=CartStore(storage, config.storage.cart_key, tax_rate=config.cart.tax_rate),
            wishlist=WishlistStore(event_bus, storage, config.storage.wishlist_key),
            notifications=NotificationStore(
                config.notifications.toast_duration_seconds,
                TimerRegistry(loop),
            ),
            network=NetworkStatusMonitor(
                event_bus,
                config.network.error_banner_seconds,
                timers=TimerRegistry(loop),
            ),
            session_prompt=SessionExpiredPrompt(event_bus, auth, config.session.sign_in_route),
            storage=storage,
            checkout=CheckoutStore(),
        )

    def close(self) -> None:
        """Cancel pending timers, drop bus subscriptions and close storage."""
        self.notifications.clear()
        self.network.close()
        self.session_prompt.close()
        if self.storage is not None:
            self.storage.close()

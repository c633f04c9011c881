"""Wishlist/Compare Store.

Saved items track the price seen when they were added. The compare
selection is capped at ``MAX_COMPARE_ITEMS`` because the comparison
table has a fixed number of columns; requests beyond the cap are
refused rather than truncated.
"""

from __future__ import annotations

import math
from typing import List, Optional

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.domain.models import CompareItem, Product, WishlistItem, WishlistSnapshot
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage

from .base import ObservableStore

MAX_COMPARE_ITEMS = 4


class WishlistStore(ObservableStore[WishlistSnapshot]):
    snapshot_model = WishlistSnapshot

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        storage: Optional[LocalStorage] = None,
        storage_key: str = "wishlist-storage",
    ) -> None:
        super().__init__(storage, storage_key)
        self.bus = event_bus
        self.wishlist_items: List[WishlistItem] = []
        self.compare_items: List[CompareItem] = []
        self.max_compare_items = MAX_COMPARE_ITEMS

        snapshot = self._load_snapshot()
        if snapshot is not None:
            self.wishlist_items = list(snapshot.wishlist_items)
            # A hand-edited snapshot must not break the cap
            self.compare_items = list(snapshot.compare_items)[:MAX_COMPARE_ITEMS]

    def snapshot(self) -> WishlistSnapshot:
        return WishlistSnapshot(wishlist_items=list(self.wishlist_items), compare_items=list(self.compare_items))

    # --- Wishlist ---

    def add_to_wishlist(
        self,
        product: Product,
        notify_on_price_drop: bool = False,
        notify_on_back_in_stock: bool = False,
    ) -> bool:
        """Save a product at its current price. Already saved is a no-op."""
        if self.is_in_wishlist(product.id):
            return False

        self.wishlist_items.append(
            WishlistItem(
                product_id=product.id,
                product=product,
                price_at_add=product.price,
                current_price=product.price,
                is_in_stock=product.stock_status == "in_stock",
                notify_on_price_drop=notify_on_price_drop,
                notify_on_back_in_stock=notify_on_back_in_stock,
            )
        )
        self._commit()
        return True

    def remove_from_wishlist(self, product_id: str) -> None:
        before = (len(self.wishlist_items), len(self.compare_items))
        self.wishlist_items = [item for item in self.wishlist_items if item.product_id != product_id]
        self.compare_items = [item for item in self.compare_items if item.product_id != product_id]
        if (len(self.wishlist_items), len(self.compare_items)) != before:
            self._commit()

    def refresh_price(self, product_id: str, new_price: float, is_in_stock: Optional[bool] = None) -> bool:
        """Record a re-fetched catalog price. ``price_at_add`` never moves.

        Refreshing a product that is no longer saved is a silent no-op.
        """
        item = self.get_wishlist_item(product_id)
        if item is None:
            self._logger.debug(f"Price refresh for {product_id} ignored, not in wishlist")
            return False
        numeric = isinstance(new_price, (int, float)) and not isinstance(new_price, bool)
        if not numeric or not math.isfinite(new_price) or new_price < 0:
            self._logger.debug(f"Price refresh for {product_id} ignored, invalid price {new_price!r}")
            return False

        was_dropped = item.price_dropped
        update = {"current_price": new_price}
        if is_in_stock is not None:
            update["is_in_stock"] = is_in_stock
        refreshed = item.model_copy(update=update)
        self.wishlist_items[self.wishlist_items.index(item)] = refreshed
        self._commit()

        if refreshed.price_dropped and not was_dropped and refreshed.notify_on_price_drop and self.bus:
            self.bus.publish(
                events.TOPIC_PRICE_DROPPED,
                events.create_price_dropped_event(product_id, refreshed.price_at_add, new_price),
            )
        return True

    def update_notifications(
        self,
        product_id: str,
        notify_on_price_drop: Optional[bool] = None,
        notify_on_back_in_stock: Optional[bool] = None,
    ) -> bool:
        item = self.get_wishlist_item(product_id)
        if item is None:
            return False
        update = {}
        if notify_on_price_drop is not None:
            update["notify_on_price_drop"] = notify_on_price_drop
        if notify_on_back_in_stock is not None:
            update["notify_on_back_in_stock"] = notify_on_back_in_stock
        self.wishlist_items[self.wishlist_items.index(item)] = item.model_copy(update=update)
        self._commit()
        return True

    def clear_wishlist(self) -> None:
        self.wishlist_items = []
        self._commit()

    def is_in_wishlist(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.wishlist_items)

    def get_wishlist_item(self, product_id: str) -> Optional[WishlistItem]:
        return next((item for item in self.wishlist_items if item.product_id == product_id), None)

    # --- Compare ---

    def add_to_compare(self, product: Product) -> bool:
        """Add a product to the comparison.

        Returns:
            False, without changing anything, when the selection is full or
            the product is already selected
        """
        if not self.can_add_to_compare() or self.is_in_compare(product.id):
            return False
        self.compare_items.append(CompareItem(product_id=product.id, product=product))
        self._commit()
        return True

    def remove_from_compare(self, product_id: str) -> None:
        remaining = [item for item in self.compare_items if item.product_id != product_id]
        if len(remaining) == len(self.compare_items):
            return
        self.compare_items = remaining
        self._commit()

    def clear_compare(self) -> None:
        self.compare_items = []
        self._commit()

    def can_add_to_compare(self) -> bool:
        return len(self.compare_items) < self.max_compare_items

    def is_in_compare(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.compare_items)

    def get_compare_item(self, product_id: str) -> Optional[CompareItem]:
        return next((item for item in self.compare_items if item.product_id == product_id), None)

    def reset(self) -> None:
        self.wishlist_items = []
        self.compare_items = []
        self._commit()

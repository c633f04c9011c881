"""Cart Store: purchase-intent lines, saved-for-later items and totals."""

from __future__ import annotations

import math
from typing import List, Optional

from storefront.shared.domain.models import (
    AppliedCoupon,
    CartItem,
    CartSnapshot,
    CartTotals,
    CartValidation,
    CartValidationError,
    CartValidationWarning,
    DeliveryOption,
    FieldError,
    Product,
    SavedItem,
)
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage

from .base import ObservableStore


class CartStore(ObservableStore[CartSnapshot]):
    """Ordered cart lines, unique by product id.

    Line totals are computed from unit price and quantity, so the
    subtotal is always the sum of ``unit_price * quantity``.
    """

    snapshot_model = CartSnapshot

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        storage_key: str = "cart-storage",
        tax_rate: float = 0.18,
    ) -> None:
        super().__init__(storage, storage_key)
        self.tax_rate = tax_rate
        self.items: List[CartItem] = []
        self.saved_for_later: List[SavedItem] = []
        self.applied_coupon: Optional[AppliedCoupon] = None
        self.shipping_cost = 0.0
        self.error: Optional[FieldError] = None
        self.delivery_pincode: Optional[str] = None
        self.delivery_available: Optional[bool] = None
        self.delivery_options: List[DeliveryOption] = []
        self.selected_delivery_option: Optional[DeliveryOption] = None
        self.validation: Optional[CartValidation] = None

        snapshot = self._load_snapshot()
        if snapshot is not None:
            self.items = _dedupe(snapshot.items)
            self.saved_for_later = list(snapshot.saved_for_later)
            self.applied_coupon = snapshot.applied_coupon
            self.shipping_cost = snapshot.shipping_cost
            self.delivery_pincode = snapshot.delivery_pincode
            self.selected_delivery_option = snapshot.selected_delivery_option

    # --- Queries ---

    def subtotal(self) -> float:
        return sum(item.total_price for item in self.items)

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def get_item(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def discount_amount(self) -> float:
        coupon = self.applied_coupon
        if coupon is None:
            return 0.0
        if coupon.discount_type == "percentage":
            discount = self.subtotal() * coupon.discount_value / 100
            if coupon.max_discount is not None:
                discount = min(discount, coupon.max_discount)
            return discount
        return coupon.discount_value

    def totals(self) -> CartTotals:
        subtotal = self.subtotal()
        tax_amount = subtotal * self.tax_rate
        discount = self.discount_amount()
        return CartTotals(
            item_count=self.item_count(),
            subtotal=subtotal,
            tax_amount=tax_amount,
            shipping_cost=self.shipping_cost,
            discount_amount=discount,
            total=max(0.0, subtotal + tax_amount + self.shipping_cost - discount),
        )

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(
            items=list(self.items),
            saved_for_later=list(self.saved_for_later),
            applied_coupon=self.applied_coupon,
            shipping_cost=self.shipping_cost,
            delivery_pincode=self.delivery_pincode,
            selected_delivery_option=self.selected_delivery_option,
        )

    # --- Line mutations ---

    def add_item(self, product_id: str, product: Product, quantity: int, unit_price: float) -> bool:
        """Add ``quantity`` of a product, merging into an existing line."""
        error = _validate_line(product_id, quantity, unit_price)
        if error is not None:
            return self._reject(error)

        self.error = None
        existing = self.get_item(product_id)
        if existing is not None:
            self._replace(existing, existing.model_copy(update={"quantity": existing.quantity + quantity}))
        else:
            self.items.append(
                CartItem(product_id=product_id, product=product, quantity=quantity, unit_price=unit_price)
            )
        self._logger.debug(f"Cart add {product_id} x{quantity}, subtotal {self.subtotal()}")
        self._commit()
        return True

    def remove_item(self, product_id: str) -> None:
        remaining = [item for item in self.items if item.product_id != product_id]
        if len(remaining) == len(self.items):
            return
        self.items = remaining
        self._commit()

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        """Set a line's quantity; zero or less removes the line."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return self._reject(FieldError(field="quantity", message="Quantity must be a whole number"))

        existing = self.get_item(product_id)
        if existing is None:
            return False
        if quantity <= 0:
            self.remove_item(product_id)
            return True

        self.error = None
        self._replace(existing, existing.model_copy(update={"quantity": quantity}))
        self._commit()
        return True

    def clear(self) -> None:
        self.items = []
        self.applied_coupon = None
        self.validation = None
        self.error = None
        self._commit()

    # --- Save for later ---

    def save_for_later(self, product_id: str) -> Optional[SavedItem]:
        item = self.get_item(product_id)
        if item is None:
            return None
        saved = SavedItem(product_id=item.product_id, product=item.product, unit_price=item.unit_price)
        self.items = [i for i in self.items if i.product_id != product_id]
        self.saved_for_later.append(saved)
        self._commit()
        return saved

    def move_to_cart(self, saved_id: str) -> bool:
        saved = next((s for s in self.saved_for_later if s.id == saved_id), None)
        if saved is None:
            return False
        self.saved_for_later = [s for s in self.saved_for_later if s.id != saved_id]
        existing = self.get_item(saved.product_id)
        if existing is not None:
            self._replace(existing, existing.model_copy(update={"quantity": existing.quantity + 1}))
        else:
            self.items.append(
                CartItem(product_id=saved.product_id, product=saved.product, quantity=1, unit_price=saved.unit_price)
            )
        self._commit()
        return True

    def remove_saved_item(self, saved_id: str) -> None:
        remaining = [s for s in self.saved_for_later if s.id != saved_id]
        if len(remaining) == len(self.saved_for_later):
            return
        self.saved_for_later = remaining
        self._commit()

    # --- Coupon & shipping ---

    def apply_coupon(self, coupon: AppliedCoupon) -> None:
        self.applied_coupon = coupon
        self._commit()

    def remove_coupon(self) -> None:
        self.applied_coupon = None
        self._commit()

    def set_shipping_cost(self, cost: float) -> bool:
        if not _is_amount(cost):
            return self._reject(FieldError(field="shipping_cost", message="Shipping cost must be a non-negative amount"))
        self.shipping_cost = cost
        self._commit()
        return True

    # --- Delivery ---

    def set_delivery_pincode(self, pincode: Optional[str]) -> bool:
        """Remember the buyer's delivery pincode; None forgets it.

        A new pincode invalidates the availability and options fetched
        for the previous one.
        """
        if pincode is not None:
            pincode = pincode.strip()
            if not (pincode.isdigit() and len(pincode) == 6):
                return self._reject(FieldError(field="delivery_pincode", message="Pincode must be 6 digits"))
        if pincode != self.delivery_pincode:
            self.delivery_available = None
            self.delivery_options = []
        self.delivery_pincode = pincode
        self.error = None
        self._commit()
        return True

    def set_delivery_available(self, available: bool) -> None:
        self.delivery_available = available
        self._commit()

    def set_delivery_options(self, options: List[DeliveryOption]) -> None:
        self.delivery_options = list(options)
        self._commit()

    def set_selected_delivery_option(self, option: Optional[DeliveryOption]) -> None:
        """Pick a delivery option; its cost becomes the shipping cost."""
        self.selected_delivery_option = option
        self.shipping_cost = option.cost if option is not None else 0.0
        self._commit()

    # --- Validation ---

    def set_validation(self, validation: Optional[CartValidation]) -> None:
        self.validation = validation
        self._commit()

    def add_validation_error(self, error: CartValidationError) -> None:
        current = self.validation or CartValidation()
        self.validation = current.model_copy(update={"is_valid": False, "errors": [*current.errors, error]})
        self._commit()

    def add_validation_warning(self, warning: CartValidationWarning) -> None:
        current = self.validation or CartValidation()
        self.validation = current.model_copy(update={"warnings": [*current.warnings, warning]})
        self._commit()

    def clear_validation(self) -> None:
        self.validation = None
        self._commit()

    def reset(self) -> None:
        self.items = []
        self.saved_for_later = []
        self.applied_coupon = None
        self.shipping_cost = 0.0
        self.error = None
        self.delivery_pincode = None
        self.delivery_available = None
        self.delivery_options = []
        self.selected_delivery_option = None
        self.validation = None
        self._commit()

    def _replace(self, old: CartItem, new: CartItem) -> None:
        self.items[self.items.index(old)] = new

    def _reject(self, error: FieldError) -> bool:
        self.error = error
        self._logger.debug(f"Cart mutation rejected: {error.field}: {error.message}")
        self._commit()
        return False


def _validate_line(product_id: str, quantity: int, unit_price: float) -> Optional[FieldError]:
    if not isinstance(product_id, str) or not product_id.strip():
        return FieldError(field="product_id", message="Product id is required")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        return FieldError(field="quantity", message="Quantity must be a positive whole number")
    if not _is_amount(unit_price):
        return FieldError(field="unit_price", message="Unit price must be a non-negative amount")
    return None


def _is_amount(value: float) -> bool:
    """Finite, non-negative number (NaN and infinity are rejected)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def _dedupe(items: List[CartItem]) -> List[CartItem]:
    """Merge persisted lines that share a product id."""
    merged: List[CartItem] = []
    by_id = {}
    for item in items:
        existing = by_id.get(item.product_id)
        if existing is None:
            by_id[item.product_id] = item
            merged.append(item)
            continue
        combined = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
        merged[merged.index(existing)] = combined
        by_id[item.product_id] = combined
    return merged

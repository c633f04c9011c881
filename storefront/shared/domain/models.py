"""Data model for the buyer session and commerce state."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex[:13]


class User(BaseModel):
    """Identity record owned by the auth session store."""

    id: str = Field(min_length=1)
    email: str
    mobile: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    profile_image: Optional[str] = None
    is_email_verified: bool = False
    is_mobile_verified: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Session(BaseModel):
    """Read-only view of the auth store at a point in time."""

    user: Optional[User] = None
    is_authenticated: bool = False
    is_guest: bool = True
    expires_at: Optional[datetime] = None
    error: Optional[str] = None


class AccountLockInfo(BaseModel):
    """Lockout state reported by the backend after repeated failed sign-ins."""

    is_locked: bool = False
    locked_until: Optional[datetime] = None
    failed_attempts: int = Field(default=0, ge=0)
    max_attempts: int = Field(default=5, ge=1)


class SessionInfo(BaseModel):
    """One signed-in device, as listed on the account security page."""

    id: str
    device: str
    browser: str = ""
    location: Optional[str] = None
    ip_address: str = ""
    last_active: datetime = Field(default_factory=utcnow)
    is_current: bool = False


class VerificationPending(BaseModel):
    type: Optional[Literal["email", "mobile"]] = None
    value: Optional[str] = None


class FieldError(BaseModel):
    """Validation failure attached to a rejected mutation."""

    field: str
    message: str


class Product(BaseModel):
    """Catalog snapshot captured when a product enters the cart or wishlist."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    name: str
    price: float = Field(ge=0)
    sku: str = ""
    slug: str = ""
    brand: str = ""
    original_price: Optional[float] = None
    currency: str = "INR"
    stock_status: Literal["in_stock", "low_stock", "out_of_stock", "pre_order"] = "in_stock"


class CartItem(BaseModel):
    product_id: str
    product: Product
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    added_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity


class SavedItem(BaseModel):
    """Cart line parked with "save for later"."""

    id: str = Field(default_factory=new_id)
    product_id: str
    product: Product
    unit_price: float = Field(ge=0)
    saved_at: datetime = Field(default_factory=utcnow)


class AppliedCoupon(BaseModel):
    code: str
    discount_type: Literal["percentage", "fixed"]
    discount_value: float = Field(ge=0)
    max_discount: Optional[float] = Field(default=None, ge=0)
    description: str = ""


class CartTotals(BaseModel):
    item_count: int = 0
    subtotal: float = 0.0
    tax_amount: float = 0.0
    shipping_cost: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0


class DeliveryOption(BaseModel):
    id: str
    name: str
    type: Literal["standard", "express", "custom"] = "standard"
    days: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0)
    estimated_date: str = ""
    available: bool = True
    unavailable_reason: Optional[str] = None


class CartValidationError(BaseModel):
    type: Literal[
        "out_of_stock", "price_changed", "invalid_customization", "delivery_unavailable", "min_order", "max_quantity"
    ]
    message: str
    item_id: Optional[str] = None
    product_name: Optional[str] = None
    old_price: Optional[float] = None
    new_price: Optional[float] = None


class CartValidationWarning(BaseModel):
    type: Literal["low_stock", "price_drop", "delivery_delay"]
    message: str
    item_id: Optional[str] = None


class CartValidation(BaseModel):
    """Server-side cart check results; any error makes the cart invalid."""

    is_valid: bool = True
    errors: List[CartValidationError] = Field(default_factory=list)
    warnings: List[CartValidationWarning] = Field(default_factory=list)


class WishlistItem(BaseModel):
    """Saved-for-later product with price-at-save tracking.

    ``price_dropped`` is derived from the two prices so it can never
    disagree with them.
    """

    id: str = Field(default_factory=new_id)
    product_id: str
    product: Product
    price_at_add: float = Field(ge=0)
    current_price: float = Field(ge=0)
    added_at: datetime = Field(default_factory=utcnow)
    is_in_stock: bool = True
    notify_on_price_drop: bool = False
    notify_on_back_in_stock: bool = False

    @computed_field
    @property
    def price_dropped(self) -> bool:
        return self.current_price < self.price_at_add

    @computed_field
    @property
    def price_increased(self) -> bool:
        return self.current_price > self.price_at_add

    @computed_field
    @property
    def price_delta(self) -> float:
        """Amount saved since the item was added (negative when the price rose)."""
        return self.price_at_add - self.current_price


class CompareItem(BaseModel):
    product_id: str
    product: Product
    added_at: datetime = Field(default_factory=utcnow)


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Toast(BaseModel):
    id: str = Field(default_factory=new_id)
    type: ToastType
    message: str
    created_at: datetime = Field(default_factory=utcnow)
    duration: float = 5.0


class Banner(str, Enum):
    OFFLINE = "offline"
    NETWORK_ERROR = "network_error"


class NetworkState(BaseModel):
    is_offline: bool = False
    transient_error_active: bool = False

    @computed_field
    @property
    def banner(self) -> Optional[Banner]:
        if self.is_offline:
            return Banner.OFFLINE
        if self.transient_error_active:
            return Banner.NETWORK_ERROR
        return None


# Checkout


class CheckoutStep(str, Enum):
    ADDRESS = "address"
    DELIVERY = "delivery"
    PAYMENT = "payment"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


CHECKOUT_STEP_ORDER: List[CheckoutStep] = list(CheckoutStep)

PaymentMethod = Literal["upi", "credit_card", "debit_card", "net_banking", "wallet", "cod", "emi"]
PaymentStatus = Literal["pending", "processing", "success", "failed", "cancelled", "refunded", "partially_refunded"]


class Address(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    full_name: str
    phone: str
    house_flat: str = ""
    street: str = ""
    landmark: Optional[str] = None
    city: str
    state: str
    pincode: str
    country: str = "India"
    type: Literal["home", "work", "other"] = "home"
    is_default: bool = False


class SavedPaymentMethod(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: Literal["card", "upi", "netbanking", "wallet"]
    is_default: bool = False


class PaymentState(BaseModel):
    method: Optional[PaymentMethod] = None
    status: PaymentStatus = "pending"
    transaction_id: Optional[str] = None
    error: Optional[str] = None
    gateway_url: Optional[str] = None
    retry_count: int = Field(default=0, ge=0)


class PlacedOrder(BaseModel):
    """Confirmation returned once the backend accepts an order."""

    model_config = ConfigDict(extra="allow")

    id: str
    order_number: str
    total: float = Field(ge=0)


class CheckoutSummary(BaseModel):
    has_shipping_address: bool
    has_billing_address: bool
    has_delivery_option: bool
    has_payment_method: bool

    @computed_field
    @property
    def is_ready_for_payment(self) -> bool:
        return (
            self.has_shipping_address
            and self.has_billing_address
            and self.has_delivery_option
            and self.has_payment_method
        )


# Persisted snapshots, one storage key per store


class AuthSnapshot(BaseModel):
    user: Optional[User] = None
    expires_at: Optional[datetime] = None
    is_guest: bool = True


class CartSnapshot(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    saved_for_later: List[SavedItem] = Field(default_factory=list)
    applied_coupon: Optional[AppliedCoupon] = None
    shipping_cost: float = Field(default=0.0, ge=0)
    delivery_pincode: Optional[str] = None
    selected_delivery_option: Optional[DeliveryOption] = None


class WishlistSnapshot(BaseModel):
    wishlist_items: List[WishlistItem] = Field(default_factory=list)
    compare_items: List[CompareItem] = Field(default_factory=list)

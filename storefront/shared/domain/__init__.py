"""Domain model (users, products, cart, wishlist and checkout records, toasts)."""

from .models import (
    CHECKOUT_STEP_ORDER,
    AccountLockInfo,
    Address,
    AppliedCoupon,
    AuthSnapshot,
    Banner,
    CartItem,
    CartSnapshot,
    CartTotals,
    CartValidation,
    CartValidationError,
    CartValidationWarning,
    CheckoutStep,
    CheckoutSummary,
    CompareItem,
    DeliveryOption,
    FieldError,
    NetworkState,
    PaymentMethod,
    PaymentState,
    PaymentStatus,
    PlacedOrder,
    Product,
    SavedItem,
    SavedPaymentMethod,
    Session,
    SessionInfo,
    Toast,
    ToastType,
    User,
    VerificationPending,
    WishlistItem,
    WishlistSnapshot,
)

__all__ = [
    "CHECKOUT_STEP_ORDER",
    "AccountLockInfo",
    "Address",
    "AppliedCoupon",
    "AuthSnapshot",
    "Banner",
    "CartItem",
    "CartSnapshot",
    "CartTotals",
    "CartValidation",
    "CartValidationError",
    "CartValidationWarning",
    "CheckoutStep",
    "CheckoutSummary",
    "CompareItem",
    "DeliveryOption",
    "FieldError",
    "NetworkState",
    "PaymentMethod",
    "PaymentState",
    "PaymentStatus",
    "PlacedOrder",
    "Product",
    "SavedItem",
    "SavedPaymentMethod",
    "Session",
    "SessionInfo",
    "Toast",
    "ToastType",
    "User",
    "VerificationPending",
    "WishlistItem",
    "WishlistSnapshot",
]

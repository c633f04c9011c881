"""Buyer session and commerce state.

Architecture:
- AuthStore: user identity and session deadline
- CartStore: cart lines, saved-for-later items, delivery, validation, totals
- CheckoutStore: checkout step machine, selections and payment outcome
- WishlistStore: saved items with price tracking and the compare selection
- NotificationStore: toast queue with owned auto-dismiss timers
- NetworkStatusMonitor: offline / transient error banner decision
- SessionExpiredPrompt: consumer of the session-expired signal
- Store: container wiring all of the above to one event bus
"""

from .auth_store import AuthStore
from .base import ObservableStore
from .cart_store import CartStore
from .checkout_store import CheckoutStore
from .network_status import NetworkStatusMonitor
from .session_prompt import SessionExpiredPrompt
from .store import Store
from .ui_store import NotificationStore
from .wishlist_store import MAX_COMPARE_ITEMS, WishlistStore

__all__ = [
    "AuthStore",
    "CartStore",
    "CheckoutStore",
    "MAX_COMPARE_ITEMS",
    "NetworkStatusMonitor",
    "NotificationStore",
    "ObservableStore",
    "SessionExpiredPrompt",
    "Store",
    "WishlistStore",
]

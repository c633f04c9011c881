"""
Storefront Shared Kernel
========================

Architecture:
- core: EventBus, timers, configuration
- infrastructure: Technical adapters (local storage)
- domain: Data model (users, products, cart, wishlist, toasts)
"""

__version__ = "1.0.0"

__all__ = []

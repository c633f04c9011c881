"""Canonical signal definitions for the storefront client."""

from __future__ import annotations

from .event_bus import EventPayload

# Global conditions
TOPIC_SESSION_EXPIRED = "session-expired"
TOPIC_NETWORK_ERROR = "network-error"

# Connectivity transitions reported by the host environment
TOPIC_ONLINE = "online"
TOPIC_OFFLINE = "offline"

# Wishlist price tracking
TOPIC_PRICE_DROPPED = "wishlist.price-dropped"


def create_session_expired_event(reason: str | None = None) -> EventPayload:
    """Create a session expired event."""
    return {"reason": reason} if reason else {}


def create_network_error_event(url: str | None = None, message: str | None = None) -> EventPayload:
    """Create a network error event (request never got a response)."""
    event: EventPayload = {}
    if url is not None:
        event["url"] = url
    if message is not None:
        event["message"] = message
    return event


def create_price_dropped_event(product_id: str, previous_price: float, current_price: float) -> EventPayload:
    """Create a price dropped event for a wishlist item.

    Args:
        product_id: Product whose price fell
        previous_price: Price when the item was saved
        current_price: Price after the refresh
    """
    return {
        "product_id": product_id,
        "previous_price": previous_price,
        "current_price": current_price,
        "delta": previous_price - current_price,
    }

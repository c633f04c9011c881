"""Storefront client state package."""

from .buyer.state import Store
from .shared.core.event_bus import EventBus

__all__ = ["Store", "EventBus"]

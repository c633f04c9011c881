"""
Shared Core Module
==================

Event system, owned timers and configuration.
"""

# Event System
from .event_bus import EventBus, EventPayload, EventHandler, Unsubscribe
from . import events
from .timers import TimerRegistry

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    get_config,
    ValidationLevel,
)

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "EventHandler",
    "Unsubscribe",
    "events",
    "TimerRegistry",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "get_config",
    "ValidationLevel",
]

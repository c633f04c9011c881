"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (local storage).
"""

# Persistence
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage

__all__ = [
    # Persistence
    "LocalStorage",
]

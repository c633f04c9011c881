"""Backend boundary adapters."""

from .api import ApiClient, ApiError

__all__ = ["ApiClient", "ApiError"]

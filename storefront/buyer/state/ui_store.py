"""Notification (toast) queue."""

from __future__ import annotations

from typing import List, Optional, Union

from storefront.shared.core.timers import TimerRegistry
from storefront.shared.domain.models import Toast, ToastType

from .base import ObservableStore


class NotificationStore(ObservableStore):
    """Insertion-ordered toasts, each owning its auto-dismiss timer."""

    def __init__(self, default_duration: float = 5.0, timers: Optional[TimerRegistry] = None) -> None:
        super().__init__()
        self.default_duration = default_duration
        self.timers = timers or TimerRegistry()
        self.toasts: List[Toast] = []

    def push(self, type: Union[ToastType, str], message: str, duration: Optional[float] = None) -> str:
        """Queue a toast and schedule its removal.

        Args:
            type: success, error, warning or info
            message: Text shown to the user
            duration: Seconds on screen; 0 or less keeps it until dismissed

        Returns:
            The toast id
        """
        toast = Toast(
            type=ToastType(type),
            message=message,
            duration=self.default_duration if duration is None else duration,
        )
        self.toasts.append(toast)
        if toast.duration > 0:
            self.timers.schedule(toast.id, toast.duration, lambda: self.remove(toast.id))
        self._commit()
        return toast.id

    def success(self, message: str, duration: Optional[float] = None) -> str:
        return self.push(ToastType.SUCCESS, message, duration)

    def error(self, message: str, duration: Optional[float] = None) -> str:
        return self.push(ToastType.ERROR, message, duration)

    def warning(self, message: str, duration: Optional[float] = None) -> str:
        return self.push(ToastType.WARNING, message, duration)

    def info(self, message: str, duration: Optional[float] = None) -> str:
        return self.push(ToastType.INFO, message, duration)

    def remove(self, toast_id: str) -> None:
        """Dismiss a toast. Unknown ids are ignored."""
        self.timers.cancel(toast_id)
        remaining = [toast for toast in self.toasts if toast.id != toast_id]
        if len(remaining) == len(self.toasts):
            return
        self.toasts = remaining
        self._commit()

    def clear(self) -> None:
        self.timers.cancel_all()
        self.toasts = []
        self._commit()

    def get(self, toast_id: str) -> Optional[Toast]:
        return next((toast for toast in self.toasts if toast.id == toast_id), None)

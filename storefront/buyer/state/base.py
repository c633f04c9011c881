"""Observable store base with optional snapshot persistence."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from storefront.shared.core.event_bus import Unsubscribe
from storefront.shared.infrastructure.persistence.local_storage import LocalStorage

SnapshotT = TypeVar("SnapshotT", bound=BaseModel)
Listener = Callable[[Any], None]


class ObservableStore(Generic[SnapshotT]):
    """Base class for the buyer state stores.

    Mutations commit every derived field first and then call
    ``_commit()``, which persists the snapshot (when storage is attached)
    and notifies listeners synchronously in registration order.
    """

    snapshot_model: Optional[Type[SnapshotT]] = None

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        storage_key: Optional[str] = None,
    ) -> None:
        self.storage = storage
        self.storage_key = storage_key
        self._listeners: List[Listener] = []
        self._logger = logging.getLogger(type(self).__module__)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener called with the store after each mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def snapshot(self) -> SnapshotT:
        raise NotImplementedError

    def _commit(self) -> None:
        self._persist()
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                name = getattr(listener, "__name__", str(listener))
                self._logger.exception(f"Listener '{name}' failed", exc_info=exc)

    def _persist(self) -> None:
        if self.storage is None or self.storage_key is None:
            return
        self.storage.set_item(self.storage_key, self.snapshot().model_dump_json())

    def _load_snapshot(self) -> Optional[SnapshotT]:
        """Read the persisted snapshot; corrupt or missing data yields None."""
        if self.storage is None or self.storage_key is None or self.snapshot_model is None:
            return None

        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            return None

        try:
            return self.snapshot_model.model_validate_json(raw)
        except ValidationError as e:
            self._logger.warning(f"Discarding unreadable state under '{self.storage_key}': {e}")
            return None

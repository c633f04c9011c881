"""Tests for the toast queue and its owned timers."""

import asyncio

import pytest

from storefront.buyer.state.ui_store import NotificationStore
from storefront.shared.core.timers import TimerRegistry
from storefront.shared.domain.models import ToastType


@pytest.mark.asyncio
async def test_toast_visible_then_auto_removed():
    toasts = NotificationStore(default_duration=0.05)

    toast_id = toasts.push("error", "x")

    assert [t.id for t in toasts.toasts] == [toast_id]
    assert toasts.get(toast_id).type is ToastType.ERROR

    await asyncio.sleep(0.15)
    assert toasts.toasts == []
    assert len(toasts.timers) == 0


@pytest.mark.asyncio
async def test_manual_removal_cancels_pending_timer():
    toasts = NotificationStore(default_duration=0.05)
    toast_id = toasts.push("info", "hello")
    notifications = []
    toasts.subscribe(lambda store: notifications.append(len(store.toasts)))

    toasts.remove(toast_id)
    assert toasts.timers.is_pending(toast_id) is False

    await asyncio.sleep(0.15)
    # Only the manual removal notified; no stale timer fired
    assert notifications == [0]


@pytest.mark.asyncio
async def test_toasts_keep_push_order_and_expire_independently():
    toasts = NotificationStore(default_duration=10)
    short = toasts.success("saved", duration=0.05)
    sticky = toasts.warning("check your address", duration=0)
    later = toasts.info("welcome back")

    assert [t.id for t in toasts.toasts] == [short, sticky, later]

    await asyncio.sleep(0.15)
    assert [t.id for t in toasts.toasts] == [sticky, later]
    assert toasts.timers.is_pending(sticky) is False
    toasts.clear()


@pytest.mark.asyncio
async def test_clear_cancels_every_timer():
    toasts = NotificationStore(default_duration=0.05)
    toasts.push("success", "a")
    toasts.push("success", "b")

    toasts.clear()

    assert toasts.toasts == []
    assert len(toasts.timers) == 0


def test_remove_unknown_id_is_noop():
    toasts = NotificationStore(default_duration=0)
    toasts.push("info", "stays")

    toasts.remove("nope")
    toasts.remove("nope")

    assert len(toasts.toasts) == 1


def test_rejects_unknown_toast_type():
    toasts = NotificationStore(default_duration=0)
    with pytest.raises(ValueError):
        toasts.push("fatal", "nope")


def test_without_event_loop_toast_stays_until_dismissed():
    toasts = NotificationStore(default_duration=1)

    toast_id = toasts.push("info", "no loop here")

    assert toasts.timers.is_pending(toast_id) is False
    toasts.remove(toast_id)
    assert toasts.toasts == []


@pytest.mark.asyncio
async def test_timer_registry_reschedule_replaces_previous():
    timers = TimerRegistry()
    fired = []

    timers.schedule("k", 0.05, lambda: fired.append("old"))
    timers.schedule("k", 0.1, lambda: fired.append("new"))

    await asyncio.sleep(0.2)
    assert fired == ["new"]

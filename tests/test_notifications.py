# tests/test_notifications.py

import asyncio

import pytest

from taskmanager.client.notifications import DEFAULT_DURATION_MS, NotificationType, Notifier


def test_show_and_dismiss():
    notifier = Notifier()

    first = notifier.success("Saved")
    second = notifier.error("Failed", "details here", duration=0)

    assert first.duration == DEFAULT_DURATION_MS
    assert first.dismissible is True
    assert second.type == NotificationType.ERROR
    assert second.description == "details here"
    assert [n.id for n in notifier.notifications] == [first.id, second.id]

    assert notifier.dismiss(first.id) is True
    assert notifier.dismiss(first.id) is False
    assert notifier.notifications == [second]

    notifier.warning("Careful")
    notifier.info("FYI")
    notifier.clear()
    assert notifier.notifications == []


@pytest.mark.asyncio
async def test_auto_dismiss_inside_event_loop():
    notifier = Notifier()

    notifier.info("brief", duration=10)
    sticky = notifier.error("sticky", duration=0)
    await asyncio.sleep(0.05)

    assert notifier.notifications == [sticky]

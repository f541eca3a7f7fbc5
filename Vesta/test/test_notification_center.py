"""
Tests for notification state: REST load, pushes and mark-as-read.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from Vesta.core.client.utils.exceptions import ServerError
from Vesta.core.realtime import topics
from Vesta.features.notification_center import NotificationCenter
from Vesta.services.notification_service import NotificationService
from Vesta.test.conftest import eventually


def notification(notification_id: int, read: bool = False, **extra):
    data = {
        "id": notification_id,
        "userId": 7,
        "title": f"Notice {notification_id}",
        "message": "Someone added your listing to favorites",
        "type": "FAVORITE",
        "isRead": read,
        "createdAt": "2025-06-01 10:00:00",
    }
    data.update(extra)
    return data


class TestNotificationCenterLocal:
    """State transitions with a mocked service."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = MagicMock(spec=NotificationService)
        self.service.get_all = AsyncMock(return_value=[])
        self.service.mark_as_read = AsyncMock(return_value=None)
        self.service.mark_all_as_read = AsyncMock(return_value=None)
        self.realtime = MagicMock()
        self.center = NotificationCenter(self.service, self.realtime)

    @pytest.mark.asyncio
    async def test_load_counts_unread(self):
        from Vesta.core.client.models.wire import Notification

        self.service.get_all.return_value = [
            Notification.model_validate(notification(1)),
            Notification.model_validate(notification(2, read=True)),
            Notification.model_validate(notification(3)),
        ]

        items = await self.center.load()

        assert [item.id for item in items] == [1, 2, 3]
        assert self.center.unread_count == 2

    @pytest.mark.asyncio
    async def test_load_failure_keeps_state(self):
        self.center.handle_push(notification(1))
        self.service.get_all.side_effect = ServerError(500, "boom")

        items = await self.center.load()

        assert [item.id for item in items] == [1]
        assert self.center.unread_count == 1

    def test_push_prepends_and_counts_unread(self):
        self.center.handle_push(notification(1))
        self.center.handle_push(notification(2, read=True))
        self.center.handle_push(notification(3))

        assert [item.id for item in self.center.items] == [3, 2, 1]
        assert self.center.unread_count == 2

    def test_push_accepts_read_alias(self):
        self.center.handle_push({"id": 1, "title": "Seen", "read": True})

        assert self.center.get(1).is_read is True
        assert self.center.unread_count == 0

    def test_malformed_push_is_dropped(self):
        self.center.handle_push({"title": "no id"})
        self.center.handle_push("not even a dict")

        assert self.center.items == []
        assert self.center.unread_count == 0

    def test_same_notification_twice_is_kept_twice(self):
        self.center.handle_push(notification(1))
        self.center.handle_push(notification(1))

        assert len(self.center.items) == 2
        assert self.center.unread_count == 2

    @pytest.mark.asyncio
    async def test_mark_as_read_decrements_once(self):
        self.center.handle_push(notification(1))
        self.center.handle_push(notification(2))

        first = await self.center.mark_as_read(1)
        second = await self.center.mark_as_read(1)

        assert first is True
        assert second is False
        assert self.center.unread_count == 1
        self.service.mark_as_read.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_concurrent_mark_as_read(self):
        self.center.handle_push(notification(1))

        results = await asyncio.gather(*(self.center.mark_as_read(1) for _ in range(5)))

        assert results.count(True) == 1
        assert self.center.unread_count == 0
        assert self.service.mark_as_read.await_count == 1

    @pytest.mark.asyncio
    async def test_mark_as_read_never_below_zero(self):
        self.center.handle_push(notification(1))
        self.center._unread = 0

        await self.center.mark_as_read(1)

        assert self.center.unread_count == 0

    @pytest.mark.asyncio
    async def test_mark_as_read_failure_is_not_rolled_back(self):
        self.center.handle_push(notification(1))
        self.service.mark_as_read.side_effect = ServerError(500, "boom")

        changed = await self.center.mark_as_read(1)

        assert changed is True
        assert self.center.get(1).is_read is True
        assert self.center.unread_count == 0

    @pytest.mark.asyncio
    async def test_mark_unknown_notification(self):
        assert await self.center.mark_as_read(99) is False
        self.service.mark_as_read.assert_not_awaited()

    def test_listeners_are_notified(self):
        calls = []
        remove = self.center.add_listener(lambda: calls.append(self.center.unread_count))

        self.center.handle_push(notification(1))
        remove()
        self.center.handle_push(notification(2))

        assert calls == [1]

    def test_failing_listener_is_contained(self):
        def explode():
            raise RuntimeError("listener bug")

        self.center.add_listener(explode)
        self.center.handle_push(notification(1))

        assert self.center.unread_count == 1

    def test_subscribe_uses_user_topic(self):
        self.realtime.destinations = []
        self.center.subscribe(7)

        self.realtime.subscribe.assert_called_once_with(topics.notifications(7), self.center.handle_push)
        assert self.center.destination == topics.notifications(7)


class TestNotificationCenterBackend:
    """End-to-end through the REST client and the broker."""

    @pytest.mark.asyncio
    async def test_mark_all_as_read_issues_one_request(self, services, backend):
        """3 unread notifications, mark all read: 0 unread and exactly one PUT /notifications/read-all."""
        backend.reply("GET", "/notifications", [notification(1), notification(2), notification(3)])
        backend.reply("PUT", "/notifications/read-all", None)
        center = NotificationCenter(services.notifications, MagicMock())

        await center.load()
        assert center.unread_count == 3

        await center.mark_all_as_read()

        assert center.unread_count == 0
        assert all(item.is_read for item in center.items)
        assert len(backend.calls("PUT", "/notifications/read-all")) == 1
        assert [r.path for r in backend.requests if r.method == "PUT"] == ["/notifications/read-all"]

    @pytest.mark.asyncio
    async def test_mark_as_read_calls_endpoint(self, services, backend):
        backend.reply("GET", "/notifications", [notification(5)])
        backend.reply("PUT", "/notifications/5/read", None)
        center = NotificationCenter(services.notifications, MagicMock())
        await center.load()

        await center.mark_as_read(5)
        await center.mark_as_read(5)

        assert len(backend.calls("PUT", "/notifications/5/read")) == 1
        assert center.unread_count == 0

    @pytest.mark.asyncio
    async def test_malformed_list_keeps_state(self, services, backend):
        backend.reply("GET", "/notifications", [{"title": "no id"}])
        center = NotificationCenter(services.notifications, MagicMock())
        center.handle_push(notification(1))

        items = await center.load()

        assert [item.id for item in items] == [1]
        assert center.unread_count == 1

    @pytest.mark.asyncio
    async def test_push_through_broker(self, services, realtime, broker):
        center = NotificationCenter(services.notifications, realtime)
        center.subscribe(7)
        realtime.connect()
        assert await realtime.wait_until_connected(1.0)
        assert await eventually(lambda: broker.subscribed(topics.notifications(7)))

        broker.publish(topics.notifications(7), notification(11))
        broker.publish(topics.notifications(7), "{broken")
        broker.publish(topics.notifications(7), notification(12))

        assert await eventually(lambda: center.unread_count == 2)
        assert [item.id for item in center.items] == [12, 11]

    @pytest.mark.asyncio
    async def test_feed_resubscribes_after_reconnect(self, services, realtime, broker):
        center = NotificationCenter(services.notifications, realtime)
        center.subscribe(7)
        realtime.connect()
        assert await realtime.wait_until_connected(1.0)
        assert await eventually(lambda: broker.subscribed(topics.notifications(7)))

        await broker.drop()

        assert await eventually(lambda: len(broker.sockets) == 2 and broker.subscribed(topics.notifications(7)))
        broker.publish(topics.notifications(7), notification(21))
        assert await eventually(lambda: center.unread_count == 1)

    @pytest.mark.asyncio
    async def test_detach_stops_pushes(self, services, realtime, broker):
        center = NotificationCenter(services.notifications, realtime)
        center.subscribe(7)
        realtime.connect()
        assert await realtime.wait_until_connected(1.0)
        assert await eventually(lambda: broker.subscribed(topics.notifications(7)))

        center.detach()
        assert await eventually(lambda: not broker.subscribed(topics.notifications(7)))
        broker.publish(topics.notifications(7), notification(31), include_released=True)

        await asyncio.sleep(0.05)
        assert center.items == []

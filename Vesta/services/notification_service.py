"""Notifications (/notifications)."""

from typing import List

from Vesta.core.client.models.wire import Notification

from .base import BaseService, parse_count, parse_list


class NotificationService(BaseService):

    async def get_all(self) -> List[Notification]:
        return parse_list(Notification, await self.api.get("/notifications"))

    async def get_unread_count(self) -> int:
        data = await self.api.get("/notifications/unread-count")
        return parse_count(data)

    async def mark_as_read(self, notification_id: int) -> None:
        await self.api.put(f"/notifications/{notification_id}/read")

    async def mark_all_as_read(self) -> None:
        await self.api.put("/notifications/read-all")

"""Direct messages (/messages)."""

from typing import List, Optional

from Vesta.core.client.models.wire import ConversationSummary, MessageCreateRequest, MessageDetail

from .base import BaseService, parse_count, parse_list, parse_one


class MessageService(BaseService):

    async def send(self, receiver_id: int, content: str, listing_id: Optional[int] = None) -> MessageDetail:
        request = MessageCreateRequest(receiver_id=receiver_id, content=content, listing_id=listing_id)
        return parse_one(MessageDetail, await self.api.post("/messages", request.to_wire()))

    async def get_conversations(self) -> List[ConversationSummary]:
        return parse_list(ConversationSummary, await self.api.get("/messages/conversations"))

    async def get_conversation(self, other_user_id: int) -> List[MessageDetail]:
        return parse_list(MessageDetail, await self.api.get(f"/messages/conversation/{other_user_id}"))

    async def delete_conversation(self, other_user_id: int) -> None:
        await self.api.delete(f"/messages/conversation/{other_user_id}")

    async def mark_as_read(self, message_id: int) -> None:
        await self.api.put(f"/messages/{message_id}/read")

    async def get_unread_count(self) -> int:
        data = await self.api.get("/messages/unread-count")
        return parse_count(data, "unreadCount")

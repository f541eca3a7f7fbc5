"""
Conversation management.
Keeps per-conversation message lists, unread counters and the last-message
projection in sync with REST responses and pushes on /topic/messages/{userId}.
"""
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PayloadError

from Vesta.core.client.models.data import STATUS_FAILED, STATUS_SENDING, STATUS_SENT, Conversation, MessageItem
from Vesta.core.client.models.wire import ConversationSummary, MessageDetail
from Vesta.core.client.utils.exceptions import ClientError
from Vesta.core.logging import get_logger
from Vesta.core.realtime import topics
from Vesta.core.realtime.websocket_service import Subscription, WebSocketService
from Vesta.services.message_service import MessageService

from .realtime_feed import TopicFeed

logger = get_logger(__name__)


class ConversationManager(TopicFeed):
    """
    Manages conversations and direct messages.

    The open (active) conversation never contributes unread messages:
    messages arriving while it is open are marked read at once.
    """

    def __init__(self, service: MessageService, current_user_id: Optional[int] = None,
                 realtime: Optional[WebSocketService] = None):
        super().__init__(realtime)
        self._service = service
        self.current_user_id = current_user_id
        self._conversations: Dict[int, Conversation] = {}
        self._conv_ids: List[int] = []
        self._active_id: Optional[int] = None

    @property
    def active_id(self) -> Optional[int]:
        """Get the other user id of the open conversation."""
        return self._active_id

    @property
    def conversation_ids(self) -> List[int]:
        """Get conversation ids, most recent first."""
        return self._conv_ids.copy()

    @property
    def total_unread(self) -> int:
        return sum(conv.unread for conv in self._conversations.values())

    def get_conversation(self, other_user_id: int) -> Optional[Conversation]:
        return self._conversations.get(other_user_id)

    def get_active_conversation(self) -> Optional[Conversation]:
        if self._active_id is None:
            return None
        return self._conversations.get(self._active_id)

    def subscribe(self, user_id: int) -> Optional[Subscription]:
        """Receive message pushes for the current user."""
        self.current_user_id = user_id
        return self.attach(topics.messages(user_id))

    def _ensure_conversation(self, other_user_id: int, name: Optional[str] = None) -> Conversation:
        """Ensure a conversation exists, creating it if necessary."""
        conv = self._conversations.get(other_user_id)
        if conv is None:
            conv = Conversation(other_user_id=other_user_id, name=name or f"user-{other_user_id}")
            self._conversations[other_user_id] = conv
        elif name and conv.name.startswith("user-"):
            conv.name = name
        if other_user_id not in self._conv_ids:
            self._conv_ids.append(other_user_id)
        return conv

    def _reorder(self) -> None:
        # Timestamps are "yyyy-MM-dd HH:mm:ss" and sort lexically
        self._conv_ids.sort(key=lambda cid: self._conversations[cid].last_created_at or "", reverse=True)

    def _other_party(self, detail: MessageDetail) -> int:
        if self.current_user_id is not None and detail.sender_id == self.current_user_id:
            return detail.receiver_id
        return detail.sender_id

    def _is_for_me(self, detail: MessageDetail) -> bool:
        return self.current_user_id is None or detail.receiver_id == self.current_user_id

    async def sync_conversations(self) -> List[int]:
        """Refresh the conversation list from GET /messages/conversations."""
        try:
            summaries = await self._service.get_conversations()
        except ClientError as e:
            logger.error("Error fetching conversations: %s", e)
            return self.conversation_ids

        for summary in summaries:
            self._apply_summary(summary)
        self._reorder()
        self._notify()
        return self.conversation_ids

    def _apply_summary(self, summary: ConversationSummary) -> None:
        conv = self._ensure_conversation(summary.other_user_id, summary.other_user_username)
        conv.unread = 0 if summary.other_user_id == self._active_id else summary.unread_count
        conv.listing_id = summary.listing_id
        conv.listing_title = summary.listing_title
        last = summary.last_message
        if last is not None:
            conv.last_sender = last.sender_username or ""
            conv.last_preview = last.content
            conv.last_created_at = last.created_at or conv.last_created_at

    async def open_conversation(self, other_user_id: int, name: Optional[str] = None) -> Conversation:
        """
        Make a conversation active, load its messages and mark the received
        unread ones read on the server.
        """
        self._active_id = other_user_id
        conv = self._ensure_conversation(other_user_id, name)
        conv.mark_read()
        self._notify()

        try:
            details = await self._service.get_conversation(other_user_id)
        except ClientError as e:
            logger.error("Error loading conversation with %s: %s", other_user_id, e)
            return conv

        # Local messages still waiting for the server stay at the end
        local_only = [item for item in conv.items if item.id is None]
        conv.items = []
        for detail in details:
            conv.add_message(MessageItem.from_detail(detail, self.current_user_id))
        for item in local_only:
            conv.add_message(item)

        to_mark = [item for item in conv.items
                   if item.id is not None and not item.is_read and not item.is_self]
        for item in to_mark:
            item.is_read = True
        if self._active_id == other_user_id:
            conv.mark_read()
        self._reorder()
        self._notify()

        for item in to_mark:
            await self._mark_read_remote(item.id)
        return conv

    def close_conversation(self) -> None:
        self._active_id = None

    async def delete_conversation(self, other_user_id: int) -> bool:
        try:
            await self._service.delete_conversation(other_user_id)
        except ClientError as e:
            logger.error("Error deleting conversation with %s: %s", other_user_id, e)
            return False
        self._conversations.pop(other_user_id, None)
        if other_user_id in self._conv_ids:
            self._conv_ids.remove(other_user_id)
        if self._active_id == other_user_id:
            self._active_id = None
        self._notify()
        return True

    async def handle_push(self, payload: Any) -> None:
        try:
            detail = MessageDetail.model_validate(payload)
        except PayloadError as e:
            logger.error("Dropping malformed message payload: %s", e)
            return

        other = self._other_party(detail)
        name = detail.sender_username if other == detail.sender_id else detail.receiver_username
        conv = self._ensure_conversation(other, name)
        if conv.has_message(detail.id):
            return

        item = MessageItem.from_detail(detail, self.current_user_id)
        conv.add_message(item)
        mark_remote = False
        if other == self._active_id:
            mark_remote = not item.is_read and not item.is_self
            item.is_read = True
            conv.mark_read()
        elif not detail.is_read and self._is_for_me(detail):
            conv.increment_unread()
        self._reorder()
        self._notify()

        if mark_remote:
            await self._mark_read_remote(detail.id)

    async def send_message(self, receiver_id: int, content: str,
                           listing_id: Optional[int] = None) -> MessageItem:
        """
        Send a message optimistically.

        The local item starts as "sending", becomes "sent" with the server's
        id and timestamp, or "failed" when the request fails.
        """
        conv = self._ensure_conversation(receiver_id)
        item = MessageItem.create(
            sender_id=self.current_user_id or 0,
            receiver_id=receiver_id,
            content=content,
            is_self=True,
            status=STATUS_SENDING,
            listing_id=listing_id,
        )
        conv.add_message(item)
        self._reorder()
        self._notify()

        try:
            detail = await self._service.send(receiver_id, content, listing_id)
        except ClientError as e:
            logger.warning("Sending message to %s failed: %s", receiver_id, e)
            item.status = STATUS_FAILED
            self._notify()
            return item

        if conv.has_message(detail.id):
            # The push for this message won the race
            conv.items.remove(item)
        else:
            item.id = detail.id
            item.ts = detail.created_at or item.ts
            item.sender_username = detail.sender_username or item.sender_username
            item.status = STATUS_SENT
            conv.last_created_at = item.ts
        self._reorder()
        self._notify()
        return item

    async def _mark_read_remote(self, message_id: Optional[int]) -> None:
        if message_id is None:
            return
        try:
            await self._service.mark_as_read(message_id)
        except ClientError as e:
            logger.warning("Marking message %s read failed: %s", message_id, e)

    async def refresh_unread_count(self) -> Optional[int]:
        """Server-side unread total, or None when the request fails."""
        try:
            return await self._service.get_unread_count()
        except ClientError as e:
            logger.error("Error fetching unread message count: %s", e)
            return None

    def get_conversation_labels(self) -> List[str]:
        """Get display labels for all conversations."""
        labels = []
        for cid in self._conv_ids:
            conv = self._conversations[cid]
            label = conv.name
            if cid == self._active_id:
                label = f"> {label}"
            if conv.last_created_at:
                label = f"{label}  ·  {conv.last_created_at}"
            preview = conv.compute_last_preview()
            if preview:
                label = f"{label}  ·  {preview}"
            if conv.unread > 0:
                label = f"{label}  ({conv.unread})"
            labels.append(label)
        return labels

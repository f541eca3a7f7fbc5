"""
Client-side view state for conversations.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from Vesta.core.client.utils.constants import CONVERSATION_PREVIEW_LENGTH

from .wire import MessageDetail

# Status values of a message item
STATUS_SENDING = "sending"
STATUS_SENT = "sent"
STATUS_FAILED = "failed"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class MessageItem:
    """Represents a message in a conversation."""
    sender_id: int
    receiver_id: int
    content: str
    ts: str
    id: Optional[int] = None
    sender_username: str = ""
    is_self: bool = False
    is_read: bool = False
    listing_id: Optional[int] = None
    status: Optional[str] = None

    @classmethod
    def create(cls, sender_id: int, receiver_id: int, content: str,
               is_self: bool = False, status: Optional[str] = None,
               listing_id: Optional[int] = None) -> 'MessageItem':
        """Factory method to create a local message with current timestamp."""
        return cls(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            ts=datetime.now().strftime(TIMESTAMP_FORMAT),
            is_self=is_self,
            is_read=is_self,
            listing_id=listing_id,
            status=status,
        )

    @classmethod
    def from_detail(cls, detail: MessageDetail, current_user_id: Optional[int]) -> 'MessageItem':
        """Build an item from a server-confirmed message."""
        return cls(
            id=detail.id,
            sender_id=detail.sender_id,
            receiver_id=detail.receiver_id,
            content=detail.content,
            ts=detail.created_at or datetime.now().strftime(TIMESTAMP_FORMAT),
            sender_username=detail.sender_username or "",
            is_self=current_user_id is not None and detail.sender_id == current_user_id,
            is_read=detail.is_read,
            listing_id=detail.listing_id,
            status=STATUS_SENT,
        )


@dataclass
class Conversation:
    """Represents a conversation with one other user."""
    other_user_id: int
    name: str
    items: List[MessageItem] = field(default_factory=list)
    unread: int = 0
    last_sender: str = ""
    last_preview: str = ""
    last_created_at: str = ""
    listing_id: Optional[int] = None
    listing_title: Optional[str] = None

    def add_message(self, item: MessageItem) -> None:
        """Append a message and refresh the last-message projection."""
        self.items.append(item)
        self.last_sender = item.sender_username
        self.last_preview = item.content
        self.last_created_at = item.ts

    def has_message(self, message_id: Optional[int]) -> bool:
        return message_id is not None and any(item.id == message_id for item in self.items)

    def mark_read(self) -> None:
        """Mark all messages as read."""
        self.unread = 0

    def increment_unread(self) -> None:
        self.unread += 1

    def compute_last_preview(self, max_len: int = CONVERSATION_PREVIEW_LENGTH) -> str:
        """Compute a compact preview for conversation list."""
        preview = (self.last_preview or "").strip()
        if not preview and self.items:
            preview = (self.items[-1].content or "").strip()
        preview = preview.replace("\n", " ").strip()
        if len(preview) > max_len:
            preview = preview[:max_len] + "…"
        return preview

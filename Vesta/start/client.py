"""
Client startup module for Vesta.
Runs the command-line front end: session commands, notification and
conversation views, comparison and the live watch mode.
"""

import asyncio
import getpass
from typing import List, Optional, Sequence

from Vesta.api.client import VestaAPIClient
from Vesta.core.client.services.persistence_service import LocalStorage
from Vesta.core.client.services.toast_service import Toast
from Vesta.core.logging import get_logger
from Vesta.core.realtime.websocket_service import WebSocketService
from Vesta.features.conversation_manager import ConversationManager
from Vesta.features.favorite_counter import FavoriteCounter
from Vesta.features.notification_center import NotificationCenter
from Vesta.services import Services
from Vesta.store import Store

__all__ = ['login', 'logout', 'notifications', 'conversations', 'compare', 'watch']

logger = get_logger(__name__)


def _print_toast(toast: Toast) -> None:
    print(toast.format())


async def _open(api_url: Optional[str] = None, state_dir: Optional[str] = None) -> Services:
    storage = LocalStorage(state_dir)
    await storage.load()
    api = VestaAPIClient(api_url, storage)
    api.error_handler.toasts.add_listener(_print_toast)
    return Services(api)


async def _close(services: Services) -> None:
    await services.api.storage.save()
    await services.api.close()


def _require_user(services: Services):
    user = services.auth.get_user()
    if user is None or not services.auth.is_authenticated():
        print("Not logged in. Run 'vesta login <username>' first.")
        return None
    return user


async def _login(username: str, password: Optional[str], api_url=None, state_dir=None) -> bool:
    services = await _open(api_url, state_dir)
    try:
        store = Store(services)
        if password is None:
            password = getpass.getpass("Password: ")
        user = await store.auth.login(username, password)
        if user is None:
            return False
        print(f"Logged in as {user.username} ({', '.join(user.roles) or 'no roles'})")
        return True
    finally:
        await _close(services)


def login(username: str, password: Optional[str] = None, api_url=None, state_dir=None) -> bool:
    """Log in and persist the session in local storage."""
    return asyncio.run(_login(username, password, api_url, state_dir))


def logout(state_dir: Optional[str] = None) -> None:
    storage = LocalStorage(state_dir)
    storage.load_sync()
    storage.clear_session()
    storage.save_sync()
    print("Logged out")


async def _notifications(mark_all: bool, read_ids: Sequence[int], api_url=None, state_dir=None) -> None:
    services = await _open(api_url, state_dir)
    try:
        if _require_user(services) is None:
            return
        center = NotificationCenter(services.notifications)
        await center.load()
        for notification_id in read_ids:
            if not await center.mark_as_read(notification_id):
                print(f"Notification {notification_id} is unknown or already read")
        if mark_all:
            await center.mark_all_as_read()

        for item in center.items:
            marker = " " if item.is_read else "*"
            print(f"{marker} [{item.id}] {item.created_at or ''}  {item.title or ''}: {item.message or ''}")
        print(f"Unread: {center.unread_count}")
    finally:
        await _close(services)


def notifications(mark_all: bool = False, read_ids: Sequence[int] = (), api_url=None, state_dir=None) -> None:
    asyncio.run(_notifications(mark_all, read_ids, api_url, state_dir))


async def _conversations(open_id: Optional[int], message: Optional[str], listing_id: Optional[int],
                         api_url=None, state_dir=None) -> None:
    services = await _open(api_url, state_dir)
    try:
        user = _require_user(services)
        if user is None:
            return
        manager = ConversationManager(services.messages, user.id)
        await manager.sync_conversations()

        if open_id is None:
            for label in manager.get_conversation_labels():
                print(label)
            print(f"Unread: {manager.total_unread}")
            return

        conv = await manager.open_conversation(open_id)
        if message:
            await manager.send_message(open_id, message, listing_id)
        print(f"Conversation with {conv.name}")
        for item in conv.items:
            who = "me" if item.is_self else (item.sender_username or conv.name)
            status = f" ({item.status})" if item.status and item.status != "sent" else ""
            print(f"[{item.ts}] {who}: {item.content}{status}")
    finally:
        await _close(services)


def conversations(open_id: Optional[int] = None, message: Optional[str] = None,
                  listing_id: Optional[int] = None, api_url=None, state_dir=None) -> None:
    asyncio.run(_conversations(open_id, message, listing_id, api_url, state_dir))


async def _compare(listing_ids: Sequence[int], category: str, api_url=None, state_dir=None) -> None:
    services = await _open(api_url, state_dir)
    try:
        store = Store(services)
        for listing_id in listing_ids:
            if not store.comparison.add(listing_id, category):
                print(f"Listing {listing_id} ignored (max {store.comparison.max_selections} "
                      f"listings of one category)")

        result = await store.comparison.compare()
        if result is None:
            print(store.comparison.error or "Comparison failed")
            return
        ids = [str(listing_id) for listing_id in store.comparison.selected]
        print("field".ljust(24) + "".join(listing_id.ljust(20) for listing_id in ids))
        for field in result.fields:
            row = field.field_name.ljust(24)
            row += "".join(str(field.values.get(listing_id) or "-").ljust(20) for listing_id in ids)
            print(row)
    finally:
        await _close(services)


def compare(listing_ids: Sequence[int], category: str, api_url=None, state_dir=None) -> None:
    asyncio.run(_compare(listing_ids, category, api_url, state_dir))


async def _watch(listing_ids: Sequence[int], api_url=None, ws_url=None, state_dir=None,
                 stop: Optional[asyncio.Event] = None) -> None:
    services = await _open(api_url, state_dir)
    user = _require_user(services)
    if user is None:
        await _close(services)
        return

    token = services.auth.get_token()
    realtime = WebSocketService(ws_url, connect_headers={"Authorization": f"Bearer {token}"})
    center = NotificationCenter(services.notifications, realtime)
    manager = ConversationManager(services.messages, user.id, realtime)
    counters: List[FavoriteCounter] = [FavoriteCounter(listing_id, realtime) for listing_id in listing_ids]

    await center.load()
    await manager.sync_conversations()

    center.add_listener(lambda: print(f"Notifications: {center.unread_count} unread"))
    manager.add_listener(lambda: print(f"Messages: {manager.total_unread} unread"))
    for counter in counters:
        counter.add_listener(lambda c=counter: print(f"Listing {c.listing_id}: {c.count} favorites"))

    # Queued until the broker answers CONNECTED
    center.subscribe(user.id)
    manager.subscribe(user.id)
    for counter in counters:
        counter.subscribe()
    realtime.connect()
    logger.info("Watch started for user %s", user.id)
    print(f"Watching as {user.username}, press Ctrl+C to stop")

    try:
        await (stop or asyncio.Event()).wait()
    finally:
        for feed in [center, manager, *counters]:
            feed.detach()
        await realtime.disconnect()
        await _close(services)


def watch(listing_ids: Sequence[int] = (), api_url=None, ws_url=None, state_dir=None) -> None:
    """Follow notifications, messages and favorite counters until interrupted."""
    try:
        asyncio.run(_watch(listing_ids, api_url, ws_url, state_dir))
    except KeyboardInterrupt:
        print("Bye!")

"""
Persistence service for the client's local storage.
Holds the bearer token and the serialized user; uses async file I/O to avoid
blocking the event loop.
"""
import asyncio
import json
import os
from typing import Any, Dict, Optional

import aiofiles
import aiofiles.os

from Vesta.config import config
from Vesta.core.client.utils.constants import TOKEN_KEY, USER_KEY
from Vesta.core.logging import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """
    String key/value store mirrored to a JSON file.

    Reads and writes of single items are synchronous and in memory; load()
    and save() move the whole map to and from disk.
    """

    def __init__(self, state_dir: Optional[str] = None, filename: Optional[str] = None):
        self._state_dir = state_dir or config.STATE_DIR
        self._state_path = os.path.join(self._state_dir, filename or config.STATE_FILE)
        self._items: Dict[str, str] = {}
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> str:
        """Get the storage file path."""
        return self._state_path

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def keys(self):
        return list(self._items)

    # Token and user helpers

    @property
    def token(self) -> Optional[str]:
        return self.get_item(TOKEN_KEY)

    def get_user(self) -> Optional[Dict[str, Any]]:
        """Return the stored user object, or None when missing or unreadable."""
        raw = self.get_item(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            logger.warning("Stored user is not valid JSON, ignoring it")
            return None
        return user if isinstance(user, dict) else None

    def set_session(self, token: str, user: Dict[str, Any]) -> None:
        self.set_item(TOKEN_KEY, token)
        self.set_item(USER_KEY, json.dumps(user, ensure_ascii=False))

    def clear_session(self) -> None:
        self.remove_item(TOKEN_KEY)
        self.remove_item(USER_KEY)

    # Disk I/O

    @staticmethod
    def _coerce(data: Any) -> Dict[str, str]:
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    async def load(self) -> Dict[str, str]:
        """Load the storage file from disk (async). A missing or broken file means empty storage."""
        try:
            async with aiofiles.open(self._state_path, "r", encoding="utf-8") as f:
                content = await f.read()
            self._items = self._coerce(json.loads(content))
        except FileNotFoundError:
            self._items = {}
        except (OSError, ValueError) as e:
            logger.warning("Could not read local storage %s: %s", self._state_path, e)
            self._items = {}
        return dict(self._items)

    async def save(self) -> bool:
        """Write the storage file to disk (async)."""
        try:
            await aiofiles.os.makedirs(self._state_dir, exist_ok=True)
            async with self._write_lock:
                async with aiofiles.open(self._state_path, "w", encoding="utf-8") as f:
                    await f.write(json.dumps(self._items, ensure_ascii=False, indent=2))
            return True
        except OSError as e:
            logger.error("Could not write local storage %s: %s", self._state_path, e)
            return False

    def load_sync(self) -> Dict[str, str]:
        """Synchronous fallback for loading."""
        try:
            with open(self._state_path, "r", encoding="utf-8") as f:
                self._items = self._coerce(json.load(f))
        except FileNotFoundError:
            self._items = {}
        except (OSError, ValueError) as e:
            logger.warning("Could not read local storage %s: %s", self._state_path, e)
            self._items = {}
        return dict(self._items)

    def save_sync(self) -> bool:
        """Synchronous fallback for saving."""
        try:
            os.makedirs(self._state_dir, exist_ok=True)
            with open(self._state_path, "w", encoding="utf-8") as f:
                json.dump(self._items, f, ensure_ascii=False, indent=2)
            return True
        except OSError as e:
            logger.error("Could not write local storage %s: %s", self._state_path, e)
            return False

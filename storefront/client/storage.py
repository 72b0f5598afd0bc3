# storefront/client/storage.py

import json
import os
from typing import Any, Dict, Optional

TOKEN_KEY = "authToken"
USER_KEY = "user"


class MemoryStorage:
    """Process-local key/value store for the client's auth state."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage(MemoryStorage):
    """
    JSON file backed store, so a token survives between runs.

    The whole file is rewritten on every change.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as fh:
                self._data = json.load(fh)

    def _flush(self) -> None:
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh)

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self._flush()

    def remove(self, key: str) -> None:
        super().remove(key)
        self._flush()


def clear_auth(storage) -> None:
    storage.remove(TOKEN_KEY)
    storage.remove(USER_KEY)

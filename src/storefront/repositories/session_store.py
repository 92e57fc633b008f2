"""
Key/value stores holding a client's serialized cart.

The cart only ever uses a single key (CART_STORAGE_KEY); stores are
deliberately dumb string maps so any of them can back a CartService.
"""
import json
import logging
import os
import tempfile
from typing import Dict, MutableMapping, Optional

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "cart"


class SessionStoreError(Exception):
    """Raised when a store cannot be read or written"""


class SessionStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileSessionStore(SessionStore):
    """
    localStorage equivalent: one JSON object on disk.

    Every instance pointing at the same file shares the same keys; the last
    writer wins.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SessionStoreError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SessionStoreError(f"{self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            # Write-then-rename so a crash never leaves half a file behind
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise SessionStoreError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)


class FlaskSessionStore(SessionStore):
    """Stores values in the signed Flask session cookie"""

    def __init__(self, session: MutableMapping):
        self.session = session

    def get(self, key: str) -> Optional[str]:
        value = self.session.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self.session[key] = value

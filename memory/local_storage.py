"""Local key-value string storage and the signed-in session marker."""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional

SESSION_MARKER_KEY = "virtualClosetUser"


class LocalStorage:
    """Interface for a string-to-string key-value store."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryLocalStorage(LocalStorage):
    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class JSONLocalStorage(LocalStorage):
    """JSON-file-backed LocalStorage suitable for local runs."""

    def __init__(self, path: str | Path = "data/local_storage.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text() or "{}")

    def _save(self, payload: Dict[str, str]) -> None:
        self.path.write_text(json.dumps(payload, indent=2))

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        record = self._load()
        record[key] = str(value)
        self._save(record)

    def remove_item(self, key: str) -> None:
        record = self._load()
        if key in record:
            del record[key]
            self._save(record)

    def clear(self) -> None:
        self._save({})


def obfuscate_password(password: str) -> str:
    return base64.b64encode(password.encode("utf-8")).decode("ascii")


def reveal_password(obfuscated: str) -> Optional[str]:
    try:
        return base64.b64decode(obfuscated.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError):
        return None


@dataclass
class SessionMarker:
    """Who is signed in on this device.

    The password is only base64-obfuscated; this is a local stand-in for
    authentication, not a security boundary.
    """

    id: str
    email: str
    password: str

    def matches(self, email: str, password: str) -> bool:
        return self.email == email and reveal_password(self.password) == password


class SessionMarkerStore:
    """Reads and writes the session marker under a fixed local storage key."""

    def __init__(self, storage: LocalStorage, key: str = SESSION_MARKER_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> Optional[SessionMarker]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return SessionMarker(id=str(data["id"]), email=str(data["email"]), password=str(data["password"]))
        except (ValueError, KeyError, TypeError):
            return None

    def save(self, user_id: str, email: str, password: str) -> SessionMarker:
        marker = SessionMarker(id=user_id, email=email, password=obfuscate_password(password))
        self.storage.set_item(self.key, json.dumps(asdict(marker)))
        return marker

    def clear(self) -> None:
        self.storage.remove_item(self.key)


__all__ = [
    "SESSION_MARKER_KEY",
    "LocalStorage",
    "InMemoryLocalStorage",
    "JSONLocalStorage",
    "SessionMarker",
    "SessionMarkerStore",
    "obfuscate_password",
    "reveal_password",
]

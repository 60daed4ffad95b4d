"""
Local document store.

Plays the role browser localStorage plays for the web storefront: guest
carts, wishlists and mock orders live here as JSON documents keyed by
string. Writes are last-write-wins; within one process each write is
serialised by a lock.
"""

import copy
import json
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStore(ABC):
    """Key/value store of JSON-serialisable documents."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a document.

        Args:
            key: Document key
            default: Value returned when the key is missing or unreadable

        Returns:
            The stored document or ``default``
        """

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the document stored under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Delete a document.

        Returns:
            True if a document was deleted, False if the key was missing
        """

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List stored keys starting with ``prefix``."""


class MemoryLocalStore(LocalStore):
    """Dict-backed store; values are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._lock = Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))


class FileLocalStore(LocalStore):
    """
    Store that keeps one JSON file per key inside a directory.

    Files are written to a temporary file first and moved into place, so a
    reader never sees a half-written document. Keys are mapped to file names
    by replacing characters outside ``[A-Za-z0-9_.-]``; the original key is
    kept inside the file so ``keys()`` can report it.

    Attributes:
        directory: Directory holding the documents
    """

    def __init__(self, directory: str) -> None:
        """
        Initialize file store.

        Args:
            directory: Directory holding the documents (created if missing)
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        logger.info("Local store ready", directory=str(self.directory))

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def _read(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            with path.open("r", encoding="utf-8") as handle:
                envelope = json.load(handle)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Unreadable local document", path=str(path), error=str(e))
            return None

        if not isinstance(envelope, dict) or "key" not in envelope:
            logger.warning("Malformed local document", path=str(path))
            return None
        return envelope

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            envelope = self._read(self._path_for(key))
        if envelope is None or envelope["key"] != key:
            return default
        return envelope.get("value", default)

    def set(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        payload = json.dumps({"key": key, "value": value}, default=str)

        with self._lock:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.directory), prefix=".tmp-", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

    def remove(self, key: str) -> bool:
        with self._lock:
            try:
                self._path_for(key).unlink()
                return True
            except FileNotFoundError:
                return False

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            found = []
            for path in self.directory.glob("*.json"):
                if path.name.startswith(".tmp-"):
                    continue
                envelope = self._read(path)
                if envelope is not None and envelope["key"].startswith(prefix):
                    found.append(envelope["key"])
        return sorted(found)


def cart_key(owner: str) -> str:
    """Key of the cart document for a user id or guest session."""
    return f"musicstore_cart:{owner}"


def wishlist_key(owner: str) -> str:
    """Key of the wishlist document for a user id or guest session."""
    return f"musicstore_wishlist:{owner}"


MOCK_ORDERS_KEY = "mock_orders"

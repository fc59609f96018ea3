"""
Durable Storage - key/value slots that survive a restart.

Backends:
- MemoryStorage: process-local dict (default, and the one tests use)
- FileStorage: a single JSON file mapping keys to string values
- RedisStorage: Upstash Redis over REST (sync client)

All backends store strings; callers do their own JSON encoding.
I/O failures surface as StorageError.
"""

import contextlib
import json
import os
import tempfile
from typing import Optional, Protocol

from upstash_redis import Redis

from .config import get_redis_config, get_storage_backend, get_storage_path
from .logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when a storage backend cannot read or write."""


class KeyValueStorage(Protocol):
    """Minimal localStorage-like interface."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage. Lives as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """
    JSON file storage.

    The whole file is one object of key -> string. Writes go to a temp file
    in the same directory and are moved into place, so a crash mid-write
    leaves the previous contents intact.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError, RecursionError) as e:
            # ValueError covers both bad JSON and bytes that are not UTF-8
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected storage layout in {self.path}")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class RedisStorage:
    """Upstash Redis storage. Any client error becomes StorageError."""

    def __init__(self, client: Redis):
        self._client = client

    def get_item(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except Exception as e:
            raise StorageError(f"Redis get failed: {e}") from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value if isinstance(value, str) else json.dumps(value)

    def set_item(self, key: str, value: str) -> None:
        try:
            self._client.set(key, value)
        except Exception as e:
            raise StorageError(f"Redis set failed: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._client.delete(key)
        except Exception as e:
            raise StorageError(f"Redis delete failed: {e}") from e


def create_redis_client() -> Redis:
    """
    Sync Upstash Redis client from UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN.

    Raises:
        ValueError: If credentials are missing
    """
    config = get_redis_config()
    if not config["url"] or not config["token"]:
        raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
    return Redis(url=config["url"], token=config["token"])


def get_storage() -> KeyValueStorage:
    """Build the backend selected by CART_STORAGE_BACKEND."""
    backend = get_storage_backend()

    if backend == "file":
        path = get_storage_path()
        logger.info(f"Using file storage at {path}")
        return FileStorage(path)

    if backend == "redis":
        logger.info("Using Upstash Redis storage")
        return RedisStorage(create_redis_client())

    return MemoryStorage()

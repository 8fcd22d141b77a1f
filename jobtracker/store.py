"""Key-value persistence: an injectable store with best-effort JSON reads."""
from __future__ import annotations

import fcntl
import json
from pathlib import Path
from typing import Any, Protocol

from jobtracker.config import STORE_PATH
from jobtracker.log import get_logger

log = get_logger(__name__)


class KeyValueStore(Protocol):
    """Flat string store with get/set/remove semantics."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store; used by tests and as a throwaway session store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JsonFileStore:
    """
    All keys live in one JSON object on disk:

      <path> -> { "<key>": "<json text>", ... }

    Every call re-reads the file, so the last writer wins.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            _lock(f, exclusive=False)
            raw_text = f.read()
            _unlock(f)
        if not raw_text.strip():
            return {}
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            log.warning("Store file %s is corrupt, starting empty: %s", self.path.name, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Store file %s is not an object, starting empty", self.path.name)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            _lock(f)
            f.write(json.dumps(data, indent=2, sort_keys=True))
            _unlock(f)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        log.debug("Stored %s (%d bytes)", key, len(value))

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
            log.debug("Removed %s", key)

    def keys(self) -> list[str]:
        return list(self._read_all())


def read_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """
    Parse the JSON stored under *key*.

    Missing keys and malformed JSON both yield *default*; a value of the wrong
    top-level type (e.g. an object where a list is expected) does too.
    """
    raw = store.get(key)
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        log.warning("Discarding malformed value for %s: %s", key, exc)
        return default
    if default is not None and not isinstance(value, type(default)):
        log.warning("Discarding %s value for %s, expected %s",
                    type(value).__name__, key, type(default).__name__)
        return default
    return value


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False))


def default_store() -> JsonFileStore:
    """The on-disk store under DATA_DIR (override with JOBTRACKER_DATA_DIR)."""
    return JsonFileStore(STORE_PATH)

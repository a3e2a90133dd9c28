"""
storage.py
==========
Raw persistence media for save blobs.

The progress store only needs get / set / delete of a string blob under a
string key. Two backends are provided:

  MemoryStore   — a dict; used by tests and throwaway sessions.
  JsonFileStore — one ``<key>.json`` file per key under a directory.

Backends raise PersistenceUnavailable when the medium fails, never a raw
OSError, so callers handle exactly one storage error type.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Optional

from errors import PersistenceUnavailable

logger = logging.getLogger("detective.storage")

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore:
    """Interface of a string-keyed blob store."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def has(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStore(KeyValueStore):
    """In-process dict store. Contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    File-per-key store rooted at ``directory``.

    Writes go to a temporary sibling file that is then renamed over the
    target, so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Unsafe storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s: %s", path, exc)
            raise PersistenceUnavailable(f"Cannot read {path}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp  = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            raise PersistenceUnavailable(f"Cannot write {path}") from exc

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.error("Failed to delete %s: %s", path, exc)
            raise PersistenceUnavailable(f"Cannot delete {path}") from exc

    def keys(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

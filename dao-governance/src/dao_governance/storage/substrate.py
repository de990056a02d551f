from __future__ import annotations

import copy
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, Protocol

from dao_governance.observability.logging import get_logger
from dao_governance.storage.keys import StorageKey


class StateFileError(Exception):
    """The persisted state document cannot be read back."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"state file {path} is unreadable: {reason}")
        self.path = path
        self.reason = reason


class Storage(Protocol):
    def get(self, key: StorageKey) -> Any | None:
        ...

    def set(self, key: StorageKey, value: Any) -> None:
        ...

    def has(self, key: StorageKey) -> bool:
        ...

    def remove(self, key: StorageKey) -> None:
        ...

    def atomic(self) -> AbstractContextManager[None]:
        ...


class InMemoryStorage:
    """Key/value substrate whose ``atomic`` blocks roll back on any exception.

    Values are copied on the way in and out so no caller ever holds a
    reference into stored state.
    """

    def __init__(self, entries: dict[str, Any] | None = None) -> None:
        self._entries: dict[str, Any] = copy.deepcopy(entries) if entries else {}
        self._depth = 0

    def get(self, key: StorageKey) -> Any | None:
        value = self._entries.get(key.encode())
        return copy.deepcopy(value)

    def set(self, key: StorageKey, value: Any) -> None:
        self._entries[key.encode()] = copy.deepcopy(value)
        self._after_write()

    def has(self, key: StorageKey) -> bool:
        return key.encode() in self._entries

    def remove(self, key: StorageKey) -> None:
        self._entries.pop(key.encode(), None)
        self._after_write()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = copy.deepcopy(self._entries)
        self._depth = 1
        try:
            yield
        except BaseException:
            self._entries = snapshot
            raise
        finally:
            self._depth = 0
        self._commit()

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._entries)

    def _after_write(self) -> None:
        if not self._depth:
            self._commit()

    def _commit(self) -> None:
        pass


class JsonFileStorage(InMemoryStorage):
    """Substrate persisted as a single JSON document, rewritten on every commit."""

    def __init__(self, path: Path) -> None:
        self._path = path
        super().__init__(self._load(path))

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            document = json.loads(path.read_text(encoding="utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            get_logger("storage").error("state_read_failed", path=str(path), error=str(exc))
            raise StateFileError(path, str(exc)) from exc
        if not isinstance(document, dict):
            get_logger("storage").error("state_read_failed", path=str(path), error="not an object")
            raise StateFileError(path, "top-level value must be a JSON object")
        return document

    @property
    def path(self) -> Path:
        return self._path

    def _commit(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._entries, handle, sort_keys=True, indent=2)
            os.replace(tmp_name, self._path)
        except OSError:
            get_logger("storage").error("state_write_failed", path=str(self._path))
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

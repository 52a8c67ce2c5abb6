"""Persistence for the checklist: one JSON array file, one in-memory copy."""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from checklist_plugin.common.io import read_json, write_json
from checklist_plugin.common.models import ChecklistItem

_LOGGER = logging.getLogger(__name__)

ReplaceListener = Callable[[list[ChecklistItem]], None]


class ChecklistFileError(RuntimeError):
    """The checklist file exists but does not hold a JSON array."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot load checklist from {path}: {reason}")
        self.path = path
        self.reason = reason


class ChecklistItemNotFound(KeyError):
    """No checklist item carries the requested name."""


def _item_name(item: Any) -> Any:
    return item.get("name") if isinstance(item, dict) else None


class ChecklistStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._items: list[ChecklistItem] = []
        self._lock = threading.RLock()
        self._listeners: list[ReplaceListener] = []

    def load(self) -> list[ChecklistItem]:
        if not self.path.exists():
            items: list[ChecklistItem] = []
        else:
            try:
                items = read_json(self.path)
            except ValueError as exc:
                raise ChecklistFileError(self.path, f"invalid JSON ({exc})") from exc
            if not isinstance(items, list):
                raise ChecklistFileError(self.path, f"expected a JSON array, got {type(items).__name__}")
        with self._lock:
            self._items = items
        _LOGGER.debug("Loaded %d checklist items from %s", len(items), self.path)
        return self.items()

    def save(self) -> None:
        with self._lock:
            write_json(self.path, self._items)

    def items(self) -> list[ChecklistItem]:
        with self._lock:
            return copy.deepcopy(self._items)

    def find(self, name: str) -> int | None:
        with self._lock:
            for index, item in enumerate(self._items):
                if _item_name(item) == name:
                    return index
        return None

    def get(self, name: str) -> ChecklistItem | None:
        with self._lock:
            index = self.find(name)
            if index is None:
                return None
            return copy.deepcopy(self._items[index])

    def set_checked(self, name: str, checked: bool) -> ChecklistItem:
        with self._lock:
            index = self.find(name)
            if index is None:
                raise ChecklistItemNotFound(name)
            self._items[index]["checked"] = checked
            self.save()
            return copy.deepcopy(self._items[index])

    def replace(self, items: Iterable[ChecklistItem]) -> list[ChecklistItem]:
        with self._lock:
            self._items = list(items)
            self.save()
            snapshot = copy.deepcopy(self._items)
        for listener in list(self._listeners):
            listener(copy.deepcopy(snapshot))
        return snapshot

    def subscribe(self, listener: ReplaceListener) -> None:
        self._listeners.append(listener)

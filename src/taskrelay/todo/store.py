"""JSON-file backed to-do list."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from taskrelay.monitoring.logging import get_logger

logger = get_logger(__name__)

STATUS_NOT_DONE = "not done"
STATUS_COMPLETED = "completed"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class TodoIndexError(IndexError):
    """Raised when a task number does not exist."""


class TodoFileError(ValueError):
    """Raised when the to-do file is not a JSON list of task objects."""


@dataclass
class TodoItem:
    task: str
    status: str = STATUS_NOT_DONE
    timestamp: str = ""

    @property
    def done(self) -> bool:
        return self.status == STATUS_COMPLETED


class TodoStore:
    """To-do items persisted as a JSON list; task numbers are 1-based."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._items: List[TodoItem] = self._load()

    def _load(self) -> List[TodoItem]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError as exc:
            raise TodoFileError(f"{self.path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, list):
            raise TodoFileError(f"{self.path} must contain a JSON list of tasks")

        items = []
        for number, entry in enumerate(raw, start=1):
            if not isinstance(entry, dict):
                raise TodoFileError(f"{self.path}: task {number} is not an object")
            items.append(
                TodoItem(
                    task=str(entry.get("task", "")),
                    status=entry.get("status", STATUS_NOT_DONE),
                    timestamp=entry.get("timestamp", ""),
                )
            )
        return items

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [asdict(item) for item in self._items]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def items(self) -> List[TodoItem]:
        return list(self._items)

    def _index(self, number: int) -> int:
        if number < 1 or number > len(self._items):
            raise TodoIndexError(f"No task number {number} (have {len(self._items)})")
        return number - 1

    def add(self, text: str, now: Optional[datetime] = None) -> TodoItem:
        text = text.strip()
        if not text:
            raise ValueError("Task text cannot be empty")
        item = TodoItem(
            task=text,
            timestamp=(now or datetime.now()).strftime(TIMESTAMP_FORMAT),
        )
        self._items.append(item)
        self.save()
        logger.debug("todo.added", task=text, count=len(self._items))
        return item

    def complete(self, number: int) -> TodoItem:
        item = self._items[self._index(number)]
        item.status = STATUS_COMPLETED
        self.save()
        return item

    def delete(self, number: int) -> TodoItem:
        item = self._items.pop(self._index(number))
        self.save()
        return item

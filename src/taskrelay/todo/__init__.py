"""Local to-do list manager."""

from .store import TodoFileError, TodoIndexError, TodoItem, TodoStore

__all__ = [
    "TodoFileError",
    "TodoIndexError",
    "TodoItem",
    "TodoStore",
]

"""Board and item types shared by the Monday client and the report builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterator, Optional, Tuple


class StatusCategory(Enum):
    """Status buckets derived from a free-text status label."""

    COMPLETED = ("✅", "Completed")
    WORKING_ON_IT = ("🟡", "Working on it")
    IN_PROGRESS = ("🚧", "In Progress")
    STUCK = ("⛔", "Stuck")
    NOT_STARTED = ("🕒", "Not Started")

    def __init__(self, glyph: str, label: str) -> None:
        self.glyph = glyph
        self.label = label

    @property
    def title(self) -> str:
        """Glyph and label, e.g. ``✅ Completed``."""
        return f"{self.glyph} {self.label}"


@dataclass(frozen=True)
class Item:
    """One task or subitem on a board.

    Attributes:
        name: Display label
        status_text: Raw text of the status column ("" when missing)
        due_date: Optional due date
        assignee: Optional assignee label
        children: Ordered subitems
        board_name: Board the item was fetched from, when known
        item_id: Monday item identifier, when known
    """

    name: str
    status_text: str = ""
    due_date: Optional[date] = None
    assignee: Optional[str] = None
    children: Tuple["Item", ...] = field(default_factory=tuple)
    board_name: Optional[str] = None
    item_id: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept any iterable of children but store an immutable tuple
        if self.children is None:
            object.__setattr__(self, "children", ())
        elif not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.status_text is None:
            object.__setattr__(self, "status_text", "")

    def walk(self) -> Iterator["Item"]:
        """Yield this item and every descendant, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Board:
    """A Monday.com board."""

    id: str
    name: str

    @property
    def is_subitem_board(self) -> bool:
        return self.name.startswith("Subitems of")

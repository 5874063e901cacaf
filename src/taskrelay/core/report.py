"""Task report builder: hierarchical status sections and flat task lists.

Everything here is pure: items in, lines out. The current day is passed in
by the caller so due-date colouring stays deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from taskrelay.core.items import Item, StatusCategory
from taskrelay.core.status import DEFAULT_CLASSIFIER, StatusClassifier, classify
from taskrelay.utils.config import DEFAULT_TIMEZONE
from taskrelay.utils.display import date_epoch, escape_slack

NONE_PLACEHOLDER = "None."

# Hierarchical report order; IN_PROGRESS only appears in the flat reports
SECTION_ORDER: Tuple[StatusCategory, ...] = (
    StatusCategory.COMPLETED,
    StatusCategory.WORKING_ON_IT,
    StatusCategory.STUCK,
    StatusCategory.NOT_STARTED,
)

FLAT_SUMMARY_ORDER: Tuple[StatusCategory, ...] = (
    StatusCategory.COMPLETED,
    StatusCategory.IN_PROGRESS,
    StatusCategory.WORKING_ON_IT,
    StatusCategory.NOT_STARTED,
)

UNFINISHED_ORDER: Tuple[StatusCategory, ...] = (
    StatusCategory.STUCK,
    StatusCategory.IN_PROGRESS,
    StatusCategory.WORKING_ON_IT,
    StatusCategory.NOT_STARTED,
)

ROOT_BULLET = "•"
BRANCH = "├"
LAST_BRANCH = "└"
PIPE = "│"


class DueStatus(Enum):
    """Marker appended to a due-date annotation."""

    OVERDUE = "🔴"
    ON_TRACK = "🟢"

    @property
    def marker(self) -> str:
        return self.value


@dataclass(frozen=True)
class Section:
    """One category's block of a report."""

    category: StatusCategory
    lines: Tuple[str, ...]
    empty: bool = False

    @property
    def label(self) -> str:
        return self.category.title

    @property
    def body(self) -> str:
        return "\n".join(self.lines)


@dataclass
class CategorizedItems:
    """Top-level items partitioned by category, in input order."""

    buckets: Dict[StatusCategory, List[Item]] = field(
        default_factory=lambda: {category: [] for category in StatusCategory}
    )

    def __getitem__(self, category: StatusCategory) -> List[Item]:
        return self.buckets[category]

    @property
    def completed(self) -> List[Item]:
        return self.buckets[StatusCategory.COMPLETED]

    @property
    def in_progress(self) -> List[Item]:
        return self.buckets[StatusCategory.IN_PROGRESS]

    @property
    def working_on_it(self) -> List[Item]:
        return self.buckets[StatusCategory.WORKING_ON_IT]

    @property
    def stuck(self) -> List[Item]:
        return self.buckets[StatusCategory.STUCK]

    @property
    def not_started(self) -> List[Item]:
        return self.buckets[StatusCategory.NOT_STARTED]


def all_match(
    item: Item,
    category: StatusCategory,
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> bool:
    """True when the item and its whole subtree are in ``category``."""
    if classify(item, classifier) is not category:
        return False
    return all(all_match(child, category, classifier) for child in item.children)


def any_match(
    item: Item,
    category: StatusCategory,
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> bool:
    """True when the item or any descendant is in ``category``."""
    if classify(item, classifier) is category:
        return True
    return any(any_match(child, category, classifier) for child in item.children)


def due_status(due: date, today: date) -> DueStatus:
    return DueStatus.OVERDUE if due < today else DueStatus.ON_TRACK


def format_due_annotation(item: Item, today: date, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Slack date token for the item's due date, or "" without one."""
    if item.due_date is None:
        return ""
    status = due_status(item.due_date, today)
    epoch = date_epoch(item.due_date, tz_name)
    fallback = item.due_date.isoformat()
    return f" (Due: *<!date^{epoch}^{{date_short}}|{fallback}>* {status.marker})"


def _qualifies(item: Item, category: StatusCategory, classifier: StatusClassifier) -> bool:
    if category is StatusCategory.COMPLETED:
        return all_match(item, category, classifier)
    if classify(item, classifier) is category:
        return True
    return any(any_match(child, category, classifier) for child in item.children)


def _visible_children(
    item: Item, category: StatusCategory, classifier: StatusClassifier
) -> List[Item]:
    # Completed hides partially finished subtrees; other categories show everything
    if category is StatusCategory.COMPLETED:
        return [child for child in item.children if all_match(child, category, classifier)]
    return list(item.children)


def _format_line(
    item: Item,
    prefix: str,
    today: date,
    tz_name: str,
    classifier: StatusClassifier,
) -> str:
    due = format_due_annotation(item, today, tz_name)
    glyph = classify(item, classifier).glyph
    return f"{prefix} {escape_slack(item.name)}{due} – {glyph}"


def _render_children(
    item: Item,
    category: StatusCategory,
    guide: str,
    today: date,
    tz_name: str,
    classifier: StatusClassifier,
    lines: List[str],
) -> None:
    children = _visible_children(item, category, classifier)
    for index, child in enumerate(children):
        is_last = index == len(children) - 1
        connector = LAST_BRANCH if is_last else BRANCH
        lines.append(_format_line(child, f"{guide}{connector}", today, tz_name, classifier))
        child_guide = guide + ("   " if is_last else f"{PIPE}  ")
        _render_children(child, category, child_guide, today, tz_name, classifier, lines)


def render_hierarchy(
    items: Sequence[Item],
    category: StatusCategory,
    today: date,
    *,
    tz_name: str = DEFAULT_TIMEZONE,
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> List[str]:
    """Render the items that belong under ``category`` as a tree of lines.

    A top-level item appears under COMPLETED only if its whole subtree is
    completed, and then only completed children are drawn. Under any other
    category it appears if it or any descendant matches, and its full subtree
    is drawn.
    """
    lines: List[str] = []
    for item in items:
        if not _qualifies(item, category, classifier):
            continue
        lines.append(_format_line(item, ROOT_BULLET, today, tz_name, classifier))
        _render_children(item, category, "", today, tz_name, classifier, lines)
    return lines


def _section(category: StatusCategory, lines: List[str]) -> Section:
    if not lines:
        return Section(category=category, lines=(NONE_PLACEHOLDER,), empty=True)
    return Section(category=category, lines=tuple(lines))


def build_sections(
    items: Sequence[Item],
    today: date,
    *,
    tz_name: str = DEFAULT_TIMEZONE,
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> List[Section]:
    """Completed, Working on it, Stuck and Not Started sections, always all four."""
    return [
        _section(
            category,
            render_hierarchy(items, category, today, tz_name=tz_name, classifier=classifier),
        )
        for category in SECTION_ORDER
    ]


def categorize(
    items: Iterable[Item],
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> CategorizedItems:
    """Partition top-level items by their own status (subitems are ignored)."""
    result = CategorizedItems()
    for item in items:
        result[classify(item, classifier)].append(item)
    return result


def unfinished(categorized: CategorizedItems) -> List[Item]:
    """Stuck, In Progress, Working on it, then Not Started items."""
    ordered: List[Item] = []
    for category in UNFINISHED_ORDER:
        ordered.extend(categorized[category])
    return ordered


def format_task_line(item: Item) -> str:
    parts = [f"*{escape_slack(item.name)}*"]
    if item.assignee:
        parts.append(f" (Assignee: {escape_slack(item.assignee)})")
    if item.due_date is not None:
        parts.append(f" (Due: {item.due_date.isoformat()})")
    if item.board_name:
        parts.append(f" _(Board: {escape_slack(item.board_name)})_")
    return "".join(parts)


def format_task_list(items: Sequence[Item]) -> List[str]:
    if not items:
        return [NONE_PLACEHOLDER]
    return [format_task_line(item) for item in items]


def unfinished_lines(
    items: Iterable[Item],
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> List[str]:
    return format_task_list(unfinished(categorize(items, classifier)))


def build_flat_summary(
    items: Iterable[Item],
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> List[Section]:
    """Workspace-wide summary: one flat section per category, no subitems."""
    categorized = categorize(items, classifier)
    sections: List[Section] = []
    for category in FLAT_SUMMARY_ORDER:
        bucket = categorized[category]
        sections.append(
            Section(
                category=category,
                lines=tuple(format_task_list(bucket)),
                empty=not bucket,
            )
        )
    return sections


def count_by_category(
    items: Iterable[Item],
    classifier: StatusClassifier = DEFAULT_CLASSIFIER,
) -> Dict[StatusCategory, int]:
    """Number of items (subitems included) per category."""
    counts = {category: 0 for category in StatusCategory}
    for item in items:
        for node in item.walk():
            counts[classify(node, classifier)] += 1
    return counts

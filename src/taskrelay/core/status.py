"""Status classification for board items.

Monday.com exposes status as a free-text label, so the default classifier
matches keywords. Rendering code only depends on the ``StatusClassifier``
protocol so a structured status source can be swapped in.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple, runtime_checkable

from taskrelay.core.items import Item, StatusCategory


@runtime_checkable
class StatusClassifier(Protocol):
    """Maps a status label to a StatusCategory."""

    def classify(self, status_text: Optional[str]) -> StatusCategory:
        ...


class KeywordStatusClassifier:
    """Case-insensitive keyword matching, first rule wins."""

    RULES: Tuple[Tuple[Tuple[str, ...], StatusCategory], ...] = (
        (("done", "complete"), StatusCategory.COMPLETED),
        (("stuck",), StatusCategory.STUCK),
        (("working on it",), StatusCategory.WORKING_ON_IT),
        (("progress",), StatusCategory.IN_PROGRESS),
    )

    def classify(self, status_text: Optional[str]) -> StatusCategory:
        text = (status_text or "").lower()
        if not text:
            return StatusCategory.NOT_STARTED
        for keywords, category in self.RULES:
            if any(keyword in text for keyword in keywords):
                return category
        return StatusCategory.NOT_STARTED


DEFAULT_CLASSIFIER: StatusClassifier = KeywordStatusClassifier()


def classify(item: Item, classifier: StatusClassifier = DEFAULT_CLASSIFIER) -> StatusCategory:
    """Category of a single item (its children are not considered)."""
    return classifier.classify(item.status_text)


def status_glyph(item: Item, classifier: StatusClassifier = DEFAULT_CLASSIFIER) -> str:
    return classify(item, classifier).glyph

"""Turn report sections into chat messages."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from taskrelay.core.report import NONE_PLACEHOLDER, Section
from taskrelay.interfaces.message_client import FormattedMessage
from taskrelay.utils.display import format_last_updated

SUMMARY_FALLBACK = "Project Summary"
UNFINISHED_FALLBACK = "Unfinished Tasks"
ALL_BOARDS = "All Boards"


def last_updated_footer(now: datetime) -> str:
    return f"Last updated: {format_last_updated(now)}"


def _section_body(lines: Sequence[str]) -> str:
    if not lines or list(lines) == [NONE_PLACEHOLDER]:
        return f"_{NONE_PLACEHOLDER}_"
    return "\n".join(lines)


def section_text(section: Section) -> str:
    """Bold label line followed by the section's lines."""
    return f"*{section.label}:*\n{_section_body(section.lines)}"


def build_summary_message(
    board_name: str,
    sections: Sequence[Section],
    now: datetime,
) -> FormattedMessage:
    """Hierarchical per-board summary: one block per status section."""
    return FormattedMessage(
        text=SUMMARY_FALLBACK,
        header=f"📊 {board_name}",
        divider=True,
        sections=[section_text(section) for section in sections],
        footer=last_updated_footer(now),
    )


def build_workspace_summary_message(
    sections: Sequence[Section],
    now: datetime,
) -> FormattedMessage:
    """Flat summary across every board."""
    return build_summary_message(f"Project Summary ({ALL_BOARDS})", sections, now)


def build_unfinished_message(
    scope: str,
    lines: Sequence[str],
    now: datetime,
) -> FormattedMessage:
    """Flat list of unfinished tasks for one board or ``All Boards``."""
    return FormattedMessage(
        text=UNFINISHED_FALLBACK,
        header=f"🚩 Unfinished Tasks ({scope})",
        divider=True,
        sections=[_section_body(lines)],
        footer=last_updated_footer(now),
    )

"""Chat-agnostic report message and the protocol for posting it.

Report builders return a ``FormattedMessage``; a ``MessageClient`` renders
it for its platform (Block Kit for Slack) and posts it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, runtime_checkable


@dataclass
class FormattedMessage:
    """A report ready to post.

    Attributes:
        text: Notification fallback shown where blocks are not rendered
        header: Title line, e.g. ``📊 Roadmap``
        sections: Mrkdwn bodies, posted as one block each
        footer: Small print under the report ("Last updated: ...")
        divider: Draw a rule between the header and the first section
    """

    text: str
    header: Optional[str] = None
    sections: List[str] = field(default_factory=list)
    footer: Optional[str] = None
    divider: bool = False


@dataclass
class MessageResult:
    """Outcome of a post; ``message_id`` is the Slack ``ts``."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@runtime_checkable
class MessageClient(Protocol):
    """Anything that can post a report to a channel or user."""

    def send_message(
        self,
        channel: str,
        message: FormattedMessage | str,
        thread_id: Optional[str] = None,
    ) -> MessageResult:
        """Post ``message`` to ``channel`` (a user ID posts a direct message)."""
        ...

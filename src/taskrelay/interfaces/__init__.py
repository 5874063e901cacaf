"""External interfaces - Slack bot, message formatting and CLI"""

from .message_client import (
    FormattedMessage,
    MessageClient,
    MessageResult,
)
from .slack_client import SlackMessageClient

__all__ = [
    "FormattedMessage",
    "MessageClient",
    "MessageResult",
    "SlackMessageClient",
]

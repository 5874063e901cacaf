"""Slack adapter: Block Kit rendering plus the Web API calls the bot uses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from taskrelay.interfaces.message_client import FormattedMessage, MessageResult
from taskrelay.monitoring.logging import get_logger

logger = get_logger(__name__)

# Block Kit limits
HEADER_LIMIT = 150
SECTION_LIMIT = 3000


class SlackMessageClient:
    """MessageClient backed by a Slack ``WebClient``.

    Besides posting reports it opens and updates the /monday modals and
    lists the channels those modals offer.
    """

    def __init__(self, web_client: WebClient):
        self._client = web_client

    @property
    def raw_client(self) -> WebClient:
        return self._client

    def send_message(
        self,
        channel: str,
        message: FormattedMessage | str,
        thread_id: Optional[str] = None,
    ) -> MessageResult:
        """Post a report or plain text; Slack errors come back in the result."""
        kwargs: Dict[str, Any] = {"channel": channel, "mrkdwn": True}
        if isinstance(message, str):
            kwargs["text"] = message
        else:
            kwargs["text"] = message.text
            blocks = self.format_to_blocks(message)
            if blocks:
                kwargs["blocks"] = blocks
        if thread_id:
            kwargs["thread_ts"] = thread_id

        try:
            response = self._client.chat_postMessage(**kwargs)
        except SlackApiError as e:
            logger.error("slack_client.send_message.failed", channel=channel, error=str(e))
            return MessageResult(success=False, error=str(e))
        except Exception as e:
            logger.error("slack_client.send_message.exception", channel=channel, error=str(e))
            return MessageResult(success=False, error=str(e))
        return MessageResult(success=True, message_id=response.get("ts"))

    def open_view(self, trigger_id: str, view: Dict[str, Any]) -> bool:
        """Open a modal for the user who triggered an interaction."""
        try:
            self._client.views_open(trigger_id=trigger_id, view=view)
            return True
        except SlackApiError as e:
            logger.error("slack_client.open_view.failed", error=str(e))
            return False

    def update_view(self, view_id: str, view: Dict[str, Any]) -> bool:
        """Replace the contents of an open modal."""
        try:
            self._client.views_update(view_id=view_id, view=view)
            return True
        except SlackApiError as e:
            logger.error("slack_client.update_view.failed", view_id=view_id, error=str(e))
            return False

    def list_channels(self, types: str = "public_channel,private_channel") -> List[Tuple[str, str]]:
        """Return ``(id, name)`` for every channel visible to the bot."""
        channels: List[Tuple[str, str]] = []
        cursor: Optional[str] = None
        while True:
            kwargs: Dict[str, Any] = {"types": types, "exclude_archived": True, "limit": 200}
            if cursor:
                kwargs["cursor"] = cursor
            response = self._client.conversations_list(**kwargs)
            for channel in response.get("channels", []):
                channels.append((channel["id"], channel.get("name", channel["id"])))
            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break
        return channels

    def format_to_blocks(self, message: FormattedMessage) -> List[Dict[str, Any]]:
        """Header, optional divider, one mrkdwn section per body, context footer."""
        blocks: List[Dict[str, Any]] = []
        if message.header:
            blocks.append({
                "type": "header",
                "text": {"type": "plain_text", "text": message.header[:HEADER_LIMIT]},
            })
        if message.divider:
            blocks.append({"type": "divider"})
        blocks.extend(
            {"type": "section", "text": {"type": "mrkdwn", "text": _truncate(body, SECTION_LIMIT)}}
            for body in message.sections
        )
        if message.footer:
            blocks.append({
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": message.footer}],
            })
        return blocks


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    # Cut on a line boundary so tree lines are never split mid-way
    cut = text.rfind("\n", 0, limit - 2)
    if cut <= 0:
        cut = limit - 2
    return text[:cut] + "\n…"

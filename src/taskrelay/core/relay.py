"""Fetch board data, build reports and post them to chat."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from taskrelay.core.report import build_flat_summary, build_sections, unfinished_lines
from taskrelay.core.status import DEFAULT_CLASSIFIER, StatusClassifier
from taskrelay.integrations.monday import MondayClient
from taskrelay.interfaces.message_client import FormattedMessage, MessageClient, MessageResult
from taskrelay.interfaces.report_messages import (
    ALL_BOARDS,
    build_summary_message,
    build_unfinished_message,
    build_workspace_summary_message,
)
from taskrelay.monitoring.logging import get_logger
from taskrelay.utils.config import DEFAULT_TIMEZONE
from taskrelay.utils.display import now_in_zone

logger = get_logger(__name__)

DEFAULT_BOARD_NAME = "Board"


class ReportRelay:
    """Builds the four report kinds and posts them through a MessageClient."""

    def __init__(
        self,
        monday: MondayClient,
        message_client: Optional[MessageClient] = None,
        tz_name: str = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None,
        classifier: StatusClassifier = DEFAULT_CLASSIFIER,
    ):
        self.monday = monday
        self.message_client = message_client
        self.tz_name = tz_name
        self.classifier = classifier
        self._clock = clock or (lambda: now_in_zone(self.tz_name))

    def now(self) -> datetime:
        return self._clock()

    def _board_name(self, board_id: str) -> str:
        board = self.monday.get_board(board_id)
        return board.name if board else DEFAULT_BOARD_NAME

    def board_summary(self, board_id: str) -> FormattedMessage:
        """Hierarchical summary of one board."""
        board_name = self._board_name(board_id)
        items = self.monday.fetch_items(board_id, board_name=board_name)
        now = self.now()
        sections = build_sections(
            items, now.date(), tz_name=self.tz_name, classifier=self.classifier
        )
        return build_summary_message(board_name, sections, now)

    def board_unfinished(self, board_id: str) -> FormattedMessage:
        """Flat list of one board's unfinished top-level tasks."""
        board_name = self._board_name(board_id)
        items = self.monday.fetch_items(board_id, board_name=board_name)
        lines = unfinished_lines(items, self.classifier)
        return build_unfinished_message(board_name, lines, self.now())

    def workspace_summary(self) -> FormattedMessage:
        """Flat summary across every board."""
        items = self.monday.fetch_all_items()
        sections = build_flat_summary(items, self.classifier)
        return build_workspace_summary_message(sections, self.now())

    def workspace_unfinished(self) -> FormattedMessage:
        """Unfinished top-level tasks across every board."""
        items = self.monday.fetch_all_items()
        lines = unfinished_lines(items, self.classifier)
        return build_unfinished_message(ALL_BOARDS, lines, self.now())

    def _post(self, channel: str, message: FormattedMessage, kind: str) -> MessageResult:
        if self.message_client is None:
            raise RuntimeError("ReportRelay has no message client to post with")
        result = self.message_client.send_message(channel, message)
        if result.success:
            logger.info("relay.posted", kind=kind, channel=channel)
        else:
            logger.error("relay.post_failed", kind=kind, channel=channel, error=result.error)
        return result

    def send_board_summary(self, channel: str, board_id: str) -> MessageResult:
        return self._post(channel, self.board_summary(board_id), "board_summary")

    def send_board_unfinished(self, channel: str, board_id: str) -> MessageResult:
        return self._post(channel, self.board_unfinished(board_id), "board_unfinished")

    def send_workspace_summary(self, channel: str) -> MessageResult:
        return self._post(channel, self.workspace_summary(), "workspace_summary")

    def send_workspace_unfinished(self, channel: str) -> MessageResult:
        return self._post(channel, self.workspace_unfinished(), "workspace_unfinished")

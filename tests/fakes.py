"""Deterministic stand-ins for Slack and Monday.com collaborators."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from taskrelay.core.items import Board, Item
from taskrelay.interfaces.message_client import FormattedMessage, MessageResult

TZ = "America/New_York"
TODAY = date(2026, 10, 16)
NOW = datetime(2026, 10, 16, 9, 5, 3, tzinfo=ZoneInfo(TZ))


def make_item(
    name: str,
    status: str = "",
    *children: Item,
    due: Optional[date] = None,
    assignee: Optional[str] = None,
    board: Optional[str] = None,
) -> Item:
    return Item(
        name=name,
        status_text=status,
        due_date=due,
        assignee=assignee,
        children=children,
        board_name=board,
    )


class FakeMessageClient:
    """Records everything the bot and relay try to send."""

    def __init__(self, channels: Sequence[Tuple[str, str]] = (("C1", "general"), ("C2", "ops"))):
        self.sent: List[Tuple[str, FormattedMessage | str]] = []
        self.opened: List[Tuple[str, dict]] = []
        self.updated: List[Tuple[str, dict]] = []
        self.channels = list(channels)
        self.raw_client = None

    def send_message(self, channel, message, thread_id=None) -> MessageResult:
        self.sent.append((channel, message))
        return MessageResult(success=True, message_id=str(len(self.sent)))

    def open_view(self, trigger_id, view) -> bool:
        self.opened.append((trigger_id, view))
        return True

    def update_view(self, view_id, view) -> bool:
        self.updated.append((view_id, view))
        return True

    def list_channels(self, types: str = "public_channel,private_channel"):
        return list(self.channels)


class FakeMonday:
    """In-memory MondayClient replacement."""

    def __init__(self, boards: Sequence[Board], items: Dict[str, List[Item]]):
        self.boards = list(boards)
        self.items = items
        self.fetched: List[str] = []

    def list_boards(self) -> List[Board]:
        return list(self.boards)

    def selectable_boards(self) -> List[Board]:
        return [board for board in self.boards if not board.is_subitem_board]

    def get_board(self, board_id: str) -> Optional[Board]:
        for board in self.boards:
            if board.id == str(board_id):
                return board
        return None

    def fetch_items(self, board_id: str, board_name: Optional[str] = None) -> List[Item]:
        self.fetched.append(str(board_id))
        return [replace(item, board_name=board_name) for item in self.items.get(str(board_id), [])]

    def fetch_all_items(self) -> List[Item]:
        items: List[Item] = []
        for board in self.selectable_boards():
            items.extend(self.fetch_items(board.id, board_name=board.name))
        return items


class FakeSocketClient:
    """Captures socket mode acknowledgements."""

    def __init__(self):
        self.responses = []
        self.socket_mode_request_listeners = []
        self.connected = False

    def send_socket_mode_response(self, response):
        self.responses.append(response)

    def connect(self):
        self.connected = True

    def close(self):
        self.connected = False

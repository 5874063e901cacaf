"""Block Kit modal definitions for the /monday command."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from taskrelay.core.items import Board
from taskrelay.core.models import Reminder, ReminderFrequency

BOARD_ACTION_MODAL = "choose_board_action_modal"
CHANNEL_MODAL = "choose_channel_modal"
SET_REMINDER_MODAL = "set_reminder_modal"
MANAGE_REMINDERS_MODAL = "manage_reminders_modal"

DELETE_REMINDER_PREFIX = "delete_reminder_"

ACTION_SUMMARY = "summary"
ACTION_GET_STUCK = "get_stuck"
ACTION_SET_REMINDER = "set_reminder"
ACTION_VIEW_REMINDERS = "view_reminders"

ACTION_CHOICES: Tuple[Tuple[str, str], ...] = (
    ("Summary", ACTION_SUMMARY),
    ("Get Stuck", ACTION_GET_STUCK),
    ("Set Scheduled Reminder", ACTION_SET_REMINDER),
    ("View/Cancel Scheduled Reminders", ACTION_VIEW_REMINDERS),
)

FREQUENCY_CHOICES: Tuple[Tuple[str, str], ...] = (
    ("Daily", ReminderFrequency.DAILY.value),
    ("Weekly (Monday)", ReminderFrequency.WEEKLY.value),
)

# Slack caps static_select menus at 100 options
MAX_OPTIONS = 100


def _plain(text: str) -> Dict[str, Any]:
    return {"type": "plain_text", "text": text}


def _option(text: str, value: str) -> Dict[str, Any]:
    return {"text": _plain(text[:75]), "value": value}


def _select_input(block_id: str, action_id: str, label: str, options: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "type": "input",
        "block_id": block_id,
        "label": _plain(label),
        "element": {
            "type": "static_select",
            "action_id": action_id,
            "options": options[:MAX_OPTIONS],
        },
    }


def _channel_options(channels: Iterable[Tuple[str, str]]) -> List[Dict[str, Any]]:
    return [_option(f"#{name}", channel_id) for channel_id, name in channels]


def board_action_modal(boards: Sequence[Board]) -> Dict[str, Any]:
    """First step: pick a board and what to do with it."""
    return {
        "type": "modal",
        "callback_id": BOARD_ACTION_MODAL,
        "title": _plain("Monday Bot"),
        "submit": _plain("Next"),
        "close": _plain("Cancel"),
        "blocks": [
            _select_input(
                "board_block",
                "board_select",
                "Select Monday Board",
                [_option(board.name, board.id) for board in boards],
            ),
            _select_input(
                "action_block",
                "action_select",
                "Choose Action",
                [_option(text, value) for text, value in ACTION_CHOICES],
            ),
        ],
    }


def channel_modal(channels: Iterable[Tuple[str, str]], board_id: str, action: str) -> Dict[str, Any]:
    """Pick the channel a summary or get-stuck report is posted to."""
    return {
        "type": "modal",
        "callback_id": CHANNEL_MODAL,
        "private_metadata": json.dumps({"boardId": board_id, "action": action}),
        "title": _plain("Select Channel"),
        "submit": _plain("Send"),
        "close": _plain("Cancel"),
        "blocks": [
            _select_input("channel_block", "channel_select", "Choose a channel:", _channel_options(channels)),
        ],
    }


def reminder_modal(channels: Iterable[Tuple[str, str]], board_id: str) -> Dict[str, Any]:
    """Frequency, time and channel for a new scheduled reminder."""
    return {
        "type": "modal",
        "callback_id": SET_REMINDER_MODAL,
        "private_metadata": json.dumps({"boardId": board_id}),
        "title": _plain("Set Scheduled Reminder"),
        "submit": _plain("Save"),
        "close": _plain("Cancel"),
        "blocks": [
            _select_input(
                "frequency_block",
                "frequency_select",
                "Frequency",
                [_option(text, value) for text, value in FREQUENCY_CHOICES],
            ),
            {
                "type": "input",
                "block_id": "time_block",
                "label": _plain("Time (HH:MM, 24h)"),
                "element": {
                    "type": "plain_text_input",
                    "action_id": "time_input",
                    "placeholder": _plain("e.g. 09:00"),
                },
            },
            _select_input("channel_block", "channel_select", "Choose a channel:", _channel_options(channels)),
        ],
    }


def reminder_line(index: int, reminder: Reminder) -> str:
    board = reminder.board_name or reminder.board_id
    return (
        f"*{index}.* Board: {board}, Channel: <#{reminder.channel_id}>, "
        f"Cron: `{reminder.cron_expression}`"
    )


def manage_reminders_modal(reminders: Sequence[Reminder]) -> Dict[str, Any]:
    """List reminders with a Delete button each."""
    blocks: List[Dict[str, Any]] = []
    if not reminders:
        blocks.append({"type": "section", "text": _plain("No scheduled reminders.")})
    for index, reminder in enumerate(reminders, start=1):
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": reminder_line(index, reminder)},
            "accessory": {
                "type": "button",
                "text": _plain("Delete"),
                "style": "danger",
                "action_id": f"{DELETE_REMINDER_PREFIX}{reminder.id}",
                "value": str(reminder.id),
            },
        })
    return {
        "type": "modal",
        "callback_id": MANAGE_REMINDERS_MODAL,
        "title": _plain("Manage Reminders"),
        "close": _plain("Close"),
        "blocks": blocks,
    }


def selected_value(state: Dict[str, Any], block_id: str, action_id: str) -> str | None:
    """Read a static_select or plain_text_input value from view state."""
    element = (state.get("values", {}).get(block_id) or {}).get(action_id) or {}
    option = element.get("selected_option")
    if option:
        return option.get("value")
    return element.get("value")


def read_metadata(view: Dict[str, Any]) -> Dict[str, Any]:
    raw = view.get("private_metadata") or "{}"
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return {}

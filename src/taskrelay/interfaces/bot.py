"""Slack bot interface relaying Monday.com board reports"""

from typing import Any, Callable, Dict, Optional, Tuple

import requests
from slack_sdk import WebClient
from slack_sdk.socket_mode import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse

from taskrelay.core.relay import ReportRelay
from taskrelay.integrations.monday import MondayAPIError, MondayClient
from taskrelay.interfaces import views
from taskrelay.interfaces.slack_client import SlackMessageClient
from taskrelay.monitoring.logging import get_logger
from taskrelay.scheduling.reminders import ReminderScheduler
from taskrelay.scheduling.time_utils import (
    TIME_FORMAT_HINT,
    TIME_PATTERN,
    describe_frequency,
)

logger = get_logger(__name__)

SLASH_COMMAND = "/monday"
USAGE = (
    "*Usage:*\n"
    "`/monday` - pick a board and an action\n"
    "`/monday summary` - project summary across all boards\n"
    "`/monday stuck` - unfinished tasks across all boards"
)
REMINDER_FAILED = "❌ Failed to set scheduled reminder. Please try again."
NEXT_VIEW_FAILED = "Could not load channels or reminders from Slack. Please try again."

ViewResponse = Tuple[Optional[Dict[str, Any]], Optional[Callable[[], None]]]


class SlackBot:
    """Slack bot for Monday.com board reports"""

    def __init__(
        self,
        bot_token: str,
        app_token: str,
        monday: MondayClient,
        relay: ReportRelay,
        reminders: ReminderScheduler,
        message_client: Optional[SlackMessageClient] = None,
        socket_mode_client: Optional[SocketModeClient] = None,
    ):
        """Initialize Slack bot"""
        self.bot_token = bot_token
        self.app_token = app_token
        self.monday = monday
        self.relay = relay
        self.reminders = reminders
        if message_client is None:
            message_client = SlackMessageClient(WebClient(token=bot_token))
        self.message_client = message_client
        self.client = message_client.raw_client
        self.socket_mode_client = socket_mode_client or SocketModeClient(
            app_token=app_token,
            web_client=self.client,
        )
        if self.relay.message_client is None:
            self.relay.message_client = self.message_client

    def start(self):
        """Start bot and listen for events"""
        self.socket_mode_client.socket_mode_request_listeners.append(self.handle_event)
        self.socket_mode_client.connect()
        logger.info("Slack bot started and listening for events")

    def stop(self):
        """Stop bot"""
        self.socket_mode_client.close()
        logger.info("Slack bot stopped")

    def handle_event(self, client: SocketModeClient, req: SocketModeRequest):
        """Handle incoming Slack events"""
        try:
            if req.type == "interactive":
                self.handle_interactive(client, req)
                return

            # Acknowledge immediately to meet Slack's 3-second requirement
            client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))

            if req.type == "slash_commands":
                self.handle_slash_command(req.payload)
        except Exception as e:
            logger.error(f"Error handling event: {e}", exc_info=True)

    def handle_interactive(self, client: SocketModeClient, req: SocketModeRequest):
        """Handle modal submissions and button clicks"""
        payload = req.payload
        kind = payload.get("type")

        if kind == "view_submission":
            try:
                response, followup = self.handle_view_submission(payload)
            except Exception as e:
                logger.error("bot.view_submission.failed", error=str(e), exc_info=True)
                response, followup = None, None
            client.send_socket_mode_response(
                SocketModeResponse(envelope_id=req.envelope_id, payload=response)
            )
            if followup:
                followup()
            return

        client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))
        if kind == "block_actions":
            self.handle_block_actions(payload)

    def handle_slash_command(self, payload: Dict[str, Any]):
        """Handle slash commands"""
        command = payload.get("command")
        text = (payload.get("text") or "").strip().lower()
        user = payload.get("user_id")
        channel = payload.get("channel_id")
        response_url = payload.get("response_url")

        logger.info(f"Slash command: {command} {text} from {user}")

        if command != SLASH_COMMAND:
            self.send_response(response_url, f"Unknown command: {command}")
            return

        try:
            if not text:
                self.open_board_picker(payload.get("trigger_id"), response_url)
            elif text == "summary":
                self.relay.send_workspace_summary(channel)
            elif text in ("stuck", "get_stuck"):
                self.relay.send_workspace_unfinished(channel)
            else:
                self.send_response(response_url, USAGE)
        except MondayAPIError as e:
            logger.error("bot.monday_failed", command=text, error=str(e))
            self.send_response(response_url, f"❌ Could not reach Monday.com: {e}")
        except Exception as e:
            logger.error(f"Error executing {command}: {e}", exc_info=True)
            self.send_response(response_url, f"Error executing {command}: {str(e)}")

    def open_board_picker(self, trigger_id: str, response_url: Optional[str] = None):
        """Open the board/action modal"""
        boards = self.monday.selectable_boards()
        if not boards:
            self.send_response(response_url, "No Monday boards are visible to this bot.")
            return
        self.message_client.open_view(trigger_id, views.board_action_modal(boards))

    def handle_view_submission(self, payload: Dict[str, Any]) -> ViewResponse:
        """Return the ack payload for a modal submission and any work to do after acking."""
        view = payload.get("view") or {}
        callback_id = view.get("callback_id")
        state = view.get("state") or {}
        user_id = (payload.get("user") or {}).get("id")

        if callback_id == views.BOARD_ACTION_MODAL:
            board_id = views.selected_value(state, "board_block", "board_select")
            action = views.selected_value(state, "action_block", "action_select")
            return self._next_view(board_id, action), None

        if callback_id == views.CHANNEL_MODAL:
            metadata = views.read_metadata(view)
            channel = views.selected_value(state, "channel_block", "channel_select")
            return None, lambda: self._post_board_report(
                channel, metadata.get("boardId"), metadata.get("action"), user_id
            )

        if callback_id == views.SET_REMINDER_MODAL:
            metadata = views.read_metadata(view)
            frequency = views.selected_value(state, "frequency_block", "frequency_select")
            time_text = (views.selected_value(state, "time_block", "time_input") or "").strip()
            channel = views.selected_value(state, "channel_block", "channel_select")
            if not TIME_PATTERN.match(time_text):
                return {"response_action": "errors", "errors": {"time_block": TIME_FORMAT_HINT}}, None
            return None, lambda: self._create_reminder(
                metadata.get("boardId"), channel, frequency, time_text, user_id
            )

        logger.debug("bot.view_submission.ignored", callback_id=callback_id)
        return None, None

    def _next_view(self, board_id: Optional[str], action: Optional[str]) -> Dict[str, Any]:
        try:
            modal = self._build_next_modal(board_id, action)
        except Exception as e:
            logger.error("bot.next_view.failed", board_id=board_id, action=action, error=str(e))
            return {"response_action": "errors", "errors": {"board_block": NEXT_VIEW_FAILED}}
        return {"response_action": "update", "view": modal}

    def _build_next_modal(self, board_id: Optional[str], action: Optional[str]) -> Dict[str, Any]:
        if action == views.ACTION_VIEW_REMINDERS:
            return views.manage_reminders_modal(self.reminders.list_reminders())
        if action == views.ACTION_SET_REMINDER:
            return views.reminder_modal(self.message_client.list_channels(), board_id)
        return views.channel_modal(self.message_client.list_channels(), board_id, action)

    def _post_board_report(self, channel: str, board_id: str, action: str, user_id: Optional[str]):
        try:
            if action == views.ACTION_SUMMARY:
                self.relay.send_board_summary(channel, board_id)
            else:
                self.relay.send_board_unfinished(channel, board_id)
        except Exception as e:
            logger.error("bot.report_failed", board_id=board_id, action=action, error=str(e))
            if user_id:
                self.message_client.send_message(user_id, f"❌ Failed to build the report: {e}")

    def _create_reminder(
        self,
        board_id: str,
        channel: str,
        frequency: str,
        time_text: str,
        user_id: Optional[str],
    ):
        try:
            board_name = None
            try:
                board = self.monday.get_board(board_id)
                board_name = board.name if board else None
            except MondayAPIError as e:
                logger.warning("bot.reminder.board_name_unavailable", board_id=board_id, error=str(e))

            self.reminders.add_reminder(
                board_id=board_id,
                channel_id=channel,
                frequency=frequency,
                time_of_day=time_text,
                board_name=board_name,
                created_by=user_id,
            )
            self.message_client.send_message(
                channel,
                f"⏰ Scheduled reminder set! A get stuck summary will be sent "
                f"{describe_frequency(frequency)} at {time_text}.",
            )
        except Exception as e:
            logger.error("bot.reminder.failed", board_id=board_id, error=str(e))
            if user_id:
                self.message_client.send_message(user_id, REMINDER_FAILED)

    def handle_block_actions(self, payload: Dict[str, Any]):
        """Handle Delete buttons in the reminder manager"""
        view_id = (payload.get("view") or {}).get("id")
        for action in payload.get("actions") or []:
            action_id = action.get("action_id", "")
            if not action_id.startswith(views.DELETE_REMINDER_PREFIX):
                continue
            try:
                reminder_id = int(action_id[len(views.DELETE_REMINDER_PREFIX):])
            except ValueError:
                logger.warning("bot.block_action.bad_id", action_id=action_id)
                continue
            if not self.reminders.remove_reminder(reminder_id):
                logger.info("bot.reminder.already_removed", reminder_id=reminder_id)
                continue
            if view_id:
                self.message_client.update_view(
                    view_id,
                    views.manage_reminders_modal(self.reminders.list_reminders()),
                )

    def send_response(self, response_url: Optional[str], message: str):
        """Reply to a slash command privately through its response URL"""
        if not response_url:
            logger.warning("send_response: no response_url, dropping message")
            return
        try:
            response = requests.post(
                response_url,
                json={"response_type": "ephemeral", "text": message},
                timeout=10,
            )
            if response.status_code != 200:
                logger.error(f"send_response: failed status={response.status_code} body={response.text[:500]}")
        except requests.RequestException as e:
            logger.error(f"send_response: exception {e}")

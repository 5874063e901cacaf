"""Main daemon running the Slack bot and reminder scheduler."""

from __future__ import annotations

import asyncio
import signal
import sys
import threading

from taskrelay.core.relay import ReportRelay
from taskrelay.integrations.monday import MondayClient
from taskrelay.interfaces.bot import SlackBot
from taskrelay.monitoring.logging import configure_logging, get_logger
from taskrelay.scheduling.reminders import ReminderScheduler
from taskrelay.storage.reminders import ReminderStore
from taskrelay.utils.config import ConfigError, get_config

logger = get_logger(__name__)


class TaskRelayDaemon:
    """Keeps the Slack bot connected and reminders firing until stopped."""

    def __init__(self) -> None:
        self.config = get_config()
        configure_logging(self.config.agent.log_level)
        self.running = False

        if not self.config.slack_enabled:
            raise ConfigError(
                "SLACK_BOT_TOKEN and SLACK_APP_TOKEN must be set to run the daemon"
            )
        if not self.config.monday.api_token:
            logger.warning(
                "daemon.monday.no_token",
                hint="MONDAY_API_TOKEN is not set; every report request will fail",
            )

        self._init_directories()

        self.monday = MondayClient(
            api_token=self.config.monday.api_token,
            api_url=self.config.monday.api_url,
            timeout=self.config.monday.timeout_seconds,
            page_limit=self.config.monday.page_limit,
        )
        self.relay = ReportRelay(self.monday, tz_name=self.config.agent.timezone)
        self.reminder_store = ReminderStore(str(self.config.agent.db_path))
        self.reminders = ReminderScheduler(
            store=self.reminder_store,
            relay=self.relay,
            tz_name=self.config.agent.timezone,
        )
        self.bot = SlackBot(
            bot_token=self.config.slack.bot_token,
            app_token=self.config.slack.app_token,
            monday=self.monday,
            relay=self.relay,
            reminders=self.reminders,
        )

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _init_directories(self) -> None:
        self.config.agent.data_dir.mkdir(parents=True, exist_ok=True)

    def _signal_handler(self, sig, _frame) -> None:
        logger.info(f"Received signal {sig}, shutting down...")
        self.running = False

    async def run(self) -> None:
        self.running = True
        logger.info("taskrelay starting...", timezone=self.config.agent.timezone)

        self.reminders.start()

        bot_thread = threading.Thread(target=self.bot.start, daemon=True, name="SlackBot")
        bot_thread.start()
        await asyncio.sleep(0.5)  # Give bot time to initialize
        logger.info("Slack bot started in background thread")

        try:
            while self.running:
                await asyncio.sleep(1.0)
        except KeyboardInterrupt:
            logger.info("Daemon interrupted by user")
        finally:
            self.reminders.shutdown()
            self.bot.stop()
            logger.info("taskrelay stopped")


def main() -> int:
    try:
        daemon = TaskRelayDaemon()
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1
    asyncio.run(daemon.run())
    return 0


if __name__ == "__main__":
    sys.exit(main())

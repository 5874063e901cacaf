"""Recurring unfinished-task reminders on top of APScheduler."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from taskrelay.core.models import Reminder, ReminderFrequency
from taskrelay.core.relay import ReportRelay
from taskrelay.monitoring.logging import get_logger
from taskrelay.scheduling.time_utils import cron_expression, parse_reminder_time
from taskrelay.storage.reminders import ReminderStore
from taskrelay.utils.config import DEFAULT_TIMEZONE

logger = get_logger(__name__)


class ReminderScheduler:
    """Owns the reminder registry and the jobs that fire them."""

    def __init__(
        self,
        store: ReminderStore,
        relay: ReportRelay,
        tz_name: str = DEFAULT_TIMEZONE,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        """Initialize the reminder scheduler

        Args:
            store: Persistent reminder registry
            relay: Report relay used to post the unfinished-tasks report
            tz_name: Time zone the HH:MM reminder times are interpreted in
            scheduler: Optional pre-built APScheduler instance
        """
        self.store = store
        self.relay = relay
        self.tz_name = tz_name
        self.scheduler = scheduler or BackgroundScheduler(timezone=tz_name)

    @property
    def running(self) -> bool:
        return bool(self.scheduler.running)

    def start(self, paused: bool = False) -> None:
        """Restore persisted reminders and start the background scheduler."""
        restored = 0
        for reminder in self.store.list_reminders():
            try:
                self._schedule(reminder)
                restored += 1
            except Exception as exc:
                logger.error(
                    "reminders.restore_failed",
                    reminder_id=reminder.id,
                    error=str(exc),
                )
        self.scheduler.start(paused=paused)
        logger.info("reminders.scheduler.started", restored=restored)

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("reminders.scheduler.stopped")

    def _trigger(self, reminder: Reminder) -> CronTrigger:
        hour, minute = parse_reminder_time(reminder.time_of_day)
        frequency = ReminderFrequency(reminder.frequency)
        # APScheduler counts weekdays from Monday=0, so name the day explicitly
        day_of_week = "mon" if frequency is ReminderFrequency.WEEKLY else "*"
        return CronTrigger(
            minute=minute,
            hour=hour,
            day_of_week=day_of_week,
            timezone=self.tz_name,
        )

    def _schedule(self, reminder: Reminder) -> None:
        self.scheduler.add_job(
            self.run_reminder,
            trigger=self._trigger(reminder),
            args=[reminder.id],
            id=reminder.job_id,
            name=f"unfinished tasks for board {reminder.board_id}",
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=300,
        )

    def add_reminder(
        self,
        board_id: str,
        channel_id: str,
        frequency: ReminderFrequency | str,
        time_of_day: str,
        board_name: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Reminder:
        """Validate, persist and schedule a reminder.

        Raises:
            InvalidReminderTime: time_of_day is not HH:MM (24h)
            ValueError: frequency is not daily or weekly
        """
        hour, minute = parse_reminder_time(time_of_day)
        frequency = ReminderFrequency(frequency)
        reminder = self.store.add(
            board_id=board_id,
            channel_id=channel_id,
            frequency=frequency.value,
            time_of_day=time_of_day.strip(),
            cron_expression=cron_expression(frequency, hour, minute),
            board_name=board_name,
            created_by=created_by,
        )
        try:
            self._schedule(reminder)
        except Exception:
            self.store.delete(reminder.id)
            raise
        return reminder

    def list_reminders(self) -> List[Reminder]:
        return self.store.list_reminders()

    def remove_reminder(self, reminder_id: int) -> bool:
        """Stop and forget a reminder. Returns False if it did not exist."""
        removed = self.store.delete(reminder_id)
        try:
            self.scheduler.remove_job(f"reminder-{reminder_id}")
        except JobLookupError:
            logger.debug("reminders.job_missing", reminder_id=reminder_id)
        return removed is not None

    def next_run_time(self, reminder: Reminder) -> Optional[datetime]:
        job = self.scheduler.get_job(reminder.job_id)
        return getattr(job, "next_run_time", None) if job else None

    def run_reminder(self, reminder_id: int) -> None:
        """Job body: post the board's unfinished-tasks report."""
        reminder = self.store.get(reminder_id)
        if reminder is None:
            logger.warning("reminders.run.missing", reminder_id=reminder_id)
            return
        logger.info(
            "reminders.run",
            reminder_id=reminder_id,
            board_id=reminder.board_id,
            channel=reminder.channel_id,
        )
        try:
            self.relay.send_board_unfinished(reminder.channel_id, reminder.board_id)
        except Exception as exc:
            logger.error("reminders.run.failed", reminder_id=reminder_id, error=str(exc))

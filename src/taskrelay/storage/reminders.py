"""SQLite-backed registry of scheduled reminders."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from taskrelay.core.models import Reminder, init_db
from taskrelay.monitoring.logging import get_logger

logger = get_logger(__name__)


class ReminderStore:
    """CRUD access to persisted reminders."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.engine = init_db(db_path)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def add(
        self,
        board_id: str,
        channel_id: str,
        frequency: str,
        time_of_day: str,
        cron_expression: str,
        board_name: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Reminder:
        """Persist a new reminder and return it with its id assigned."""
        with self.SessionLocal() as session:
            reminder = Reminder(
                board_id=str(board_id),
                board_name=board_name,
                channel_id=channel_id,
                frequency=frequency,
                time_of_day=time_of_day,
                cron_expression=cron_expression,
                created_by=created_by,
            )
            session.add(reminder)
            session.commit()
            session.refresh(reminder)
            logger.info(
                "reminders.added",
                reminder_id=reminder.id,
                board_id=reminder.board_id,
                channel=reminder.channel_id,
                cron=reminder.cron_expression,
            )
            return reminder

    def list_reminders(self) -> List[Reminder]:
        """All reminders, oldest first."""
        with self.SessionLocal() as session:
            return session.query(Reminder).order_by(Reminder.id).all()

    def get(self, reminder_id: int) -> Optional[Reminder]:
        with self.SessionLocal() as session:
            return session.get(Reminder, reminder_id)

    def delete(self, reminder_id: int) -> Optional[Reminder]:
        """Remove a reminder; returns it, or None if it did not exist."""
        with self.SessionLocal() as session:
            reminder = session.get(Reminder, reminder_id)
            if reminder is None:
                return None
            session.delete(reminder)
            session.commit()
            logger.info("reminders.deleted", reminder_id=reminder_id)
            return reminder

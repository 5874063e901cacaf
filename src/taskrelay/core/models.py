"""Database models for persisted scheduled reminders."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReminderFrequency(str, Enum):
    """How often a reminder fires."""

    DAILY = "daily"
    WEEKLY = "weekly"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Reminder(Base):
    """A recurring unfinished-tasks report for one board and channel."""

    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_id = Column(String(64), nullable=False)
    board_name = Column(String(255), nullable=True)
    channel_id = Column(String(64), nullable=False)
    frequency = Column(String(16), nullable=False, default=ReminderFrequency.DAILY.value)
    time_of_day = Column(String(5), nullable=False)
    cron_expression = Column(String(64), nullable=False)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    @property
    def job_id(self) -> str:
        return f"reminder-{self.id}"

    def __repr__(self) -> str:
        return (
            f"<Reminder(id={self.id}, board={self.board_id}, channel={self.channel_id}, "
            f"cron='{self.cron_expression}')>"
        )


def init_db(db_path: str) -> Engine:
    """Create the SQLite database and tables if needed."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False, future=True)
    Base.metadata.create_all(engine)
    return engine

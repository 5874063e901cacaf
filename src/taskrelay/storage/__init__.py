"""Persistence for scheduled reminders."""

from .reminders import ReminderStore

__all__ = ["ReminderStore"]

"""Reminder time parsing and cron expression helpers."""

from __future__ import annotations

import re
from typing import Tuple

from taskrelay.core.models import ReminderFrequency

TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")
TIME_FORMAT_HINT = "Please enter time in HH:MM 24-hour format, e.g. 09:00"


class InvalidReminderTime(ValueError):
    """Raised when a reminder time is not HH:MM in 24-hour format."""


def parse_reminder_time(value: str) -> Tuple[int, int]:
    """Parse ``HH:MM`` (24h, zero-padded hour) into ``(hour, minute)``."""
    text = (value or "").strip()
    if not TIME_PATTERN.match(text):
        raise InvalidReminderTime(TIME_FORMAT_HINT)
    hour, minute = text.split(":")
    return int(hour), int(minute)


def cron_expression(frequency: ReminderFrequency | str, hour: int, minute: int) -> str:
    """Five-field crontab: daily, or weekly on Monday."""
    frequency = ReminderFrequency(frequency)
    day_of_week = "1" if frequency is ReminderFrequency.WEEKLY else "*"
    return f"{minute} {hour} * * {day_of_week}"


def describe_frequency(frequency: ReminderFrequency | str) -> str:
    frequency = ReminderFrequency(frequency)
    return "every Monday" if frequency is ReminderFrequency.WEEKLY else "every day"

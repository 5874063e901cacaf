"""Display helpers for timestamps and Slack-safe text."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def now_in_zone(tz_name: str, now: Optional[datetime] = None) -> datetime:
    """Return the current time (or ``now``) converted to ``tz_name``."""
    zone = ZoneInfo(tz_name)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(zone)


def today_in_zone(tz_name: str, now: Optional[datetime] = None) -> date:
    """Calendar date of the current day in ``tz_name``."""
    return now_in_zone(tz_name, now).date()


def date_epoch(value: date, tz_name: str) -> int:
    """Unix timestamp of midnight at the start of ``value`` in ``tz_name``."""
    midnight = datetime.combine(value, time.min, tzinfo=ZoneInfo(tz_name))
    return int(midnight.timestamp())


def format_last_updated(moment: datetime) -> str:
    """Format a timestamp like ``10/16/2026, 9:05:03 AM``."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def shorten(text: Optional[str], limit: int = 80) -> str:
    if not text:
        return ""
    text = " ".join(str(text).split())
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 1)].rstrip() + "…"


def escape_slack(text: Optional[str]) -> str:
    """Escape the characters Slack treats as control sequences in mrkdwn."""
    if text is None:
        return ""
    text = str(text)
    replacements = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
    for char, replacement in replacements.items():
        text = text.replace(char, replacement)
    return text


_SLACK_DATE = re.compile(r"<!date\^\d+\^[^|>]*\|([^>]+)>")
_SLACK_CHANNEL = re.compile(r"<#(\w+)(?:\|[^>]*)?>")


def slack_to_plain(text: str) -> str:
    """Strip Slack date tokens, channel links and emphasis for terminal output."""
    text = _SLACK_DATE.sub(r"\1", text)
    text = _SLACK_CHANNEL.sub(r"#\1", text)
    text = re.sub(r"\*([^*\n]+)\*", r"\1", text)
    text = re.sub(r"(?<!\w)_([^_\n]+)_(?!\w)", r"\1", text)
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")

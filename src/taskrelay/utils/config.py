"""Environment-driven configuration for taskrelay."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Mapping, NamedTuple, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_MONDAY_API_URL = "https://api.monday.com/v2"


class ConfigError(ValueError):
    """Raised when an environment setting cannot be interpreted."""


class SlackConfig(NamedTuple):
    """Slack credentials."""
    bot_token: str
    app_token: str
    signing_secret: str


class MondayConfig(NamedTuple):
    """Monday.com API settings."""
    api_token: str
    api_url: str
    page_limit: int
    timeout_seconds: int


class AgentConfig(NamedTuple):
    """Local runtime settings."""
    timezone: str
    data_dir: Path
    db_path: Path
    todo_file: Path
    log_level: str


class Config(NamedTuple):
    """Top-level configuration container."""
    slack: SlackConfig
    monday: MondayConfig
    agent: AgentConfig

    @property
    def slack_enabled(self) -> bool:
        return bool(self.slack.bot_token and self.slack.app_token)


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _timezone_setting(env: Mapping[str, str]) -> str:
    name = env.get("TIMEZONE", "").strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"TIMEZONE is not a known time zone: {name!r}") from exc
    return name


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """Build a Config from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env

    data_dir = Path(env.get("TASKRELAY_DATA_DIR", "") or "./data").expanduser()

    return Config(
        slack=SlackConfig(
            bot_token=env.get("SLACK_BOT_TOKEN", ""),
            app_token=env.get("SLACK_APP_TOKEN", ""),
            signing_secret=env.get("SLACK_SIGNING_SECRET", ""),
        ),
        monday=MondayConfig(
            api_token=env.get("MONDAY_API_TOKEN", ""),
            api_url=env.get("MONDAY_API_URL", "") or DEFAULT_MONDAY_API_URL,
            page_limit=_int_setting(env, "MONDAY_PAGE_LIMIT", 50),
            timeout_seconds=_int_setting(env, "MONDAY_TIMEOUT_SECONDS", 30),
        ),
        agent=AgentConfig(
            timezone=_timezone_setting(env),
            data_dir=data_dir,
            db_path=data_dir / "reminders.db",
            todo_file=Path(env.get("TASKRELAY_TODO_FILE", "") or "todo.json").expanduser(),
            log_level=(env.get("TASKRELAY_LOG_LEVEL", "") or "INFO").upper(),
        ),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Return the process-wide configuration, read once from the environment."""
    return load_config()

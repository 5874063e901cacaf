from datetime import datetime, timezone
from pathlib import Path

import pytest

from taskrelay.utils.config import DEFAULT_MONDAY_API_URL, ConfigError, load_config
from taskrelay.utils.display import now_in_zone, shorten, slack_to_plain, today_in_zone


def test_defaults():
    config = load_config({})
    assert config.agent.timezone == "America/New_York"
    assert config.monday.api_url == DEFAULT_MONDAY_API_URL
    assert config.monday.page_limit == 50
    assert config.monday.timeout_seconds == 30
    assert config.agent.db_path == Path("data") / "reminders.db"
    assert config.agent.log_level == "INFO"
    assert not config.slack_enabled


def test_values_from_env(tmp_path):
    config = load_config(
        {
            "SLACK_BOT_TOKEN": "xoxb-1",
            "SLACK_APP_TOKEN": "xapp-1",
            "MONDAY_API_TOKEN": "m-1",
            "MONDAY_PAGE_LIMIT": "100",
            "TIMEZONE": "Europe/Berlin",
            "TASKRELAY_DATA_DIR": str(tmp_path),
            "TASKRELAY_LOG_LEVEL": "debug",
        }
    )
    assert config.slack_enabled
    assert config.monday.api_token == "m-1"
    assert config.monday.page_limit == 100
    assert config.agent.timezone == "Europe/Berlin"
    assert config.agent.db_path == tmp_path / "reminders.db"
    assert config.agent.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"MONDAY_PAGE_LIMIT": "lots"},
        {"MONDAY_TIMEOUT_SECONDS": "0"},
        {"TIMEZONE": "Mars/Olympus_Mons"},
    ],
)
def test_invalid_settings(env):
    with pytest.raises(ConfigError):
        load_config(env)


def test_zone_conversion():
    utc_morning = datetime(2026, 10, 16, 2, 30, tzinfo=timezone.utc)
    assert today_in_zone("America/New_York", utc_morning).isoformat() == "2026-10-15"
    assert now_in_zone("UTC", datetime(2026, 10, 16, 2, 30)).hour == 2


def test_slack_to_plain():
    text = "• *Fix* (Due: *<!date^1792123200^{date_short}|2026-10-15>* 🔴) <#C1> _(Board: R&amp;D)_"
    assert slack_to_plain(text) == "• Fix (Due: 2026-10-15 🔴) #C1 (Board: R&D)"


def test_shorten():
    assert shorten("a   b") == "a b"
    assert shorten("x" * 10, 5) == "xxxx…"
    assert shorten(None) == ""

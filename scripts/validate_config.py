#!/usr/bin/env python3
"""Validate taskrelay configuration before starting the Slack bot.

Usage:
    python scripts/validate_config.py [--check-network]

This script checks:
1. Slack and Monday.com environment variables
2. Time zone and data directory settings
3. Monday.com connectivity (optional, requires network)
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

REQUIRED_VARS = ("SLACK_BOT_TOKEN", "SLACK_APP_TOKEN", "MONDAY_API_TOKEN")
OPTIONAL_VARS = ("SLACK_SIGNING_SECRET", "TIMEZONE", "TASKRELAY_DATA_DIR", "MONDAY_API_URL")


def check_env_vars() -> dict:
    """Check Slack and Monday environment variables."""
    results = {}
    for name in REQUIRED_VARS + OPTIONAL_VARS:
        value = os.environ.get(name, "")
        if value and ("TOKEN" in name or "SECRET" in name):
            value = "***"
        results[name] = value
    return results


def check_settings() -> dict:
    """Parse the full configuration the way the daemon does."""
    try:
        from taskrelay.utils.config import ConfigError, load_config
    except ImportError as e:
        return {"error": f"taskrelay is not importable: {e}"}

    try:
        config = load_config()
    except ConfigError as e:
        return {"error": str(e)}

    return {
        "timezone": config.agent.timezone,
        "data_dir": str(config.agent.data_dir.resolve()),
        "db_path": str(config.agent.db_path),
        "page_limit": config.monday.page_limit,
    }


def check_monday() -> tuple[bool, str]:
    """Fetch the board list to confirm the Monday.com token works."""
    from taskrelay.integrations.monday import MondayAPIError, MondayClient
    from taskrelay.utils.config import load_config

    monday = load_config().monday
    client = MondayClient(
        api_token=monday.api_token,
        api_url=monday.api_url,
        timeout=monday.timeout_seconds,
    )
    try:
        boards = client.selectable_boards()
    except MondayAPIError as e:
        return False, str(e)
    return True, f"{len(boards)} board(s) visible"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate taskrelay configuration")
    parser.add_argument("--check-network", action="store_true", help="Also query Monday.com")
    args = parser.parse_args(argv)

    load_dotenv()

    print("=" * 60)
    print("taskrelay Configuration Validator")
    print("=" * 60)

    print("\n[1/3] Environment Variables:")
    env_vars = check_env_vars()
    for key, value in env_vars.items():
        required = key in REQUIRED_VARS
        status = "OK" if value else ("NOT SET" if required else "default")
        print(f"  {key}: {value or '(empty)'} [{status}]")

    print("\n[2/3] Settings:")
    settings = check_settings()
    if "error" in settings:
        print(f"  Error: {settings['error']}")
    else:
        for key, value in settings.items():
            print(f"  {key}: {value}")

    print("\n[3/3] Monday.com Connectivity:")
    monday_ok = None
    if not args.check_network:
        print("  Skipped (pass --check-network to query Monday.com)")
    elif not env_vars["MONDAY_API_TOKEN"]:
        print("  Skipped: MONDAY_API_TOKEN not set")
    else:
        monday_ok, info = check_monday()
        print(f"  {info} [{'OK' if monday_ok else 'FAILED'}]")

    issues = [f"{name} not set" for name in REQUIRED_VARS if not env_vars[name]]
    if "error" in settings:
        issues.append("invalid settings")
    if monday_ok is False:
        issues.append("Monday.com unreachable")

    print("\n" + "=" * 60)
    if issues:
        print(f"Status: ISSUES - {', '.join(issues)}")
    else:
        print("Status: READY")
    print("=" * 60)
    return 1 if issues else 0


if __name__ == "__main__":
    sys.exit(main())

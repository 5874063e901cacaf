"""Command line interface for taskrelay."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from taskrelay.core.report import build_sections, count_by_category, unfinished_lines
from taskrelay.core.items import StatusCategory
from taskrelay.integrations.monday import MondayAPIError, MondayClient
from taskrelay.monitoring.logging import configure_logging, get_logger
from taskrelay.storage.reminders import ReminderStore
from taskrelay.todo.store import TodoFileError, TodoIndexError, TodoStore
from taskrelay.utils.config import Config, get_config
from taskrelay.utils.display import (
    format_last_updated,
    now_in_zone,
    shorten,
    slack_to_plain,
)

logger = get_logger(__name__)

# Keep stdout for command output; warnings and errors still reach stderr
LOG_LEVEL = "WARNING"

TODO_USAGE = (
    "  taskrelay todo add \"Your task here\"",
    "  taskrelay todo list",
    "  taskrelay todo done <task number>",
    "  taskrelay todo delete <task number>",
)


@dataclass
class CLIContext:
    """Holds shared resources for CLI commands."""

    config: Config
    console: Console = field(default_factory=lambda: Console(soft_wrap=True))
    _monday: Optional[MondayClient] = None

    @property
    def monday(self) -> MondayClient:
        if self._monday is None:
            monday_config = self.config.monday
            self._monday = MondayClient(
                api_token=monday_config.api_token,
                api_url=monday_config.api_url,
                timeout=monday_config.timeout_seconds,
                page_limit=monday_config.page_limit,
            )
        return self._monday


def build_context(args: argparse.Namespace) -> CLIContext:
    """Create the CLI context using config values."""

    return CLIContext(config=get_config())


def _print_plain(console: Console, line: str, style: Optional[str] = None) -> None:
    console.print(Text(slack_to_plain(line), style=style or ""))


def command_boards(ctx: CLIContext) -> int:
    """List the boards a report can be built for."""

    boards = ctx.monday.selectable_boards()
    if not boards:
        ctx.console.print("[yellow]No boards visible to this API token.[/]")
        return 0

    table = Table(box=box.ROUNDED, title=f"Monday Boards ({len(boards)})")
    table.add_column("ID", style="bold cyan")
    table.add_column("Name")
    for board in boards:
        table.add_row(board.id, board.name)
    ctx.console.print(table)
    return 0


def command_summary(ctx: CLIContext, board_id: str) -> int:
    """Print the hierarchical status sections for one board."""

    tz_name = ctx.config.agent.timezone
    board = ctx.monday.get_board(board_id)
    board_name = board.name if board else "Board"
    items = ctx.monday.fetch_items(board_id, board_name=board_name)
    now = now_in_zone(tz_name)

    counts = count_by_category(items)
    header = Text()
    header.append(f"📊 {board_name}", style="bold bright_magenta")
    header.append(
        "  " + " · ".join(f"{category.glyph} {counts[category]}" for category in StatusCategory),
        style="dim",
    )
    ctx.console.print(Panel(header, border_style="cyan"))

    for section in build_sections(items, now.date(), tz_name=tz_name):
        ctx.console.print(Text(f"{section.label}:", style="bold"))
        for line in section.lines:
            _print_plain(ctx.console, line, style="dim" if section.empty else None)
        ctx.console.print()

    ctx.console.print(f"[dim]Last updated: {format_last_updated(now)}[/]")
    return 0


def command_stuck(ctx: CLIContext, board_id: Optional[str]) -> int:
    """Print unfinished tasks for one board, or every board."""

    if board_id:
        board = ctx.monday.get_board(board_id)
        scope = board.name if board else "Board"
        items = ctx.monday.fetch_items(board_id, board_name=scope)
    else:
        scope = "All Boards"
        items = ctx.monday.fetch_all_items()

    ctx.console.print(Text(f"🚩 Unfinished Tasks ({scope})", style="bold red"))
    for line in unfinished_lines(items):
        _print_plain(ctx.console, line)
    now = now_in_zone(ctx.config.agent.timezone)
    ctx.console.print(f"[dim]Last updated: {format_last_updated(now)}[/]")
    return 0


def command_reminders(ctx: CLIContext) -> int:
    """List persisted scheduled reminders."""

    ctx.config.agent.data_dir.mkdir(parents=True, exist_ok=True)
    store = ReminderStore(str(ctx.config.agent.db_path))
    reminders = store.list_reminders()
    if not reminders:
        ctx.console.print("No scheduled reminders.")
        return 0

    table = Table(box=box.ROUNDED, title=f"Scheduled Reminders ({len(reminders)})")
    table.add_column("ID", style="bold cyan", justify="right")
    table.add_column("Board")
    table.add_column("Channel")
    table.add_column("Frequency")
    table.add_column("Time")
    table.add_column("Cron", style="dim")
    for reminder in reminders:
        table.add_row(
            str(reminder.id),
            shorten(reminder.board_name or reminder.board_id, 40),
            f"#{reminder.channel_id}",
            reminder.frequency,
            reminder.time_of_day,
            reminder.cron_expression,
        )
    ctx.console.print(table)
    return 0


def _todo_usage(console: Console) -> int:
    console.print("[red]Invalid command.[/]\n")
    console.print("[yellow]Usage:[/]")
    for line in TODO_USAGE:
        console.print(line, markup=False, highlight=False)
    return 1


def _task_number(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def command_todo(ctx: CLIContext, action: Optional[str], args: List[str], file: Optional[str]) -> int:
    """Manage the local JSON to-do list."""

    console = ctx.console
    try:
        store = TodoStore(file or ctx.config.agent.todo_file)
    except TodoFileError as exc:
        console.print(Text(str(exc), style="red"))
        return 1

    if action == "add":
        text = " ".join(args).strip()
        if not text:
            return _todo_usage(console)
        store.add(text)
        return 0

    if action == "list":
        for number, item in enumerate(store.items(), start=1):
            console.print(
                Text(f"list {number}: {item.task}, {item.status}, {item.timestamp}", style="blue")
            )
        return 0

    if action in ("done", "delete"):
        number = _task_number(args[0] if args else None)
        if number is None:
            return _todo_usage(console)
        try:
            if action == "done":
                store.complete(number)
            else:
                removed = store.delete(number)
                console.print(Text(f"already removed: {removed.task}", style="blue"))
        except TodoIndexError as exc:
            console.print(Text(str(exc), style="red"))
            return 1
        return 0

    return _todo_usage(console)


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(description="taskrelay command line interface")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("boards", help="List Monday.com boards")

    summary_parser = subparsers.add_parser("summary", help="Show a board's status sections with subitems")
    summary_parser.add_argument("board_id", help="Monday.com board ID")

    stuck_parser = subparsers.add_parser("stuck", help="Show unfinished tasks for a board or all boards")
    stuck_parser.add_argument("board_id", nargs="?", help="Monday.com board ID (default: all boards)")

    subparsers.add_parser("reminders", help="List scheduled Slack reminders")

    todo_parser = subparsers.add_parser("todo", help="Manage the local to-do list")
    todo_parser.add_argument("action", nargs="?", help="add | list | done | delete")
    todo_parser.add_argument("args", nargs="*", help="Task text or task number")
    todo_parser.add_argument("--file", help="To-do JSON file (default: TASKRELAY_TODO_FILE or todo.json)")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""

    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(LOG_LEVEL)

    ctx = build_context(args)

    try:
        if args.command == "boards":
            return command_boards(ctx)

        if args.command == "summary":
            return command_summary(ctx, args.board_id)

        if args.command == "stuck":
            return command_stuck(ctx, args.board_id)

        if args.command == "reminders":
            return command_reminders(ctx)

        if args.command == "todo":
            return command_todo(ctx, args.action, args.args, args.file)
    except MondayAPIError as exc:
        ctx.console.print(f"[red]Monday.com request failed: {exc}[/]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())

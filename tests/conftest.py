# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from taskrelay.core.items import Board
from taskrelay.core.relay import ReportRelay
from taskrelay.monitoring.logging import configure_logging
from taskrelay.scheduling.reminders import ReminderScheduler
from taskrelay.storage.reminders import ReminderStore

from .fakes import NOW, TZ, FakeMessageClient, FakeMonday, make_item


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    configure_logging("WARNING", force=True)


@pytest.fixture()
def boards() -> list[Board]:
    return [
        Board(id="111", name="Roadmap"),
        Board(id="222", name="Ops"),
        Board(id="333", name="Subitems of Roadmap"),
    ]


@pytest.fixture()
def monday(boards) -> FakeMonday:
    return FakeMonday(
        boards,
        {
            "111": [
                make_item("Launch", "Done", make_item("Docs", "Done")),
                make_item(
                    "Billing",
                    "Working on it",
                    make_item("Invoices", "Stuck"),
                    make_item("Refunds", ""),
                ),
                make_item("Search", "In Progress", assignee="Ana"),
            ],
            "222": [
                make_item("Backups", "Stuck"),
                make_item("Alerts", "Done"),
            ],
        },
    )


@pytest.fixture()
def message_client() -> FakeMessageClient:
    return FakeMessageClient()


@pytest.fixture()
def relay(monday, message_client) -> ReportRelay:
    return ReportRelay(monday, message_client=message_client, tz_name=TZ, clock=lambda: NOW)


@pytest.fixture()
def reminder_store(tmp_path: Path) -> ReminderStore:
    return ReminderStore(str(tmp_path / "reminders.db"))


@pytest.fixture()
def reminders(reminder_store, relay):
    scheduler = ReminderScheduler(
        store=reminder_store,
        relay=relay,
        tz_name=TZ,
        scheduler=BackgroundScheduler(timezone=TZ),
    )
    scheduler.start(paused=True)
    yield scheduler
    scheduler.shutdown()

import pytest

from taskrelay.core.relay import ReportRelay

from .fakes import NOW, TZ, FakeMonday


def test_board_summary_sections(relay):
    message = relay.board_summary("111")

    assert message.header == "📊 Roadmap"
    assert message.footer == "Last updated: 10/16/2026, 9:05:03 AM"
    completed, working, stuck, not_started = message.sections
    assert completed == "*✅ Completed:*\n• Launch – ✅\n└ Docs – ✅"
    assert working == "*🟡 Working on it:*\n• Billing – 🟡\n├ Invoices – ⛔\n└ Refunds – 🕒"
    assert stuck == "*⛔ Stuck:*\n• Billing – 🟡\n├ Invoices – ⛔\n└ Refunds – 🕒"
    assert not_started == "*🕒 Not Started:*\n• Billing – 🟡\n├ Invoices – ⛔\n└ Refunds – 🕒"


def test_unknown_board_uses_fallback_name(relay):
    message = relay.board_unfinished("999")
    assert message.header == "🚩 Unfinished Tasks (Board)"
    assert message.sections == ["_None._"]


def test_workspace_summary_is_flat(relay):
    message = relay.workspace_summary()
    assert message.header == "📊 Project Summary (All Boards)"
    assert message.sections[0] == (
        "*✅ Completed:*\n*Launch* _(Board: Roadmap)_\n*Alerts* _(Board: Ops)_"
    )
    assert message.sections[1] == "*🚧 In Progress:*\n*Search* (Assignee: Ana) _(Board: Roadmap)_"


def test_send_requires_message_client(monday):
    relay = ReportRelay(monday, tz_name=TZ, clock=lambda: NOW)
    with pytest.raises(RuntimeError):
        relay.send_board_summary("C1", "111")


def test_send_posts_through_client(relay, message_client):
    result = relay.send_workspace_unfinished("C5")
    assert result.success
    assert message_client.sent[0][0] == "C5"


def test_subitem_boards_excluded_from_workspace(boards):
    monday = FakeMonday(boards, {"333": []})
    relay = ReportRelay(monday, tz_name=TZ, clock=lambda: NOW)
    relay.workspace_unfinished()
    assert monday.fetched == ["111", "222"]

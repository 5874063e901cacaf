import random
from datetime import date, datetime
from zoneinfo import ZoneInfo

from taskrelay.core.items import Item, StatusCategory
from taskrelay.core.report import (
    FLAT_SUMMARY_ORDER,
    NONE_PLACEHOLDER,
    SECTION_ORDER,
    DueStatus,
    all_match,
    any_match,
    build_flat_summary,
    build_sections,
    categorize,
    count_by_category,
    due_status,
    format_due_annotation,
    format_task_line,
    format_task_list,
    render_hierarchy,
    unfinished,
    unfinished_lines,
)

from .fakes import TODAY, TZ, make_item

C = StatusCategory


def render(items, category):
    return render_hierarchy(items, category, TODAY, tz_name=TZ)


def test_fully_completed_tree_listed_under_completed():
    items = [make_item("A", "Done", make_item("B", "Done"))]
    assert render(items, C.COMPLETED) == ["• A – ✅", "└ B – ✅"]


def test_partially_completed_tree_is_not_completed():
    items = [make_item("A", "Done", make_item("B", "Working on it"))]
    assert render(items, C.COMPLETED) == []
    assert render(items, C.WORKING_ON_IT) == ["• A – ✅", "└ B – 🟡"]


def test_parent_listed_under_descendant_category_with_full_subtree():
    items = [
        make_item(
            "A",
            "Stuck",
            make_item("B", "Done", make_item("D", "")),
            make_item("C", "Working on it"),
        )
    ]
    assert render(items, C.STUCK) == [
        "• A – ⛔",
        "├ B – ✅",
        "│  └ D – 🕒",
        "└ C – 🟡",
    ]
    # D is not started, so A surfaces there too
    assert render(items, C.NOT_STARTED)[0] == "• A – ⛔"
    assert render(items, C.COMPLETED) == []


def test_last_child_guide_is_blank():
    items = [make_item("A", "", make_item("B", "", make_item("D", ""), make_item("E", "")))]
    assert render(items, C.NOT_STARTED) == [
        "• A – 🕒",
        "└ B – 🕒",
        "   ├ D – 🕒",
        "   └ E – 🕒",
    ]


def test_items_keep_input_order():
    items = [make_item("Z", "Stuck"), make_item("A", "Stuck"), make_item("M", "Done")]
    assert render(items, C.STUCK) == ["• Z – ⛔", "• A – ⛔"]


def test_names_are_escaped():
    items = [make_item("R&D <beta>", "Done")]
    assert render(items, C.COMPLETED) == ["• R&amp;D &lt;beta&gt; – ✅"]


def test_due_annotation_markers():
    assert due_status(date(2026, 10, 15), TODAY) is DueStatus.OVERDUE
    assert due_status(TODAY, TODAY) is DueStatus.ON_TRACK
    assert due_status(date(2026, 10, 20), TODAY) is DueStatus.ON_TRACK


def test_due_annotation_token():
    item = make_item("A", "", due=date(2026, 10, 15))
    epoch = int(datetime(2026, 10, 15, tzinfo=ZoneInfo(TZ)).timestamp())
    assert format_due_annotation(item, TODAY, TZ) == (
        f" (Due: *<!date^{epoch}^{{date_short}}|2026-10-15>* 🔴)"
    )
    assert format_due_annotation(make_item("B"), TODAY, TZ) == ""


def test_due_annotation_inside_tree_line():
    items = [make_item("A", "", due=date(2026, 10, 30))]
    line = render(items, C.NOT_STARTED)[0]
    assert line.startswith("• A (Due: *<!date^")
    assert line.endswith("|2026-10-30>* 🟢) – 🕒")


def test_build_sections_always_has_four_sections():
    sections = build_sections([], TODAY, tz_name=TZ)
    assert [section.category for section in sections] == list(SECTION_ORDER)
    assert [section.label for section in sections] == [
        "✅ Completed",
        "🟡 Working on it",
        "⛔ Stuck",
        "🕒 Not Started",
    ]
    for section in sections:
        assert section.lines == (NONE_PLACEHOLDER,)
        assert section.empty


def test_build_sections_in_progress_items_only_show_via_children():
    items = [make_item("Search", "In Progress"), make_item("Done thing", "Done")]
    sections = {section.category: section for section in build_sections(items, TODAY, tz_name=TZ)}
    assert sections[C.COMPLETED].lines == ("• Done thing – ✅",)
    for category in (C.WORKING_ON_IT, C.STUCK, C.NOT_STARTED):
        assert sections[category].empty


def test_all_and_any_match():
    tree = make_item("A", "Done", make_item("B", "Done", make_item("C", "Stuck")))
    assert not all_match(tree, C.COMPLETED)
    assert all_match(tree.children[0].children[0], C.STUCK)
    assert any_match(tree, C.STUCK)
    assert not any_match(tree, C.NOT_STARTED)


def _random_tree(rng, depth=0):
    statuses = ["Done", "Stuck", "Working on it", "In Progress", ""]
    children = []
    if depth < 3:
        children = [_random_tree(rng, depth + 1) for _ in range(rng.randint(0, 3))]
    return Item(name=f"n{rng.randint(0, 999)}", status_text=rng.choice(statuses), children=children)


def test_membership_rules_hold_for_random_trees():
    rng = random.Random(7)
    for _ in range(200):
        tree = _random_tree(rng)
        statuses = {node.status_text for node in tree.walk()}
        for category in SECTION_ORDER:
            listed = bool(render([tree], category))
            if category is C.COMPLETED:
                assert listed == (statuses == {"Done"})
            else:
                assert listed == any_match(tree, category)
            if listed and category is not C.COMPLETED:
                # the full subtree is drawn
                assert len(render([tree], category)) == len(list(tree.walk()))


def test_categorize_uses_top_level_status_only():
    items = [
        make_item("A", "Done", make_item("A1", "Stuck")),
        make_item("B", "Stuck"),
        make_item("C", "In Progress"),
        make_item("D", "Working on it"),
        make_item("E", "Someday"),
    ]
    categorized = categorize(items)
    assert [item.name for item in categorized.completed] == ["A"]
    assert [item.name for item in categorized.stuck] == ["B"]
    assert [item.name for item in categorized.in_progress] == ["C"]
    assert [item.name for item in categorized.working_on_it] == ["D"]
    assert [item.name for item in categorized.not_started] == ["E"]
    assert [item.name for item in unfinished(categorized)] == ["B", "C", "D", "E"]


def test_format_task_line_optional_parts():
    item = make_item("Fix", "", due=date(2026, 10, 20), assignee="Ana", board="Ops")
    assert format_task_line(item) == "*Fix* (Assignee: Ana) (Due: 2026-10-20) _(Board: Ops)_"
    assert format_task_line(make_item("Bare")) == "*Bare*"


def test_unfinished_lines_order_and_placeholder():
    items = [
        make_item("Later", ""),
        make_item("Blocked", "Stuck"),
        make_item("Shipped", "Done"),
        make_item("Busy", "Working on it"),
        make_item("Moving", "In Progress"),
    ]
    assert unfinished_lines(items) == ["*Blocked*", "*Moving*", "*Busy*", "*Later*"]
    assert unfinished_lines([make_item("Shipped", "Done")]) == [NONE_PLACEHOLDER]
    assert format_task_list([]) == [NONE_PLACEHOLDER]


def test_flat_summary_sections():
    items = [make_item("Shipped", "Done", board="Ops"), make_item("Blocked", "Stuck")]
    sections = build_flat_summary(items)
    assert [section.category for section in sections] == list(FLAT_SUMMARY_ORDER)
    assert sections[0].lines == ("*Shipped* _(Board: Ops)_",)
    assert not sections[0].empty
    assert all(section.lines == (NONE_PLACEHOLDER,) for section in sections[1:])
    assert all(section.empty for section in sections[1:])


def test_count_by_category_includes_subitems():
    items = [make_item("A", "Done", make_item("B", "Stuck"), make_item("C", "Stuck"))]
    counts = count_by_category(items)
    assert counts[C.COMPLETED] == 1
    assert counts[C.STUCK] == 2
    assert counts[C.NOT_STARTED] == 0


def test_unfinished_keeps_input_order_within_each_category():
    items = [
        make_item("Later 1", ""),
        make_item("Blocked 1", "Stuck"),
        make_item("Busy 1", "Working on it"),
        make_item("Later 2", "Waiting"),
        make_item("Blocked 2", "Stuck"),
        make_item("Busy 2", "working on it"),
        make_item("Blocked 3", "STUCK"),
    ]
    assert [item.name for item in unfinished(categorize(items))] == [
        "Blocked 1",
        "Blocked 2",
        "Blocked 3",
        "Busy 1",
        "Busy 2",
        "Later 1",
        "Later 2",
    ]
    assert unfinished_lines(items)[:3] == ["*Blocked 1*", "*Blocked 2*", "*Blocked 3*"]


def test_due_markers_and_category_glyphs():
    assert DueStatus.OVERDUE.marker == "🔴"
    assert DueStatus.ON_TRACK.marker == "🟢"
    assert [(category.glyph, category.label) for category in SECTION_ORDER] == [
        ("✅", "Completed"),
        ("🟡", "Working on it"),
        ("⛔", "Stuck"),
        ("🕒", "Not Started"),
    ]


def test_count_by_category_accepts_custom_classifier():
    class EverythingStuck:
        def classify(self, status_text):
            return C.STUCK

    items = [make_item("A", "Done", make_item("B", "Done"))]
    assert count_by_category(items, EverythingStuck())[C.STUCK] == 2
    assert count_by_category(items)[C.COMPLETED] == 2

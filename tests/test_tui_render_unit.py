from types import SimpleNamespace

from core.desktop.devtools.interface import tui_render
from core.desktop.devtools.interface.tui_dialogs import DialogStack, ProgressDialog
from core.desktop.devtools.interface.tui_display import display_width, pad_display, trim_display, wrap_display
from core.desktop.devtools.interface.tui_navigation import toggle_multi_select
from core.desktop.devtools.interface.tui_projection import set_search_query
from core.desktop.devtools.interface.tui_state import DashboardState, log_activity, replace_tasks
from core.task import Task


def _tui(tasks=None):
    state = DashboardState()
    replace_tasks(state, tasks if tasks is not None else [
        Task("1", "Parent", subtasks=[Task("1.1", "Child")], priority="high"),
        Task("2", "Second", description="Some description", dependencies=["1"], complexity=4),
    ])
    return SimpleNamespace(state=state, list_offset=0, dialogs=DialogStack(), _t=lambda key, **kw: key)


def _text(fragments):
    return "".join(fragment[1] for fragment in fragments)


def test_scroll_offset_keeps_cursor_visible():
    assert tui_render.scroll_offset(0, 0, 5, 20) == 0
    assert tui_render.scroll_offset(7, 0, 5, 20) == 3
    assert tui_render.scroll_offset(2, 3, 5, 20) == 2
    assert tui_render.scroll_offset(4, 18, 5, 20) == 4
    assert tui_render.scroll_offset(0, 0, 0, 20) == 0


def test_task_list_rows():
    tui = _tui()
    toggle_multi_select(tui.state)
    fragments = tui_render.render_task_list(tui, 10, 60)
    lines = _text(fragments).splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("◆▸ ○ 1 Parent")
    assert "→1" in lines[1] and "C4" in lines[1]
    assert any(style.endswith("class:selected") for style, _ in fragments if style)


def test_filtered_rows_count_only_kept_children():
    tui = _tui()
    set_search_query(tui.state, "Parent")
    assert tui.state.visible_children == {"1": 0}
    lines = _text(tui_render.render_task_list(tui, 10, 60)).splitlines()
    assert lines[0].startswith("   ○ 1 Parent")

    set_search_query(tui.state, "Child")
    lines = _text(tui_render.render_task_list(tui, 10, 60)).splitlines()
    assert lines[0].startswith(" ▾ ○ 1 Parent")
    assert "1.1 Child" in lines[1]

    set_search_query(tui.state, "")
    assert tui.state.visible_children == {}
    assert _text(tui_render.render_task_list(tui, 10, 60)).startswith(" ▸ ○ 1 Parent")


def test_task_list_scrolls_with_cursor():
    tui = _tui([Task(str(i), f"Task {i}") for i in range(1, 21)])
    tui.state.cursor, tui.state.selected_id = 15, "16"
    text = _text(tui_render.render_task_list(tui, 5, 40))
    assert tui.list_offset == 11
    assert "16 Task 16" in text and " 1 Task 1 " not in text


def test_empty_and_loading_messages():
    tui = _tui([])
    assert _text(tui_render.render_task_list(tui, 5, 40)) == "STATUS_NO_TASKS"
    tui.state.loading = True
    assert _text(tui_render.render_task_list(tui, 5, 40)) == "STATUS_LOADING"


def test_details_panel():
    tui = _tui()
    tui.state.cursor, tui.state.selected_id = 1, "2"
    text = _text(tui_render.render_details(tui, 40))
    assert text.startswith("2 Second")
    assert "DETAIL_DEPENDENCIES: 1" in text
    assert "Some description" in text
    assert _text(tui_render.render_details(_tui([]), 40)) == "DETAIL_NONE"


def test_log_panel_shows_latest_entries():
    tui = _tui()
    assert _text(tui_render.render_log(tui, 3)) == "LOG_EMPTY"
    for idx in range(5):
        log_activity(tui.state, f"entry {idx}", "warning")
    text = _text(tui_render.render_log(tui, 2))
    assert "entry 4" in text and "entry 3" in text and "entry 2" not in text


def test_dialog_render_uses_top_dialog():
    tui = _tui()
    assert list(tui_render.render_dialog(tui)) == []
    tui.dialogs.push(ProgressDialog("Working", "half"))
    tui.dialogs.top.update(0.5)
    text = _text(tui_render.render_dialog(tui))
    assert "Working" in text and " 50%" in text


def test_display_helpers_handle_wide_characters():
    assert display_width("日本") == 4
    assert trim_display("日本語", 4) == "日本"
    assert trim_display("abcdef", 4, "…") == "abc…"
    assert pad_display("ab", 4) == "ab  "
    assert wrap_display("abcdef", 4) == ["abcd", "ef"]
    assert wrap_display("a\nb", 4) == ["a", "b"]

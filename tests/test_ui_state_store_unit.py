from core.desktop.devtools.interface.tui_projection import ViewMode
from core.desktop.devtools.interface.tui_state import DashboardState, apply_ui_state, snapshot_ui_state
from core.status import TaskStatus
from infrastructure.ui_state_store import UIState, UIStateStore, ui_state_path


def test_round_trip(tmp_path):
    store = UIStateStore(ui_state_path(tmp_path))
    state = UIState(expanded_ids=["1"], selected_id="1.2", view_mode="list", status_filter="done", last_document_path="/tmp/p.md")
    assert store.save(state)
    assert store.path == tmp_path / ".taskmaster" / ".tui-state.json"
    assert store.load() == state
    store.clear()
    assert store.load() == UIState()


def test_broken_files_fall_back_to_defaults(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{oops", encoding="utf-8")
    assert UIStateStore(path).load() == UIState()
    path.write_text("[1, 2]", encoding="utf-8")
    assert UIStateStore(path).load() == UIState()
    path.write_text('{"view_mode": "grid", "expanded_ids": "nope"}', encoding="utf-8")
    loaded = UIStateStore(path).load()
    assert loaded.view_mode == "tree" and loaded.expanded_ids == []


def test_apply_and_snapshot_dashboard_state():
    state = DashboardState()
    apply_ui_state(state, UIState(expanded_ids=["2"], view_mode="list", status_filter="blocked", show_log_panel=True))
    assert state.view_mode == ViewMode.LIST
    assert state.status_filter == TaskStatus.BLOCKED
    assert state.expanded_ids == {"2"}
    snap = snapshot_ui_state(state, "doc.md")
    assert snap.status_filter == "blocked"
    assert snap.show_log_panel is True
    assert snap.last_document_path == "doc.md"


def test_unknown_saved_filter_is_ignored():
    state = DashboardState()
    apply_ui_state(state, UIState(status_filter="someday"))
    assert state.status_filter is None

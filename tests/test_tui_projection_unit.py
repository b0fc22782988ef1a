from core.desktop.devtools.interface.tui_projection import (
    ViewMode,
    clamp_cursor,
    cycle_status_filter,
    filter_tree,
    matches_search,
    project,
    set_search_query,
    toggle_view_mode,
)
from core.desktop.devtools.interface.tui_state import DashboardState, replace_tasks
from core.status import TaskStatus
from core.task import Task
from core.task_index import TaskIndex


def _tasks():
    return [
        Task(
            "1",
            "Build API",
            subtasks=[
                Task("1.1", "Schema", status=TaskStatus.DONE),
                Task("1.2", "Handlers", subtasks=[Task("1.2.1", "Auth handler", status=TaskStatus.BLOCKED)]),
            ],
        ),
        Task("2", "Write docs", description="user guide"),
    ]


def _ids(rows):
    return [row.id for row in rows]


def _state():
    state = DashboardState()
    replace_tasks(state, _tasks())
    return state


def test_collapsed_tree_shows_roots_only():
    assert _ids(project(_tasks(), ViewMode.TREE, set())) == ["1", "2"]
    assert _ids(project(_tasks(), ViewMode.TREE, {"1"})) == ["1", "1.1", "1.2", "2"]
    assert _ids(project(_tasks(), ViewMode.LIST, set())) == ["1", "1.1", "1.2", "1.2.1", "2"]


def test_filter_keeps_ancestors_of_matches():
    rows = project(_tasks(), ViewMode.TREE, set(), status_filter=TaskStatus.BLOCKED)
    assert _ids(rows) == ["1", "1.2", "1.2.1"]
    kept = filter_tree(_tasks(), TaskStatus.DONE)
    assert _ids(kept) == ["1"]
    assert _ids(kept[0].subtasks) == ["1.1"]


def test_filter_does_not_mutate_source():
    tasks = _tasks()
    filter_tree(tasks, TaskStatus.DONE)
    assert len(tasks[0].subtasks) == 2


def test_rows_are_canonical_when_index_given():
    tasks = _tasks()
    index = TaskIndex.build(tasks)
    rows = project(tasks, ViewMode.TREE, set(), status_filter=TaskStatus.DONE, index=index)
    assert rows[1] is tasks[0].subtasks[0]


def test_search_matches_id_title_and_description():
    task = Task("7.3", "Deploy", description="Kubernetes rollout")
    assert matches_search(task, "7.3")
    assert matches_search(task, "DEPLOY")
    assert matches_search(task, "kubernetes")
    assert matches_search(task, "  ")
    assert not matches_search(task, "docs")


def test_search_query_projection():
    state = _state()
    set_search_query(state, "guide")
    assert _ids(state.visible) == ["2"]
    assert state.selected_id == "2"
    set_search_query(state, "auth")
    assert _ids(state.visible) == ["1", "1.2", "1.2.1"]


def test_cursor_clamped_after_filter():
    state = _state()
    state.cursor, state.selected_id = 1, "2"
    cycle_status_filter(state)  # pending
    assert state.status_filter == TaskStatus.PENDING
    assert 0 <= state.cursor < len(state.visible)
    assert state.visible[state.cursor].id == state.selected_id


def test_cursor_falls_back_to_visible_ancestor():
    state = _state()
    state.expanded_ids = {"1", "1.2"}
    state.selected_id = "1.2.1"
    state.status_filter = TaskStatus.DONE
    state.visible = project(state.tasks, state.view_mode, state.expanded_ids, state.status_filter, "", state.index)
    clamp_cursor(state)
    assert state.selected_id == "1"


def test_empty_projection_has_no_cursor():
    state = _state()
    set_search_query(state, "nothing matches this")
    assert state.visible == []
    assert state.cursor == -1


def test_toggle_view_mode():
    state = _state()
    assert toggle_view_mode(state) == ViewMode.LIST
    assert len(state.visible) == 5
    assert toggle_view_mode(state) == ViewMode.TREE
    assert ViewMode.from_string("bogus") == ViewMode.TREE

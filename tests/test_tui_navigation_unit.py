from core.desktop.devtools.interface import tui_navigation as nav
from core.desktop.devtools.interface.tui_state import DashboardState, replace_tasks
from core.task import Task, ancestor_ids
from core.task_index import TaskIndex


def _tasks():
    return [
        Task("1", "One", subtasks=[Task("1.1", "One.one"), Task("1.2", "One.two", subtasks=[Task("1.2.1", "Deep")])]),
        Task("2", "Two"),
    ]


def _state(tasks=None):
    state = DashboardState()
    replace_tasks(state, tasks if tasks is not None else _tasks())
    return state


def _visible(state):
    return [task.id for task in state.visible]


def test_expand_all_and_collapse_all_change_visible_count():
    state = _state([Task("1", "One", subtasks=[Task("1.1", "a"), Task("1.2", "b")]), Task("2", "Two")])
    assert len(state.index) == 4
    assert len(state.visible) == 2
    nav.expand_all(state)
    assert len(state.visible) == 4
    nav.collapse_all(state)
    assert len(state.visible) == 2


def test_collapse_or_ascend_on_leaf_moves_to_parent():
    state = _state()
    assert nav.select_by_id(state, "1.1")
    assert nav.collapse_or_ascend(state)
    assert state.selected_id == "1"
    assert _visible(state)[state.cursor] == "1"


def test_collapse_or_ascend_collapses_first():
    state = _state()
    nav.select_by_id(state, "1.2.1")
    nav.select_by_id(state, "1.2")
    assert nav.collapse_or_ascend(state)
    assert state.selected_id == "1.2"
    assert "1.2.1" not in _visible(state)


def test_toggle_expand_twice_is_identity():
    state = _state()
    before_ids, before_visible = set(state.expanded_ids), _visible(state)
    assert nav.toggle_expand(state)
    assert _visible(state) != before_visible
    assert nav.toggle_expand(state)
    assert state.expanded_ids == before_ids
    assert _visible(state) == before_visible
    assert state.selected_id == "1"


def test_toggle_expand_on_leaf_is_noop():
    state = _state()
    nav.select_last(state)
    assert not nav.toggle_expand(state)


def test_select_by_id_expands_every_ancestor():
    state = _state()
    assert nav.select_by_id(state, "1.2.1")
    assert set(ancestor_ids("1.2.1")) <= state.expanded_ids
    assert state.visible[state.cursor].id == "1.2.1"
    assert not nav.select_by_id(state, "9")


def test_expand_or_descend():
    state = _state()
    assert nav.expand_or_descend(state)
    assert state.selected_id == "1"
    assert nav.expand_or_descend(state)
    assert state.selected_id == "1.1"


def test_cursor_movement_is_clamped():
    state = _state()
    nav.select_previous(state)
    assert state.cursor == 0
    nav.page_down(state, 10)
    assert state.selected_id == "2"
    nav.select_next(state)
    assert state.cursor == 1
    nav.page_up(state, 10)
    assert state.selected_id == "1"
    nav.select_index(state, 99)
    assert state.cursor == len(state.visible) - 1


def test_missing_selection_marks_view_stale():
    state = _state()
    nav.select_last(state)
    state.index = TaskIndex.build([state.tasks[0]])
    task = nav.selected_task(state)
    assert task is not None and task.id == "2"
    assert state.stale


def test_selected_task_is_the_canonical_object():
    tasks = _tasks()
    state = _state(tasks)
    assert nav.selected_task(state) is tasks[0]


def test_multi_select_in_tree_order():
    state = _state()
    nav.select_last(state)
    nav.toggle_multi_select(state)
    nav.select_first(state)
    nav.toggle_multi_select(state)
    assert [t.id for t in nav.selected_tasks(state)] == ["1", "2"]
    nav.toggle_multi_select(state)
    assert [t.id for t in nav.selected_tasks(state)] == ["2"]
    nav.clear_multi_select(state)
    assert [t.id for t in nav.selected_tasks(state)] == ["1"]


def test_empty_tree():
    state = _state([])
    assert state.cursor == -1
    assert nav.selected_task(state) is None
    assert nav.selected_tasks(state) == []
    assert not nav.collapse_or_ascend(state)

import pytest

from application.deletion import (
    DeleteOptions,
    analyze_delete_impact,
    collect_delete_set,
    prune_tasks,
)
from core.errors import AppError
from core.task import Task
from core.task_index import TaskIndex


def _tasks():
    return [
        Task("1", "Root", subtasks=[Task("1.1", "A"), Task("1.2", "B")]),
        Task("2", "Uses root", dependencies=["1"]),
        Task("3", "Uses two", dependencies=["2"]),
        Task("4", "Alone"),
    ]


def test_subtasks_block_non_recursive_delete():
    impact = analyze_delete_impact(TaskIndex.build(_tasks()), ["1"], DeleteOptions())
    assert impact.blocked
    assert impact.blocking_reason == "2 subtasks detected"
    assert impact.total_delete_count == 1


def test_dependents_block_non_recursive_delete():
    impact = analyze_delete_impact(TaskIndex.build(_tasks()), ["2"], DeleteOptions())
    assert impact.blocking_reason == "1 dependent tasks detected"
    assert [s.id for s in impact.dependents] == ["3"]


def test_recursive_impact_follows_dependents_transitively():
    impact = analyze_delete_impact(TaskIndex.build(_tasks()), ["1"], DeleteOptions(recursive=True))
    assert not impact.blocked
    assert [s.id for s in impact.descendants] == ["1.1", "1.2"]
    assert [s.id for s in impact.dependents] == ["2", "3"]
    assert impact.total_delete_count == 5
    assert len(impact.warnings) == 2


def test_missing_ids():
    index = TaskIndex.build(_tasks())
    with pytest.raises(AppError):
        analyze_delete_impact(index, ["9"], DeleteOptions())
    impact = analyze_delete_impact(index, ["9", "4"], DeleteOptions(force=True))
    assert impact.warnings == ["Task 9 not found and will be skipped"]
    assert impact.total_delete_count == 1
    with pytest.raises(AppError):
        analyze_delete_impact(index, [], DeleteOptions())


def test_collect_and_prune():
    tasks = _tasks()
    index = TaskIndex.build(tasks)
    delete_set, warnings = collect_delete_set(index, ["1"], DeleteOptions(recursive=True))
    assert delete_set == {"1", "1.1", "1.2", "2", "3"}
    assert warnings == []
    kept = prune_tasks(tasks, delete_set)
    assert [t.id for t in kept] == ["4"]


def test_collect_blocks_without_recursive():
    index = TaskIndex.build(_tasks())
    with pytest.raises(AppError) as excinfo:
        collect_delete_set(index, ["2"], DeleteOptions())
    assert excinfo.value.title == "Delete Blocked"
    # a dependent that is itself being deleted does not block
    delete_set, _ = collect_delete_set(index, ["2", "3"], DeleteOptions())
    assert delete_set == {"2", "3"}


def test_prune_nested_subtask():
    tasks = _tasks()
    kept = prune_tasks(tasks, {"1.2"})
    assert [s.id for s in kept[0].subtasks] == ["1.1"]


def test_nested_descendants_come_from_the_index():
    tasks = [Task("1", "Root", subtasks=[Task("1.1", "A", subtasks=[Task("1.1.1", "Leaf")])]), Task("2", "Other")]
    index = TaskIndex.build(tasks)
    impact = analyze_delete_impact(index, ["1"], DeleteOptions(recursive=True))
    assert [s.id for s in impact.descendants] == ["1.1", "1.1.1"]
    assert impact.total_delete_count == 3

    with pytest.raises(AppError) as excinfo:
        collect_delete_set(index, ["1"], DeleteOptions())
    assert excinfo.value.message == "task 1 has 1 subtasks; enable recursive deletion"
    delete_set, _ = collect_delete_set(index, ["1"], DeleteOptions(recursive=True))
    assert delete_set == {"1", "1.1", "1.1.1"}

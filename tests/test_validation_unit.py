from core.task import Task
from core.validation import build_dependents_map, detect_cycles, validate_tasks
from core.task_index import TaskIndex


def _messages(warnings):
    return [str(w) for w in warnings]


def test_missing_and_self_dependencies():
    tasks = [Task("1", "A", dependencies=["1", "7"]), Task("2", "B", priority="urgent")]
    messages = _messages(validate_tasks(tasks))
    assert "Task 1: Task cannot depend on itself" in messages
    assert "Task 1: Dependency not found: 7" in messages
    assert "Task 2: Invalid priority: urgent" in messages


def test_unknown_status_is_a_warning():
    task = Task.from_dict({"id": 1, "title": "A", "status": "someday"})
    assert _messages(validate_tasks([task])) == ["Task 1: Invalid status: someday"]


def test_cycle_detected_once():
    tasks = [Task("1", "A", dependencies=["2"]), Task("2", "B", dependencies=["3"]), Task("3", "C", dependencies=["1"])]
    cycles = detect_cycles({t.id: t.dependencies for t in tasks})
    assert cycles == [["1", "2", "3", "1"]]
    warnings = validate_tasks(tasks)
    assert any("Circular dependency: 1 -> 2 -> 3 -> 1" in w.message for w in warnings)


def test_subtask_warnings_and_dependents_map():
    tasks = [Task("1", "A", subtasks=[Task("1.1", "Sub", dependencies=["9"])]), Task("2", "B", dependencies=["1"])]
    assert _messages(validate_tasks(tasks)) == ["Task 1.1: Dependency not found: 9"]
    assert build_dependents_map(TaskIndex.build(tasks)) == {"9": ["1.1"], "1": ["2"]}

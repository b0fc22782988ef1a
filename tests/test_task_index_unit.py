from core.status import TaskStatus
from core.task import Task, ancestor_ids, parent_id
from core.task_index import TaskIndex


def _tree():
    return [
        Task("1", "Root", subtasks=[Task("1.1", "Child a", subtasks=[Task("1.1.1", "Leaf")]), Task("1.2", "Child b")]),
        Task("2", "Second"),
    ]


def test_index_preorder_and_lookup():
    tasks = _tree()
    index = TaskIndex.build(tasks)
    assert index.ids() == ["1", "1.1", "1.1.1", "1.2", "2"]
    assert len(index) == 5
    assert "1.2" in index and "3" not in index
    # references, not copies
    assert index.get("1.1") is tasks[0].subtasks[0]


def test_resolve_reports_misses():
    index = TaskIndex.build(_tree())
    task, found = index.resolve("1.1.1")
    assert found and task.title == "Leaf"
    assert index.resolve("9") == (None, False)
    assert index.resolve("") == (None, False)
    assert index.resolve(None) == (None, False)


def test_children_and_descendants():
    index = TaskIndex.build(_tree())
    assert [t.id for t in index.children_of("1")] == ["1.1", "1.2"]
    assert [t.id for t in index.descendants_of("1")] == ["1.1", "1.1.1", "1.2"]
    assert index.children_of("missing") == []
    assert index.descendants_of("2") == []


def test_duplicate_ids_keep_first():
    first = Task("1", "First")
    index = TaskIndex.build([first, Task("1", "Second")])
    assert index.get("1") is first
    assert index.duplicates == ["1"]


def test_id_helpers():
    assert parent_id("2.3.1") == "2.3"
    assert parent_id("2") == ""
    assert ancestor_ids("2.3.1") == ["2", "2.3"]
    assert ancestor_ids("2") == []


def test_task_from_dict_relative_subtask_ids():
    data = {
        "id": 4,
        "title": "Parent",
        "status": "in_progress",
        "priority": "HIGH",
        "dependencies": [1],
        "subtasks": [
            {"id": 1, "title": "A", "status": "done"},
            {"id": 2, "title": "B", "dependencies": [1, "3"], "status": "weird"},
        ],
        "customField": "kept",
    }
    task = Task.from_dict(data)
    assert task.id == "4"
    assert task.status == TaskStatus.IN_PROGRESS
    assert task.priority == "high"
    assert [sub.id for sub in task.subtasks] == ["4.1", "4.2"]
    second = task.subtasks[1]
    assert second.dependencies == ["4.1", "3"]
    assert second.status == TaskStatus.PENDING and second.raw_status == "weird"

    out = task.to_dict()
    assert out["id"] == 4
    assert out["customField"] == "kept"
    assert out["subtasks"][1]["id"] == 2
    assert out["subtasks"][1]["dependencies"] == [1, "3"]
    assert out["subtasks"][1]["status"] == "weird"


def test_walk_and_depth():
    root = _tree()[0]
    assert [t.id for t in root.walk()] == ["1", "1.1", "1.1.1", "1.2"]
    assert root.subtasks[0].subtasks[0].depth == 2
    assert root.has_subtasks and not root.subtasks[1].has_subtasks
    clone = root.clone()
    clone.subtasks[0].title = "changed"
    assert root.subtasks[0].title == "Child a"

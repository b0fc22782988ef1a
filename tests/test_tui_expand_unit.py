from application.task_service import ExpandResult
from core.desktop.devtools.interface import tui_expand
from core.desktop.devtools.interface.tui_controller import DashboardController
from core.desktop.devtools.interface.tui_dialogs import FormDialog, ListDialog
from core.desktop.devtools.interface.tui_messages import WorkflowKind
from core.desktop.devtools.interface.tui_navigation import select_by_id
from core.desktop.devtools.interface.tui_runtime import TimerHandle
from core.desktop.devtools.interface.tui_state import replace_tasks
from core.desktop.devtools.interface.tui_workflows import WorkflowOrchestrator
from core.expansion import ExpandOptions
from core.status import TaskStatus
from core.task import Task


class FakeService:
    def __init__(self):
        self.expanded = []

    def expand_with_progress(self, cancel, task_ids, options, on_progress):
        self.expanded.append((list(task_ids), options))
        return ExpandResult(expanded_ids=list(task_ids), created_ids=[f"{task_ids[0]}.1"])


class Scheduler:
    def __init__(self):
        self.calls = []

    def call_later(self, delay, msg):
        self.calls.append((delay, msg))
        return TimerHandle()


def _inline(target, name):
    target()


def _run(ctl, commands):
    pending = list(commands)
    while pending:
        msg = pending.pop(0)()
        if msg is not None:
            pending.extend(ctl.update(msg))


def _controller():
    ctl = DashboardController(
        FakeService(),
        scheduler=Scheduler(),
        orchestrator=WorkflowOrchestrator(spawn=_inline),
    )
    replace_tasks(
        ctl.state,
        [
            Task("1", "Setup", status=TaskStatus.DONE),
            Task("2", "Build", description="- compile\n- package"),
        ],
    )
    select_by_id(ctl.state, "2")
    return ctl


def _to_preview(ctl):
    ctl.action_expand()
    assert isinstance(ctl.dialogs.top, FormDialog)
    assert ctl.handle_dialog_key("enter") == []
    return ctl.dialogs.top


def test_options_form_leads_to_draft_preview():
    ctl = _controller()
    preview = _to_preview(ctl)
    assert isinstance(preview, ListDialog)
    assert preview.title == "Preview Subtasks"
    assert preview.header[0] == "2 subtask(s) will be created under 1 task(s)"
    assert [row.text for row in preview.rows] == ["2 Build", "  - Compile", "  - Package"]
    assert ctl.service.expanded == []
    assert not ctl.workflows.is_running(WorkflowKind.EXPAND)


def test_continue_from_preview_starts_expansion():
    ctl = _controller()
    _to_preview(ctl)
    _run(ctl, ctl.handle_dialog_key("c"))
    assert ctl.service.expanded == [(["2"], ExpandOptions())]
    assert WorkflowKind.EXPAND in ctl.progress_dialogs


def test_enter_on_preview_also_continues():
    ctl = _controller()
    _to_preview(ctl)
    _run(ctl, ctl.handle_dialog_key("enter"))
    assert len(ctl.service.expanded) == 1


def test_escape_on_preview_changes_nothing():
    ctl = _controller()
    _to_preview(ctl)
    assert ctl.handle_dialog_key("escape") == []
    assert ctl.service.expanded == []
    assert not ctl.dialogs.active


def test_preview_nests_deeper_drafts():
    ctl = _controller()
    rows, total = tui_expand.preview_rows(ctl, ["2", "missing"], ExpandOptions(depth=2))
    assert rows[0].text == "2 Build"
    assert total >= 2
    assert all(row.value == "2" for row in rows)

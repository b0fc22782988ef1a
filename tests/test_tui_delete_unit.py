from application.deletion import DeleteImpact, DeleteOptions, DeleteResult
from application.undo import UndoToken
from core.desktop.devtools.interface import tui_delete
from core.desktop.devtools.interface.tui_controller import DashboardController
from core.desktop.devtools.interface.tui_delete import DeleteFlow, DeleteStage
from core.desktop.devtools.interface.tui_dialogs import ConfirmDialog, DialogAction, DialogResult, FormDialog
from core.desktop.devtools.interface.tui_messages import HoldElapsedMsg, Outcome, UndoTickMsg, WorkflowKind
from core.desktop.devtools.interface.tui_navigation import select_by_id, toggle_multi_select
from core.desktop.devtools.interface.tui_runtime import TimerHandle
from core.desktop.devtools.interface.tui_state import replace_tasks
from core.desktop.devtools.interface.tui_workflows import WorkflowOrchestrator
from core.errors import validation_error
from core.task import Task


class FakeService:
    def __init__(self, impact):
        self.impact = impact
        self.analyzed = []
        self.deleted = []
        self.after_commit = None

    def analyze_delete_impact(self, task_ids, options):
        self.analyzed.append((list(task_ids), options))
        if isinstance(self.impact, Exception):
            raise self.impact
        return self.impact

    def delete_tasks(self, cancel, task_ids, options):
        self.deleted.append((list(task_ids), options))
        if self.after_commit is not None:
            self.after_commit()
        token = UndoToken("undo-1", "Deleted 1 task(s)", expires_at=1000.0 + 20, duration=20)
        return DeleteResult(len(task_ids), list(task_ids), undo_token=token)

    def get_tasks(self):
        return [], []

    def validation_warnings(self):
        return []


class Scheduler:
    def __init__(self):
        self.calls = []

    def call_later(self, delay, msg):
        self.calls.append((delay, msg))
        return TimerHandle()


def _inline(target, name):
    target()


def _controller(impact):
    ctl = DashboardController(
        FakeService(impact),
        scheduler=Scheduler(),
        orchestrator=WorkflowOrchestrator(spawn=_inline),
        clock=lambda: 1000.0,
    )
    replace_tasks(ctl.state, [Task("1", "One", subtasks=[Task("1.1", "a")]), Task("2", "Two"), Task("3", "Three")])
    return ctl


def _run(ctl, commands):
    pending = list(commands)
    while pending:
        msg = pending.pop(0)()
        if msg is not None:
            pending.extend(ctl.update(msg))


def _to_review(ctl):
    ctl.action_delete()
    assert isinstance(ctl.dialogs.top, ConfirmDialog)
    ctl.handle_dialog_key("enter")
    assert isinstance(ctl.dialogs.top, FormDialog)
    return ctl.handle_dialog_key("enter")


def test_blocked_review_routes_back_to_options():
    ctl = _controller(DeleteImpact(total_delete_count=1, blocking_reason="has 3 dependents"))
    _to_review(ctl)
    review = ctl.dialogs.top
    assert review.title == "Review Impact"
    assert "Blocking issue: has 3 dependents" in review.lines
    assert [b.id for b in review.buttons] == ["adjust", "cancel"]

    commands = ctl.handle_dialog_key("enter")
    assert commands == []
    assert isinstance(ctl.dialogs.top, FormDialog)
    assert ctl.dialogs.top.title == "Delete Options"
    assert ctl.service.deleted == []
    assert not ctl.workflows.is_running(WorkflowKind.DELETE)


def test_blocked_flow_never_executes():
    flow = DeleteFlow(["1"])
    flow.impact = DeleteImpact(blocking_reason="has 3 dependents")
    flow.stage = DeleteStage.IMPACT_REVIEW
    assert flow.after_review(DialogResult(DialogAction.CONFIRM, button="delete")) == DeleteStage.OPTIONS
    assert flow.after_review(DialogResult(DialogAction.CANCEL)) == DeleteStage.CLOSED


def test_review_without_impact_goes_back_to_options():
    flow = DeleteFlow(["1"])
    assert flow.after_review(DialogResult(DialogAction.CONFIRM, button="delete")) == DeleteStage.OPTIONS


def test_options_carry_into_review():
    flow = DeleteFlow(["1"])
    assert flow.after_confirm(DialogResult(DialogAction.CONFIRM)) == DeleteStage.OPTIONS
    stage = flow.after_options(DialogResult(DialogAction.CONFIRM, value={"recursive": True, "force": False}))
    assert stage == DeleteStage.IMPACT_REVIEW
    assert flow.options == DeleteOptions(recursive=True, force=False)
    assert flow.after_options(DialogResult(DialogAction.CANCEL)) == DeleteStage.CLOSED


def test_recursive_option_is_sent_to_analysis():
    ctl = _controller(DeleteImpact(total_delete_count=2))
    ctl.action_delete()
    ctl.handle_dialog_key("enter")
    ctl.handle_dialog_key("space")
    ctl.handle_dialog_key("enter")
    assert ctl.service.analyzed == [(["1"], DeleteOptions(recursive=True, force=False))]


def test_confirmed_review_executes_and_offers_undo():
    ctl = _controller(DeleteImpact(total_delete_count=1))
    select_by_id(ctl.state, "2")
    toggle_multi_select(ctl.state)
    _run(ctl, _to_review(ctl))
    assert ctl.dialogs.top.buttons[0].id == "delete"

    _run(ctl, ctl.handle_dialog_key("enter"))
    assert ctl.service.deleted == [(["2"], DeleteOptions())]
    hold = next(msg for _, msg in ctl.scheduler.calls if isinstance(msg, HoldElapsedMsg))
    _run(ctl, ctl.update(hold))

    assert ctl.undo_session is not None
    assert ctl.dialogs.top is ctl.undo_session.dialog
    assert ctl.dialogs.top.lines == ["Deleted 1 task(s)", "Undo available for 20 seconds"]
    assert ctl.state.multi_selected == set()
    assert any(isinstance(msg, UndoTickMsg) for _, msg in ctl.scheduler.calls)


def test_cancel_at_confirm_closes_flow():
    ctl = _controller(DeleteImpact())
    ctl.action_delete()
    ctl.handle_dialog_key("escape")
    assert not ctl.dialogs.active
    assert ctl.service.analyzed == []


def test_analysis_error_is_shown():
    ctl = _controller(validation_error("Task Not Found", "task 1 not found"))
    _to_review(ctl)
    assert ctl.dialogs.top.kind == "error"


def test_nothing_selected():
    ctl = _controller(DeleteImpact())
    replace_tasks(ctl.state, [])
    assert ctl.action_delete() == []
    assert ctl.status_message == "Select a task to delete"


def test_review_lines_list_warnings():
    ctl = _controller(DeleteImpact())
    impact = DeleteImpact(total_delete_count=3, warnings=["2 subtasks will be removed: 1.1 (a), 1.2 (b)"])
    assert tui_delete.review_lines(ctl, impact) == [
        "Tasks to delete: 3",
        "- 2 subtasks will be removed: 1.1 (a), 1.2 (b)",
    ]


def test_cancel_arriving_after_commit_still_offers_undo():
    ctl = _controller(DeleteImpact(total_delete_count=1))
    select_by_id(ctl.state, "2")
    _run(ctl, _to_review(ctl))
    ctl.service.after_commit = lambda: ctl.handle_dialog_key("escape")

    _run(ctl, ctl.handle_dialog_key("enter"))
    assert ctl.service.deleted == [(["2"], DeleteOptions())]
    assert ctl.workflows.active(WorkflowKind.DELETE).held.outcome == Outcome.SUCCEEDED
    assert ctl.cancel_workflow(WorkflowKind.DELETE) == []
    assert ("warning", "Delete had already saved its changes; cancel ignored") in [
        (level, message) for _, level, message in ctl.state.activity
    ]

    hold = next(msg for _, msg in ctl.scheduler.calls if isinstance(msg, HoldElapsedMsg))
    _run(ctl, ctl.update(hold))
    assert ctl.undo_session is not None
    assert ctl.dialogs.top is ctl.undo_session.dialog
    assert not any(d.kind == "notification" and d.level == "cancelled" for d in ctl.dialogs.dialogs())
    assert ctl.state.visible == []

from core.desktop.devtools.interface.tui_controller import DashboardController, build_dispatch_table
from core.desktop.devtools.interface.tui_dialogs import ErrorDialog, NotificationDialog, ProgressDialog
from core.desktop.devtools.interface.tui_messages import (
    MESSAGE_TYPES,
    HoldElapsedMsg,
    NotificationTimeoutMsg,
    TasksLoadedMsg,
    TasksReloadedMsg,
    WorkflowKind,
)
from core.desktop.devtools.interface.tui_runtime import TimerHandle
from core.desktop.devtools.interface.tui_workflows import WorkflowOrchestrator
from application.task_service import ExpandResult
from core.errors import ErrorCategory
from core.expansion import ExpandProgress
from core.status import TaskStatus
from core.task import Task, clone_tasks
from infrastructure.ui_state_store import UIState, UIStateStore
from util.channel import Channel

KIND = WorkflowKind.EXPAND


class FakeService:
    def __init__(self):
        self.tasks = [Task("1", "One", subtasks=[Task("1.1", "a"), Task("1.2", "b")]), Task("2", "Two")]
        self.fail_load = None
        self.loads = 0
        self.status_changes = []
        self.stopped = False
        self.next = None
        self.reloads = Channel(1)
        self.reloads.close()

    def load_tasks(self):
        self.loads += 1
        if self.fail_load is not None:
            raise self.fail_load

    def get_tasks(self):
        return clone_tasks(self.tasks), ["master"]

    def validation_warnings(self):
        return []

    def reload_events(self):
        return self.reloads

    def set_task_status(self, task_id, status):
        self.status_changes.append((task_id, status))

    def next_task(self):
        return self.next

    def stop_watcher(self):
        self.stopped = True


class Scheduler:
    def __init__(self):
        self.calls = []

    def call_later(self, delay, msg):
        self.calls.append((delay, msg))
        return TimerHandle()

    def pop(self, msg_type):
        for entry in self.calls:
            if isinstance(entry[1], msg_type):
                self.calls.remove(entry)
                return entry
        return None


class DeferredSpawn:
    def __init__(self):
        self.targets = []

    def __call__(self, target, name):
        self.targets.append(target)

    def run_all(self):
        while self.targets:
            self.targets.pop(0)()


def _inline(target, name):
    target()


def _controller(spawn=_inline, ui_store=None):
    scheduler = Scheduler()
    ctl = DashboardController(
        FakeService(),
        scheduler=scheduler,
        ui_store=ui_store,
        orchestrator=WorkflowOrchestrator(spawn=spawn),
    )
    return ctl, scheduler


def _run(ctl, commands):
    pending = list(commands)
    while pending:
        msg = pending.pop(0)()
        if msg is not None:
            pending.extend(ctl.update(msg))


def _loaded(spawn=_inline):
    ctl, scheduler = _controller(spawn)
    _run(ctl, [ctl.load_command()])
    return ctl, scheduler


def _expand_work(cancel, on_progress):
    on_progress(ExpandProgress("expanding", 0.5, "2"))
    return ExpandResult(expanded_ids=["2"], created_ids=["2.1"])


def test_dispatch_table_covers_every_message():
    assert set(build_dispatch_table()) == set(MESSAGE_TYPES)


def test_unknown_message_is_ignored():
    ctl, _ = _controller()
    assert ctl.update(object()) == []


def test_init_loads_tasks():
    ctl, _ = _controller()
    commands = ctl.init_commands()
    assert ctl.state.loading
    assert len(commands) == 2
    _run(ctl, commands)
    assert not ctl.state.loading
    assert [t.id for t in ctl.state.visible] == ["1", "2"]
    assert ctl.state.tags == ["master"]
    assert ctl.service.loads == 1


def test_load_failure_surfaces_error_dialog():
    ctl, _ = _controller()
    ctl.service.fail_load = OSError("disk gone")
    _run(ctl, [ctl.load_command()])
    assert ctl.state.load_error.category == ErrorCategory.IO
    assert isinstance(ctl.dialogs.top, ErrorDialog)
    assert ctl.dialogs.top.error.title == "Failed to Load Tasks"


def test_load_restores_saved_selection(tmp_path):
    store = UIStateStore(tmp_path / "state.json")
    store.save(UIState(selected_id="1.2", view_mode="tree"))
    ctl, _ = _controller(ui_store=store)
    _run(ctl, [ctl.load_command()])
    assert ctl.state.selected_id == "1.2"
    assert "1" in ctl.state.expanded_ids
    assert ctl.pending_select_id == ""


def test_reload_message_reloads_without_disk_read():
    ctl, _ = _loaded()
    commands = ctl.update(TasksReloadedMsg())
    assert len(commands) == 2
    _run(ctl, commands)
    assert ctl.service.loads == 1


def test_workflow_success_holds_then_runs_hook():
    ctl, scheduler = _loaded()
    _run(ctl, ctl.begin_workflow(KIND, _expand_work, title="Expanding"))

    dialog = ctl.progress_dialogs[KIND]
    assert dialog.fraction == 1.0
    assert not dialog.cancellable
    delay, hold = scheduler.pop(HoldElapsedMsg)
    assert delay > 0

    commands = ctl.update(hold)
    assert KIND not in ctl.progress_dialogs
    assert not any(isinstance(d, ProgressDialog) for d in ctl.dialogs.dialogs())
    assert isinstance(ctl.dialogs.top, NotificationDialog)
    assert ctl.dialogs.top.level == "success"
    assert "2" in ctl.state.expanded_ids
    _run(ctl, commands)

    _, timeout = scheduler.pop(NotificationTimeoutMsg)
    ctl.update(timeout)
    assert not ctl.dialogs.active


def test_progress_updates_dialog():
    spawn = DeferredSpawn()
    ctl, _ = _loaded(spawn)
    commands = ctl.begin_workflow(KIND, _expand_work, title="Expanding")
    spawn.run_all()
    ctl.update(commands[0]())
    assert ctl.progress_dialogs[KIND].fraction == 0.5
    assert ctl.progress_dialogs[KIND].label == "Expanding 2"


def test_escape_cancels_running_workflow():
    spawn = DeferredSpawn()
    ctl, _ = _loaded(spawn)
    commands = ctl.begin_workflow(KIND, lambda cancel, progress: ExpandResult(expanded_ids=["2"]), title="Expanding")
    ctl.handle_dialog_key("escape")
    assert ctl.workflows.active(KIND).cancel_requested

    spawn.run_all()
    _run(ctl, commands)
    top = ctl.dialogs.top
    assert isinstance(top, NotificationDialog)
    assert top.level == "cancelled"
    assert top.title == "Task Expansion Cancelled"
    assert ctl.progress_dialogs == {}
    assert "2" not in ctl.state.expanded_ids


def test_cancel_during_completion_hold():
    ctl, scheduler = _loaded()
    _run(ctl, ctl.begin_workflow(KIND, _expand_work, title="Expanding"))
    ctl.cancel_workflow(KIND)
    assert ctl.dialogs.top.level == "cancelled"
    assert KIND not in ctl.progress_dialogs

    _, hold = scheduler.pop(HoldElapsedMsg)
    assert ctl.update(hold) == []
    assert "2" not in ctl.state.expanded_ids


def test_workflow_failure_shows_error():
    ctl, _ = _loaded()

    def work(cancel, on_progress):
        raise ValueError("depth must be positive")

    _run(ctl, ctl.begin_workflow(KIND, work, title="Expanding"))
    top = ctl.dialogs.top
    assert isinstance(top, ErrorDialog)
    assert top.error.category == ErrorCategory.VALIDATION
    assert top.error.title == "Task Expansion Failed"
    assert not ctl.workflows.is_running(KIND)


def test_stream_closing_without_result_is_an_error():
    spawn = DeferredSpawn()
    ctl, _ = _loaded(spawn)
    commands = ctl.begin_workflow(KIND, _expand_work, title="Expanding")
    ctl.workflows.active(KIND).channel.close()
    _run(ctl, commands)
    top = ctl.dialogs.top
    assert isinstance(top, ErrorDialog)
    assert top.error.message == "The operation ended without reporting a result."


def test_cycle_status_persists_through_service():
    ctl, _ = _loaded()
    commands = ctl.action_cycle_status()
    assert ctl.service.status_changes == [("1", TaskStatus.IN_PROGRESS)]
    assert len(commands) == 1


def test_next_task_reveals_and_selects():
    ctl, _ = _loaded()
    ctl.service.next = Task("1.2", "b")
    ctl.action_next_task()
    assert ctl.state.selected_id == "1.2"
    assert ctl.status_message == "Next: 1.2 b"
    ctl.service.next = None
    ctl.action_next_task()
    assert ctl.status_message == "No pending task has all dependencies done"


def test_search_mode_edits_query():
    ctl, _ = _loaded()
    ctl.begin_search()
    for key in ("T", "w", "o", "x", "backspace"):
        ctl.search_key(key)
    assert ctl.state.search_query == "Two"
    assert [t.id for t in ctl.state.visible] == ["2"]
    ctl.search_key("enter")
    assert not ctl.search_mode
    assert ctl.state.search_query == "Two"
    ctl.begin_search()
    ctl.search_key("escape")
    assert ctl.state.search_query == ""


def test_panel_and_view_toggles():
    ctl, _ = _loaded()
    ctl.action_toggle_details()
    ctl.action_toggle_log()
    ctl.action_toggle_view()
    ctl.action_cycle_filter()
    assert not ctl.state.show_details_panel
    assert ctl.state.show_log_panel
    assert ctl.state.status_filter == TaskStatus.PENDING
    assert len(ctl.action_refresh()) == 1
    assert ctl.state.loading


def test_shutdown_saves_state_and_stops_watcher(tmp_path):
    store = UIStateStore(tmp_path / "state.json")
    ctl, _ = _controller(ui_store=store)
    _run(ctl, [ctl.load_command()])
    ctl.state.expanded_ids.add("1")
    ctl.shutdown()
    assert ctl.service.stopped
    assert store.load().expanded_ids == ["1"]

"""Undo countdown shown after a destructive operation.

A session is bound to one undo token. Its timer is a scheduled tick carrying
the session id, so ticks that outlive their session are simply ignored.
"""

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from application.undo import UndoToken
from core.errors import as_app_error

from .tui_dialogs import Button, ConfirmDialog, DialogAction, DialogResult
from .tui_messages import Command, UndoCompletedMsg, UndoExpiredMsg, UndoTickMsg

UNDO_TICK = 1.0


@dataclass
class UndoSession:
    id: int
    token: UndoToken
    dialog: Optional[ConfirmDialog] = None
    timer: Optional[Any] = field(default=None, repr=False)

    def remaining(self, now: float) -> float:
        return self.token.remaining(now)


def _countdown_line(tui, remaining: float) -> str:
    return tui._t("UNDO_AVAILABLE", seconds=max(0, math.ceil(remaining)))


def _schedule_tick(tui, session: UndoSession, remaining: float) -> None:
    session.timer = tui.scheduler.call_later(min(UNDO_TICK, max(0.0, remaining)), UndoTickMsg(session.id))


def start_undo_session(tui, token: UndoToken) -> UndoSession:
    teardown_undo_session(tui, discard=False)
    session = UndoSession(id=next(tui.undo_ids), token=token)
    remaining = session.remaining(tui.clock())
    session.dialog = ConfirmDialog(
        tui._t("UNDO_TITLE"),
        [token.summary, _countdown_line(tui, remaining)],
        [
            Button(tui._t("BTN_UNDO"), DialogAction.CONFIRM, "undo"),
            Button(tui._t("BTN_DISMISS"), DialogAction.CANCEL, "dismiss"),
        ],
    )
    tui.dialogs.push(session.dialog, on_result=lambda result, sid=session.id: _on_dialog_result(tui, sid, result))
    tui.undo_session = session
    _schedule_tick(tui, session, remaining)
    return session


def teardown_undo_session(tui, *, discard: bool) -> None:
    session = tui.undo_session
    if session is None:
        return
    if session.timer is not None:
        session.timer.cancel()
        session.timer = None
    if session.dialog is not None:
        tui.dialogs.remove(session.dialog)
    if discard:
        tui.service.discard_undo(session.token.id)
    tui.undo_session = None


def _current(tui, session_id: int) -> Optional[UndoSession]:
    session = tui.undo_session
    if session is None or session.id != session_id:
        return None
    return session


def handle_undo_tick(tui, msg: UndoTickMsg) -> List[Command]:
    session = _current(tui, msg.session_id)
    if session is None:
        return []
    remaining = session.remaining(tui.clock())
    if remaining <= 0:
        session.timer = None
        return [lambda sid=session.id: UndoExpiredMsg(sid)]
    if session.dialog is not None:
        session.dialog.lines[-1] = _countdown_line(tui, remaining)
    _schedule_tick(tui, session, remaining)
    return []


def handle_undo_expired(tui, msg: UndoExpiredMsg) -> List[Command]:
    if _current(tui, msg.session_id) is None:
        return []
    tui.log(tui._t("UNDO_EXPIRED"))
    teardown_undo_session(tui, discard=True)
    return []


def _on_dialog_result(tui, session_id: int, result: DialogResult) -> List[Command]:
    session = _current(tui, session_id)
    if session is None:
        return []
    session.dialog = None
    if result.action == DialogAction.CONFIRM:
        return trigger_undo(tui)
    teardown_undo_session(tui, discard=True)
    tui.log(tui._t("UNDO_DISMISSED"))
    return []


def trigger_undo(tui) -> List[Command]:
    session = tui.undo_session
    if session is None or session.remaining(tui.clock()) <= 0:
        teardown_undo_session(tui, discard=True)
        tui.notify(tui._t("UNDO_TITLE"), tui._t("UNDO_UNAVAILABLE"))
        return []
    token_id, session_id = session.token.id, session.id
    teardown_undo_session(tui, discard=False)
    tui.set_status_message(tui._t("UNDO_RUNNING"))
    service = tui.service

    def run_undo():
        try:
            service.undo(None, token_id)
        except Exception as exc:
            return UndoCompletedMsg(session_id, exc)
        return UndoCompletedMsg(session_id)

    return [run_undo]


def handle_undo_completed(tui, msg: UndoCompletedMsg) -> List[Command]:
    if msg.error is not None:
        tui.show_error(as_app_error(msg.error, tui._t("UNDO_FAILED")))
        return []
    tui.log(tui._t("UNDO_COMPLETED"), "success")
    tui.set_status_message(tui._t("UNDO_COMPLETED"))
    return [tui.load_command(from_disk=False)]


__all__ = [
    "UNDO_TICK",
    "UndoSession",
    "start_undo_session",
    "teardown_undo_session",
    "handle_undo_tick",
    "handle_undo_expired",
    "trigger_undo",
    "handle_undo_completed",
]

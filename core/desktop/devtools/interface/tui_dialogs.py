"""Modal dialogs and the LIFO stack that routes keys to the topmost one.

Dialogs are plain objects: they take key names ("up", "enter", "escape",
"space", "backspace", "tab" or a single printable character) and answer with
a DialogResult once they are done. The stack pops the dialog and hands the
result to the callback registered on push; the callback may return commands.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from prompt_toolkit.formatted_text import FormattedText

from core.errors import AppError

Fragments = List[Tuple[str, str]]

_dialog_ids = itertools.count(1)

PROGRESS_BAR_WIDTH = 30


class DialogAction(Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    CLOSE = "close"


@dataclass(frozen=True)
class DialogResult:
    action: DialogAction
    value: Any = None
    button: str = ""


@dataclass(frozen=True)
class Button:
    label: str
    action: DialogAction
    id: str = ""


class Dialog:
    kind = "dialog"

    def __init__(self, title: str):
        self.id = next(_dialog_ids)
        self.title = title

    def handle_key(self, key: str) -> Optional[DialogResult]:
        if key == "escape":
            return DialogResult(DialogAction.CANCEL)
        return None

    def body(self) -> Fragments:
        return []

    def render(self) -> FormattedText:
        parts: Fragments = [("class:dialog.title", f" {self.title} \n")]
        parts.extend(self.body())
        return FormattedText(parts)


def _render_buttons(buttons: Sequence[Button], focused: int) -> Fragments:
    parts: Fragments = [("class:dialog", "\n")]
    for idx, button in enumerate(buttons):
        style = "class:dialog.button.focused" if idx == focused else "class:dialog.button"
        parts.append((style, f"[ {button.label} ]"))
        parts.append(("class:dialog", " "))
    return parts


class ConfirmDialog(Dialog):
    kind = "confirm"

    def __init__(self, title: str, lines: Sequence[str], buttons: Sequence[Button], selected: int = 0):
        super().__init__(title)
        self.lines = list(lines)
        self.buttons = list(buttons)
        self.selected = max(0, min(selected, len(self.buttons) - 1))

    def handle_key(self, key: str) -> Optional[DialogResult]:
        if key in ("left", "s-tab", "up"):
            self.selected = (self.selected - 1) % len(self.buttons)
        elif key in ("right", "tab", "down"):
            self.selected = (self.selected + 1) % len(self.buttons)
        elif key == "enter":
            button = self.buttons[self.selected]
            return DialogResult(button.action, button=button.id)
        elif key in ("y", "н"):
            for button in self.buttons:
                if button.action == DialogAction.CONFIRM:
                    return DialogResult(button.action, button=button.id)
        elif key in ("escape", "n", "т"):
            return DialogResult(DialogAction.CANCEL)
        return None

    def body(self) -> Fragments:
        parts: Fragments = [("class:dialog", f"{line}\n") for line in self.lines]
        parts.extend(_render_buttons(self.buttons, self.selected))
        return parts


# ---------------------------------------------------------------------- forms


@dataclass
class CheckboxField:
    name: str
    label: str
    value: bool = False

    def handle_key(self, key: str) -> bool:
        if key in ("space", "x"):
            self.value = not self.value
            return True
        return False

    def render(self) -> str:
        return f"[{'x' if self.value else ' '}] {self.label}"


@dataclass
class RadioField:
    name: str
    label: str
    options: List[Tuple[str, str]]
    value: str = ""

    def __post_init__(self) -> None:
        if not self.value and self.options:
            self.value = self.options[0][0]

    def _step(self, delta: int) -> None:
        values = [opt[0] for opt in self.options]
        idx = values.index(self.value) if self.value in values else 0
        self.value = values[(idx + delta) % len(values)]

    def handle_key(self, key: str) -> bool:
        if key in ("space", "right"):
            self._step(1)
            return True
        if key == "left":
            self._step(-1)
            return True
        return False

    def render(self) -> str:
        choices = "  ".join(f"({'•' if value == self.value else ' '}) {label}" for value, label in self.options)
        return f"{self.label}: {choices}"


@dataclass
class TextField:
    name: str
    label: str
    value: str = ""

    def handle_key(self, key: str) -> bool:
        if key == "backspace":
            self.value = self.value[:-1]
            return True
        if key == "space":
            self.value += " "
            return True
        if len(key) == 1 and key.isprintable():
            self.value += key
            return True
        return False

    def render(self) -> str:
        return f"{self.label}: {self.value}▏"


@dataclass
class NumberField:
    name: str
    label: str
    value: int = 0
    minimum: int = 0
    maximum: int = 99

    def handle_key(self, key: str) -> bool:
        if key in ("right", "+"):
            self.value = min(self.maximum, self.value + 1)
            return True
        if key in ("left", "-"):
            self.value = max(self.minimum, self.value - 1)
            return True
        if key.isdigit() and len(key) == 1:
            self.value = max(self.minimum, min(self.maximum, int(key)))
            return True
        return False

    def render(self) -> str:
        return f"{self.label}: ◂ {self.value} ▸"


FormField = Union[CheckboxField, RadioField, TextField, NumberField]


class FormDialog(Dialog):
    """Fields followed by a button row; focus walks fields then buttons."""

    kind = "form"

    def __init__(
        self,
        title: str,
        fields: Sequence[FormField],
        *,
        lines: Sequence[str] = (),
        buttons: Optional[Sequence[Button]] = None,
        validate: Optional[Callable[[Dict[str, Any]], str]] = None,
    ):
        super().__init__(title)
        self.lines = list(lines)
        self.fields = list(fields)
        self.buttons = list(buttons or (Button("OK", DialogAction.CONFIRM, "ok"), Button("Cancel", DialogAction.CANCEL, "cancel")))
        self.validate = validate
        self.focus = 0
        self.error = ""

    @property
    def _slots(self) -> int:
        return len(self.fields) + len(self.buttons)

    def values(self) -> Dict[str, Any]:
        return {f.name: f.value for f in self.fields}

    def field(self, name: str) -> Optional[FormField]:
        for item in self.fields:
            if item.name == name:
                return item
        return None

    def _submit(self, button: Button) -> Optional[DialogResult]:
        if button.action != DialogAction.CONFIRM:
            return DialogResult(button.action, button=button.id)
        values = self.values()
        if self.validate:
            self.error = self.validate(values) or ""
            if self.error:
                return None
        return DialogResult(DialogAction.CONFIRM, value=values, button=button.id)

    def handle_key(self, key: str) -> Optional[DialogResult]:
        if key == "escape":
            return DialogResult(DialogAction.CANCEL)
        if key in ("tab", "down"):
            self.focus = (self.focus + 1) % self._slots
            return None
        if key in ("s-tab", "up"):
            self.focus = (self.focus - 1) % self._slots
            return None
        on_field = self.focus < len(self.fields)
        if key == "enter":
            if on_field:
                # Enter on a field submits with the first (primary) button.
                return self._submit(self.buttons[0])
            return self._submit(self.buttons[self.focus - len(self.fields)])
        if on_field:
            self.fields[self.focus].handle_key(key)
        elif key in ("left", "right"):
            offset = self.focus - len(self.fields)
            step = 1 if key == "right" else -1
            self.focus = len(self.fields) + (offset + step) % len(self.buttons)
        return None

    def body(self) -> Fragments:
        parts: Fragments = [("class:dialog", f"{line}\n") for line in self.lines]
        for idx, item in enumerate(self.fields):
            style = "class:dialog.field.focused" if idx == self.focus else "class:dialog.field"
            parts.append((style, item.render()))
            parts.append(("class:dialog", "\n"))
        if self.error:
            parts.append(("class:dialog.error", f"{self.error}\n"))
        focused_button = self.focus - len(self.fields)
        parts.extend(_render_buttons(self.buttons, focused_button))
        return parts


# ---------------------------------------------------------------------- progress / lists / notices


class ProgressDialog(Dialog):
    kind = "progress"

    def __init__(self, title: str, label: str = "", *, cancellable: bool = True):
        super().__init__(title)
        self.label = label
        self.detail = ""
        self.fraction = 0.0
        self.cancellable = cancellable

    def update(self, fraction: Optional[float] = None, label: Optional[str] = None, detail: Optional[str] = None) -> None:
        if fraction is not None:
            self.fraction = max(0.0, min(1.0, float(fraction)))
        if label is not None:
            self.label = label
        if detail is not None:
            self.detail = detail

    def handle_key(self, key: str) -> Optional[DialogResult]:
        if self.cancellable and key in ("escape", "c", "с"):
            return DialogResult(DialogAction.CANCEL)
        return None

    def body(self) -> Fragments:
        filled = int(round(self.fraction * PROGRESS_BAR_WIDTH))
        parts: Fragments = []
        if self.label:
            parts.append(("class:dialog", f"{self.label}\n"))
        parts.append(("class:progress.bar", "█" * filled))
        parts.append(("class:progress.empty", "░" * (PROGRESS_BAR_WIDTH - filled)))
        parts.append(("class:dialog", f" {int(self.fraction * 100):3d}%\n"))
        if self.detail:
            parts.append(("class:text.dim", f"{self.detail}\n"))
        if self.cancellable:
            parts.append(("class:text.dim", "Esc: cancel"))
        return parts


@dataclass
class ListRow:
    value: Any
    text: str
    style: str = "class:dialog"


class ListDialog(Dialog):
    """Selectable rows; extra single-key shortcuts confirm with their button id."""

    kind = "list"

    def __init__(
        self,
        title: str,
        rows: Sequence[ListRow],
        *,
        header: Sequence[str] = (),
        shortcuts: Optional[Dict[str, str]] = None,
        hint: str = "",
        page_size: int = 12,
    ):
        super().__init__(title)
        self.rows = list(rows)
        self.header = list(header)
        self.shortcuts = dict(shortcuts or {})
        self.hint = hint
        self.page_size = page_size
        self.selected = 0
        self.offset = 0

    def _move(self, delta: int) -> None:
        if not self.rows:
            return
        self.selected = max(0, min(self.selected + delta, len(self.rows) - 1))
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + self.page_size:
            self.offset = self.selected - self.page_size + 1

    def handle_key(self, key: str) -> Optional[DialogResult]:
        if key in ("down", "j"):
            self._move(1)
        elif key in ("up", "k"):
            self._move(-1)
        elif key == "pagedown":
            self._move(self.page_size)
        elif key == "pageup":
            self._move(-self.page_size)
        elif key == "enter":
            if not self.rows:
                return DialogResult(DialogAction.CLOSE)
            return DialogResult(DialogAction.CONFIRM, value=self.rows[self.selected].value, button="select")
        elif key in ("escape", "q"):
            return DialogResult(DialogAction.CLOSE)
        elif key in self.shortcuts:
            value = self.rows[self.selected].value if self.rows else None
            return DialogResult(DialogAction.CONFIRM, value=value, button=self.shortcuts[key])
        return None

    def body(self) -> Fragments:
        parts: Fragments = [("class:dialog", f"{line}\n") for line in self.header]
        window = self.rows[self.offset : self.offset + self.page_size]
        for pos, row in enumerate(window, start=self.offset):
            marker = "▶ " if pos == self.selected else "  "
            style = "class:selected" if pos == self.selected else row.style
            parts.append((style, f"{marker}{row.text}\n"))
        if len(self.rows) > self.page_size:
            parts.append(("class:text.dim", f"{self.selected + 1}/{len(self.rows)}\n"))
        if self.hint:
            parts.append(("class:text.dim", self.hint))
        return parts


NOTIFICATION_LEVELS = ("info", "success", "warning", "error", "cancelled")


class NotificationDialog(Dialog):
    kind = "notification"

    def __init__(self, title: str, message: str, level: str = "info", duration: float = 3.0):
        super().__init__(title)
        self.message = message
        self.level = level if level in NOTIFICATION_LEVELS else "info"
        self.duration = duration

    def handle_key(self, key: str) -> Optional[DialogResult]:
        return DialogResult(DialogAction.CLOSE)

    def render(self) -> FormattedText:
        return FormattedText(
            [
                (f"class:notify.{self.level}", f" {self.title} \n"),
                ("class:dialog", self.message),
            ]
        )


class ErrorDialog(Dialog):
    kind = "error"

    def __init__(self, error: AppError):
        super().__init__(error.title)
        self.error = error

    def handle_key(self, key: str) -> Optional[DialogResult]:
        if key in ("enter", "escape", "q", "space"):
            return DialogResult(DialogAction.CLOSE)
        return None

    def render(self) -> FormattedText:
        parts: Fragments = [
            ("class:notify.error", f" {self.error.title} \n"),
            ("class:dialog", f"{self.error.display_message()}\n\n"),
            ("class:text.dim", self.error.recovery_message()),
            ("class:dialog", "\n"),
        ]
        parts.extend(_render_buttons([Button("Close", DialogAction.CLOSE)], 0))
        return FormattedText(parts)


# ---------------------------------------------------------------------- stack


OnResult = Callable[[DialogResult], Optional[List[Callable]]]


@dataclass
class _Entry:
    dialog: Dialog
    on_result: Optional[OnResult] = field(default=None, repr=False)


class DialogStack:
    def __init__(self) -> None:
        self._entries: List[_Entry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @property
    def active(self) -> bool:
        return bool(self._entries)

    @property
    def top(self) -> Optional[Dialog]:
        return self._entries[-1].dialog if self._entries else None

    def dialogs(self) -> List[Dialog]:
        return [entry.dialog for entry in self._entries]

    def push(self, dialog: Dialog, on_result: Optional[OnResult] = None) -> Dialog:
        self._entries.append(_Entry(dialog, on_result))
        return dialog

    def pop(self) -> Optional[Dialog]:
        if not self._entries:
            return None
        return self._entries.pop().dialog

    def replace_top(self, dialog: Dialog, on_result: Optional[OnResult] = None) -> Dialog:
        if self._entries:
            self._entries.pop()
        return self.push(dialog, on_result)

    def find(self, kind: Union[str, type]) -> Optional[Dialog]:
        """Topmost dialog of a kind name or class."""
        for entry in reversed(self._entries):
            dialog = entry.dialog
            if isinstance(kind, str) and dialog.kind == kind:
                return dialog
            if isinstance(kind, type) and isinstance(dialog, kind):
                return dialog
        return None

    def find_by_id(self, dialog_id: int) -> Optional[Dialog]:
        for entry in self._entries:
            if entry.dialog.id == dialog_id:
                return entry.dialog
        return None

    def remove(self, dialog: Optional[Dialog]) -> bool:
        for pos, entry in enumerate(self._entries):
            if entry.dialog is dialog:
                del self._entries[pos]
                return True
        return False

    def clear(self) -> None:
        self._entries = []

    def resolve(self, result: DialogResult) -> List[Callable]:
        """Pop the top dialog and run its callback; returns whatever commands it produced."""
        if not self._entries:
            return []
        entry = self._entries.pop()
        if entry.on_result is None:
            return []
        return [cmd for cmd in (entry.on_result(result) or []) if cmd is not None]

    def handle_key(self, key: str) -> List[Callable]:
        top = self.top
        if top is None:
            return []
        result = top.handle_key(key)
        if result is None:
            return []
        return self.resolve(result)


__all__ = [
    "DialogAction",
    "DialogResult",
    "Button",
    "Dialog",
    "ConfirmDialog",
    "CheckboxField",
    "RadioField",
    "TextField",
    "NumberField",
    "FormDialog",
    "ProgressDialog",
    "ListRow",
    "ListDialog",
    "NotificationDialog",
    "ErrorDialog",
    "DialogStack",
    "NOTIFICATION_LEVELS",
]

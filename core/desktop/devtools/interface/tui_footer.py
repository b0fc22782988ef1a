"""Footer renderer: key hints for the current mode."""

from typing import List, Tuple

from prompt_toolkit.formatted_text import FormattedText

MAIN_HINTS: Tuple[Tuple[str, str], ...] = (
    ("↑↓", "HINT_MOVE"),
    ("←→", "HINT_FOLD"),
    ("space", "HINT_MARK"),
    ("s", "HINT_STATUS"),
    ("n", "HINT_NEXT"),
    ("a", "HINT_COMPLEXITY"),
    ("i", "HINT_IMPORT"),
    ("E", "HINT_EXPAND"),
    ("x", "HINT_DELETE"),
    ("u", "HINT_UNDO"),
    ("f", "HINT_FILTER"),
    ("/", "HINT_SEARCH"),
    ("v", "HINT_VIEW"),
    ("d", "HINT_DETAILS"),
    ("L", "HINT_LOG"),
    ("r", "HINT_REFRESH"),
    ("q", "HINT_QUIT"),
)

DIALOG_HINTS: Tuple[Tuple[str, str], ...] = (
    ("tab", "HINT_DIALOG_FOCUS"),
    ("enter", "HINT_DIALOG_CONFIRM"),
    ("esc", "HINT_DIALOG_CANCEL"),
)

SEARCH_HINTS: Tuple[Tuple[str, str], ...] = (
    ("enter", "HINT_SEARCH_APPLY"),
    ("esc", "HINT_SEARCH_CLEAR"),
)


def _hints(tui) -> Tuple[Tuple[str, str], ...]:
    if tui.dialogs.active:
        return DIALOG_HINTS
    if getattr(tui, "search_mode", False):
        return SEARCH_HINTS
    return MAIN_HINTS


def build_footer_text(tui) -> FormattedText:
    parts: List[Tuple[str, str]] = []
    for pos, (key, label_key) in enumerate(_hints(tui)):
        if pos:
            parts.append(("class:footer", "  "))
        parts.append(("class:footer.key", key))
        parts.append(("class:footer", f" {tui._t(label_key)}"))
    return FormattedText(parts)


__all__ = ["build_footer_text", "MAIN_HINTS", "DIALOG_HINTS", "SEARCH_HINTS"]

"""Display utilities: text width, trimming, padding and wrapping."""

from typing import List

from wcwidth import wcwidth


def _char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w is None or w < 0:
        return 0
    return w


def display_width(text: str) -> int:
    """Return visual width of text accounting for wide/narrow characters."""
    return sum(_char_width(ch) for ch in text)


def trim_display(text: str, width: int, ellipsis: str = "") -> str:
    """Trim text so visible width doesn't exceed specified width."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    budget = width - display_width(ellipsis)
    acc = []
    used = 0
    for ch in text:
        w = _char_width(ch)
        if used + w > budget:
            break
        acc.append(ch)
        used += w
    return "".join(acc) + ellipsis if budget > 0 else "".join(acc)


def pad_display(text: str, width: int) -> str:
    """Trim and pad with spaces to exact visible width."""
    trimmed = trim_display(text, width)
    trimmed_width = display_width(trimmed)
    if trimmed_width < width:
        trimmed += " " * (width - trimmed_width)
    return trimmed


def wrap_display(text: str, width: int) -> List[str]:
    """Wrap text into lines no wider than width, honouring explicit newlines."""
    width = max(1, width)
    lines: List[str] = []
    for paragraph in (text or "").splitlines() or [""]:
        current = ""
        used = 0
        for ch in paragraph:
            w = _char_width(ch)
            if used + w > width and current:
                lines.append(current)
                current = ch
                used = w
            else:
                current += ch
                used += w
        lines.append(current)
    return lines


__all__ = ["display_width", "trim_display", "pad_display", "wrap_display"]

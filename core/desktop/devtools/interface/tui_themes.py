#!/usr/bin/env python3
"""TUI themes and styling."""

from typing import Dict

from prompt_toolkit.styles import Style


def _palette(
    *,
    text: str,
    dim: str,
    dimmer: str,
    ok: str,
    warn: str,
    fail: str,
    info: str,
    select_bg: str,
    border: str,
    dialog_bg: str,
) -> Dict[str, str]:
    return {
        "": text,
        "text": text,
        "text.dim": dim,
        "text.dimmer": dimmer,
        "header": "#ffb347 bold",
        "border": border,
        # task statuses
        "status.pending": text,
        "status.active": f"{warn} bold",
        "status.done": f"{ok} bold",
        "status.blocked": f"{fail} bold",
        "status.deferred": dim,
        "status.cancelled": f"{dimmer} strike",
        # rows
        "selected": f"bg:{select_bg} {text} bold",
        "marked": f"{info} bold",
        "tree.guide": dimmer,
        "priority.critical": f"{fail} bold",
        "priority.high": warn,
        "priority.medium": dim,
        "priority.low": dimmer,
        "complexity": info,
        # status bar / footer
        "statusbar": f"bg:{select_bg} {text}",
        "statusbar.key": f"bg:{select_bg} {warn} bold",
        "statusbar.stale": f"bg:{select_bg} {fail} bold",
        "statusbar.spinner": f"bg:{select_bg} {info} bold",
        "footer": dim,
        "footer.key": f"{warn} bold",
        # log panel
        "log.time": dimmer,
        "log.info": text,
        "log.success": ok,
        "log.warning": warn,
        "log.error": fail,
        "log.debug": dimmer,
        # dialogs
        "dialog": f"bg:{dialog_bg} {text}",
        "dialog.title": f"bg:{dialog_bg} #ffb347 bold",
        "dialog.button": f"bg:{dialog_bg} {dim}",
        "dialog.button.focused": f"bg:{select_bg} {text} bold reverse",
        "dialog.field": f"bg:{dialog_bg} {text}",
        "dialog.field.focused": f"bg:{select_bg} {text} bold",
        "dialog.error": f"bg:{dialog_bg} {fail} bold",
        "dialog.border": f"bg:{dialog_bg} {border}",
        "progress.bar": f"bg:{dialog_bg} {ok}",
        "progress.empty": f"bg:{dialog_bg} {dimmer}",
        "notify.info": f"bg:{dialog_bg} {info} bold",
        "notify.success": f"bg:{dialog_bg} {ok} bold",
        "notify.warning": f"bg:{dialog_bg} {warn} bold",
        "notify.error": f"bg:{dialog_bg} {fail} bold",
        "notify.cancelled": f"bg:{dialog_bg} {dim} bold",
    }


THEMES: Dict[str, Dict[str, str]] = {
    "dark-olive": _palette(
        text="#d7dfe6",
        dim="#97a0a9",
        dimmer="#6d717a",
        ok="#9ad974",
        warn="#e5c07b",
        fail="#e06c75",
        info="#7fb4e0",
        select_bg="#3b3b3b",
        border="#4b525a",
        dialog_bg="#262a2e",
    ),
    "dark-contrast": _palette(
        text="#e8eaec",
        dim="#a7b0ba",
        dimmer="#6f757d",
        ok="#b8f171",
        warn="#f0c674",
        fail="#ff6b6b",
        info="#8cc8ff",
        select_bg="#3d4047",
        border="#5a6169",
        dialog_bg="#1f2226",
    ),
}

DEFAULT_THEME = "dark-olive"


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme)
    if not base:
        base = THEMES[DEFAULT_THEME]
    return dict(base)


def build_style(theme: str) -> Style:
    """Build Style object from theme name."""
    palette = get_theme_palette(theme)
    return Style.from_dict(palette)


__all__ = ["THEMES", "DEFAULT_THEME", "get_theme_palette", "build_style"]

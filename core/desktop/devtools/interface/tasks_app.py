#!/usr/bin/env python3
"""
task-dashboard: interactive terminal dashboard over a Task Master project.

Tasks live in .taskmaster/tasks/tasks.json under the project root.

This is a thin facade: argument parsing and logging setup, then the TUI.
"""

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version
from typing import List, Optional

from config import get_default_view_mode, get_watch_enabled

from .constants import APP_NAME, APP_VERSION
from .tui_app import TaskDashboardTUI, cmd_tui
from .tui_themes import DEFAULT_THEME, THEMES

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Interactive dashboard for a hierarchical task list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--project", "-p", default=".", help="project root containing .taskmaster/")
    parser.add_argument("--tag", default="", help="task list tag inside tasks.json")
    parser.add_argument("--theme", choices=list(THEMES.keys()), default=None, help=f"palette (default: {DEFAULT_THEME})")
    parser.add_argument("--view", choices=["tree", "list"], default=None, help="initial view mode")
    parser.add_argument("--lang", default=None, help="interface language (en, ru)")
    parser.add_argument("--no-watch", dest="watch", action="store_false", default=None, help="do not reload on external file changes")
    parser.add_argument("--log-file", default=None, help="write diagnostic logs to this file")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    return parser


def configure_logging(log_file: Optional[str], level: str = "INFO") -> None:
    """Route logs to a file, or silence them; the terminal belongs to the TUI."""
    root = logging.getLogger("task_dashboard")
    root.setLevel(getattr(logging, level, logging.INFO))
    root.propagate = False
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        try:
            print(pkg_version(APP_NAME))
        except PackageNotFoundError:
            print(APP_VERSION)
        return 0
    if args.watch is None:
        args.watch = get_watch_enabled()
    if args.view is None:
        args.view = get_default_view_mode()
    configure_logging(args.log_file, args.log_level)
    return cmd_tui(args)


__all__ = ["build_parser", "configure_logging", "main", "cmd_tui", "TaskDashboardTUI", "THEMES", "DEFAULT_THEME"]


if __name__ == "__main__":
    sys.exit(main())

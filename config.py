from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Dict, Any

DEFAULT_UNDO_TTL = 20.0


def _config_path() -> Path:
    override = os.getenv("TASK_DASHBOARD_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".task_dashboard_config.yaml"


def _load_config() -> Dict[str, Any]:
    path = _config_path()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    path = _config_path()
    if not data:
        if path.exists():
            path.unlink()
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _set_value(key: str, value: Any) -> None:
    data = _load_config()
    if value in (None, ""):
        data.pop(key, None)
    else:
        data[key] = value
    _save_config(data)


def get_user_lang() -> str:
    return str(_load_config().get("lang", "") or "").strip()


def set_user_lang(value: str) -> None:
    _set_value("lang", (value or "").strip())


def get_user_theme() -> str:
    return str(_load_config().get("theme", "") or "").strip()


def set_user_theme(value: str) -> None:
    _set_value("theme", (value or "").strip())


def get_undo_ttl() -> float:
    raw = _load_config().get("undo_ttl", DEFAULT_UNDO_TTL)
    try:
        ttl = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_UNDO_TTL
    return ttl if ttl > 0 else DEFAULT_UNDO_TTL


def get_default_view_mode() -> str:
    mode = str(_load_config().get("view_mode", "tree") or "tree").strip().lower()
    return mode if mode in ("tree", "list") else "tree"


def get_watch_enabled() -> bool:
    return bool(_load_config().get("watch", True))

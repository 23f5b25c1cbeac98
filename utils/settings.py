# utils/settings.py
import json
import logging
from pathlib import Path
from typing import Any, Dict

from utils.config import SETTINGS_PATH, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


def _read_json(path: str):
    p = Path(path)
    if not p.exists():
        return None
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read settings from {path}: {e}", exc_info=True)
        return None


def _write_json(path: str, obj):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(json.dumps(obj, indent=2), encoding="utf-8")


def load_settings(path: str = SETTINGS_PATH) -> Dict[str, Any]:
    data = _read_json(path)
    if not isinstance(data, dict) or not data:
        data = DEFAULT_SETTINGS.copy()
        _write_json(path, data)
    # backfill any new keys
    changed = False
    for k, v in DEFAULT_SETTINGS.items():
        if k not in data:
            data[k] = v
            changed = True
    if changed:
        _write_json(path, data)
    return data


def save_settings(updates: dict, path: str = SETTINGS_PATH) -> Dict[str, Any]:
    data = load_settings(path)
    data.update(updates)
    _write_json(path, data)
    return data


def validate_settings(settings: Dict[str, Any]) -> None:
    """Raise ValueError if the bot can't start with these settings."""
    if not settings.get("font_path"):
        raise ValueError("font_path is not set")
    for k in ("grid_width", "grid_height"):
        v = settings.get(k)
        if not isinstance(v, int) or isinstance(v, bool) or v < 1:
            raise ValueError(f"{k} must be a positive integer ({v!r})")
    if not settings.get("command_prefix"):
        raise ValueError("command_prefix is not set")


def layout_from_settings(settings: Dict[str, Any]) -> Dict[str, int]:
    """Renderer keyword arguments taken from settings."""
    return {
        "grid_width": settings.get("grid_width", DEFAULT_SETTINGS["grid_width"]),
        "grid_height": settings.get("grid_height", DEFAULT_SETTINGS["grid_height"]),
    }

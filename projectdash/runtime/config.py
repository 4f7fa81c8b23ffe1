"""Persistent JSON settings helpers.

Stores the projects root, scan depth, skip patterns, and list preferences.
All access is defensive: malformed or missing settings fall back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

from ..project_tree import ScanParams

logger = logging.getLogger(__name__)

APP_NAME = "projectdash"
SETTINGS_FILENAME = "settings.json"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
SETTINGS_PATH = CONFIG_DIR / SETTINGS_FILENAME

DEFAULT_SKIP_DIRS = "node_modules,.git,vendor,dist,build,.next,__pycache__"


@dataclass(frozen=True)
class Settings:
    """User-tunable settings; the first three fields derive ``ScanParams``."""

    projects_dir: str = str(Path.home() / "projects")
    max_depth: int = 4
    skip_dirs: str = DEFAULT_SKIP_DIRS
    recent_count: int = 5
    visible_rows: int = 12
    show_shortcuts: bool = True

    def scan_params(self) -> ScanParams:
        return ScanParams.from_settings(self.projects_dir, self.max_depth, self.skip_dirs)


DEFAULT_SETTINGS = Settings()

# JSON key -> (field name, min, max) for bounded integer settings.
_INT_FIELDS: dict[str, tuple[str, int, int]] = {
    "maxDepth": ("max_depth", 1, 10),
    "recentCount": ("recent_count", 1, 50),
    "visibleRows": ("visible_rows", 5, 30),
}
_STR_FIELDS: dict[str, str] = {
    "projectsDir": "projects_dir",
    "skipDirs": "skip_dirs",
}


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON settings object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path or SETTINGS_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist settings data as pretty-printed JSON, ignoring write errors."""
    config_path = path or SETTINGS_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.debug("save_config: ignoring write error for %s (%s)", config_path, exc)


def _coerce_bounded_int(value: object, default: int, low: int, high: int) -> int:
    """Clamp integer JSON values into ``[low, high]``; other types use ``default``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(low, min(high, value))


def settings_from_dict(data: dict[str, object]) -> Settings:
    """Merge a raw settings object over the defaults with type validation."""
    updates: dict[str, object] = {}
    for key, field_name in _STR_FIELDS.items():
        value = data.get(key)
        if isinstance(value, str) and (value.strip() or key == "skipDirs"):
            updates[field_name] = value
    for key, (field_name, low, high) in _INT_FIELDS.items():
        if key in data:
            default = getattr(DEFAULT_SETTINGS, field_name)
            updates[field_name] = _coerce_bounded_int(data[key], default, low, high)
    show_shortcuts = data.get("showShortcuts")
    if isinstance(show_shortcuts, bool):
        updates["show_shortcuts"] = show_shortcuts
    return replace(DEFAULT_SETTINGS, **updates)


def settings_to_dict(settings: Settings) -> dict[str, object]:
    """Serialize settings using the camelCase keys of the settings file."""
    raw = asdict(settings)
    out: dict[str, object] = {key: raw[field_name] for key, field_name in _STR_FIELDS.items()}
    for key, (field_name, _low, _high) in _INT_FIELDS.items():
        out[key] = raw[field_name]
    out["showShortcuts"] = raw["show_shortcuts"]
    return out


def load_settings(path: Path | None = None) -> Settings:
    """Return persisted settings merged over defaults."""
    return settings_from_dict(load_config(path))


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Persist ``settings``, keeping unrelated keys already in the file."""
    config = load_config(path)
    config.update(settings_to_dict(settings))
    save_config(config, path)


def settings_change_requires_rescan(previous: Settings, current: Settings) -> bool:
    """Return whether a settings change invalidates the cached scan."""
    return previous.scan_params() != current.scan_params()


__all__ = [
    "CONFIG_DIR",
    "SETTINGS_PATH",
    "DEFAULT_SKIP_DIRS",
    "Settings",
    "DEFAULT_SETTINGS",
    "load_config",
    "save_config",
    "settings_from_dict",
    "settings_to_dict",
    "load_settings",
    "save_settings",
    "settings_change_requires_rescan",
]

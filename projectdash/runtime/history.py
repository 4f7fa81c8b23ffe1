"""Read-only loaders for recent-project history and saved shortcuts.

Both files are owned by the external persistence layer; this module only
decodes them. Missing or corrupt files read as empty lists.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..navigation.types import RecentEntry, Shortcut
from .config import CONFIG_DIR

logger = logging.getLogger(__name__)

HISTORY_PATH = CONFIG_DIR / "history.json"
SHORTCUTS_PATH = CONFIG_DIR / "shortcuts.json"


def _read_json_list(path: Path, key: str) -> list[object]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as exc:
        logger.debug("history: ignoring unreadable %s (%s)", path, exc)
        return []
    if not isinstance(data, dict):
        return []
    value = data.get(key)
    return value if isinstance(value, list) else []


def _number(value: object, default: float = 0.0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def load_recent_entries(limit: int = 5, path: Path | None = None) -> list[RecentEntry]:
    """Return up to ``limit`` recent entries, most recently used first."""
    entries: list[RecentEntry] = []
    for raw in _read_json_list(path or HISTORY_PATH, "recent"):
        if not isinstance(raw, dict):
            continue
        raw_path = raw.get("path")
        if not isinstance(raw_path, str) or not raw_path:
            continue
        display_name = raw.get("displayName")
        if not isinstance(display_name, str) or not display_name:
            display_name = Path(raw_path).name
        entries.append(
            RecentEntry(
                path=Path(raw_path),
                display_name=display_name,
                last_used=_number(raw.get("lastUsed")),
            )
        )
    entries.sort(key=lambda entry: entry.last_used, reverse=True)
    return entries[: max(0, limit)]


def load_shortcuts(path: Path | None = None) -> list[Shortcut]:
    """Return shortcuts in their saved display order."""
    decoded: list[tuple[float, float, Shortcut]] = []
    for index, raw in enumerate(_read_json_list(path or SHORTCUTS_PATH, "shortcuts")):
        if not isinstance(raw, dict):
            continue
        name = raw.get("name")
        trigger = raw.get("trigger")
        command = raw.get("command")
        if not isinstance(name, str) or not isinstance(trigger, str) or not isinstance(command, list):
            continue
        pinned = raw.get("pinned", True)
        decoded.append(
            (
                _number(raw.get("order"), float(index)),
                _number(raw.get("createdAt")),
                Shortcut(
                    name=name,
                    trigger=trigger,
                    command=tuple(str(part) for part in command if isinstance(part, str) and part.strip()),
                    pinned=pinned if isinstance(pinned, bool) else True,
                ),
            )
        )
    decoded.sort(key=lambda item: (item[0], item[1]))
    return [shortcut for _order, _created, shortcut in decoded]


__all__ = [
    "HISTORY_PATH",
    "SHORTCUTS_PATH",
    "load_recent_entries",
    "load_shortcuts",
]

"""Opt-in debug log written to the per-user log directory.

Modules log through ``logging.getLogger(__name__)``; nothing is emitted
unless ``configure_debug_logging`` attached the file handler.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "projectdash"
DEBUG_ENV_VAR = "PROJECTDASH_DEBUG"
LOG_FILENAME = "debug.log"
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME

_handler: logging.Handler | None = None


class _ElapsedFormatter(logging.Formatter):
    """Prefix lines with milliseconds elapsed since logging started."""

    def format(self, record: logging.LogRecord) -> str:
        return f"[+{int(record.relativeCreated):6d}ms] {record.getMessage()}"


def debug_enabled_from_env() -> bool:
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "on"}


def configure_debug_logging(enabled: bool | None = None, log_path: Path | None = None) -> Path | None:
    """Start a fresh debug log for this session and return its path.

    ``enabled=None`` defers to the ``PROJECTDASH_DEBUG`` environment variable.
    Returns ``None`` when logging stays disabled or the file cannot be opened.
    """
    global _handler
    if enabled is None:
        enabled = debug_enabled_from_env()
    package_logger = logging.getLogger(APP_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler.close()
        _handler = None
    if not enabled:
        return None

    target = log_path or LOG_PATH
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"=== Debug log started at {datetime.now().isoformat()} ===\n", encoding="utf-8")
        handler = logging.FileHandler(target, mode="a", encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(_ElapsedFormatter())
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    _handler = handler
    return target


__all__ = [
    "DEBUG_ENV_VAR",
    "LOG_PATH",
    "configure_debug_logging",
    "debug_enabled_from_env",
]

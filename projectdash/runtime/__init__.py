"""Side-effectful runtime layers: settings, cache, history, and scan workers."""

from __future__ import annotations

from .cache import CacheRecord, ScanCache
from .config import DEFAULT_SETTINGS, Settings, load_settings, save_settings, settings_change_requires_rescan
from .debug_log import configure_debug_logging
from .history import load_recent_entries, load_shortcuts
from .scan_coordinator import ProjectListUpdate, ScanCoordinator
from .app import ProjectDashApp

__all__ = [
    "CacheRecord",
    "ScanCache",
    "DEFAULT_SETTINGS",
    "Settings",
    "load_settings",
    "save_settings",
    "settings_change_requires_rescan",
    "configure_debug_logging",
    "load_recent_entries",
    "load_shortcuts",
    "ProjectListUpdate",
    "ScanCoordinator",
    "ProjectDashApp",
]

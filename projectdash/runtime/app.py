"""Wire settings, history, the scan coordinator, and a navigator session.

``ProjectDashApp`` is what an interactive front end drives: call ``start``
once, ``poll`` from the event loop, and route user actions to ``session``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..navigation import NavigatorSession, RecentEntry, Shortcut
from .config import Settings, load_settings, settings_change_requires_rescan
from .history import load_recent_entries, load_shortcuts
from .scan_coordinator import ProjectListUpdate, ScanCoordinator

logger = logging.getLogger(__name__)


@dataclass
class ProjectDashApp:
    """Session owner connecting background scans to the navigation model."""

    settings: Settings = field(default_factory=load_settings)
    coordinator: ScanCoordinator = field(default_factory=ScanCoordinator)
    load_shortcuts: Callable[[], list[Shortcut]] = load_shortcuts
    load_recent_entries: Callable[[int], list[RecentEntry]] = load_recent_entries
    session: NavigatorSession = field(init=False)

    def __post_init__(self) -> None:
        self.session = NavigatorSession(
            root_dir=self.settings.projects_dir,
            shortcuts=self.load_shortcuts(),
            recents=self.load_recent_entries(self.settings.recent_count),
            visible_rows=self.settings.visible_rows,
            show_shortcuts=self.settings.show_shortcuts,
        )

    def start(self) -> bool:
        """Kick off the concurrent cache load and fresh scan."""
        return self.coordinator.run_initial_load(self.settings.scan_params())

    def refresh(self) -> bool:
        """Rescan with current settings; no-op while a scan is running."""
        return self.coordinator.refresh(self.settings.scan_params())

    def poll(self) -> list[ProjectListUpdate]:
        """Apply finished background results to the session in arrival order."""
        params = self.settings.scan_params()
        applied: list[ProjectListUpdate] = []
        for update in self.coordinator.drain_updates():
            if update.params != params:
                logger.debug("app: dropping %s update for stale params %s", update.source, update.params)
                continue
            self.session.apply_update(update)
            applied.append(update)
        return applied

    def apply_settings(self, settings: Settings) -> bool:
        """Adopt new settings and return whether a rescan was started."""
        previous = self.settings
        self.settings = settings
        self.session.set_visible_rows(settings.visible_rows)
        self.session.set_show_shortcuts(settings.show_shortcuts)
        if settings.recent_count != previous.recent_count:
            self.session.set_recents(self.load_recent_entries(settings.recent_count))
        if not settings_change_requires_rescan(previous, settings):
            return False
        logger.debug("app: scan settings changed, refreshing")
        self.coordinator.cancel()
        self.session = NavigatorSession(
            root_dir=settings.projects_dir,
            shortcuts=self.session.shortcuts,
            recents=self.session.recents,
            visible_rows=settings.visible_rows,
            show_shortcuts=settings.show_shortcuts,
        )
        return self.refresh()

    def reload_metadata(self) -> None:
        """Re-read shortcuts and history after the external store changed them."""
        self.session.set_shortcuts(self.load_shortcuts())
        self.session.set_recents(self.load_recent_entries(self.settings.recent_count))

    def close(self) -> None:
        self.coordinator.cancel()


__all__ = ["ProjectDashApp"]

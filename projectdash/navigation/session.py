"""UI-independent navigator session over a changing project tree.

Owns the navigation stack, the built list, and the selection key. A renderer
reads ``items``/``visible_items``/``selected_index``; input handlers call the
action methods, and finished scans arrive through ``apply_update``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..project_tree import FlattenCache, ProjectNode, flattened_level_projects, projects_by_path
from ..project_tree.scanner import resolve_root_dir
from .list_builder import build_list_items
from .selection import SelectionTracker, nearest_surviving_key, selectable_indices
from .stack import NavigationStack
from .types import BackItem, EntryItem, ListItem, RecentEntry, Shortcut

if TYPE_CHECKING:
    from ..runtime.scan_coordinator import ProjectListUpdate

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
DEFAULT_VISIBLE_ROWS = 12


class NavigatorSession:
    """Searchable drill-down list with a selection that survives list changes."""

    def __init__(
        self,
        projects: list[ProjectNode] | None = None,
        *,
        root_dir: str | Path | None = None,
        shortcuts: Sequence[Shortcut] = (),
        recents: Sequence[RecentEntry] = (),
        visible_rows: int = DEFAULT_VISIBLE_ROWS,
        show_shortcuts: bool = True,
    ) -> None:
        self.stack = NavigationStack(projects)
        self.root = resolve_root_dir(str(root_dir)) if root_dir is not None else None
        self.shortcuts = list(shortcuts)
        self.recents = list(recents)
        self.visible_rows = max(1, visible_rows)
        self.show_shortcuts = show_shortcuts
        self.search_term = ""
        self.scroll_offset = 0
        self.selection_key: str | None = None
        self.flatten_cache = FlattenCache()
        self.selection = SelectionTracker()
        self._all_projects = projects_by_path(self.stack.levels[0].projects)
        self.items: list[ListItem] = []
        self._rebuild_items()

    # Read-side helpers for renderers.

    @property
    def is_at_root(self) -> bool:
        return self.stack.is_at_root

    @property
    def selected_index(self) -> int:
        return self.selection.resolve(self.selection_key, self.items)

    @property
    def selected_item(self) -> EntryItem | BackItem | None:
        if not self.items:
            return None
        item = self.items[self.selected_index]
        return item if isinstance(item, (EntryItem, BackItem)) else None

    def visible_items(self) -> list[ListItem]:
        return self.items[self.scroll_offset : self.scroll_offset + self.visible_rows]

    @property
    def hidden_above(self) -> int:
        return self.scroll_offset

    @property
    def hidden_below(self) -> int:
        return max(0, len(self.items) - self.scroll_offset - self.visible_rows)

    # List maintenance.

    def _rebuild_items(self, *, keep_neighbor: bool = False) -> None:
        old_items = self.items
        old_index = self.selection.resolve(self.selection_key, old_items) if old_items else 0
        self.items = build_list_items(
            self.stack.current,
            is_root=self.stack.is_at_root,
            shortcuts=self.shortcuts,
            recents=self.recents,
            search_term=self.search_term,
            root=self.root,
            show_shortcuts=self.show_shortcuts,
            all_projects=self._all_projects,
        )
        if self.selection_key is not None and not self.selection.contains(self.selection_key, self.items):
            if keep_neighbor:
                self.selection_key = nearest_surviving_key(old_items, old_index, self.items)
            else:
                self.selection_key = None
        if self.selection_key is None:
            item = self.selected_item
            self.selection_key = item.selection_key if item is not None else None
        self._ensure_selection_visible()

    def _ensure_selection_visible(self) -> None:
        index = self.selected_index
        if index < self.scroll_offset:
            self.scroll_offset = index
        elif index >= self.scroll_offset + self.visible_rows:
            self.scroll_offset = index - self.visible_rows + 1
        max_offset = max(0, len(self.items) - self.visible_rows)
        self.scroll_offset = max(0, min(self.scroll_offset, max_offset))

    def replace_projects(self, projects: list[ProjectNode]) -> None:
        """Swap in a new tree, re-deriving drilled levels that still exist."""
        self.stack.replace_root(projects)
        self.flatten_cache.clear()
        self._all_projects = projects_by_path(projects)

        for depth, level in enumerate(self.stack.levels[1:], start=1):
            node = self._all_projects.get(level.parent_path) if level.parent_path is not None else None
            flattened = self.flatten_cache.get(node) if node is not None else []
            if not flattened:
                logger.debug("session: %s vanished, truncating to depth %d", level.parent_path, depth)
                self.stack.truncate(depth)
                top = self.stack.current
                self.search_term = ""
                self.selection_key = top.saved_selection_key
                self.scroll_offset = top.saved_scroll_offset
                break
            level.projects = flattened_level_projects(flattened)

        self._rebuild_items(keep_neighbor=True)

    def apply_update(self, update: ProjectListUpdate) -> None:
        logger.debug("session: applying %s update with %d roots", update.source, len(update.projects))
        self.replace_projects(update.projects)

    def set_shortcuts(self, shortcuts: Sequence[Shortcut]) -> None:
        self.shortcuts = list(shortcuts)
        self._rebuild_items(keep_neighbor=True)

    def set_recents(self, recents: Sequence[RecentEntry]) -> None:
        self.recents = list(recents)
        self._rebuild_items(keep_neighbor=True)

    def set_show_shortcuts(self, show_shortcuts: bool) -> None:
        self.show_shortcuts = show_shortcuts
        self._rebuild_items(keep_neighbor=True)

    def set_visible_rows(self, visible_rows: int) -> None:
        self.visible_rows = max(1, visible_rows)
        self._ensure_selection_visible()

    # Actions.

    def set_search_term(self, search_term: str) -> None:
        """Apply a new search term and select the first matching row."""
        if search_term == self.search_term:
            return
        self.search_term = search_term
        self.selection_key = None
        self.scroll_offset = 0
        self._rebuild_items()

    def move_selection(self, delta: int) -> None:
        """Move by ``delta`` selectable rows, clamped to the list bounds."""
        positions = selectable_indices(self.items)
        if not positions:
            return
        current = self.selected_index
        position = positions.index(current) if current in positions else 0
        target = max(0, min(len(positions) - 1, position + delta))
        self.selection_key = self.items[positions[target]].selection_key
        self._ensure_selection_visible()

    def page(self, direction: int) -> None:
        self.move_selection(direction * PAGE_SIZE)

    def select_key(self, selection_key: str) -> bool:
        if not self.selection.contains(selection_key, self.items):
            return False
        self.selection_key = selection_key
        self._ensure_selection_visible()
        return True

    def drill_down(self, entry: EntryItem | None = None) -> bool:
        """Open a level listing every repository below ``entry``'s project."""
        if entry is None:
            selected = self.selected_item
            entry = selected if isinstance(selected, EntryItem) else None
        if entry is None or entry.project is None or not entry.project.has_children:
            return False
        flattened = self.flatten_cache.get(entry.project)
        if not flattened:
            return False

        self.stack.save_viewport(self.scroll_offset, entry.selection_key)
        self.stack.push(flattened_level_projects(flattened), entry.project.path)
        self.search_term = ""
        self.selection_key = None
        self.scroll_offset = 0
        self._rebuild_items()
        return True

    def go_back(self) -> bool:
        """Return to the previous level, restoring its scroll and selection."""
        if self.stack.pop() is None:
            return False
        level = self.stack.current
        self.search_term = ""
        self.selection_key = level.saved_selection_key
        self.scroll_offset = level.saved_scroll_offset
        self._rebuild_items()
        return True

    def activate(self) -> EntryItem | None:
        """Act on the selected row.

        Returns the entry to open when the selection is a destination. Back
        rows and pure container projects navigate instead and return ``None``.
        """
        item = self.selected_item
        if isinstance(item, BackItem):
            self.go_back()
            return None
        if item is None:
            return None
        project = item.project
        if project is not None and not project.is_repo and project.has_children:
            self.drill_down(item)
            return None
        return item


__all__ = [
    "PAGE_SIZE",
    "DEFAULT_VISIBLE_ROWS",
    "NavigatorSession",
]

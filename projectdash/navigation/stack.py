"""Drill-down navigation stack over project levels.

This module intentionally has no UI concerns. Frames are plain values: popping
truncates the sequence and never needs to undo shared mutation.
"""

from __future__ import annotations

from pathlib import Path

from ..project_tree import ProjectNode
from .types import NavLevel


class NavigationStack:
    """Stack of ``NavLevel`` frames whose root frame is never popped."""

    def __init__(self, root_projects: list[ProjectNode] | None = None) -> None:
        self.levels: list[NavLevel] = [NavLevel(projects=list(root_projects or ()))]

    @property
    def current(self) -> NavLevel:
        return self.levels[-1]

    @property
    def depth(self) -> int:
        return len(self.levels)

    @property
    def is_at_root(self) -> bool:
        return len(self.levels) == 1

    def push(self, projects: list[ProjectNode], parent_path: Path) -> NavLevel:
        """Append a fresh frame; callers save the previous viewport first."""
        level = NavLevel(projects=list(projects), parent_path=parent_path)
        self.levels.append(level)
        return level

    def pop(self) -> NavLevel | None:
        """Drop the top frame and return it; no-op at the root."""
        if self.is_at_root:
            return None
        return self.levels.pop()

    def save_viewport(self, scroll_offset: int, selection_key: str | None) -> None:
        """Record viewport state on the top frame only."""
        level = self.current
        level.saved_scroll_offset = max(0, scroll_offset)
        level.saved_selection_key = selection_key

    def replace_root(self, projects: list[ProjectNode]) -> None:
        self.levels[0].projects = list(projects)

    def truncate(self, depth: int) -> None:
        """Keep only the bottom ``depth`` frames (at least the root)."""
        del self.levels[max(1, depth):]


__all__ = ["NavigationStack"]

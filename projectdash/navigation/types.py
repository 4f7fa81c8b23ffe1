"""Datatypes for navigation levels, external list metadata, and list rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..project_tree import ProjectNode


@dataclass
class NavLevel:
    """One navigation frame: the projects it lists plus saved viewport state."""

    projects: list[ProjectNode]
    parent_path: Path | None = None
    saved_scroll_offset: int = 0
    saved_selection_key: str | None = None


@dataclass(frozen=True)
class Shortcut:
    """A favorite/shortcut record read from the external store."""

    name: str
    trigger: str
    command: tuple[str, ...] = ()
    pinned: bool = True


@dataclass(frozen=True)
class RecentEntry:
    """One recently visited project read from the external history store."""

    path: Path
    display_name: str
    last_used: float = 0.0


@dataclass(frozen=True)
class HeaderItem:
    """Non-selectable section label."""

    label: str


@dataclass(frozen=True)
class EntryItem:
    """Selectable row pointing at a path, optionally backed by a tree node."""

    label: str
    path: Path | None
    selection_key: str
    project: ProjectNode | None = field(default=None, compare=False)
    is_favorite: bool = False
    is_recent: bool = False
    section: str = "projects"
    shortcut: Shortcut | None = None


@dataclass(frozen=True)
class BackItem:
    """Selectable row returning to the previous navigation level."""

    selection_key: str = "back"
    label: str = "← Back"


ListItem = HeaderItem | EntryItem | BackItem


__all__ = [
    "NavLevel",
    "Shortcut",
    "RecentEntry",
    "HeaderItem",
    "EntryItem",
    "BackItem",
    "ListItem",
]

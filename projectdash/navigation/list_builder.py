"""Sectioned list rows for the current navigation level plus live filtering.

Rows are rebuilt from scratch on every change: shortcuts and recent history
first (root only), then the level's own projects, then a trailing Back row.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..project_tree import ProjectNode
from .types import BackItem, EntryItem, HeaderItem, ListItem, NavLevel, RecentEntry, Shortcut

SHORTCUTS_HEADER = "Shortcuts"
RECENT_HEADER = "Recent"
ROOT_HEADER = "All"

SECTION_SHORTCUTS = "shortcuts"
SECTION_RECENT = "recent"
SECTION_PROJECTS = "projects"


def parse_cd_target(command: str) -> Path | None:
    """Return the directory of a bare ``cd <path>`` command, else ``None``."""
    try:
        tokens = shlex.split(command)
    except ValueError:
        return None
    if len(tokens) != 2 or tokens[0] != "cd" or not tokens[1]:
        return None
    return Path(tokens[1])


def exact_favorite_path(shortcut: Shortcut) -> Path | None:
    """Return the path a shortcut goes to when its whole action is one ``cd``."""
    if len(shortcut.command) != 1:
        return None
    return parse_cd_target(shortcut.command[0])


def display_name_for_path(path: Path, root: Path | None) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators, else its name."""
    if root is not None:
        try:
            relative = path.relative_to(root)
        except ValueError:
            relative = None
        if relative is not None and relative.parts:
            return relative.as_posix()
    return path.name or str(path)


class _SelectionKeys:
    """Hand out keys unique within one built list."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def allocate(self, base: str) -> str:
        count = self._seen.get(base, 0) + 1
        self._seen[base] = count
        return base if count == 1 else f"{base}#{count}"


def filter_list_items(items: list[ListItem], search_term: str) -> list[ListItem]:
    """Keep entries whose label contains ``search_term`` (case-insensitive).

    Headers survive only when an entry below them does and the Back row always
    moves to the end. An empty term returns ``items`` itself.
    """
    if not search_term:
        return items

    needle = search_term.lower()
    filtered: list[ListItem] = []
    pending_header: HeaderItem | None = None
    back_item: BackItem | None = None

    for item in items:
        if isinstance(item, HeaderItem):
            pending_header = item
            continue
        if isinstance(item, BackItem):
            back_item = item
            continue
        if needle not in item.label.lower():
            continue
        if pending_header is not None:
            filtered.append(pending_header)
            pending_header = None
        filtered.append(item)

    if back_item is not None:
        filtered.append(back_item)
    return filtered


def build_list_items(
    level: NavLevel,
    *,
    is_root: bool,
    shortcuts: Sequence[Shortcut] = (),
    recents: Sequence[RecentEntry] = (),
    search_term: str = "",
    root: Path | None = None,
    show_shortcuts: bool = True,
    all_projects: Mapping[Path, ProjectNode] | None = None,
) -> list[ListItem]:
    """Build display rows for ``level`` and apply ``search_term``.

    Recent entries are only listed when their path is still in ``all_projects``
    (when given). At the root, projects already listed in the shortcut or
    recent sections are not repeated.
    """
    keys = _SelectionKeys()
    items: list[ListItem] = []
    exact_paths = {path for path in map(exact_favorite_path, shortcuts) if path is not None}
    recent_paths = {entry.path for entry in recents}
    listed_paths: set[Path] = set()

    def lookup(path: Path | None) -> ProjectNode | None:
        if path is None or all_projects is None:
            return None
        return all_projects.get(path)

    if is_root and show_shortcuts and not search_term:
        pinned = [shortcut for shortcut in shortcuts if shortcut.pinned]
        if pinned:
            items.append(HeaderItem(SHORTCUTS_HEADER))
        for shortcut in pinned:
            path = exact_favorite_path(shortcut)
            items.append(
                EntryItem(
                    label=shortcut.name,
                    path=path,
                    selection_key=keys.allocate(f"shortcut:{shortcut.trigger}"),
                    project=lookup(path),
                    is_favorite=True,
                    section=SECTION_SHORTCUTS,
                    shortcut=shortcut,
                )
            )
            if path is not None:
                listed_paths.add(path)

    if is_root:
        recent_rows: list[EntryItem] = []
        for entry in recents:
            if entry.path in exact_paths:
                continue
            project = lookup(entry.path)
            if all_projects is not None and project is None:
                continue
            recent_rows.append(
                EntryItem(
                    label=entry.display_name,
                    path=entry.path,
                    selection_key=keys.allocate(f"recent:{entry.path}"),
                    project=project,
                    is_recent=True,
                    section=SECTION_RECENT,
                )
            )
            listed_paths.add(entry.path)
        if recent_rows:
            items.append(HeaderItem(RECENT_HEADER))
            items.extend(recent_rows)

    if is_root or level.parent_path is None:
        items.append(HeaderItem(ROOT_HEADER))
    else:
        items.append(HeaderItem(display_name_for_path(level.parent_path, root)))

    for project in level.projects:
        if is_root and project.path in listed_paths:
            continue
        items.append(
            EntryItem(
                label=project.name,
                path=project.path,
                selection_key=keys.allocate(f"project:{project.path}"),
                project=project,
                is_favorite=project.path in exact_paths,
                is_recent=project.path in recent_paths,
                section=SECTION_PROJECTS,
            )
        )

    if not is_root:
        items.append(BackItem(selection_key=keys.allocate("back")))

    return filter_list_items(items, search_term)


__all__ = [
    "SHORTCUTS_HEADER",
    "RECENT_HEADER",
    "ROOT_HEADER",
    "SECTION_SHORTCUTS",
    "SECTION_RECENT",
    "SECTION_PROJECTS",
    "parse_cd_target",
    "exact_favorite_path",
    "display_name_for_path",
    "filter_list_items",
    "build_list_items",
]

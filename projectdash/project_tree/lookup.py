"""Path lookups over nested project trees."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .types import ProjectNode


def iter_projects(projects: Iterable[ProjectNode]):
    """Yield every node in ``projects`` depth-first, parents before children."""
    for project in projects:
        yield project
        if project.children:
            yield from iter_projects(project.children)


def projects_by_path(projects: Iterable[ProjectNode]) -> dict[Path, ProjectNode]:
    """Return a flat ``path -> node`` map covering the whole tree."""
    return {project.path: project for project in iter_projects(projects)}


def find_project_by_path(projects: Iterable[ProjectNode], path: Path) -> ProjectNode | None:
    """Return the node at ``path`` or ``None`` when it is not in the tree."""
    for project in iter_projects(projects):
        if project.path == path:
            return project
    return None


__all__ = [
    "iter_projects",
    "projects_by_path",
    "find_project_by_path",
]

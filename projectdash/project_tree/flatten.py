"""Flatten project subtrees into repository leaves for drilled-down levels."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .types import ProjectNode


@dataclass(frozen=True)
class FlattenedProject:
    """One repository beneath a flattened node plus its relative display name."""

    path: Path
    display_name: str


def flatten_project(node: ProjectNode) -> list[FlattenedProject]:
    """Collect every repository below ``node`` in depth-first, name order.

    ``node`` itself is never included; display names join segment names from
    just below ``node`` with ``/``.
    """
    results: list[FlattenedProject] = []

    def traverse(current: ProjectNode, relative_name: str) -> None:
        if current.is_repo:
            results.append(FlattenedProject(path=current.path, display_name=relative_name))
        for child in current.children or ():
            traverse(child, f"{relative_name}/{child.name}")

    for child in node.children or ():
        traverse(child, child.name)
    return results


def flattened_level_projects(flattened: list[FlattenedProject]) -> list[ProjectNode]:
    """Turn flattened repositories into leaf nodes labelled by display name."""
    return [ProjectNode(name=item.display_name, path=item.path, is_repo=True) for item in flattened]


class FlattenCache:
    """Per-path memo of ``flatten_project`` valid for one scan result."""

    def __init__(self) -> None:
        self._by_path: dict[Path, list[FlattenedProject]] = {}

    def get(self, node: ProjectNode) -> list[FlattenedProject]:
        cached = self._by_path.get(node.path)
        if cached is None:
            cached = flatten_project(node)
            self._by_path[node.path] = cached
        return cached

    def clear(self) -> None:
        self._by_path.clear()

    def __len__(self) -> int:
        return len(self._by_path)


__all__ = [
    "FlattenedProject",
    "flatten_project",
    "flattened_level_projects",
    "FlattenCache",
]

"""Domain datatypes for discovered project trees and scan parameters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


def parse_skip_patterns(skip_dirs: str) -> tuple[str, ...]:
    """Split a comma-separated skip setting into trimmed, non-empty patterns."""
    return tuple(part.strip() for part in skip_dirs.split(",") if part.strip())


@dataclass
class ProjectNode:
    """One directory in the project tree.

    ``is_repo`` is set only when a repository marker sits exactly at ``path``.
    ``children`` is ``None`` for leaves and holds name-sorted nodes otherwise.
    """

    name: str
    path: Path
    is_repo: bool = False
    children: list["ProjectNode"] | None = None

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class ScanParams:
    """Scan inputs that also key cache validity.

    Equality is exact on every field; ``skip_dirs`` is the raw comma-separated
    setting and is only split when a scan needs the patterns.
    """

    root_dir: str
    max_depth: int
    skip_dirs: str = ""

    @property
    def skip_patterns(self) -> tuple[str, ...]:
        return parse_skip_patterns(self.skip_dirs)

    @classmethod
    def from_settings(cls, projects_dir: str, max_depth: int, skip_dirs: str) -> ScanParams:
        return cls(
            root_dir=projects_dir,
            max_depth=max(1, int(max_depth)),
            skip_dirs=skip_dirs,
        )


__all__ = [
    "ProjectNode",
    "ScanParams",
    "parse_skip_patterns",
]

"""Filesystem discovery of repositories and project-tree construction."""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .types import ProjectNode, ScanParams, parse_skip_patterns

logger = logging.getLogger(__name__)

REPOSITORY_MARKER = ".git"
_WINDOWS_DRIVE_PATH = re.compile(r"^([a-zA-Z]):[/\\](.*)$")
_is_wsl: bool | None = None


@dataclass
class ScanAbortSignal:
    """Cooperative cancellation cell shared between a session and its workers."""

    aborted: bool = False


def detect_wsl() -> bool:
    """Return whether the interpreter runs under Windows Subsystem for Linux."""
    global _is_wsl
    if _is_wsl is not None:
        return _is_wsl
    try:
        proc_version = Path("/proc/version").read_text(encoding="utf-8").lower()
    except OSError:
        proc_version = ""
    _is_wsl = "microsoft" in proc_version or "wsl" in proc_version
    logger.debug("detect_wsl: is_wsl=%s", _is_wsl)
    return _is_wsl


def to_native_path(root_dir: str) -> str:
    """Map ``D:\\projects`` style roots to ``/mnt/d/projects`` under WSL."""
    if not detect_wsl():
        return root_dir
    match = _WINDOWS_DRIVE_PATH.match(root_dir)
    if match is None:
        return root_dir
    drive = match.group(1).lower()
    rest = match.group(2).replace("\\", "/")
    native = f"/mnt/{drive}/{rest}"
    logger.debug("to_native_path: %s -> %s", root_dir, native)
    return native


def is_skipped(name: str, skip_patterns: Iterable[str]) -> bool:
    """Return whether one path segment matches any skip pattern."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in skip_patterns)


def find_repository_paths(root: Path, max_depth: int, skip_patterns: tuple[str, ...]) -> list[Path]:
    """Return directories up to ``max_depth`` levels below ``root`` holding a marker.

    Symlinks are never followed and unreadable directories are skipped.
    """
    found: list[Path] = []

    def walk(directory: Path, depth: int) -> None:
        try:
            with os.scandir(directory) as entries:
                children = sorted(entries, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("scan: skipping %s (%s)", directory, exc)
            return

        for child in children:
            try:
                if not child.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue
            if child.name == REPOSITORY_MARKER:
                if depth > 0:
                    found.append(directory)
                continue
            if is_skipped(child.name, skip_patterns):
                continue
            if depth + 1 <= max_depth:
                walk(Path(child.path), depth + 1)

    walk(root, 0)
    return found


def build_project_tree(project_paths: Iterable[Path], root: Path) -> list[ProjectNode]:
    """Build a name-sorted tree from flat repository paths under ``root``.

    Intermediate directories become plain container nodes; nodes are shared
    through a path-keyed map so every directory appears exactly once.
    """
    nodes: dict[Path, ProjectNode] = {}

    for project_path in project_paths:
        try:
            segments = project_path.relative_to(root).parts
        except ValueError:
            continue
        if not segments:
            continue

        current = root
        parent: ProjectNode | None = None
        for index, segment in enumerate(segments):
            current = current / segment
            is_last = index == len(segments) - 1
            node = nodes.get(current)
            if node is None:
                node = ProjectNode(name=segment, path=current, is_repo=is_last)
                nodes[current] = node
                if parent is not None:
                    if parent.children is None:
                        parent.children = []
                    parent.children.append(node)
            elif is_last:
                node.is_repo = True
            parent = node

    roots = [node for path, node in nodes.items() if path.parent == root]
    logger.debug("build_project_tree: %d paths, %d root projects", len(nodes), len(roots))
    return sort_projects(roots)


def sort_projects(projects: list[ProjectNode]) -> list[ProjectNode]:
    """Sort ``projects`` and all nested children by name in place."""
    for project in projects:
        if project.children:
            sort_projects(project.children)
    projects.sort(key=lambda project: project.name)
    return projects


def resolve_root_dir(root_dir: str) -> Path:
    """Return the absolute native path a scan of ``root_dir`` walks.

    Normalization is lexical; a symlinked root keeps its own path so node
    paths stay under it.
    """
    return Path(os.path.abspath(os.path.expanduser(to_native_path(root_dir))))


def scan_projects(params: ScanParams, signal: ScanAbortSignal | None = None) -> list[ProjectNode]:
    """Scan ``params.root_dir`` and return the root-level project nodes.

    A missing root yields ``[]``. When ``signal`` was aborted by the time the
    walk finishes the result is discarded and ``[]`` is returned.
    """
    root = resolve_root_dir(params.root_dir)
    if not root.is_dir():
        logger.debug("scan_projects: %s does not exist", root)
        return []

    logger.debug("scan_projects: scanning %s, max_depth=%d", root, params.max_depth)
    project_paths = find_repository_paths(root, params.max_depth, params.skip_patterns)
    logger.debug("scan_projects: found %d repositories", len(project_paths))

    if signal is not None and signal.aborted:
        logger.debug("scan_projects: aborted")
        return []
    return build_project_tree(project_paths, root)


__all__ = [
    "REPOSITORY_MARKER",
    "ScanAbortSignal",
    "parse_skip_patterns",
    "detect_wsl",
    "to_native_path",
    "is_skipped",
    "find_repository_paths",
    "build_project_tree",
    "sort_projects",
    "resolve_root_dir",
    "scan_projects",
]

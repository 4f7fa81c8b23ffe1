"""Domain model for discovered project trees.

This package contains non-UI primitives:
- project node and scan-parameter datatypes
- filesystem discovery of repositories and tree construction
- subtree flattening with a per-scan memo
- path lookups across a tree
"""

from __future__ import annotations

from .types import ProjectNode, ScanParams, parse_skip_patterns
from .scanner import (
    REPOSITORY_MARKER,
    ScanAbortSignal,
    build_project_tree,
    find_repository_paths,
    resolve_root_dir,
    scan_projects,
    to_native_path,
)
from .flatten import FlattenCache, FlattenedProject, flatten_project, flattened_level_projects
from .lookup import find_project_by_path, iter_projects, projects_by_path

__all__ = [
    "ProjectNode",
    "ScanParams",
    "parse_skip_patterns",
    "REPOSITORY_MARKER",
    "ScanAbortSignal",
    "build_project_tree",
    "find_repository_paths",
    "resolve_root_dir",
    "scan_projects",
    "to_native_path",
    "FlattenCache",
    "FlattenedProject",
    "flatten_project",
    "flattened_level_projects",
    "find_project_by_path",
    "iter_projects",
    "projects_by_path",
]

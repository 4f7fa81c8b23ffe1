"""Persisted last-scan cache keyed by exact scan parameters.

The cache is a single JSON file rewritten wholesale after every completed
scan. Every read failure is a cache miss; write failures are ignored.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_cache_dir

from ..project_tree import ProjectNode, ScanParams

logger = logging.getLogger(__name__)

APP_NAME = "projectdash"
CACHE_FILENAME = "cache.json"
DEFAULT_CACHE_PATH = Path(user_cache_dir(APP_NAME, appauthor=False)) / CACHE_FILENAME


@dataclass(frozen=True)
class CacheRecord:
    """One decoded cache file."""

    projects: list[ProjectNode]
    params: ScanParams
    timestamp: float


def node_to_json(node: ProjectNode) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": node.name,
        "path": str(node.path),
        "isGitRepo": node.is_repo,
        "hasNestedProjects": node.has_children,
    }
    if node.children is not None:
        payload["nestedProjects"] = [node_to_json(child) for child in node.children]
    return payload


def node_from_json(raw: object) -> ProjectNode:
    """Decode one serialized node, raising ``ValueError`` on malformed input."""
    if not isinstance(raw, dict):
        raise ValueError("project node must be an object")
    name = raw.get("name")
    path = raw.get("path")
    is_repo = raw.get("isGitRepo", False)
    if not isinstance(name, str) or not isinstance(path, str) or not isinstance(is_repo, bool):
        raise ValueError("project node has invalid fields")
    raw_children = raw.get("nestedProjects")
    children: list[ProjectNode] | None = None
    if raw_children is not None:
        if not isinstance(raw_children, list):
            raise ValueError("nestedProjects must be a list")
        children = [node_from_json(child) for child in raw_children]
    return ProjectNode(name=name, path=Path(path), is_repo=is_repo, children=children)


def record_from_json(data: object) -> CacheRecord:
    """Decode a whole cache document, raising ``ValueError`` when malformed."""
    if not isinstance(data, dict):
        raise ValueError("cache must be an object")
    projects_dir = data.get("projectsDir")
    max_depth = data.get("maxDepth")
    skip_dirs = data.get("skipDirs")
    raw_projects = data.get("projects")
    timestamp = data.get("timestamp", 0)
    if not isinstance(projects_dir, str) or not isinstance(skip_dirs, str):
        raise ValueError("cache params must be strings")
    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        raise ValueError("cache maxDepth must be an integer")
    if not isinstance(raw_projects, list):
        raise ValueError("cache projects must be a list")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        timestamp = 0
    return CacheRecord(
        projects=[node_from_json(raw) for raw in raw_projects],
        params=ScanParams(
            root_dir=projects_dir,
            max_depth=max_depth,
            skip_dirs=skip_dirs,
        ),
        timestamp=float(timestamp),
    )


def record_to_json(record: CacheRecord) -> dict[str, object]:
    return {
        "projects": [node_to_json(node) for node in record.projects],
        "projectsDir": record.params.root_dir,
        "maxDepth": record.params.max_depth,
        "skipDirs": record.params.skip_dirs,
        "timestamp": int(record.timestamp),
    }


class ScanCache:
    """Load/save the last successful scan result for one cache file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or DEFAULT_CACHE_PATH

    def read_record(self) -> CacheRecord | None:
        """Return the decoded record, or ``None`` when absent or corrupt."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("cache: no cache file at %s", self.path)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("cache: unreadable %s (%s)", self.path, exc)
            return None
        try:
            return record_from_json(json.loads(content))
        except (ValueError, RecursionError) as exc:
            logger.debug("cache: discarding malformed cache (%s)", exc)
            return None

    def load(self, params: ScanParams) -> list[ProjectNode] | None:
        """Return cached projects when they were scanned with exactly ``params``."""
        record = self.read_record()
        if record is None:
            return None
        if record.params != params:
            logger.debug("cache: params mismatch (%s != %s)", record.params, params)
            return None
        logger.debug("cache: returning %d cached root projects", len(record.projects))
        return record.projects

    def save(self, projects: list[ProjectNode], params: ScanParams) -> None:
        """Overwrite the cache with ``projects``; errors are ignored."""
        record = CacheRecord(projects=projects, params=params, timestamp=time.time() * 1000)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(record_to_json(record)), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.debug("cache: ignoring write error (%s)", exc)

    def clear(self) -> None:
        try:
            if self.path.exists():
                self.path.write_text("{}", encoding="utf-8")
        except OSError as exc:
            logger.debug("cache: ignoring clear error (%s)", exc)


__all__ = [
    "DEFAULT_CACHE_PATH",
    "CacheRecord",
    "ScanCache",
    "node_from_json",
    "node_to_json",
    "record_from_json",
    "record_to_json",
]

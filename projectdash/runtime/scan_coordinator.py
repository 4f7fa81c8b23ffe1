"""Background coordination of cache loads and fresh project scans.

Workers run on daemon threads and publish finished results into a queue that
the single UI thread drains. The first usable result of a session is shown
immediately; the fresh scan always replaces it and is written back to cache.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..project_tree import ProjectNode, ScanAbortSignal, ScanParams, scan_projects
from .cache import ScanCache

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_SCAN = "scan"


@dataclass(frozen=True)
class ProjectListUpdate:
    """A project list ready to replace the displayed tree."""

    source: str
    projects: list[ProjectNode]
    params: ScanParams
    generation: int


class ScanCoordinator:
    """Run cache-load and scan workers and decide which results to publish.

    Only one live scan runs at a time; a cancelled scan may still be finishing
    in the background while its replacement starts. ``cancel`` is cooperative:
    a worker checks the shared signal when it finishes and drops its result.
    """

    def __init__(
        self,
        scan: Callable[[ScanParams, ScanAbortSignal], list[ProjectNode]] = scan_projects,
        cache: ScanCache | None = None,
    ) -> None:
        self._scan = scan
        self._cache = cache if cache is not None else ScanCache()
        self._lock = threading.Lock()
        self._signal = ScanAbortSignal()
        self._generation = 0
        self._active_generation: int | None = None
        self._shown = False
        self._updates: Queue[ProjectListUpdate] = Queue()

    @property
    def scanning(self) -> bool:
        with self._lock:
            return self._active_generation is not None

    @property
    def has_shown_result(self) -> bool:
        with self._lock:
            return self._shown

    def _start_worker(self, target: Callable[..., None], name: str, *args: object) -> None:
        worker = threading.Thread(target=target, args=args, name=name, daemon=True)
        worker.start()

    def _begin(self, params: ScanParams, *, load_cache: bool) -> bool:
        with self._lock:
            if self._active_generation is not None and not self._signal.aborted:
                logger.debug("coordinator: scan already in flight, ignoring request")
                return False
            if load_cache:
                self._shown = False
            self._signal = ScanAbortSignal()
            self._generation += 1
            self._active_generation = self._generation
            signal = self._signal
            generation = self._generation

        if load_cache:
            self._start_worker(self._cache_worker, "projectdash-cache-load", params, signal, generation)
        self._start_worker(self._scan_worker, "projectdash-scan", params, signal, generation)
        return True

    def run_initial_load(self, params: ScanParams) -> bool:
        """Start concurrent cache load and fresh scan for ``params``."""
        logger.debug("coordinator: initial load for %s", params)
        return self._begin(params, load_cache=True)

    def refresh(self, params: ScanParams) -> bool:
        """Start a scan-only refresh; returns ``False`` while one is running."""
        logger.debug("coordinator: refresh for %s", params)
        return self._begin(params, load_cache=False)

    def cancel(self) -> None:
        """Mark the current session cancelled and drop results not yet drained."""
        with self._lock:
            self._signal.aborted = True
            dropped = self._take_queued()
            logger.debug("coordinator: cancelled generation %d, dropped %d queued", self._generation, len(dropped))

    def _cache_worker(self, params: ScanParams, signal: ScanAbortSignal, generation: int) -> None:
        try:
            projects = self._cache.load(params)
        except Exception:
            logger.exception("coordinator: cache load failed")
            projects = None

        with self._lock:
            if signal.aborted:
                logger.debug("coordinator: dropping cache result, cancelled")
                return
            if not projects:
                logger.debug("coordinator: cache miss")
                return
            if self._shown:
                logger.debug("coordinator: dropping cache result, already showing newer data")
                return
            self._shown = True
            self._updates.put(ProjectListUpdate(SOURCE_CACHE, projects, params, generation))
        logger.debug("coordinator: showing %d cached root projects", len(projects))

    def _scan_worker(self, params: ScanParams, signal: ScanAbortSignal, generation: int) -> None:
        try:
            projects = self._scan(params, signal)
        except Exception:
            logger.exception("coordinator: scan failed")
            projects = []

        with self._lock:
            if self._active_generation == generation:
                self._active_generation = None
            if signal.aborted:
                logger.debug("coordinator: dropping scan result, cancelled")
                return
            self._shown = True
            self._updates.put(ProjectListUpdate(SOURCE_SCAN, projects, params, generation))
        logger.debug("coordinator: showing %d scanned root projects", len(projects))
        self._cache.save(projects, params)

    def drain_updates(self) -> list[ProjectListUpdate]:
        """Drain all published updates in completion order."""
        return self._take_queued()

    def _take_queued(self) -> list[ProjectListUpdate]:
        out: list[ProjectListUpdate] = []
        while True:
            try:
                out.append(self._updates.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "SOURCE_CACHE",
    "SOURCE_SCAN",
    "ProjectListUpdate",
    "ScanCoordinator",
]

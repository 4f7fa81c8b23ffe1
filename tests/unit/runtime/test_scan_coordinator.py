"""Tests for concurrent cache-load/scan coordination."""

from __future__ import annotations

import threading
import time
import unittest
from pathlib import Path

from projectdash.project_tree import ProjectNode, ScanAbortSignal, ScanParams
from projectdash.runtime.scan_coordinator import SOURCE_CACHE, SOURCE_SCAN, ScanCoordinator

PARAMS = ScanParams("/p", 2)


def _projects(*names: str) -> list[ProjectNode]:
    return [ProjectNode(name, Path("/p") / name, True) for name in names]


class FakeCache:
    def __init__(self, projects: list[ProjectNode] | None = None, gate: threading.Event | None = None) -> None:
        self.projects = projects
        self.gate = gate
        self.saved: list[tuple[list[ProjectNode], ScanParams]] = []
        self.loads = 0

    def load(self, params: ScanParams) -> list[ProjectNode] | None:
        self.loads += 1
        if self.gate is not None:
            self.gate.wait(timeout=1.0)
        return self.projects

    def save(self, projects: list[ProjectNode], params: ScanParams) -> None:
        self.saved.append((projects, params))


class GatedScan:
    def __init__(self, result: list[ProjectNode]) -> None:
        self.result = result
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def __call__(self, params: ScanParams, signal: ScanAbortSignal) -> list[ProjectNode]:
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=1.0)
        return self.result


def _wait_for_updates(coordinator: ScanCoordinator, *, expected_count: int, timeout_seconds: float = 1.0) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(coordinator.drain_updates())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


def _wait_idle(coordinator: ScanCoordinator, timeout_seconds: float = 1.0) -> None:
    deadline = time.monotonic() + timeout_seconds
    while coordinator.scanning and time.monotonic() < deadline:
        time.sleep(0.01)


class ScanCoordinatorTests(unittest.TestCase):
    def test_cache_shown_first_then_replaced_by_scan(self) -> None:
        cache = FakeCache(_projects("cached"))
        scan = GatedScan(_projects("fresh"))
        coordinator = ScanCoordinator(scan=scan, cache=cache)

        self.assertTrue(coordinator.run_initial_load(PARAMS))
        first = _wait_for_updates(coordinator, expected_count=1)
        self.assertEqual([update.source for update in first], [SOURCE_CACHE])
        self.assertEqual(first[0].projects, _projects("cached"))

        scan.release.set()
        second = _wait_for_updates(coordinator, expected_count=1)
        self.assertEqual([update.source for update in second], [SOURCE_SCAN])
        self.assertEqual(second[0].projects, _projects("fresh"))
        _wait_idle(coordinator)
        self.assertEqual(cache.saved, [(_projects("fresh"), PARAMS)])

    def test_late_cache_result_is_never_reinstated(self) -> None:
        gate = threading.Event()
        cache = FakeCache(_projects("stale"), gate=gate)
        scan = GatedScan(_projects("fresh"))
        scan.release.set()
        coordinator = ScanCoordinator(scan=scan, cache=cache)

        coordinator.run_initial_load(PARAMS)
        updates = _wait_for_updates(coordinator, expected_count=1)
        gate.set()
        time.sleep(0.05)
        updates.extend(coordinator.drain_updates())

        self.assertEqual([update.source for update in updates], [SOURCE_SCAN])

    def test_empty_cache_is_not_shown_but_empty_scan_is(self) -> None:
        cache = FakeCache([])
        scan = GatedScan([])
        scan.release.set()
        coordinator = ScanCoordinator(scan=scan, cache=cache)

        coordinator.run_initial_load(PARAMS)
        updates = _wait_for_updates(coordinator, expected_count=1)
        time.sleep(0.05)
        updates.extend(coordinator.drain_updates())

        self.assertEqual([(update.source, update.projects) for update in updates], [(SOURCE_SCAN, [])])

    def test_cancel_discards_pending_results(self) -> None:
        cache = FakeCache(_projects("cached"), gate=threading.Event())
        scan = GatedScan(_projects("fresh"))
        coordinator = ScanCoordinator(scan=scan, cache=cache)

        coordinator.run_initial_load(PARAMS)
        self.assertTrue(scan.started.wait(timeout=1.0))
        coordinator.cancel()
        cache.gate.set()
        scan.release.set()
        _wait_idle(coordinator)
        time.sleep(0.05)

        self.assertEqual(coordinator.drain_updates(), [])
        self.assertEqual(cache.saved, [])

    def test_cancel_drops_results_already_queued(self) -> None:
        scan = GatedScan(_projects("old"))
        scan.release.set()
        coordinator = ScanCoordinator(scan=scan, cache=FakeCache())

        coordinator.refresh(PARAMS)
        _wait_idle(coordinator)
        coordinator.cancel()

        self.assertFalse(coordinator.scanning)
        self.assertEqual(coordinator.drain_updates(), [])

    def test_refresh_skips_cache_and_ignores_overlapping_requests(self) -> None:
        cache = FakeCache(_projects("cached"))
        scan = GatedScan(_projects("fresh"))
        coordinator = ScanCoordinator(scan=scan, cache=cache)

        self.assertTrue(coordinator.refresh(PARAMS))
        self.assertTrue(scan.started.wait(timeout=1.0))
        self.assertFalse(coordinator.refresh(PARAMS))
        scan.release.set()

        updates = _wait_for_updates(coordinator, expected_count=1)
        _wait_idle(coordinator)

        self.assertEqual(cache.loads, 0)
        self.assertEqual(scan.calls, 1)
        self.assertEqual([update.source for update in updates], [SOURCE_SCAN])
        self.assertFalse(coordinator.scanning)

    def test_refresh_allowed_after_cancel_of_inflight_scan(self) -> None:
        old_scan_release = threading.Event()
        calls: list[str] = []

        def scan(params: ScanParams, signal: ScanAbortSignal) -> list[ProjectNode]:
            calls.append(params.root_dir)
            if params.root_dir == "/old":
                old_scan_release.wait(timeout=1.0)
            return _projects(params.root_dir.strip("/"))

        coordinator = ScanCoordinator(scan=scan, cache=FakeCache())
        coordinator.refresh(ScanParams("/old", 2))
        coordinator.cancel()
        self.assertTrue(coordinator.refresh(ScanParams("/new", 2)))

        updates = _wait_for_updates(coordinator, expected_count=1)
        old_scan_release.set()
        time.sleep(0.05)
        updates.extend(coordinator.drain_updates())
        _wait_idle(coordinator)

        self.assertEqual([update.params.root_dir for update in updates], ["/new"])
        self.assertFalse(coordinator.scanning)

    def test_scan_errors_publish_empty_result(self) -> None:
        def broken_scan(params: ScanParams, signal: ScanAbortSignal) -> list[ProjectNode]:
            raise RuntimeError("boom")

        coordinator = ScanCoordinator(scan=broken_scan, cache=FakeCache())
        coordinator.refresh(PARAMS)

        updates = _wait_for_updates(coordinator, expected_count=1)

        self.assertEqual([(update.source, update.projects) for update in updates], [(SOURCE_SCAN, [])])


if __name__ == "__main__":
    unittest.main()

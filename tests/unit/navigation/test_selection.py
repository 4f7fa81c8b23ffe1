"""Tests for key-based selection tracking."""

from __future__ import annotations

import unittest
from pathlib import Path

from projectdash.navigation import BackItem, EntryItem, HeaderItem, SelectionTracker, nearest_surviving_key, selectable_indices


def _entry(name: str) -> EntryItem:
    return EntryItem(name, Path("/r") / name, f"project:{name}")


class SelectionTrackerTests(unittest.TestCase):
    def test_resolves_existing_key(self) -> None:
        items = [HeaderItem("All"), _entry("a"), _entry("b")]
        self.assertEqual(SelectionTracker().resolve("project:b", items), 2)

    def test_missing_key_falls_back_to_first_selectable(self) -> None:
        items = [HeaderItem("Recent"), HeaderItem("All"), _entry("a")]
        tracker = SelectionTracker()
        self.assertEqual(tracker.resolve("project:zzz", items), 2)
        self.assertEqual(tracker.resolve(None, items), 2)

    def test_headers_only_or_empty_resolve_to_zero(self) -> None:
        tracker = SelectionTracker()
        self.assertEqual(tracker.resolve("x", [HeaderItem("All")]), 0)
        self.assertEqual(tracker.resolve("x", []), 0)

    def test_map_rebuilds_when_list_identity_changes(self) -> None:
        tracker = SelectionTracker()
        first = [HeaderItem("All"), _entry("a"), _entry("b")]
        self.assertEqual(tracker.resolve("project:b", first), 2)

        second = [HeaderItem("All"), _entry("b")]
        self.assertEqual(tracker.resolve("project:b", second), 1)
        self.assertTrue(tracker.contains("project:b", second))
        self.assertFalse(tracker.contains("project:a", second))

    def test_back_row_is_selectable(self) -> None:
        items = [HeaderItem("org"), BackItem()]
        self.assertEqual(SelectionTracker().resolve("back", items), 1)
        self.assertEqual(selectable_indices(items), [1])


class NearestSurvivingKeyTests(unittest.TestCase):
    def test_prefers_next_neighbor_then_previous(self) -> None:
        old = [HeaderItem("All"), _entry("a"), _entry("b"), _entry("c")]
        without_b = [HeaderItem("All"), _entry("a"), _entry("c")]
        self.assertEqual(nearest_surviving_key(old, 2, without_b), "project:c")

        without_b_and_c = [HeaderItem("All"), _entry("a")]
        self.assertEqual(nearest_surviving_key(old, 2, without_b_and_c), "project:a")

    def test_none_when_nothing_survives(self) -> None:
        old = [HeaderItem("All"), _entry("a")]
        self.assertIsNone(nearest_surviving_key(old, 1, [HeaderItem("All")]))


if __name__ == "__main__":
    unittest.main()

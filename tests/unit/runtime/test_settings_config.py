"""Tests for persisted settings and scan-parameter derivation."""

from __future__ import annotations

import json
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest import mock

from projectdash.project_tree import ScanParams
from projectdash.runtime import config


class SettingsConfigTests(unittest.TestCase):
    def test_missing_or_malformed_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            self.assertEqual(config.load_settings(path), config.DEFAULT_SETTINGS)
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(config.load_settings(path), config.DEFAULT_SETTINGS)

    def test_values_are_validated_and_clamped(self) -> None:
        settings = config.settings_from_dict(
            {
                "projectsDir": "/work",
                "maxDepth": 99,
                "skipDirs": "",
                "recentCount": "many",
                "visibleRows": 1,
                "showShortcuts": False,
            }
        )

        self.assertEqual(settings.projects_dir, "/work")
        self.assertEqual(settings.max_depth, 10)
        self.assertEqual(settings.skip_dirs, "")
        self.assertEqual(settings.recent_count, config.DEFAULT_SETTINGS.recent_count)
        self.assertEqual(settings.visible_rows, 5)
        self.assertFalse(settings.show_shortcuts)

    def test_save_round_trip_keeps_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text(json.dumps({"selectedColor": "#FFD700"}), encoding="utf-8")
            settings = replace(config.DEFAULT_SETTINGS, projects_dir="/src", max_depth=2)

            config.save_settings(settings, path)

            self.assertEqual(config.load_settings(path), settings)
            self.assertEqual(config.load_config(path)["selectedColor"], "#FFD700")

    def test_default_path_is_patchable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            with mock.patch("projectdash.runtime.config.SETTINGS_PATH", path):
                config.save_settings(replace(config.DEFAULT_SETTINGS, recent_count=9))
                self.assertEqual(config.load_settings().recent_count, 9)

    def test_scan_params_and_rescan_detection(self) -> None:
        base = replace(config.DEFAULT_SETTINGS, projects_dir="/p", max_depth=3, skip_dirs="a, b")

        self.assertEqual(base.scan_params(), ScanParams("/p", 3, "a, b"))
        self.assertFalse(config.settings_change_requires_rescan(base, replace(base, visible_rows=20)))
        self.assertTrue(config.settings_change_requires_rescan(base, replace(base, projects_dir="/q")))
        self.assertTrue(config.settings_change_requires_rescan(base, replace(base, max_depth=4)))
        self.assertTrue(config.settings_change_requires_rescan(base, replace(base, skip_dirs="a")))
        self.assertTrue(config.settings_change_requires_rescan(base, replace(base, skip_dirs="a,b")))


if __name__ == "__main__":
    unittest.main()

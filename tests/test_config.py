#!/usr/bin/env python3

"""Tests for the user configuration loader."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from autocommit import config


class ConfigTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.env_patch = patch.dict(
            os.environ, {"AUTOCOMMIT_CONFIG_DIR": self.temp_dir.name}
        )
        self.env_patch.start()
        self.addCleanup(self.env_patch.stop)
        self.home_patch = patch.object(
            Path, "home", return_value=Path(self.temp_dir.name) / "home"
        )
        self.home_patch.start()
        self.addCleanup(self.home_patch.stop)

    def write_config(self, content: str) -> None:
        with open(os.path.join(self.temp_dir.name, "autocommitrc"), "w") as f:
            f.write(content)

    def test_config_dir_takes_precedence(self):
        self.write_config("")
        self.assertEqual(
            config.get_config_path(), Path(self.temp_dir.name) / "autocommitrc"
        )

    def test_falls_back_to_home(self):
        self.assertEqual(
            config.get_config_path(),
            Path(self.temp_dir.name) / "home" / ".autocommitrc",
        )

    def test_defaults_without_config_file(self):
        loaded = config.load_config()
        self.assertEqual(loaded["logger"]["verbosity"], "INFO")
        self.assertTrue(loaded["logger"]["show_timestamp"])
        self.assertTrue(loaded["debug"]["git_status_snapshots"])

    def test_user_config_is_merged(self):
        self.write_config(
            '[logger]\nverbosity = "DEBUG"\n\n[debug]\ngit_status_snapshots = false\n'
        )
        self.assertEqual(config.get_logger_verbosity(), "DEBUG")
        self.assertFalse(config.get_git_status_snapshots())
        # Untouched keys keep their defaults
        self.assertTrue(config.get_show_timestamp())

    def test_merge_does_not_leak_into_defaults(self):
        self.write_config('[logger]\nverbosity = "ERROR"\n')
        config.load_config()
        self.assertEqual(config.DEFAULT_CONFIG["logger"]["verbosity"], "INFO")

    def test_logger_path_expands_tilde(self):
        self.write_config('[logger]\npath = "~/logs"\n')
        with patch.dict(os.environ, {"HOME": "/home/tester"}):
            self.assertEqual(config.get_logger_path(), "/home/tester/logs")

    def test_malformed_config_uses_defaults(self):
        self.write_config("[logger\nverbosity = ")
        with self.assertLogs(level="WARNING") as cm:
            loaded = config.load_config()
        self.assertEqual(loaded["logger"]["verbosity"], "INFO")
        self.assertIn("Error loading config", cm.output[0])


if __name__ == "__main__":
    unittest.main()

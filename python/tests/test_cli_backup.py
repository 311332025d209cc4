"""
End-to-end tests for the backup command-line interface.
"""

import os
import unittest
from unittest.mock import Mock, patch

from cli_backup import BackupCLI
from reporter import ConsoleReporter

from .test_utils import TempDirTestCase, TreeFactory, read_tree


class CLITestCase(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.env = patch.dict(os.environ, {"HOME": self.temp_dir}, clear=True)
        self.env.start()

        self.claude_dir = self.temp_path / "home" / ".claude"
        self.backup_root = self.temp_path / "backup"
        TreeFactory.create_plugin_cache(self.claude_dir)
        TreeFactory.create_tree(self.claude_dir / "skills", {"review.md": "# review"})
        self.cli = BackupCLI()

    def tearDown(self):
        self.env.stop()
        super().tearDown()

    def run_cli(self, *args, claude_dir=None):
        return self.cli.run(
            [
                "--backup-root",
                str(self.backup_root),
                "--claude-dir",
                str(claude_dir or self.claude_dir),
                *args,
            ]
        )

    @property
    def archive_path(self):
        return self.backup_root / "cache" / "plugins-cache.tar.gz"


class TestBackupCLI(CLITestCase):
    def test_no_command_prints_help(self):
        with patch.object(self.cli.parser, "print_help") as mock_help:
            self.assertEqual(self.cli.run([]), 1)
        mock_help.assert_called_once()

    def test_backup_then_restore(self):
        self.assertEqual(self.run_cli("backup"), 0)
        self.assertTrue(self.archive_path.is_file())
        self.assertTrue((self.backup_root / "skills" / "review.md").is_file())

        fresh = self.temp_path / "fresh" / ".claude"
        self.assertEqual(self.run_cli("restore", claude_dir=fresh), 0)

        self.assertEqual(
            read_tree(fresh / "plugins" / "cache"),
            read_tree(self.claude_dir / "plugins" / "cache"),
        )
        self.assertEqual((fresh / "skills" / "review.md").read_text(), "# review")

    def test_detected_plugins_listed_before_packing(self):
        calls = Mock()
        with patch.object(
            ConsoleReporter, "detected_plugins", calls.detected_plugins
        ), patch.object(ConsoleReporter, "progress", calls.progress):
            self.assertEqual(self.run_cli("backup", "--skip-skills"), 0)

        names = [name for name, _, _ in calls.mock_calls]
        self.assertEqual(names, ["detected_plugins", "progress"])
        self.assertEqual(calls.progress.call_args.args[0], "cache.backup.packing")

    def test_backup_skip_flags(self):
        self.assertEqual(self.run_cli("backup", "--skip-skills", "--skip-cache"), 0)
        self.assertFalse(self.backup_root.exists())

    def test_backup_with_missing_sources_succeeds(self):
        empty_home = self.temp_path / "nobody" / ".claude"
        self.assertEqual(self.run_cli("backup", claude_dir=empty_home), 0)
        self.assertFalse(self.archive_path.exists())

    def test_restore_with_no_backup_succeeds(self):
        fresh = self.temp_path / "fresh" / ".claude"
        self.assertEqual(self.run_cli("restore", claude_dir=fresh), 0)
        self.assertFalse(fresh.exists())

    def test_restore_corrupt_container_fails(self):
        self.archive_path.parent.mkdir(parents=True)
        self.archive_path.write_bytes(b"garbage")

        self.assertEqual(self.run_cli("restore", "--skip-skills"), 1)

    def test_restore_modes_flag(self):
        tool = self.claude_dir / "plugins" / "cache" / "alpha" / "tool.sh"
        tool.write_text("#!/bin/sh\n")
        os.chmod(tool, 0o755)
        self.run_cli("backup", "--skip-skills")

        fresh = self.temp_path / "fresh" / ".claude"
        self.run_cli("restore", "--skip-skills", "--restore-modes", claude_dir=fresh)

        restored = fresh / "plugins" / "cache" / "alpha" / "tool.sh"
        self.assertEqual(os.stat(restored).st_mode & 0o777, 0o755)

    def test_clean(self):
        self.run_cli("backup", "--skip-skills")

        self.assertEqual(self.run_cli("clean"), 0)
        self.assertEqual(os.listdir(self.backup_root / "cache"), [])

    def test_clean_without_artifact_directory_fails(self):
        self.assertEqual(self.run_cli("clean"), 1)
        self.assertFalse((self.backup_root / "cache").exists())

    def test_info(self):
        self.run_cli("backup", "--skip-skills")
        self.assertEqual(self.run_cli("info"), 0)

    def test_verify(self):
        self.run_cli("backup", "--skip-skills")
        self.assertEqual(self.run_cli("verify"), 0)

        self.archive_path.write_bytes(b"garbage")
        self.assertEqual(self.run_cli("verify"), 1)

    def test_verify_without_artifacts_fails(self):
        self.assertEqual(self.run_cli("verify"), 1)

    def test_unexpected_error_returns_one(self):
        with patch(
            "cli_backup.BackupManager.backup_skills",
            side_effect=PermissionError("denied"),
        ):
            self.assertEqual(self.run_cli("backup"), 1)

    def test_interrupt_returns_130(self):
        with patch(
            "cli_backup.BackupManager.backup_cache", side_effect=KeyboardInterrupt
        ):
            self.assertEqual(self.run_cli("backup", "--skip-skills"), 130)

    def test_invalid_compression_level_rejected(self):
        with self.assertRaises(SystemExit):
            self.run_cli("backup", "--level", "11")


if __name__ == "__main__":
    unittest.main()

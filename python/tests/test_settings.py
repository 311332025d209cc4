import json
import os
import unittest
from pathlib import Path
from unittest.mock import patch

from settings import Settings, resolve_claude_dir, DEFAULT_SETTINGS_NAME

from .test_utils import TempDirTestCase


class TestResolveClaudeDir(TempDirTestCase):
    def test_environment_wins(self):
        with patch.dict(os.environ, {"CLAUDE_CONFIG_DIR": self.temp_dir}, clear=True):
            self.assertEqual(resolve_claude_dir("/configured"), self.temp_path)

    def test_configured_value(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_claude_dir(self.temp_dir), self.temp_path)

    def test_default_is_dot_claude_in_home(self):
        with patch.dict(os.environ, {"HOME": self.temp_dir}, clear=True):
            self.assertEqual(resolve_claude_dir(), self.temp_path / ".claude")


class TestSettings(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.env = patch.dict(os.environ, {"HOME": self.temp_dir}, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()
        super().tearDown()

    def _write_settings(self, data, name=DEFAULT_SETTINGS_NAME):
        path = self.temp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_defaults(self):
        settings = Settings(overrides={"backup_root": self.temp_dir})

        self.assertEqual(settings.backup_root, self.temp_path)
        self.assertEqual(settings.claude_dir, self.temp_path / ".claude")
        self.assertEqual(settings.lang, "en")
        self.assertFalse(settings.skip_skills)
        self.assertTrue(settings.verify_after_backup)
        self.assertFalse(settings.restore_file_modes)
        self.assertTrue(settings.validate_paths)
        self.assertEqual(settings.compression_level, 6)
        self.assertEqual(settings.min_free_space_mb, 100)

    def test_backup_root_defaults_to_cwd(self):
        with patch("settings.os.getcwd", return_value=self.temp_dir):
            settings = Settings()
        self.assertEqual(settings.backup_root, self.temp_path)

    def test_settings_file_in_backup_root_is_loaded(self):
        self._write_settings(
            {"skip_skills": True, "compression_level": 3, "lang": "zh_CN"}
        )

        settings = Settings(overrides={"backup_root": self.temp_dir})

        self.assertTrue(settings.skip_skills)
        self.assertEqual(settings.compression_level, 3)
        self.assertEqual(settings.lang, "zh")

    def test_environment_overrides_file(self):
        self._write_settings({"skip_skills": True, "lang": "zh"})
        os.environ["CCCONFIG_SKIP_SKILLS"] = "0"
        os.environ["CCCONFIG_LANG"] = "en"

        settings = Settings(overrides={"backup_root": self.temp_dir})

        self.assertFalse(settings.skip_skills)
        self.assertEqual(settings.lang, "en")

    def test_overrides_win_over_environment(self):
        os.environ["CCCONFIG_VALIDATE_PATHS"] = "true"
        os.environ["CLAUDE_CONFIG_DIR"] = "/from/env"

        settings = Settings(
            overrides={
                "backup_root": self.temp_dir,
                "validate_paths": False,
                "claude_dir": str(self.temp_path / "explicit"),
                "skip_skills": None,
            }
        )

        self.assertFalse(settings.validate_paths)
        self.assertEqual(settings.claude_dir, self.temp_path / "explicit")
        self.assertFalse(settings.skip_skills)

    def test_backup_root_from_environment(self):
        os.environ["CCCONFIG_BACKUP_DIR"] = self.temp_dir
        self.assertEqual(Settings().backup_root, self.temp_path)

    def test_lang_from_locale(self):
        os.environ["LANG"] = "zh_TW.UTF-8"
        settings = Settings(overrides={"backup_root": self.temp_dir})
        self.assertEqual(settings.lang, "zh")

    def test_out_of_range_compression_level(self):
        self._write_settings({"compression_level": 12})
        settings = Settings(overrides={"backup_root": self.temp_dir})
        self.assertEqual(settings.compression_level, 6)

    def test_string_booleans_in_file_are_parsed(self):
        self._write_settings(
            {"skip_skills": "false", "verify_after_backup": "no", "restore_file_modes": "yes"}
        )

        settings = Settings(overrides={"backup_root": self.temp_dir})

        self.assertFalse(settings.skip_skills)
        self.assertFalse(settings.verify_after_backup)
        self.assertTrue(settings.restore_file_modes)

    def test_non_numeric_compression_level_exits(self):
        self._write_settings({"compression_level": "high"})

        with self.assertRaises(SystemExit) as cm:
            Settings(overrides={"backup_root": self.temp_dir})
        self.assertEqual(cm.exception.code, 1)

    def test_non_numeric_free_space_threshold_exits(self):
        self._write_settings({"min_free_space_mb": None})

        with self.assertRaises(SystemExit):
            Settings(overrides={"backup_root": self.temp_dir})

    def test_explicit_settings_file(self):
        path = self._write_settings({"min_free_space_mb": 5}, name="custom.json")

        settings = Settings(str(path), {"backup_root": self.temp_dir})

        self.assertEqual(settings.min_free_space_mb, 5)

    def test_missing_explicit_settings_file_exits(self):
        with self.assertRaises(SystemExit) as cm:
            Settings(str(self.temp_path / "absent.json"))
        self.assertEqual(cm.exception.code, 1)

    def test_invalid_explicit_settings_file_exits(self):
        path = self.temp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with self.assertRaises(SystemExit):
            Settings(str(path))

    def test_invalid_default_settings_file_is_ignored(self):
        (self.temp_path / DEFAULT_SETTINGS_NAME).write_text("[1, 2]", encoding="utf-8")

        settings = Settings(overrides={"backup_root": self.temp_dir})

        self.assertEqual(settings.compression_level, 6)

    def test_layout(self):
        settings = Settings(
            overrides={"backup_root": self.temp_dir, "claude_dir": "/x/.claude"}
        )

        self.assertEqual(settings.layout.plugins_cache_dir, Path("/x/.claude/plugins/cache"))
        self.assertEqual(settings.layout.artifact_dir, self.temp_path / "cache")


if __name__ == "__main__":
    unittest.main()

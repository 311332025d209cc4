import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from io_ops.path_utils import ArtifactLayout
from messages import normalize_lang, detect_lang_from_env

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_NAME = "ccconfig.json"


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None:
        return None
    return _parse_bool(value)


def resolve_claude_dir(configured: str = "") -> Path:
    """
    Resolve the assistant's home directory.

    CLAUDE_CONFIG_DIR wins over the configured value; the default is ~/.claude.
    """
    location = os.environ.get("CLAUDE_CONFIG_DIR") or configured or "~/.claude"
    return Path(os.path.expanduser(location)).absolute()


class Settings:
    """
    Loads backup settings from an optional JSON file (by default `ccconfig.json`
    in the backup root), then applies environment variables and explicit
    overrides, in that order of increasing precedence.
    """

    def __init__(
        self,
        settings_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Loads settings and populates instance variables.
        Exits the program if an explicitly named settings file is missing or invalid.

        :param settings_file: Path to a JSON settings file. Optional.
        :param overrides: Values from the command line; None entries are ignored.
        """
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

        backup_root_hint = (
            overrides.get("backup_root")
            or os.environ.get("CCCONFIG_BACKUP_DIR")
            or os.getcwd()
        )
        self.raw = self._load_raw(settings_file, backup_root_hint)

        # Locations
        self.backup_root: Path = Path(
            os.path.expanduser(
                overrides.get("backup_root")
                or os.environ.get("CCCONFIG_BACKUP_DIR")
                or self.raw.get("backup_root")
                or os.getcwd()
            )
        ).absolute()
        if "claude_dir" in overrides:
            self.claude_dir: Path = Path(
                os.path.expanduser(overrides["claude_dir"])
            ).absolute()
        else:
            self.claude_dir = resolve_claude_dir(self.raw.get("claude_dir", ""))

        # Presentation
        self.lang: str = normalize_lang(
            overrides.get("lang")
            or os.environ.get("CCCONFIG_LANG")
            or self.raw.get("lang")
            or detect_lang_from_env()
        )

        # Behavior
        self.skip_skills: bool = self._pick_bool(
            overrides, "skip_skills", "CCCONFIG_SKIP_SKILLS", False
        )
        self.verify_after_backup: bool = self._pick_bool(
            overrides, "verify_after_backup", "CCCONFIG_VERIFY", True
        )
        self.restore_file_modes: bool = self._pick_bool(
            overrides, "restore_file_modes", "CCCONFIG_RESTORE_FILE_MODES", False
        )
        self.validate_paths: bool = self._pick_bool(
            overrides, "validate_paths", "CCCONFIG_VALIDATE_PATHS", True
        )

        # Performance
        self.compression_level: int = self._pick_int(overrides, "compression_level", 6)
        if not 0 <= self.compression_level <= 9:
            logger.warning(
                "compression_level %d out of range 0-9, using 6", self.compression_level
            )
            self.compression_level = 6
        self.min_free_space_mb: int = self._pick_int(
            overrides, "min_free_space_mb", 100
        )

        logger.debug(
            "Settings resolved: claude_dir=%s backup_root=%s lang=%s",
            self.claude_dir,
            self.backup_root,
            self.lang,
        )

    @property
    def layout(self) -> ArtifactLayout:
        return ArtifactLayout(self.claude_dir, self.backup_root)

    def _pick_bool(
        self, overrides: Dict[str, Any], key: str, env_name: str, default: bool
    ) -> bool:
        if key in overrides:
            return bool(overrides[key])
        env_value = _env_bool(env_name)
        if env_value is not None:
            return env_value
        return _parse_bool(self.raw.get(key, default))

    def _pick_int(self, overrides: Dict[str, Any], key: str, default: int) -> int:
        value = overrides.get(key, self.raw.get(key, default))
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.critical("Setting %s must be an integer, got %r. Exiting...", key, value)
            sys.exit(1)

    def _load_raw(self, settings_file: Optional[str], backup_root: str) -> Dict[str, Any]:
        if settings_file:
            if not os.path.isfile(settings_file):
                logger.critical("Settings file not found at '%s'. Exiting...", settings_file)
                sys.exit(1)
            raw = self._load_json(settings_file)
            if not isinstance(raw, dict):
                logger.critical(
                    "Settings file '%s' appears to be empty or invalid. Exiting...",
                    settings_file,
                )
                sys.exit(1)
            logger.debug("Settings loaded from '%s'.", settings_file)
            return raw

        default_path = os.path.join(os.path.expanduser(backup_root), DEFAULT_SETTINGS_NAME)
        if os.path.isfile(default_path):
            raw = self._load_json(default_path)
            if isinstance(raw, dict):
                logger.debug("Settings loaded from '%s'.", default_path)
                return raw
            logger.warning("Ignoring invalid settings file '%s'.", default_path)
        return {}

    def _load_json(self, path: str) -> Any:
        """
        Loads JSON from the given file path.

        :param path: The path to the JSON file.
        :return: The parsed JSON if valid, otherwise None.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError, OSError) as e:
            logger.error("Error loading JSON file '%s': %s", path, e)
            return None

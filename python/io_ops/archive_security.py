"""
Security validation components for archive extraction.

This module checks that archive entry names and link targets stay inside the
extraction root, preventing directory traversal through crafted headers.
"""

import os
from pathlib import Path, PurePosixPath
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

MAX_ENTRY_NAME_LENGTH = 4096


class SecurityValidator:
    """Handles path validation for extracted archive entries."""

    def __init__(self, validate_paths: bool = True):
        self.validate_paths = validate_paths

    def normalize_entry_name(self, entry_name: str) -> str:
        """Strip leading slashes so absolute names join under the destination."""
        return entry_name.lstrip("/")

    def resolve_entry_path(self, entry_name: str, base_path: Path) -> Path:
        """
        Map an archive entry name to its target under base_path.

        Raises:
            PathSecurityError: If validation is enabled and the target escapes
                base_path
        """
        relative_name = self.normalize_entry_name(entry_name)
        target = Path(base_path) / relative_name

        if not self.validate_paths:
            return target

        if len(entry_name) > MAX_ENTRY_NAME_LENGTH:
            raise PathSecurityError(f"Entry name too long: {entry_name[:64]}...")

        if ".." in PurePosixPath(relative_name).parts:
            logger.warning("Path traversal attempt blocked: %s", entry_name)
            raise PathSecurityError(f"Entry escapes destination: {entry_name}")

        if not self.is_within(target, base_path):
            logger.warning("Path traversal attempt blocked: %s", entry_name)
            raise PathSecurityError(f"Entry escapes destination: {entry_name}")

        return target

    def validate_link_target(
        self, link_path: Path, link_target: str, base_path: Path
    ) -> None:
        """
        Check that a symlink created at link_path would resolve inside base_path.

        Raises:
            PathSecurityError: If validation is enabled and the link escapes
        """
        if not self.validate_paths:
            return

        if os.path.isabs(link_target):
            candidate = Path(link_target)
        else:
            candidate = link_path.parent / link_target

        if not self.is_within(candidate, base_path):
            logger.warning(
                "Symlink escaping destination blocked: %s -> %s", link_path, link_target
            )
            raise PathSecurityError(
                f"Symlink escapes destination: {link_path} -> {link_target}"
            )

    @staticmethod
    def is_within(path: Path, base_path: Path) -> bool:
        """Return True if path, with symlinks resolved, is base_path or below it."""
        resolved_path = Path(os.path.realpath(path))
        resolved_base = Path(os.path.realpath(base_path))
        try:
            resolved_path.relative_to(resolved_base)
        except ValueError:
            return False
        return True


class PathSecurityError(Exception):
    """Raised when an archive entry would be written outside the destination."""

    pass

"""
Path utilities for backup artifacts.

This module fixes where live configuration trees and their backup artifacts
live, and converts byte counts into human-readable sizes.
"""

from dataclasses import dataclass
from pathlib import Path

KB = 1024
MB = KB * 1024
GB = MB * 1024

CACHE_ARCHIVE_NAME = "plugins-cache.tar.gz"
CACHE_ROOT_LABEL = "cache"


def format_size(num_bytes: int) -> str:
    """Format a byte count using 1024-based units (B, KB, MB, GB)."""
    if num_bytes >= GB:
        return f"{num_bytes / GB:.1f}GB"
    if num_bytes >= MB:
        return f"{num_bytes / MB:.1f}MB"
    if num_bytes >= KB:
        return f"{num_bytes / KB:.1f}KB"
    return f"{num_bytes}B"


@dataclass(frozen=True)
class ArtifactLayout:
    """
    Fixed layout of source trees under the assistant home and of artifacts
    under the backup root.

    Attributes:
        claude_dir: Live assistant configuration directory
        backup_root: Portable directory holding backup artifacts
    """

    claude_dir: Path
    backup_root: Path

    @property
    def plugins_dir(self) -> Path:
        """Extraction root for the plugin cache container."""
        return self.claude_dir / "plugins"

    @property
    def plugins_cache_dir(self) -> Path:
        return self.plugins_dir / CACHE_ROOT_LABEL

    @property
    def skills_dir(self) -> Path:
        return self.claude_dir / "skills"

    @property
    def artifact_dir(self) -> Path:
        return self.backup_root / "cache"

    @property
    def cache_archive_path(self) -> Path:
        return self.artifact_dir / CACHE_ARCHIVE_NAME

    @property
    def skills_backup_dir(self) -> Path:
        return self.backup_root / "skills"

"""
Directory traversal for archive operations.

This module walks source trees in the order archives are written and
collects size statistics for reporting.
"""

import os
from pathlib import Path
from typing import Iterator, List, Tuple, Dict, Any
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)


class FileStats:
    """Container for tree size statistics."""

    def __init__(self):
        self.total_files = 0
        self.total_dirs = 0
        self.total_size = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "total_files": self.total_files,
            "total_dirs": self.total_dirs,
            "total_size": self.total_size,
        }

    def add_file(self, file_size: int) -> None:
        self.total_files += 1
        self.total_size += file_size

    def add_dir(self) -> None:
        self.total_dirs += 1


class FileScanner:
    """Walks directory trees depth-first."""

    def walk_tree(self, source_path: Path) -> Iterator[Path]:
        """
        Yield source_path and every node below it in pre-order.

        Siblings are visited in lexical order. Symlinks to directories are
        yielded but not descended into. Listing errors propagate.
        """
        source_path = Path(source_path)
        yield source_path

        if not source_path.is_dir() or source_path.is_symlink():
            return

        with os.scandir(source_path) as entries:
            children = sorted(entries, key=lambda entry: entry.name)

        for entry in children:
            if entry.is_dir(follow_symlinks=False):
                yield from self.walk_tree(Path(entry.path))
            else:
                yield Path(entry.path)

    def collect_stats(self, source_path: Path) -> FileStats:
        """Count files, directories and bytes below source_path."""
        stats = FileStats()
        for path in self.walk_tree(source_path):
            if path.is_symlink():
                continue
            if path.is_dir():
                stats.add_dir()
            elif path.is_file():
                stats.add_file(path.stat().st_size)
        return stats

    def summarize_top_level(self, source_path: Path) -> List[Tuple[str, int]]:
        """Return (name, total size) for each top-level directory of source_path."""
        summary = []
        with os.scandir(source_path) as entries:
            directories = sorted(
                (Path(entry.path) for entry in entries if entry.is_dir(follow_symlinks=False)),
                key=lambda path: path.name,
            )

        for directory in directories:
            try:
                size = self.collect_stats(directory).total_size
            except OSError as e:
                logger.debug("Could not size %s: %s", directory, e)
                size = 0
            summary.append((directory.name, size))

        return summary

"""
Archive creation for directory snapshots.

This module serializes a directory tree into a gzip-compressed tar stream,
one entry per filesystem node, preserving relative paths, entry types, sizes
and permission bits.
"""

import gzip
import os
import tarfile
from dataclasses import dataclass
from pathlib import Path
from colored_logger import get_colored_logger

from .file_scanner import FileScanner

logger = get_colored_logger(__name__)


@dataclass
class ArchiveResult:
    """Outcome of writing a container.

    Attributes:
        archive_path: Path of the written container
        entries_written: All entries, directories included
        files_written: Non-directory entries
        bytes_written: Total payload bytes (uncompressed)
        skipped_entries: Nodes of unsupported types that were left out
    """

    archive_path: Path
    entries_written: int = 0
    files_written: int = 0
    bytes_written: int = 0
    skipped_entries: int = 0


class TarGzArchiveCreator:
    """Creates gzip-compressed tar containers with streaming writes."""

    def __init__(self, compression_level: int = 6, chunk_size: int = 64 * 1024):
        self.compression_level = max(0, min(compression_level, 9))
        self.chunk_size = max(1024, chunk_size)  # Minimum 1KB chunks
        self.scanner = FileScanner()

    def _archive_name(self, path: Path, source_path: Path, root_label: str) -> str:
        """Re-root a node's path relative to source_path under root_label."""
        relative = path.relative_to(source_path)
        if relative == Path("."):
            return root_label
        return f"{root_label}/{relative.as_posix()}"

    def _build_tarinfo(
        self, tar: tarfile.TarFile, path: Path, archive_name: str
    ) -> tarfile.TarInfo:
        tarinfo = tar.gettarinfo(str(path), arcname=archive_name)
        if tarinfo is not None and tarinfo.islnk():
            # Hard links are stored as independent copies
            tarinfo.type = tarfile.REGTYPE
            tarinfo.linkname = ""
            tarinfo.size = os.lstat(path).st_size
        return tarinfo

    def _add_entry(
        self,
        tar: tarfile.TarFile,
        path: Path,
        archive_name: str,
        result: ArchiveResult,
    ) -> None:
        """Write one header, followed by the payload for regular files."""
        tarinfo = self._build_tarinfo(tar, path, archive_name)

        if tarinfo is None or not (
            tarinfo.isreg() or tarinfo.isdir() or tarinfo.issym()
        ):
            logger.warning("Skipping unsupported file type: %s", path)
            result.skipped_entries += 1
            return

        if tarinfo.isreg():
            with open(path, "rb") as src_file:
                tar.addfile(tarinfo, src_file)
            result.bytes_written += tarinfo.size
        else:
            tar.addfile(tarinfo)

        if not tarinfo.isdir():
            result.files_written += 1
        result.entries_written += 1
        logger.trace("Archived %s (%d bytes)", archive_name, tarinfo.size)

    def create_archive(
        self, source_path: Path, archive_path: Path, root_label: str = "cache"
    ) -> ArchiveResult:
        """
        Archive every node under source_path, source_path included.

        The container is written in place. On failure the partial file is
        left behind and must not be treated as a usable snapshot.

        Raises:
            FileNotFoundError: If source_path does not exist
            NotADirectoryError: If source_path is not a directory
            OSError: On any read or write failure
        """
        source_path = Path(source_path)
        archive_path = Path(archive_path)

        if not source_path.exists():
            raise FileNotFoundError(f"Source directory not found: {source_path}")
        if not source_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {source_path}")

        # A symlinked root is archived by its contents
        source_path = Path(os.path.realpath(source_path))

        archive_path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
        result = ArchiveResult(archive_path)

        with open(archive_path, "wb") as raw_file:
            with gzip.GzipFile(
                fileobj=raw_file, mode="wb", compresslevel=self.compression_level
            ) as compressor:
                with tarfile.open(
                    fileobj=compressor, mode="w|", copybufsize=self.chunk_size
                ) as tar:
                    for path in self.scanner.walk_tree(source_path):
                        archive_name = self._archive_name(path, source_path, root_label)
                        self._add_entry(tar, path, archive_name, result)

        logger.debug(
            "Wrote %s: %d entries, %d files, %d bytes",
            archive_path,
            result.entries_written,
            result.files_written,
            result.bytes_written,
        )
        return result

"""
Archive extraction for directory snapshots.

This module reads a gzip-compressed tar stream entry by entry and rebuilds
the directory tree under a destination root. Entries are processed strictly
in stream order; nothing is buffered or reordered, so ancestors that have not
been seen yet are synthesized on demand.

Directories are created writable by their owner and receive their stored
mode after the stream ends, so read-only directories can still be filled.
Extracted regular files are written with default creation permissions unless
restore_file_modes is enabled.
"""

import gzip
import os
import tarfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from colored_logger import get_colored_logger

from .archive_security import SecurityValidator

logger = get_colored_logger(__name__)

# Errors raised by the gzip and tar layers when the stream is malformed
STREAM_READ_ERRORS = (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile)


@dataclass
class ExtractResult:
    """Outcome of restoring a container."""

    destination_root: Path
    files_extracted: int = 0
    directories_extracted: int = 0
    symlinks_created: int = 0
    skipped_entries: int = 0


class TarGzArchiveExtractor:
    """Extracts gzip-compressed tar containers with streaming reads."""

    DEFAULT_DIR_MODE = 0o755

    def __init__(
        self,
        validate_paths: bool = True,
        restore_file_modes: bool = False,
        chunk_size: int = 64 * 1024,
    ):
        self.security_validator = SecurityValidator(validate_paths)
        self.restore_file_modes = restore_file_modes
        self.chunk_size = max(1024, chunk_size)

    def _make_ancestors(self, directory: Path) -> None:
        """Create every missing directory up to and including directory."""
        missing = []
        current = directory
        while not current.exists():
            missing.append(current)
            current = current.parent

        for path in reversed(missing):
            path.mkdir(mode=self.DEFAULT_DIR_MODE, exist_ok=True)

    def _copy_payload(self, source, dst_file, member: tarfile.TarInfo) -> None:
        """Copy exactly member.size bytes from the tar stream."""
        remaining = member.size
        while remaining > 0:
            chunk = source.read(min(self.chunk_size, remaining))
            if not chunk:
                raise CorruptArchiveError(f"Truncated payload for {member.name}")
            dst_file.write(chunk)
            remaining -= len(chunk)

    def _extract_directory(self, member: tarfile.TarInfo, target: Path) -> bool:
        """Create the directory writable by its owner; return True if it was created."""
        self._make_ancestors(target.parent)
        if target.is_dir():
            return False
        target.mkdir(mode=self.DEFAULT_DIR_MODE | 0o700)
        return True

    def _apply_directory_modes(self, pending_modes) -> None:
        """Apply stored directory modes, deepest first, once children are written."""
        for target, mode in sorted(
            pending_modes, key=lambda item: len(item[0].parts), reverse=True
        ):
            os.chmod(target, mode)

    def _extract_file(
        self, tar: tarfile.TarFile, member: tarfile.TarInfo, target: Path
    ) -> None:
        self._make_ancestors(target.parent)
        source = tar.extractfile(member)
        with open(target, "wb") as dst_file:
            self._copy_payload(source, dst_file, member)

        if self.restore_file_modes:
            os.chmod(target, member.mode & 0o7777)

    def _extract_symlink(
        self, member: tarfile.TarInfo, target: Path, destination_root: Path
    ) -> None:
        self._make_ancestors(target.parent)
        self.security_validator.validate_link_target(
            target, member.linkname, destination_root
        )
        if target.is_symlink() or (target.exists() and not target.is_dir()):
            target.unlink()
        os.symlink(member.linkname, target)

    def _extract_member(
        self,
        tar: tarfile.TarFile,
        member: tarfile.TarInfo,
        destination_root: Path,
        result: ExtractResult,
        pending_modes: list,
    ) -> None:
        target = self.security_validator.resolve_entry_path(
            member.name, destination_root
        )

        if member.isdir():
            if self._extract_directory(member, target):
                pending_modes.append((target, member.mode & 0o7777))
            result.directories_extracted += 1
        elif member.isreg():
            self._extract_file(tar, member, target)
            result.files_extracted += 1
        elif member.issym():
            self._extract_symlink(member, target, destination_root)
            result.symlinks_created += 1
        else:
            logger.warning("Skipping unsupported entry type: %s", member.name)
            result.skipped_entries += 1
            return

        logger.trace("Extracted %s", member.name)

    def extract_archive(self, archive_path: Path, destination_root: Path) -> ExtractResult:
        """
        Rebuild the tree stored in archive_path under destination_root.

        Entries completed before a failure stay on disk; there is no rollback.

        Raises:
            FileNotFoundError: If archive_path does not exist
            CorruptArchiveError: If the stream is truncated or malformed
            PathSecurityError: If an entry would land outside destination_root
            OSError: On any write failure under destination_root
        """
        archive_path = Path(archive_path)
        destination_root = Path(destination_root)

        if not archive_path.is_file():
            raise FileNotFoundError(f"Archive not found: {archive_path}")

        result = ExtractResult(destination_root)
        pending_modes = []

        with open(archive_path, "rb") as raw_file:
            with gzip.GzipFile(fileobj=raw_file, mode="rb") as decompressor:
                try:
                    with tarfile.open(
                        fileobj=decompressor, mode="r|", copybufsize=self.chunk_size
                    ) as tar:
                        for member in tar:
                            self._extract_member(
                                tar, member, destination_root, result, pending_modes
                            )
                except STREAM_READ_ERRORS as e:
                    raise CorruptArchiveError(
                        f"Corrupt archive {archive_path}: {e}"
                    ) from e
                finally:
                    self._apply_directory_modes(pending_modes)

        logger.debug(
            "Extracted %s into %s: %d files, %d directories",
            archive_path,
            destination_root,
            result.files_extracted,
            result.directories_extracted,
        )
        return result


class CorruptArchiveError(Exception):
    """Raised when a container is truncated or malformed during extraction."""

    pass

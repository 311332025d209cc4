import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)


@dataclass
class ReplicationResult:
    """Outcome of a flat directory replication."""

    source_dir: Path
    destination_dir: Path
    files_copied: int = 0
    skipped: bool = False
    source_missing: bool = False


class FileManager:
    CHUNK_SIZE = 64 * 1024

    @staticmethod
    def ensure_dir_exists(directory: Path, mode: int = 0o755) -> None:
        directory.mkdir(mode=mode, parents=True, exist_ok=True)

    @staticmethod
    def copy_file(source_path: Path, destination_path: Path) -> None:
        """
        Copy a regular file's bytes, then apply the source's permission bits.

        Content and mode are two separate steps: if the mode step fails the
        destination keeps its content with default permissions and the error
        is raised to the caller.

        Raises:
            FileNotFoundError: If source_path does not exist
            PermissionError: If either side cannot be opened or chmod fails
            OSError: On any other read/write failure
        """
        with open(source_path, "rb") as src_file:
            with open(destination_path, "wb") as dst_file:
                shutil.copyfileobj(src_file, dst_file, FileManager.CHUNK_SIZE)

        source_mode = os.stat(source_path).st_mode
        os.chmod(destination_path, source_mode)

    @staticmethod
    def replicate_flat(
        source_dir: Path, destination_dir: Path, skip: bool = False
    ) -> ReplicationResult:
        """
        Copy every non-directory entry of source_dir into destination_dir.

        Subdirectories are ignored, not recursed. A missing source directory
        is reported in the result rather than raised; copy failures abort.
        """
        source_dir = Path(source_dir)
        destination_dir = Path(destination_dir)
        result = ReplicationResult(source_dir, destination_dir)

        if skip:
            result.skipped = True
            return result

        if not source_dir.is_dir():
            logger.debug("Replication source not found: %s", source_dir)
            result.source_missing = True
            return result

        FileManager.ensure_dir_exists(destination_dir)

        with os.scandir(source_dir) as entries:
            names = sorted(entry.name for entry in entries if not entry.is_dir())

        for name in names:
            FileManager.copy_file(source_dir / name, destination_dir / name)
            logger.trace("Copied %s", name)
            result.files_copied += 1

        logger.debug(
            "Replicated %d files from %s to %s",
            result.files_copied,
            source_dir,
            destination_dir,
        )
        return result

"""
Backup Manager - orchestrates backup, restore and clean operations.

The manager wires the focused components together and applies caller policy:
- Skills replication: PathCopier via FileManager.replicate_flat
- Plugin cache snapshot: TarGzArchiveCreator / TarGzArchiveExtractor
- Artifact housekeeping: ArchiveStore
- Integrity checks: ArchiveVerifier

A missing source tree or container is reported as a MISSING step so that a
multi-step run can continue; every other error propagates. The manager
performs no text output of its own.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from colored_logger import get_colored_logger

from .archive_creators import ArchiveResult, TarGzArchiveCreator
from .archive_extractor import ExtractResult, TarGzArchiveExtractor
from .archive_store import ArchiveStore, ArtifactInfo, CleanResult
from .archive_verifier import ArchiveVerifier
from .file_manager import FileManager, ReplicationResult
from .file_scanner import FileScanner
from .path_utils import ArtifactLayout, CACHE_ROOT_LABEL, MB

logger = get_colored_logger(__name__)


class StepStatus(Enum):
    DONE = "done"
    SKIPPED = "skipped"
    MISSING = "missing"


@dataclass
class StepResult:
    """Outcome of one step of a backup or restore run.

    Attributes:
        step: Step name ("skills" or "cache")
        status: Whether the step ran, was skipped, or had nothing to work on
        path: Source tree or container the step worked on
        replication: Result of a skills copy
        archive: Result of writing the cache container
        extract: Result of restoring the cache container
        archive_size: Size of the container on disk
        verified: Post-backup integrity check result, None when not run
        free_space: Free bytes on the artifact filesystem when below threshold
    """

    step: str
    status: StepStatus
    path: Optional[Path] = None
    replication: Optional[ReplicationResult] = None
    archive: Optional[ArchiveResult] = None
    extract: Optional[ExtractResult] = None
    archive_size: int = 0
    verified: Optional[bool] = None
    free_space: Optional[int] = None


class BackupManager:
    """Runs backup, restore and clean against a fixed ArtifactLayout."""

    def __init__(
        self,
        layout: ArtifactLayout,
        verify_after_backup: bool = True,
        restore_file_modes: bool = False,
        validate_paths: bool = True,
        compression_level: int = 6,
        min_free_space_mb: int = 100,
    ):
        self.layout = layout
        self.verify_after_backup = verify_after_backup
        self.min_free_space = max(0, min_free_space_mb) * MB

        self.creator = TarGzArchiveCreator(compression_level)
        self.extractor = TarGzArchiveExtractor(
            validate_paths=validate_paths, restore_file_modes=restore_file_modes
        )
        self.store = ArchiveStore()
        self.verifier = ArchiveVerifier()
        self.scanner = FileScanner()

    @classmethod
    def from_settings(cls, settings) -> "BackupManager":
        return cls(
            settings.layout,
            verify_after_backup=settings.verify_after_backup,
            restore_file_modes=settings.restore_file_modes,
            validate_paths=settings.validate_paths,
            compression_level=settings.compression_level,
            min_free_space_mb=settings.min_free_space_mb,
        )

    # Skills

    def _replicate_skills(self, source: Path, destination: Path, skip: bool) -> StepResult:
        replication = FileManager.replicate_flat(source, destination, skip=skip)
        if replication.skipped:
            status = StepStatus.SKIPPED
        elif replication.source_missing:
            status = StepStatus.MISSING
        else:
            status = StepStatus.DONE
        return StepResult("skills", status, path=source, replication=replication)

    def backup_skills(self, skip: bool = False) -> StepResult:
        """Copy skill files from the assistant home into the backup root."""
        return self._replicate_skills(
            self.layout.skills_dir, self.layout.skills_backup_dir, skip
        )

    def restore_skills(self, skip: bool = False) -> StepResult:
        """Copy skill files from the backup root back into the assistant home."""
        return self._replicate_skills(
            self.layout.skills_backup_dir, self.layout.skills_dir, skip
        )

    # Plugin cache

    def detect_plugins(self) -> List[Tuple[str, int]]:
        """Return (name, size) for each top-level plugin directory in the cache."""
        source = self.layout.plugins_cache_dir
        if not source.is_dir():
            return []
        return self.scanner.summarize_top_level(source)

    def backup_cache(self, skip: bool = False) -> StepResult:
        """Snapshot the plugin cache into the artifact directory."""
        source = self.layout.plugins_cache_dir
        if skip:
            return StepResult("cache", StepStatus.SKIPPED, path=source)
        if not source.is_dir():
            logger.debug("Plugin cache not found: %s", source)
            return StepResult("cache", StepStatus.MISSING, path=source)

        result = StepResult("cache", StepStatus.DONE, path=source)

        free = self.store.free_space(self.layout.artifact_dir)
        if free < self.min_free_space:
            result.free_space = free

        archive_path = self.layout.cache_archive_path
        result.archive = self.creator.create_archive(
            source, archive_path, root_label=CACHE_ROOT_LABEL
        )
        result.archive_size = archive_path.stat().st_size

        if self.verify_after_backup:
            result.verified = self.verifier.verify_archive_integrity(str(archive_path))
            if not result.verified:
                logger.debug("Post-backup verification failed for %s", archive_path)

        return result

    def restore_cache(self, skip: bool = False) -> StepResult:
        """Extract the plugin cache container back into the assistant home."""
        archive_path = self.layout.cache_archive_path
        if skip:
            return StepResult("cache", StepStatus.SKIPPED, path=archive_path)
        if not archive_path.is_file():
            logger.debug("Plugin cache archive not found: %s", archive_path)
            return StepResult("cache", StepStatus.MISSING, path=archive_path)

        result = StepResult("cache", StepStatus.DONE, path=archive_path)
        result.archive_size = archive_path.stat().st_size
        result.extract = self.extractor.extract_archive(
            archive_path, self.layout.plugins_dir
        )
        return result

    def clean_cache(self) -> CleanResult:
        """
        Delete every artifact in the artifact directory.

        Raises:
            OSError: If the artifact directory cannot be read
        """
        return self.store.delete_all(self.layout.artifact_dir)

    # Inspection

    def describe_artifacts(self) -> List[Tuple[ArtifactInfo, Optional[Dict[str, Any]]]]:
        """List artifacts with container details where the format is known."""
        described = []
        for artifact in self.store.list_artifacts(self.layout.artifact_dir):
            path = self.layout.artifact_dir / artifact.name
            details = None
            if self.verifier.is_container(artifact.name):
                details = self.verifier.get_archive_info(str(path))
            described.append((artifact, details))
        return described

    def verify_artifacts(self) -> List[Tuple[ArtifactInfo, bool]]:
        """Check the integrity of every container in the artifact directory."""
        return [
            (
                artifact,
                self.verifier.verify_archive_integrity(
                    str(self.layout.artifact_dir / artifact.name)
                ),
            )
            for artifact in self.store.list_artifacts(self.layout.artifact_dir)
            if self.verifier.is_container(artifact.name)
        ]

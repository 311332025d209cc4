"""
Artifact directory management.

Lists, sizes and deletes completed containers. Deletion is best-effort by
policy: a file that cannot be removed is skipped and the pass continues.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import psutil
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)


@dataclass(frozen=True)
class ArtifactInfo:
    """A completed container in the artifact directory."""

    name: str
    size: int


@dataclass
class CleanResult:
    """Outcome of a delete pass.

    Attributes:
        artifacts: Artifacts found before deletion
        total_size: Combined size of those artifacts in bytes
        deleted: Number of artifacts removed
    """

    artifacts: List[ArtifactInfo] = field(default_factory=list)
    total_size: int = 0
    deleted: int = 0


class ArchiveStore:
    """Manages backup artifacts on disk."""

    def list_artifacts(self, artifact_dir: Path) -> List[ArtifactInfo]:
        """
        List non-directory entries of artifact_dir, sorted by name.

        Raises:
            OSError: If the directory cannot be read (FileNotFoundError when
                it does not exist)
        """
        artifacts = []
        with os.scandir(artifact_dir) as entries:
            for entry in entries:
                if entry.is_dir():
                    continue
                artifacts.append(ArtifactInfo(entry.name, entry.stat().st_size))

        return sorted(artifacts, key=lambda artifact: artifact.name)

    @staticmethod
    def total_size(artifacts: List[ArtifactInfo]) -> int:
        return sum(artifact.size for artifact in artifacts)

    def delete_all(self, artifact_dir: Path) -> CleanResult:
        """
        Delete every artifact in artifact_dir.

        Listing failures raise. Individual deletion failures are discarded so
        that as much as possible is removed; the pass always completes.
        """
        artifacts = self.list_artifacts(artifact_dir)
        result = CleanResult(artifacts, self.total_size(artifacts))

        for artifact in artifacts:
            try:
                os.remove(os.path.join(artifact_dir, artifact.name))
                result.deleted += 1
            except OSError as e:
                logger.debug("Could not delete %s: %s", artifact.name, e)

        logger.debug(
            "Deleted %d of %d artifacts in %s",
            result.deleted,
            len(artifacts),
            artifact_dir,
        )
        return result

    @staticmethod
    def free_space(path: Path) -> int:
        """Free bytes on the filesystem holding path or its nearest existing ancestor."""
        current = Path(path).absolute()
        while not current.exists() and current != current.parent:
            current = current.parent
        return psutil.disk_usage(str(current)).free

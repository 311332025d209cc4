"""
Console rendering of backup results.

The core operations return result objects; this module turns them into
localized lines on the colored logger. Nothing else in the project writes
user-facing text.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from colored_logger import get_colored_logger
from io_ops.archive_manager import StepResult, StepStatus
from io_ops.archive_store import ArtifactInfo, CleanResult
from io_ops.path_utils import format_size
from messages import Translator

logger = get_colored_logger(__name__)

STEP_LABELS = {
    "skills": "backup.steps.skills",
    "cache": "backup.steps.cache",
}


class ConsoleReporter:
    """Renders result objects as localized console output."""

    def __init__(self, translator: Optional[Translator] = None, log=None):
        self.t = translator or Translator()
        self.log = log or logger

    def title(self, key: str, **params) -> None:
        self.log.notice(self.t(key, **params))

    def step_started(self, step: str) -> None:
        self.log.progress(self.t(STEP_LABELS[step]))

    def progress(self, key: str, **params) -> None:
        self.log.progress(self.t(key, **params))

    def _missing(self, result: StepResult) -> None:
        self.log.warning(
            self.t("backup.warnings.not_found", item=self.t(STEP_LABELS[result.step]))
        )

    def _skipped(self, result: StepResult) -> None:
        self.log.skipped(self.t(STEP_LABELS[result.step]))

    def detected_plugins(self, detected: List[Tuple[str, int]]) -> None:
        if not detected:
            return
        self.log.info(self.t("cache.backup.detected"))
        for name, size in detected:
            self.log.info(self.t("list.item", name=name, size=format_size(size)))

    def backup_step(self, result: StepResult) -> None:
        """Render the outcome of one backup step."""
        if result.status is StepStatus.SKIPPED:
            self._skipped(result)
            return
        if result.status is StepStatus.MISSING:
            self._missing(result)
            return

        if result.step == "skills":
            self.log.success(
                self.t(
                    "backup.messages.skills_count",
                    count=result.replication.files_copied,
                )
            )
            return

        if result.free_space is not None:
            self.log.warning(
                self.t(
                    "cache.backup.low_space",
                    free=format_size(result.free_space),
                    path=result.archive.archive_path.parent,
                )
            )
        self.log.success(
            self.t(
                "cache.backup.done",
                files=result.archive.files_written,
                size=format_size(result.archive_size),
                path=result.archive.archive_path,
            )
        )
        if result.verified is False:
            self.log.warning(
                self.t("cache.backup.verify_failed", path=result.archive.archive_path)
            )

    def restore_step(self, result: StepResult) -> None:
        """Render the outcome of one restore step."""
        if result.status is StepStatus.SKIPPED:
            self._skipped(result)
            return
        if result.status is StepStatus.MISSING:
            self._missing(result)
            return

        if result.step == "skills":
            self.log.success(
                self.t(
                    "restore.messages.skills_count",
                    count=result.replication.files_copied,
                )
            )
            return

        self.log.info(self.t("cache.restore.info"))
        self.log.info(self.t("cache.restore.file", path=result.path))
        self.log.info(self.t("cache.restore.size", size=format_size(result.archive_size)))
        self.log.success(
            self.t(
                "cache.restore.done",
                files=result.extract.files_extracted,
                dirs=result.extract.directories_extracted,
            )
        )

    def clean(self, result: CleanResult) -> None:
        if not result.artifacts:
            self.log.info(self.t("cache.clean.empty"))
            return

        self.log.info(self.t("cache.clean.files"))
        self._artifact_list(result.artifacts)
        self.log.info(self.t("cache.clean.total", size=format_size(result.total_size)))
        self.log.success(
            self.t(
                "cache.clean.done",
                deleted=result.deleted,
                count=len(result.artifacts),
            )
        )

    def _artifact_list(self, artifacts: List[ArtifactInfo]) -> None:
        for artifact in artifacts:
            self.log.info(
                self.t("list.item", name=artifact.name, size=format_size(artifact.size))
            )

    def info(
        self,
        artifact_dir: Path,
        described: List[Tuple[ArtifactInfo, Optional[Dict[str, Any]]]],
    ) -> None:
        self.title("info.title", path=artifact_dir)
        if not described:
            self.log.info(self.t("cache.clean.empty"))
            return

        for artifact, details in described:
            self.log.info(
                self.t("list.item", name=artifact.name, size=format_size(artifact.size))
            )
            if details is None:
                continue
            status = self.t("info.valid" if details["valid"] else "info.invalid")
            self.log.info(
                self.t(
                    "info.details",
                    files=details["file_count"],
                    size=format_size(details.get("uncompressed_size", 0)),
                    status=status,
                )
            )

    def verify(self, artifact_dir: Path, results: List[Tuple[ArtifactInfo, bool]]) -> None:
        if not results:
            self.log.info(self.t("cache.clean.empty"))
            return
        for artifact, ok in results:
            path = artifact_dir / artifact.name
            if ok:
                self.log.success(self.t("verify.ok", path=path))
            else:
                self.log.error(self.t("verify.failed", path=path))

    def missing(self, item: str) -> None:
        self.log.warning(self.t("backup.warnings.not_found", item=item))

    def failed(self, error: Exception) -> None:
        self.log.failure(self.t("common.failed", error=error))

    def cancelled(self) -> None:
        self.log.warning(self.t("common.cancelled"))

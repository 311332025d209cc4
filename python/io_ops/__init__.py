from .file_manager import FileManager, ReplicationResult

# Modular archive components
from .archive_security import SecurityValidator, PathSecurityError
from .file_scanner import FileScanner, FileStats
from .archive_creators import ArchiveResult, TarGzArchiveCreator
from .archive_extractor import (
    CorruptArchiveError,
    ExtractResult,
    TarGzArchiveExtractor,
)
from .archive_verifier import TarGzArchiveVerifier, ArchiveVerifier
from .archive_store import ArchiveStore, ArtifactInfo, CleanResult
from .path_utils import ArtifactLayout, format_size

# Orchestration
from .archive_manager import BackupManager, StepResult, StepStatus

__all__ = [
    # Core components
    "FileManager",
    "ReplicationResult",
    "BackupManager",
    "StepResult",
    "StepStatus",
    # Security components
    "SecurityValidator",
    "PathSecurityError",
    # File scanning components
    "FileScanner",
    "FileStats",
    # Archive creation and extraction
    "ArchiveResult",
    "TarGzArchiveCreator",
    "CorruptArchiveError",
    "ExtractResult",
    "TarGzArchiveExtractor",
    # Verification components
    "TarGzArchiveVerifier",
    "ArchiveVerifier",
    # Artifact directory
    "ArchiveStore",
    "ArtifactInfo",
    "CleanResult",
    # Path utilities
    "ArtifactLayout",
    "format_size",
]

"""Galaxy History Archive SDK.

A Python library for reading exported Galaxy history archives (.tar.gz)
without extracting them: detect the export format, load the metadata
tables, reconstruct the history tree and stream dataset payloads.

Quick Start (High-Level API):
    >>> from galaxy_history import load_history
    >>> tree = load_history("history.tar.gz")
    >>> [item["name"] for item in tree.contents]

Quick Start (SDK API):
    >>> from galaxy_history import HistoryArchive, Settings
    >>> archive = HistoryArchive("https://example.org/history.tar.gz", Settings())
    >>> archive.export_version()
    >>> with open("out.bam", "wb") as f:
    ...     archive.output_dataset(f, "f2db41e1fa331b3e")

Configuration:
    >>> from galaxy_history import Settings
    >>> import os
    >>> os.environ["GALAXY_HISTORY_REQUEST_TIMEOUT"] = "60"
    >>> config = Settings()  # Loads from environment

    >>> # Or configure programmatically
    >>> config = Settings(dataset_attributes=["encoded_id", "name", "hid"])

Public API:
    High-level functions:
        - load_history: Reconstruct the history tree of an archive
        - detect_version: Detect the export format version of an archive

    Orchestrators:
        - HistoryArchive: Archive access, reconstruction and payload output

    Configuration:
        - Settings: Configuration model

    Domain Models:
        - ExportVersion: Export format version enum
        - HistoryTables: The four metadata tables
        - HistoryTree: Reconstructed history

    Errors:
        - HistoryArchiveError: Base class of every error raised here

    Reporters (for custom UIs):
        - Reporter: Console reporter (use silent=True for headless mode)
"""

from pathlib import Path

# Configuration
from galaxy_history.config import Settings

# Domain models
from galaxy_history.domain import ExportVersion, HistoryTables, HistoryTree

# Errors
from galaxy_history.errors import HistoryArchiveError

# Orchestrators
from galaxy_history.orchestrators import HistoryArchive

# UI Reporters
from galaxy_history.ui import Reporter

__all__ = [
    # High-level functions
    "load_history",
    "detect_version",
    # Orchestrators
    "HistoryArchive",
    # Configuration
    "Settings",
    # Domain models
    "ExportVersion",
    "HistoryTables",
    "HistoryTree",
    # Errors
    "HistoryArchiveError",
    # Reporters
    "Reporter",
]

# Version
__version__ = "0.1.0"


# High-level convenience functions
def load_history(source: str | Path, config: Settings | None = None) -> HistoryTree:
    """Reconstruct the history tree of an archive (high-level convenience function).

    Args:
        source: Local path or http/https URL of the archive
        config: Archive configuration. If None, uses Settings() from environment.

    Raises:
        VersionError: If the archive is not in the current export format
        ArchiveFormatError: If the archive metadata is inconsistent

    Example:
        >>> from galaxy_history import load_history
        >>> tree = load_history("history.tar.gz")
        >>> tree.metadata["name"]
    """
    return HistoryArchive(source, config).history()


def detect_version(source: str | Path, config: Settings | None = None) -> ExportVersion:
    """Detect the export format version of an archive (high-level convenience function).

    Example:
        >>> from galaxy_history import ExportVersion, detect_version
        >>> detect_version("history.tar.gz") is ExportVersion.CURRENT
        True
    """
    return HistoryArchive(source, config).export_version()

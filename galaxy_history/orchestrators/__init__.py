"""Orchestration layer.

This module contains the high-level archive orchestrator that coordinates
reading, state resolution and reconstruction of a history.
"""

from galaxy_history.orchestrators.history_archive import HistoryArchive

__all__ = [
    "HistoryArchive",
]

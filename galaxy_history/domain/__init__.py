"""Domain models and business logic."""

from galaxy_history.domain.content_types import content_type_for_extension
from galaxy_history.domain.models import (
    ExportVersion,
    HistoryTables,
    HistoryTree,
    StateBucket,
    StateCounts,
)
from galaxy_history.domain.services import HistoryTreeService, StateResolutionService
from galaxy_history.domain.types import JSONObject, JSONValue, Record

__all__ = [
    "ExportVersion",
    "HistoryTables",
    "HistoryTree",
    "StateBucket",
    "StateCounts",
    "HistoryTreeService",
    "StateResolutionService",
    "content_type_for_extension",
    "JSONObject",
    "JSONValue",
    "Record",
]

"""Domain models for history archives."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ExportVersion(str, Enum):
    """Export format of a history archive."""

    NOT_AN_ARCHIVE = "0"  # Not a history archive (or version undeterminable)
    LEGACY = "1"  # Older format without proper collection support
    CURRENT = "2"  # Newest format, the only one that can be reconstructed

    @property
    def label(self) -> str:
        """Return a short human readable description."""
        return {
            ExportVersion.NOT_AN_ARCHIVE: "not a history archive",
            ExportVersion.LEGACY: "unsupported legacy format",
            ExportVersion.CURRENT: "current format",
        }[self]


class StateBucket(str, Enum):
    """Aggregation bucket for dataset states within a collection."""

    OK = "ok"
    ERROR = "error"
    WAITING = "waiting"
    RUNNING = "running"
    DELETED = "deleted"
    PAUSED = "paused"
    OTHER = "other"

    @classmethod
    def for_state(cls, state: object) -> "StateBucket":
        """Return the bucket a dataset state is counted in."""
        if not isinstance(state, str):
            return cls.OTHER
        return _STATE_BUCKETS.get(state.lower(), cls.OTHER)


_STATE_BUCKETS = {
    "ok": StateBucket.OK,
    "error": StateBucket.ERROR,
    "waiting": StateBucket.WAITING,
    "new": StateBucket.WAITING,
    "queued": StateBucket.WAITING,
    "running": StateBucket.RUNNING,
    "upload": StateBucket.RUNNING,
    "deleted": StateBucket.DELETED,
    "deleted_new": StateBucket.DELETED,
    "paused": StateBucket.PAUSED,
}


class StateCounts(BaseModel):
    """Number of datasets per state bucket within a collection (recursively)."""

    ok: int = 0
    error: int = 0
    waiting: int = 0
    running: int = 0
    deleted: int = 0
    paused: int = 0
    other: int = 0

    @property
    def total(self) -> int:
        """Return the number of counted datasets."""
        return sum(getattr(self, bucket.value) for bucket in StateBucket)

    def add(self, bucket: StateBucket) -> None:
        """Count one more dataset in the given bucket."""
        setattr(self, bucket.value, getattr(self, bucket.value) + 1)

    def merge(self, other: "StateCounts") -> None:
        """Fold the counts of a child collection into these counts."""
        for bucket in StateBucket:
            setattr(self, bucket.value, getattr(self, bucket.value) + getattr(other, bucket.value))

    @property
    def state(self) -> str:
        """Return the aggregate collection state.

        Priority is fixed: error, running, waiting, paused, all-deleted, other, ok.
        """
        if self.error > 0:
            return StateBucket.ERROR.value
        if self.running > 0:
            return StateBucket.RUNNING.value
        if self.waiting > 0:
            return StateBucket.WAITING.value
        if self.paused > 0:
            return StateBucket.PAUSED.value
        if self.deleted == self.total:
            return StateBucket.DELETED.value
        if self.other > 0:
            return StateBucket.OTHER.value
        return StateBucket.OK.value


class HistoryTables(BaseModel):
    """The four normalized metadata tables of an archive."""

    history: dict[str, Any] = Field(default_factory=dict)
    datasets: list[dict[str, Any]] = Field(default_factory=list)
    collections: list[dict[str, Any]] = Field(default_factory=list)
    jobs: list[dict[str, Any]] = Field(default_factory=list)


class HistoryTree(BaseModel):
    """Reconstructed history: metadata plus contents, newest first."""

    metadata: dict[str, Any] = Field(default_factory=dict)
    contents: list[dict[str, Any]] = Field(default_factory=list)

    def __repr__(self) -> str:
        """Return string representation of the tree."""
        return f"HistoryTree(name={self.metadata.get('name')!r}, contents={len(self.contents)})"

"""History archive orchestrator.

Coordinates version detection, metadata loading, state resolution and tree
reconstruction for a single archive source, and serves payload bytes and
content types for the datasets it contains.
"""

from pathlib import Path
from typing import BinaryIO

import orjson

from galaxy_history.config import Settings
from galaxy_history.domain.content_types import (
    DEFAULT_CONTENT_TYPE,
    content_type_for_extension,
    content_type_for_filename,
)
from galaxy_history.domain.models import ExportVersion, HistoryTables, HistoryTree
from galaxy_history.domain.services import HistoryTreeService, StateResolutionService
from galaxy_history.domain.types import JSONObject, Record
from galaxy_history.errors import (
    DatasetNotFoundError,
    NotAnArchiveError,
    UnsupportedLegacyFormatError,
)
from galaxy_history.operations import metadata
from galaxy_history.operations.archive import (
    ArchiveReader,
    estimate_history_size,
    human_readable_size,
)
from galaxy_history.operations.extract import dataset_member, extra_file_member, output_member
from galaxy_history.operations.version import detect_export_version

UNKNOWN_SIZE = "unknown"


class HistoryArchive:
    """A history archive read from a local file or URL.

    Only the detected export version is cached. Every other call reads fresh
    from the source, so the archive must stay available for the lifetime of
    this object.

    Example:
        >>> archive = HistoryArchive("history.tar.gz")
        >>> tree = archive.history()
        >>> [item["name"] for item in tree.contents]
    """

    def __init__(self, source: str | Path, config: Settings | None = None):
        """Initialize the archive handle.

        Args:
            source: Local path or http/https URL of the archive
            config: Configuration. If None, creates new Settings() from environment.
        """
        self.source = source
        self.config = config if config is not None else Settings()
        self.reader = ArchiveReader(source, timeout=self.config.request_timeout)
        self._version: ExportVersion | None = None

    def export_version(self) -> ExportVersion:
        """Return the detected export format version (cached)."""
        if self._version is None:
            self._version = detect_export_version(self.reader)
        return self._version

    def require_current_version(self) -> None:
        """Raise unless the archive uses the current export format.

        Raises:
            NotAnArchiveError: If the source is not a history archive
            UnsupportedLegacyFormatError: If the archive uses the old format
        """
        version = self.export_version()
        if version is ExportVersion.NOT_AN_ARCHIVE:
            raise NotAnArchiveError()
        if version is ExportVersion.LEGACY:
            raise UnsupportedLegacyFormatError()

    def history_attributes(self, attributes: list[str] | None = None) -> JSONObject:
        """Return the history's own attributes (name, annotation, tags, ...).

        Args:
            attributes: Fields to load. If None, uses the configured allow-list.
        """
        if attributes is None:
            attributes = self.config.history_attributes
        return metadata.load_history_attributes(self.reader, attributes)

    def datasets(self) -> list[Record]:
        """Return the raw datasets table, including datasets inside collections."""
        return metadata.load_datasets(self.reader, self.config.dataset_attributes)

    def collections(self) -> list[Record]:
        """Return the raw collections table."""
        return metadata.load_collections(self.reader, self.config.collection_attributes)

    def jobs(self) -> list[Record]:
        """Return the raw jobs table."""
        return metadata.load_jobs(self.reader, self.config.job_attributes)

    def get_dataset(self, dataset_id: str) -> Record | None:
        """Return the dataset with the given encoded id, or None.

        If several records share the id, the last one in the table wins.
        """
        found = None
        for dataset in self.datasets():
            if dataset.get("encoded_id") == dataset_id:
                found = dataset
        return found

    def get_job(self, job_id: str) -> Record | None:
        """Return the job with the given encoded id, or None."""
        return next((job for job in self.jobs() if job.get("encoded_id") == job_id), None)

    def load_tables(self) -> HistoryTables:
        """Load all metadata tables and resolve execution states."""
        self.require_current_version()
        tables = metadata.load_tables(
            self.reader,
            history_attributes=self.config.history_attributes,
            dataset_attributes=self.config.dataset_attributes,
            collection_attributes=self.config.collection_attributes,
            job_attributes=self.config.job_attributes,
        )
        StateResolutionService.resolve(tables)
        return tables

    def history_size(self) -> str:
        """Return the estimated readable size of the history, or "unknown"."""
        size = estimate_history_size(self.source, self.config.request_timeout)
        return human_readable_size(size) if size is not None else UNKNOWN_SIZE

    def history(self) -> HistoryTree:
        """Reconstruct the history tree (full pass over the archive)."""
        tables = self.load_tables()
        return HistoryTreeService.build(tables, history_size=self.history_size())

    def history_json(self, pretty: bool = False) -> str:
        """Return the history tree serialized as JSON."""
        return self._dump_history(pretty).decode("utf-8")

    def write_history_json(self, sink: BinaryIO, pretty: bool = False) -> None:
        """Write the history tree as JSON to a binary sink (left open)."""
        sink.write(self._dump_history(pretty))

    def _dump_history(self, pretty: bool) -> bytes:
        option = orjson.OPT_INDENT_2 if pretty else 0
        return orjson.dumps(self.history().model_dump(mode="json"), option=option)

    def _require_dataset(self, dataset_id: str) -> Record:
        dataset = self.get_dataset(dataset_id)
        if dataset is None:
            raise DatasetNotFoundError(dataset_id)
        return dataset

    def output_dataset(
        self,
        sink: BinaryIO,
        dataset_id: str,
        start: int = -1,
        end: int = -1,
        decompress: bool = False,
    ) -> int:
        """Write a dataset file (or an inclusive byte range of it) to the sink.

        Returns:
            Number of bytes written
        """
        dataset = self._require_dataset(dataset_id)
        return output_member(
            self.reader,
            dataset_member(dataset),
            sink,
            start,
            end,
            decompress,
            self.config.copy_buffer_size,
        )

    def output_extra_file(
        self,
        sink: BinaryIO,
        dataset_id: str,
        filename: str,
        start: int = -1,
        end: int = -1,
        decompress: bool = False,
    ) -> int:
        """Write an extra file of a dataset (or a byte range of it) to the sink.

        Args:
            filename: Path of the file relative to the dataset's extra files directory

        Raises:
            MissingExtraFilesError: If the dataset has no extra files directory
            MemberNotFoundError: If the extra file is not in the archive
        """
        dataset = self._require_dataset(dataset_id)
        return output_member(
            self.reader,
            extra_file_member(dataset, filename),
            sink,
            start,
            end,
            decompress,
            self.config.copy_buffer_size,
        )

    def content_type_for_dataset(self, dataset_id: str, decompress: bool = False) -> str:
        """Return the MIME type of a dataset based on its extension."""
        dataset = self.get_dataset(dataset_id)
        if dataset is None:
            return DEFAULT_CONTENT_TYPE
        extension = dataset.get("extension")
        return content_type_for_extension(
            extension if isinstance(extension, str) else None, decompress
        )

    def content_type_for_extra_file(self, filename: str, decompress: bool = False) -> str:
        """Return the MIME type of an extra file based on its own suffix."""
        return content_type_for_filename(filename, decompress)

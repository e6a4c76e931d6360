"""Loading of the normalized metadata tables stored in an archive."""

from collections.abc import Iterable
from logging import Logger

from galaxy_history.domain.models import HistoryTables
from galaxy_history.domain.types import JSONObject, Record
from galaxy_history.errors import ArchiveFormatError
from galaxy_history.operations.archive import ArchiveReader
from galaxy_history.operations.json_decoder import decode_json

logger = Logger(__file__)

HISTORY_ATTRS = "history_attrs.txt"
DATASETS_ATTRS = "datasets_attrs.txt"
COLLECTIONS_ATTRS = "collections_attrs.txt"
JOBS_ATTRS = "jobs_attrs.txt"


def load_history_attributes(
    reader: ArchiveReader, attributes: Iterable[str] | None = None
) -> JSONObject:
    """Load ``history_attrs.txt``.

    A missing or null ``annotation`` is normalized to an empty string.
    """
    with reader.open_member(HISTORY_ATTRS) as stream:
        result = decode_json(stream, attributes)
    if not isinstance(result, dict):
        raise ArchiveFormatError(
            "Unable to read history attributes: expected a JSON object", member=HISTORY_ATTRS
        )
    if result.get("annotation") is None:
        result["annotation"] = ""
    return result


def load_table(
    reader: ArchiveReader, member: str, attributes: Iterable[str] | None = None
) -> list[Record]:
    """Load a metadata table that holds a JSON list of records."""
    with reader.open_member(member) as stream:
        result = decode_json(stream, attributes)
    if not isinstance(result, list):
        raise ArchiveFormatError(f"Unable to parse {member}: expected a JSON list", member=member)
    if not all(isinstance(record, dict) for record in result):
        raise ArchiveFormatError(
            f"Unable to parse {member}: expected a list of objects", member=member
        )
    logger.debug(f"Loaded {len(result)} records from {member}")
    return result


def load_datasets(reader: ArchiveReader, attributes: Iterable[str] | None = None) -> list[Record]:
    """Load the datasets table, including datasets that belong to collections."""
    return load_table(reader, DATASETS_ATTRS, attributes)


def load_collections(
    reader: ArchiveReader, attributes: Iterable[str] | None = None
) -> list[Record]:
    """Load the collections table."""
    return load_table(reader, COLLECTIONS_ATTRS, attributes)


def load_jobs(reader: ArchiveReader, attributes: Iterable[str] | None = None) -> list[Record]:
    """Load the jobs table."""
    return load_table(reader, JOBS_ATTRS, attributes)


def load_tables(
    reader: ArchiveReader,
    history_attributes: Iterable[str] | None = None,
    dataset_attributes: Iterable[str] | None = None,
    collection_attributes: Iterable[str] | None = None,
    job_attributes: Iterable[str] | None = None,
) -> HistoryTables:
    """Load all four metadata tables.

    Each table is a separate pass over the archive stream.
    """
    return HistoryTables(
        history=load_history_attributes(reader, history_attributes),
        datasets=load_datasets(reader, dataset_attributes),
        collections=load_collections(reader, collection_attributes),
        jobs=load_jobs(reader, job_attributes),
    )

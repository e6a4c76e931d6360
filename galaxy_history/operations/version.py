"""Export format version detection."""

from logging import Logger

from galaxy_history.domain.models import ExportVersion
from galaxy_history.errors import (
    MalformedJSONError,
    MemberNotFoundError,
    NotAnArchiveError,
    UnrecognizedVersionError,
)
from galaxy_history.operations.archive import ArchiveReader
from galaxy_history.operations.json_decoder import decode_json

logger = Logger(__file__)

EXPORT_ATTRS = "export_attrs.txt"
HISTORY_ATTRS = "history_attrs.txt"
VERSION_FIELD = "galaxy_export_version"


def read_declared_version(reader: ArchiveReader) -> str | None:
    """Return the version string declared in ``export_attrs.txt``.

    Returns:
        The declared version, or None if the file has no usable version field

    Raises:
        MemberNotFoundError: If the archive has no ``export_attrs.txt``
    """
    with reader.open_member(EXPORT_ATTRS) as stream:
        try:
            attrs = decode_json(stream, [VERSION_FIELD])
        except MalformedJSONError as exc:
            logger.debug(f"Unable to decode {EXPORT_ATTRS}: {exc}")
            return None
    if isinstance(attrs, dict) and attrs.get(VERSION_FIELD) is not None:
        return str(attrs[VERSION_FIELD])
    return None


def detect_export_version(reader: ArchiveReader) -> ExportVersion:
    """Classify the archive by its export format version.

    Archives with ``export_attrs.txt`` declare their version. Archives without
    it but with ``history_attrs.txt`` are the older unversioned format.
    Anything else, including sources that are not gzip/tar data, is not a
    history archive.

    Raises:
        UnrecognizedVersionError: If a version is declared but unknown
        TransportError: If the source could not be read at all
    """
    try:
        declared = read_declared_version(reader)
    except NotAnArchiveError as exc:
        logger.debug(f"{reader.source} is not an archive: {exc}")
        return ExportVersion.NOT_AN_ARCHIVE
    except MemberNotFoundError:
        try:
            with reader.open_member(HISTORY_ATTRS):
                pass
        except MemberNotFoundError:
            return ExportVersion.NOT_AN_ARCHIVE
        return ExportVersion.LEGACY

    if declared is None:
        return ExportVersion.NOT_AN_ARCHIVE
    try:
        return ExportVersion(declared)
    except ValueError:
        raise UnrecognizedVersionError(declared) from None

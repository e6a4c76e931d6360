"""Streaming dataset payloads (or byte ranges of them) out of an archive."""

from typing import BinaryIO

from galaxy_history.domain.types import Record
from galaxy_history.errors import ArchiveFormatError, MissingExtraFilesError
from galaxy_history.operations.archive import ArchiveReader

DEFAULT_BUFFER_SIZE = 100_000


def dataset_member(dataset: Record) -> str:
    """Return the archive path of a dataset's main file."""
    file_name = dataset.get("file_name")
    if not file_name:
        raise ArchiveFormatError(
            f"Missing file path for dataset [{dataset.get('encoded_id')}]", field="file_name"
        )
    return str(file_name)


def extra_file_member(dataset: Record, filename: str) -> str:
    """Return the archive path of one of a dataset's extra files.

    Raises:
        MissingExtraFilesError: If the dataset has no ``extra_files_path``
    """
    directory = dataset.get("extra_files_path")
    if not directory:
        raise MissingExtraFilesError(str(dataset.get("encoded_id")))
    return f"{str(directory).rstrip('/')}/{filename.lstrip('/')}"


def _discard(stream: BinaryIO, count: int, buffer_size: int) -> None:
    while count > 0:
        chunk = stream.read(min(buffer_size, count))
        if not chunk:
            return
        count -= len(chunk)


def copy_range(
    stream: BinaryIO,
    sink: BinaryIO,
    start: int = -1,
    end: int = -1,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Copy an inclusive byte range of a stream, or the whole stream.

    A range is used only when both bounds are non-negative and end > start;
    otherwise everything is copied.

    Returns:
        Number of bytes written to the sink
    """
    remaining = end - start + 1 if start >= 0 and end > start else None
    if remaining is not None:
        _discard(stream, start, buffer_size)

    written = 0
    while remaining is None or remaining > 0:
        size = buffer_size if remaining is None else min(buffer_size, remaining)
        chunk = stream.read(size)
        if not chunk:
            break
        sink.write(chunk)
        written += len(chunk)
        if remaining is not None:
            remaining -= len(chunk)
    return written


def output_member(
    reader: ArchiveReader,
    member: str,
    sink: BinaryIO,
    start: int = -1,
    end: int = -1,
    decompress: bool = False,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Write (a range of) an archive member to the sink.

    Raises:
        MemberNotFoundError: If the member does not exist
    """
    with reader.open_member(member, decompress=decompress) as stream:
        return copy_range(stream, sink, start, end, buffer_size)

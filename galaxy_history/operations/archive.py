"""Streaming access to members of a gzipped history archive tarball.

The archive is never extracted to disk. Every lookup re-opens the source
(local file or http/https URL) and scans the tar stream sequentially until
the requested member is found.
"""

import bz2
import gzip
import io
import tarfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from http.client import HTTPException
from logging import Logger
from pathlib import Path
from typing import BinaryIO, TextIO

import requests
import urllib3

from galaxy_history.errors import (
    ArchiveFormatError,
    MemberNotFoundError,
    NotAnArchiveError,
    TransportError,
)

logger = Logger(__file__)

DATASETS_PREFIX = "datasets/"

# Failures while reading an already opened source. urllib3 raises its own
# errors from response.raw, local files raise OSError.
TRANSPORT_ERRORS = (
    requests.RequestException,
    urllib3.exceptions.HTTPError,
    HTTPException,
    OSError,
)


def is_remote(source: str | Path) -> bool:
    """Return True if the source is an http or https URL."""
    return str(source).startswith(("http:", "https:"))


class _SourceStream:
    """Read-only view of the archive source that reports read failures as transport errors."""

    def __init__(self, stream: BinaryIO, source: str | Path):
        self._stream = stream
        self._source = source

    def read(self, size: int = -1) -> bytes:
        try:
            return self._stream.read(size)
        except TRANSPORT_ERRORS as exc:
            raise TransportError(f"Unable to read {self._source}: {exc}") from exc

    def close(self) -> None:
        self._stream.close()


@contextmanager
def open_source(source: str | Path, timeout: int = 30) -> Iterator[BinaryIO]:
    """Open the raw (still compressed) archive bytes.

    Args:
        source: Local path or http/https URL of the archive
        timeout: Timeout in seconds for remote sources

    Raises:
        TransportError: If the file or URL could not be opened or read
    """
    if is_remote(source):
        try:
            response = requests.get(str(source), stream=True, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Unable to open {source}: {exc}") from exc
        with response:
            yield _SourceStream(response.raw, source)
    else:
        try:
            handle = open(source, "rb")
        except OSError as exc:
            raise TransportError(f"Unable to open {source}: {exc}") from exc
        with handle:
            yield _SourceStream(handle, source)


@contextmanager
def open_tar_stream(source: str | Path, timeout: int = 30) -> Iterator[tarfile.TarFile]:
    """Open the archive as a sequential (non-seekable) tar stream.

    Raises:
        NotAnArchiveError: If the source is not gzip compressed or holds no tar data
        ArchiveFormatError: If the stream is truncated or corrupt past its header
        TransportError: If the source could not be opened or read
    """
    with open_source(source, timeout) as raw:
        gz = gzip.GzipFile(fileobj=raw, mode="rb")
        try:
            tar = tarfile.open(fileobj=gz, mode="r|")
        except gzip.BadGzipFile as exc:
            raise NotAnArchiveError(f"Input is not in the .gz format: {source}") from exc
        except (tarfile.ReadError, EOFError) as exc:
            raise NotAnArchiveError(f"Input is not a tar archive: {source}") from exc

        with gz, tar:
            try:
                yield tar
            except (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile) as exc:
                raise ArchiveFormatError(f"Corrupt archive stream: {exc}") from exc


def _decompressing(name: str, stream: BinaryIO) -> BinaryIO:
    """Wrap a member stream in a decompressor matching its suffix."""
    if name.endswith(".gz"):
        return gzip.GzipFile(fileobj=stream, mode="rb")
    if name.endswith(".bz2"):
        return bz2.BZ2File(stream, mode="rb")
    return stream


class ArchiveReader:
    """Reads named members from a history archive.

    Example:
        >>> reader = ArchiveReader("history.tar.gz")
        >>> with reader.open_member("history_attrs.txt") as stream:
        ...     raw = stream.read()
    """

    def __init__(self, source: str | Path, timeout: int = 30):
        """Initialize the reader.

        Args:
            source: Local path or http/https URL of the archive
            timeout: Timeout in seconds for remote sources
        """
        self.source = source
        self.timeout = timeout

    @contextmanager
    def open_member(self, name: str, decompress: bool = False) -> Iterator[BinaryIO]:
        """Open a member of the archive as a binary stream.

        Args:
            name: Exact path of the member inside the archive
            decompress: Transparently decompress members ending in .gz or .bz2

        Raises:
            MemberNotFoundError: If no regular file with that exact name exists
        """
        with open_tar_stream(self.source, self.timeout) as tar:
            for member in tar:
                if member.name != name:
                    continue
                extracted = tar.extractfile(member)
                if extracted is None:
                    break
                logger.debug(f"Found member {name} ({member.size} bytes) in {self.source}")
                with extracted:
                    stream = _decompressing(name, extracted) if decompress else extracted
                    with stream:
                        yield stream
                return
        raise MemberNotFoundError(name)

    @contextmanager
    def open_text_member(self, name: str, encoding: str = "utf-8") -> Iterator[TextIO]:
        """Open a member as text, decompressing .gz and .bz2 members."""
        with self.open_member(name, decompress=True) as stream:
            text = io.TextIOWrapper(stream, encoding=encoding)
            try:
                yield text
            finally:
                text.detach()

    def read_member(self, name: str, decompress: bool = False) -> bytes:
        """Return the full contents of a member."""
        with self.open_member(name, decompress=decompress) as stream:
            return stream.read()

    def member_names(self) -> list[str]:
        """Return the names of all members in archive order."""
        with open_tar_stream(self.source, self.timeout) as tar:
            return [member.name for member in tar]


def estimate_history_size(source: str | Path, timeout: int = 30) -> int | None:
    """Estimate the history size by summing member sizes below ``datasets/``.

    Returns:
        Size in bytes, or None if the archive could not be scanned
    """
    try:
        with open_tar_stream(source, timeout) as tar:
            return sum(member.size for member in tar if member.name.startswith(DATASETS_PREFIX))
    except Exception as exc:
        logger.warning(f"Unable to estimate history size for {source}: {exc}")
        return None


def human_readable_size(num_bytes: int) -> str:
    """Convert a byte count to a readable string using 1024-based units.

    Example:
        >>> human_readable_size(1536)
        '1.5 KB'
    """
    if abs(num_bytes) < 1024:
        return f"{num_bytes} B"
    value = float(num_bytes)
    for unit in "KMGTP":
        value /= 1024.0
        if abs(value) < 1023.95:
            return f"{value:.1f} {unit}B"
    return f"{value / 1024.0:.1f} EB"

"""Errors raised while reading and reconstructing history archives."""


class HistoryArchiveError(Exception):
    """Base class for all history archive errors."""


class VersionError(HistoryArchiveError):
    """The archive cannot be processed because of its export format version."""


class NotAnArchiveError(VersionError):
    """The source is probably not a history archive at all."""

    def __init__(self, message: str = "This file is probably not a Galaxy history archive"):
        super().__init__(message)


class UnsupportedLegacyFormatError(VersionError):
    """The archive uses the old export format without proper collection support."""

    def __init__(
        self,
        message: str = (
            "This history was exported by an older version of Galaxy "
            "that does not support collections properly"
        ),
    ):
        super().__init__(message)


class UnrecognizedVersionError(VersionError):
    """The archive declares an export version this library does not know."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Unrecognized history export version: {version}")


class MemberNotFoundError(HistoryArchiveError, FileNotFoundError):
    """A named member is not present in the archive."""

    def __init__(self, member: str):
        self.member = member
        super().__init__(f"Unable to locate archive file '{member}'")


class MalformedJSONError(HistoryArchiveError):
    """A metadata table could not be decoded as JSON.

    Attributes:
        token: The offending token (event name or value), if known
        position: Number of source bytes read when the error was detected, if known
    """

    def __init__(self, message: str, token: object = None, position: int | None = None):
        self.token = token
        self.position = position
        detail = message
        if token is not None:
            detail += f" (token: {token!r})"
        if position is not None:
            detail += f" near byte {position}"
        super().__init__(detail)


class ArchiveFormatError(HistoryArchiveError):
    """The archive metadata violates the export format."""

    def __init__(
        self,
        message: str,
        *,
        member: str | None = None,
        field: str | None = None,
        element_index: int | None = None,
    ):
        self.member = member
        self.field = field
        self.element_index = element_index
        super().__init__(f"Archive Format Error: {message}")


class DatasetNotFoundError(HistoryArchiveError):
    """No dataset with the requested encoded id exists in the history."""

    def __init__(self, dataset_id: str):
        self.dataset_id = dataset_id
        super().__init__(f"Dataset with ID [{dataset_id}] not found")


class MissingExtraFilesError(HistoryArchiveError):
    """The dataset has no extra files directory."""

    def __init__(self, dataset_id: str):
        self.dataset_id = dataset_id
        super().__init__(f"Dataset [{dataset_id}] does not include extra files")


class TransportError(HistoryArchiveError):
    """The archive source could not be read (file system or network failure)."""


class OutOfOrderElementError(ArchiveFormatError):
    """A collection element's ``element_index`` does not match its position."""

    def __init__(self, element_index: int, found: object):
        super().__init__(
            f"List element out of order: expected index {element_index}, found {found!r}",
            field="element_index",
            element_index=element_index,
        )


class UnrecognizedCollectionTypeError(ArchiveFormatError):
    """A collection has a type other than list, paired or list:paired."""

    def __init__(self, collection_type: object):
        self.collection_type = collection_type
        super().__init__(f"Unrecognized collection type: {collection_type}", field="type")

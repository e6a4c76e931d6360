"""Streaming JSON decoder with field allow-list filtering.

Metadata tables in a history archive can be very large while only a few
fields of each record are needed. The decoder walks the ijson event stream
depth-first and builds the value tree directly, skipping unwanted object
fields (and their whole subtrees) without constructing containers for them.

The allow-list is applied to objects at every depth: a field name that is
allowed is kept wherever it occurs, not only at the top level.
"""

from collections.abc import Iterable, Iterator
from typing import BinaryIO

import ijson

from galaxy_history.domain.types import JSONValue
from galaxy_history.errors import MalformedJSONError

START_EVENTS = frozenset({"start_map", "start_array"})
END_EVENTS = frozenset({"end_map", "end_array"})
SCALAR_EVENTS = frozenset({"string", "number", "integer", "double", "boolean", "null"})

# Bytes handed to ijson per read. Error offsets are accurate to one read.
READ_SIZE = 16 * 1024


class _CountingReader:
    """Byte stream wrapper that tracks how far the parser has read."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.offset = 0

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self.offset += len(data)
        return data


class _Events:
    """ijson event iterator that keeps a byte offset for error reporting."""

    def __init__(self, stream: BinaryIO):
        self._reader = _CountingReader(stream)
        self._events = ijson.basic_parse(self._reader, buf_size=READ_SIZE, use_float=True)

    @property
    def position(self) -> int:
        return self._reader.offset

    def next(self, context: str) -> tuple[str, object]:
        try:
            return next(self._events)
        except StopIteration:
            raise MalformedJSONError(
                f"Unexpected end of {context}", position=self.position
            ) from None

    def exhausted(self) -> bool:
        try:
            next(self._events)
        except StopIteration:
            return True
        return False


class FilteringJSONDecoder:
    """Decodes one JSON document (object or array) from a byte stream.

    Integers and floats are kept apart based on the source token, so ``1.0``
    decodes to a float and ``1`` to an int.

    Example:
        >>> decoder = FilteringJSONDecoder(["name", "hid"])
        >>> with open("datasets_attrs.txt", "rb") as f:
        ...     datasets = decoder.decode(f)
    """

    def __init__(self, allowed_fields: Iterable[str] | None = None):
        """Initialize the decoder.

        Args:
            allowed_fields: Object field names to keep. None (or empty) keeps all fields.
        """
        self.allowed_fields = frozenset(allowed_fields) if allowed_fields else None

    def decode(self, stream: BinaryIO) -> JSONValue:
        """Decode the stream into dicts, lists and scalars.

        Raises:
            MalformedJSONError: If the stream is not a single JSON object or array
        """
        events = _Events(stream)
        try:
            event, value = events.next("document")
            if event == "start_map":
                result = self._object(events)
            elif event == "start_array":
                result = self._array(events)
            else:
                raise MalformedJSONError(
                    "Top-level value must be an object or array",
                    token=value if event in SCALAR_EVENTS else event,
                    position=events.position,
                )
            if not events.exhausted():
                raise MalformedJSONError(
                    "Unexpected content after top-level value", position=events.position
                )
        except (ijson.JSONError, UnicodeDecodeError) as exc:
            raise MalformedJSONError(str(exc), position=events.position) from exc
        return result

    def _keeps(self, field: str) -> bool:
        return self.allowed_fields is None or field in self.allowed_fields

    def _value(self, event: str, value: object, events: _Events) -> JSONValue:
        if event == "start_map":
            return self._object(events)
        if event == "start_array":
            return self._array(events)
        if event in SCALAR_EVENTS:
            return value
        raise MalformedJSONError(
            "Unexpected JSON token", token=event, position=events.position
        )

    def _object(self, events: _Events) -> dict[str, JSONValue]:
        result: dict[str, JSONValue] = {}
        while True:
            event, value = events.next("object")
            if event == "end_map":
                return result
            if event != "map_key":
                raise MalformedJSONError(
                    "Missing field name in object", token=event, position=events.position
                )
            field = str(value)
            event, value = events.next("object")
            if self._keeps(field):
                result[field] = self._value(event, value, events)
            else:
                self._skip(event, events)

    def _array(self, events: _Events) -> list[JSONValue]:
        result: list[JSONValue] = []
        while True:
            event, value = events.next("array")
            if event == "end_array":
                return result
            result.append(self._value(event, value, events))

    def _skip(self, event: str, events: _Events) -> None:
        """Consume a value without building it."""
        if event in SCALAR_EVENTS:
            return
        if event not in START_EVENTS:
            raise MalformedJSONError(
                "Unexpected JSON token", token=event, position=events.position
            )
        depth = 1
        while depth:
            event, _ = events.next("skipped value")
            if event in START_EVENTS:
                depth += 1
            elif event in END_EVENTS:
                depth -= 1


def decode_json(stream: BinaryIO, allowed_fields: Iterable[str] | None = None) -> JSONValue:
    """Decode a JSON document with a fresh decoder."""
    return FilteringJSONDecoder(allowed_fields).decode(stream)

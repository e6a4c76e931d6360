"""Shared type definitions."""

from typing import TypeAlias

# Decoded JSON value: object, array, string, integer, float, boolean or null
JSONValue: TypeAlias = (
    dict[str, "JSONValue"] | list["JSONValue"] | str | int | float | bool | None
)
JSONObject: TypeAlias = dict[str, JSONValue]

# A metadata table row (dataset, collection or job record)
Record: TypeAlias = dict[str, JSONValue]

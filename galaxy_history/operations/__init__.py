"""Archive access layer.

This module provides streaming access to history archive tarballs.

Public API:
    Archive operations:
        - ArchiveReader: Open named members as byte or text streams
        - estimate_history_size: Sum of payload sizes below datasets/

    Metadata operations:
        - decode_json: Streaming JSON decoding with field allow-lists
        - detect_export_version: Classify the archive format
        - load_tables: Load history, datasets, collections and jobs

    Payload operations:
        - output_member: Stream (a byte range of) a member to a sink
"""

from galaxy_history.operations.archive import ArchiveReader, estimate_history_size
from galaxy_history.operations.extract import output_member
from galaxy_history.operations.json_decoder import FilteringJSONDecoder, decode_json
from galaxy_history.operations.metadata import load_tables
from galaxy_history.operations.version import detect_export_version

__all__ = [
    # Archive operations
    "ArchiveReader",
    "estimate_history_size",
    # Metadata operations
    "FilteringJSONDecoder",
    "decode_json",
    "detect_export_version",
    "load_tables",
    # Payload operations
    "output_member",
]

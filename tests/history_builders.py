"""Builders for history archives and metadata records used across tests."""

import gzip
import io
import tarfile
from datetime import datetime
from pathlib import Path

import orjson

FASTQ = b"@read1\nACGTACGT\n+\nIIIIIIII\n"
BAM = bytes(range(100))
REPORT = b"<html><body>report</body></html>"
STYLE = b"body { color: black; }"


def create_history_archive(archive_path: Path, files: dict[str, object]) -> Path:
    """Create a .tar.gz archive with the given members.

    Args:
        archive_path: Path where the archive will be created
        files: Mapping of member names to content. Bytes are stored as-is,
            anything else is stored as JSON.
    """
    with gzip.open(archive_path, "wb") as gz_file:
        with tarfile.open(fileobj=gz_file, mode="w") as tar:
            for name, content in files.items():
                data = content if isinstance(content, bytes) else orjson.dumps(content)
                tarinfo = tarfile.TarInfo(name=name)
                tarinfo.size = len(data)
                tarinfo.mtime = datetime(2024, 1, 1).timestamp()
                tar.addfile(tarinfo, fileobj=io.BytesIO(data))
    return archive_path


def hda(encoded_id: str, hid: int, name: str, **extra) -> dict:
    """Create a dataset record as found in datasets_attrs.txt."""
    record = {
        "encoded_id": encoded_id,
        "hid": hid,
        "name": name,
        "visible": True,
        "deleted": False,
        "extension": "txt",
        "blurb": "1 line",
        "file_name": f"datasets/{name}",
        "metadata": {"dbkey": "hg38", "data_lines": 1},
        "copied_from_history_dataset_association_id_chain": [],
    }
    record.update(extra)
    return record


def hda_element(index: int, identifier: str, encoded_id: str, dataset_id: str) -> dict:
    """Create a collection element pointing at a dataset."""
    return {
        "encoded_id": encoded_id,
        "element_index": index,
        "element_identifier": identifier,
        "element_type": "hda",
        "hda": {"encoded_id": dataset_id},
    }
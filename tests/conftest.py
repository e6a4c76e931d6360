"""Configure tests."""

import gzip
from pathlib import Path

import pytest

from history_builders import BAM, FASTQ, REPORT, STYLE, create_history_archive, hda, hda_element


@pytest.fixture
def history_files() -> dict[str, object]:
    """Members of a realistic current-format history archive.

    Contents (by hid):
        1, 2   reads in the "reads list" collection (ok)
        3      mapped.bam, produced by a failed job
        4      copy of mapped.bam (inherits the error through its copy chain)
        5      report.html with extra files
        6      hidden dataset outside any collection
        7, 8   forward/reverse reads of the "paired reads" collection (queued)
        9      gzipped reads whose job has no state
        10     "reads list" collection (list)
        11     "paired reads" collection (list:paired)
    """
    datasets = [
        hda("d1", 1, "sample1.fastq", extension="fastqsanger"),
        hda("d2", 2, "sample2.fastq", extension="fastqsanger", visible=False),
        hda("d3", 3, "mapped.bam", extension="bam", blurb="100 bytes"),
        hda(
            "d4",
            4,
            "mapped_copy.bam",
            extension="bam",
            copied_from_history_dataset_association_id_chain=["d0", "d3"],
        ),
        hda(
            "d5",
            5,
            "report.html",
            extension="html",
            extra_files_path="datasets/report_files/",
        ),
        hda("d6", 6, "hidden.txt", visible=False),
        hda("d7", 7, "forward.fastq", extension="fastqsanger", visible=False),
        hda("d8", 8, "reverse.fastq", extension="fastqsanger", visible=False),
        hda("d9", 9, "reads.fastq.gz", extension="fastqsanger.gz", metadata=None),
    ]
    collections = [
        {
            "encoded_id": "c1",
            "hid": 10,
            "display_name": "reads list",
            "visible": True,
            "collection": {
                "encoded_id": "cc1",
                "type": "list",
                "elements": [
                    hda_element(0, "sample1", "e1", "d1"),
                    hda_element(1, "sample2", "e2", "d2"),
                ],
            },
        },
        {
            "encoded_id": "c2",
            "hid": 11,
            "display_name": "paired reads",
            "visible": True,
            "collection": {
                "encoded_id": "cc2",
                "type": "list:paired",
                "elements": [
                    {
                        "encoded_id": "e3",
                        "element_index": 0,
                        "element_identifier": "pair1",
                        "element_type": "dataset_collection",
                        "child_collection": {
                            "encoded_id": "cc3",
                            "type": "paired",
                            "elements": [
                                hda_element(0, "forward", "e4", "d7"),
                                hda_element(1, "reverse", "e5", "d8"),
                            ],
                        },
                    }
                ],
            },
        },
    ]
    jobs = [
        {"encoded_id": "j1", "state": "ok", "output_dataset_mapping": {"output": ["d1", "d2"]}},
        {"encoded_id": "j2", "state": "error", "output_dataset_mapping": {"out_file1": ["d3"]}},
        {
            "encoded_id": "j3",
            "state": "queued",
            "output_dataset_mapping": {"forward": ["d7"], "reverse": ["d8"]},
        },
        {"encoded_id": "j4", "state": None, "output_dataset_mapping": {"output": ["d9"]}},
        {"encoded_id": "j5", "state": "ok"},
    ]
    return {
        "export_attrs.txt": {"galaxy_export_version": "2"},
        "history_attrs.txt": {
            "name": "RNA-seq analysis",
            "annotation": None,
            "tags": ["rna", "mouse"],
            "hid_counter": 12,
        },
        "datasets_attrs.txt": datasets,
        "collections_attrs.txt": collections,
        "jobs_attrs.txt": jobs,
        "datasets/sample1.fastq": FASTQ,
        "datasets/sample2.fastq": FASTQ,
        "datasets/mapped.bam": BAM,
        "datasets/mapped_copy.bam": BAM,
        "datasets/report.html": REPORT,
        "datasets/report_files/style.css": STYLE,
        "datasets/hidden.txt": b"hidden\n",
        "datasets/forward.fastq": FASTQ,
        "datasets/reverse.fastq": FASTQ,
        "datasets/reads.fastq.gz": gzip.compress(FASTQ),
    }


@pytest.fixture
def make_archive(tmp_path):
    """Return a factory that writes members into a new .tar.gz archive."""

    def _make(files: dict[str, object], name: str = "history.tar.gz") -> Path:
        return create_history_archive(tmp_path / name, files)

    return _make


@pytest.fixture
def history_archive(make_archive, history_files) -> Path:
    """Create a current-format history archive."""
    return make_archive(history_files)


@pytest.fixture
def legacy_archive(make_archive, history_files) -> Path:
    """Create an archive in the older, unversioned export format."""
    files = dict(history_files)
    del files["export_attrs.txt"]
    return make_archive(files, name="legacy.tar.gz")


@pytest.fixture
def plain_file(tmp_path) -> Path:
    """Create a file that is not an archive at all."""
    path = tmp_path / "notes.txt"
    path.write_text("just some notes\n")
    return path


@pytest.fixture
def payload_size(history_files) -> int:
    """Total size of the members below datasets/."""
    return sum(
        len(content)
        for name, content in history_files.items()
        if name.startswith("datasets/") and isinstance(content, bytes)
    )

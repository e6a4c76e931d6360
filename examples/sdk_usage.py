"""Example: Using galaxy_history as an SDK.

This example demonstrates how to use galaxy_history programmatically
as a Python library (SDK) rather than via the CLI.
"""

import os
import sys

from galaxy_history import (
    ExportVersion,
    HistoryArchive,
    HistoryArchiveError,
    Reporter,
    Settings,
    detect_version,
    load_history,
)

ARCHIVE = "history.tar.gz"


def example_simple_usage():
    """Simplest usage - reconstruct a history with default settings."""
    print("=" * 60)
    print("Example 1: Simple Usage")
    print("=" * 60)

    if detect_version(ARCHIVE) is not ExportVersion.CURRENT:
        print("Archive is not in the current export format")
        return

    tree = load_history(ARCHIVE)
    print(f"History: {tree.metadata.get('name')} ({tree.metadata.get('history_size')})")
    for item in tree.contents:
        print(f"  {item['hid']:>4}  {item['class']:<12} {item['name']} [{item['state']}]")


def example_with_environment_config():
    """Load configuration from environment variables."""
    print("\n" + "=" * 60)
    print("Example 2: Environment Configuration")
    print("=" * 60)

    # Only keep the dataset fields we are going to look at
    os.environ["GALAXY_HISTORY_REQUEST_TIMEOUT"] = "60"
    os.environ["GALAXY_HISTORY_DATASET_ATTRIBUTES"] = "encoded_id,name,extension,file_name"

    settings = Settings()
    print(f"Loaded config: timeout={settings.request_timeout}")
    print(f"Dataset fields: {settings.dataset_attributes}")

    archive = HistoryArchive(ARCHIVE, settings)
    for dataset in archive.datasets():
        print(f"  {dataset['encoded_id']}: {dataset['name']} ({dataset['extension']})")


def example_remote_archive():
    """Read an archive directly from a URL without downloading it first."""
    print("\n" + "=" * 60)
    print("Example 3: Remote Archive")
    print("=" * 60)

    archive = HistoryArchive("https://usegalaxy.org/history/export_archive?id=f2db41e1fa331b3e")
    print(f"Version: {archive.export_version().value}")


def example_stream_dataset():
    """Write the first kilobyte of a dataset to stdout."""
    print("\n" + "=" * 60)
    print("Example 4: Streaming Dataset Bytes")
    print("=" * 60)

    archive = HistoryArchive(ARCHIVE, Settings(copy_buffer_size=4096))
    dataset = archive.datasets()[0]
    print(f"Content-Type: {archive.content_type_for_dataset(dataset['encoded_id'])}")
    archive.output_dataset(sys.stdout.buffer, dataset["encoded_id"], start=0, end=1023)


def example_headless_mode():
    """Use the reporter in silent mode and handle errors yourself."""
    print("\n" + "=" * 60)
    print("Example 5: Headless Mode (No Terminal Output)")
    print("=" * 60)

    reporter = Reporter(silent=True)
    try:
        tree = HistoryArchive(ARCHIVE).history()
    except HistoryArchiveError as e:
        print(f"Failed: {e}")
        return
    reporter.report_history(tree)
    print("✓ History reconstructed silently")


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("Galaxy History SDK Examples")
    print("=" * 60)
    print("\nThese examples show different ways to use galaxy_history")
    print("as a Python library (SDK) in your own code.\n")

    # Uncomment the examples you want to run:

    # example_simple_usage()
    # example_with_environment_config()
    # example_remote_archive()
    # example_stream_dataset()
    # example_headless_mode()

    print("\nTo run an example, uncomment it in the __main__ section.")

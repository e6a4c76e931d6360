"""Integration tests for CLI commands."""

from unittest.mock import MagicMock, patch

import orjson
import pytest
import urllib3
from typer.testing import CliRunner

from galaxy_history.cli.app import app


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep .env files and GALAXY_HISTORY_* variables of the host out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GALAXY_HISTORY_DECOMPRESS", raising=False)


class TestVersionCommand:
    """Test 'galaxy-history version' command."""

    def test_current_archive(self, cli_runner, history_archive):
        """Current archives exit successfully."""
        result = cli_runner.invoke(app, ["version", str(history_archive)])

        assert result.exit_code == 0
        assert "Galaxy History Archive Format Version: 2" in result.stdout

    def test_legacy_archive(self, cli_runner, legacy_archive):
        """Legacy archives report version 1 and fail."""
        result = cli_runner.invoke(app, ["version", str(legacy_archive)])

        assert result.exit_code == 1
        assert "Version: 1" in result.stdout

    def test_not_an_archive(self, cli_runner, plain_file):
        """Foreign files report version 0 and fail."""
        result = cli_runner.invoke(app, ["version", str(plain_file)])

        assert result.exit_code == 1
        assert "Version: 0" in result.stdout

    def test_missing_file(self, cli_runner, tmp_path):
        """Unreadable sources are reported as errors."""
        result = cli_runner.invoke(app, ["version", str(tmp_path / "missing.tar.gz")])

        assert result.exit_code == 1
        assert "Error:" in result.stdout


class TestShowCommand:
    """Test 'galaxy-history show' command."""

    def test_show_history(self, cli_runner, history_archive):
        """The contents table and summary are printed."""
        result = cli_runner.invoke(app, ["show", str(history_archive)])

        assert result.exit_code == 0
        assert "RNA-seq analysis (6 items)" in result.stdout
        assert "paired reads" in result.stdout
        assert "Summary:" in result.stdout

    def test_show_legacy(self, cli_runner, legacy_archive):
        """Legacy archives are refused."""
        result = cli_runner.invoke(app, ["show", str(legacy_archive)])

        assert result.exit_code == 1
        assert "older version of Galaxy" in result.stdout


class TestExportCommand:
    """Test 'galaxy-history export' command."""

    def test_export_to_stdout(self, cli_runner, history_archive):
        """JSON is written to stdout."""
        result = cli_runner.invoke(app, ["export", str(history_archive)])

        assert result.exit_code == 0
        data = orjson.loads(result.stdout_bytes)
        assert data["metadata"]["name"] == "RNA-seq analysis"
        assert [item["hid"] for item in data["contents"]] == [11, 10, 9, 5, 4, 3]

    def test_export_to_file(self, cli_runner, history_archive, tmp_path):
        """JSON is written atomically to a file."""
        output = tmp_path / "history.json"

        result = cli_runner.invoke(
            app, ["export", str(history_archive), "--pretty", "--output", str(output)]
        )

        assert result.exit_code == 0
        assert output.read_text().startswith('{\n  "metadata"')
        assert orjson.loads(output.read_bytes())["metadata"]["annotation"] == ""


class TestDatasetCommand:
    """Test 'galaxy-history dataset' command."""

    def test_dataset_to_stdout(self, cli_runner, history_archive, history_files):
        """Dataset bytes are written to stdout."""
        result = cli_runner.invoke(app, ["dataset", str(history_archive), "d3"])

        assert result.exit_code == 0
        assert result.stdout_bytes == history_files["datasets/mapped.bam"]

    def test_dataset_range(self, cli_runner, history_archive):
        """An inclusive byte range can be requested."""
        result = cli_runner.invoke(
            app, ["dataset", str(history_archive), "d3", "--start", "10", "--end", "19"]
        )

        assert result.exit_code == 0
        assert result.stdout_bytes == bytes(range(10, 20))

    def test_decompressed_by_default(self, cli_runner, history_archive, history_files):
        """Compressed datasets are decompressed unless disabled."""
        result = cli_runner.invoke(app, ["dataset", str(history_archive), "d9"])
        raw = cli_runner.invoke(app, ["dataset", str(history_archive), "d9", "--no-decompress"])

        assert result.stdout_bytes == history_files["datasets/sample1.fastq"]
        assert raw.stdout_bytes == history_files["datasets/reads.fastq.gz"]

    def test_decompress_setting(self, cli_runner, history_archive, history_files, monkeypatch):
        """The decompression default comes from the environment."""
        monkeypatch.setenv("GALAXY_HISTORY_DECOMPRESS", "false")

        result = cli_runner.invoke(app, ["dataset", str(history_archive), "d9"])

        assert result.stdout_bytes == history_files["datasets/reads.fastq.gz"]

    def test_extra_file_to_file(self, cli_runner, history_archive, history_files, tmp_path):
        """Extra files can be written to a file."""
        output = tmp_path / "style.css"

        result = cli_runner.invoke(
            app,
            ["dataset", str(history_archive), "d5", "--extra-file", "style.css", "-o", str(output)],
        )

        assert result.exit_code == 0
        assert output.read_bytes() == history_files["datasets/report_files/style.css"]

    def test_unknown_dataset(self, cli_runner, history_archive):
        """Unknown dataset ids fail with an error message."""
        result = cli_runner.invoke(app, ["dataset", str(history_archive), "nope"])

        assert result.exit_code == 1
        assert "Dataset with ID [nope] not found" in result.output

    def test_connection_lost(self, cli_runner):
        """A connection dropped mid-download fails with an error message."""

        def fake_get(url, stream, timeout):
            response = MagicMock()
            response.raw.read.side_effect = urllib3.exceptions.ProtocolError("Connection broken")
            return response

        with patch("galaxy_history.operations.archive.requests.get", side_effect=fake_get):
            result = cli_runner.invoke(app, ["dataset", "https://example.org/h.tar.gz", "d3"])

        assert result.exit_code == 1
        assert "Connection broken" in result.output


class TestContentTypeCommand:
    """Test 'galaxy-history content-type' command."""

    def test_dataset_content_type(self, cli_runner, history_archive):
        """The dataset's MIME type is printed."""
        result = cli_runner.invoke(app, ["content-type", str(history_archive), "d3"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "application/octet-stream"

    def test_decompressed_content_type(self, cli_runner, history_archive):
        """Compressed datasets are typed by their content unless decompression is off."""
        inner = cli_runner.invoke(app, ["content-type", str(history_archive), "d9"])
        raw = cli_runner.invoke(
            app, ["content-type", str(history_archive), "d9", "--no-decompress"]
        )

        assert inner.stdout.strip() == "text/plain"
        assert raw.stdout.strip() == "application/gzip"

    def test_matches_dataset_output(self, cli_runner, history_archive, monkeypatch):
        """The decompression default is shared with the dataset command."""
        monkeypatch.setenv("GALAXY_HISTORY_DECOMPRESS", "false")

        result = cli_runner.invoke(app, ["content-type", str(history_archive), "d9"])

        assert result.stdout.strip() == "application/gzip"

    def test_extra_file_content_type(self, cli_runner, history_archive):
        """Extra files are typed by their own name."""
        result = cli_runner.invoke(
            app, ["content-type", str(history_archive), "d5", "--extra-file", "img/plot.svg"]
        )

        assert result.stdout.strip() == "image/svg+xml"

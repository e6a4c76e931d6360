"""Typer-based CLI for browsing history archives."""

from pathlib import Path
from typing import NoReturn

import typer
from atomicwrites import atomic_write

from galaxy_history.config import Settings
from galaxy_history.domain.models import ExportVersion
from galaxy_history.errors import HistoryArchiveError
from galaxy_history.orchestrators import HistoryArchive
from galaxy_history.orchestrators.history_archive import UNKNOWN_SIZE
from galaxy_history.ui import Reporter

app = typer.Typer(help="Galaxy history archive browser")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(reporter: Reporter, error: Exception) -> NoReturn:
    reporter.report_error(str(error))
    raise typer.Exit(1)


@app.command()
def version(source: str = typer.Argument(..., help="Archive file path or URL")):
    """Show the export format version of an archive."""
    reporter = Reporter()
    archive = HistoryArchive(source, Settings())
    try:
        detected = archive.export_version()
    except HistoryArchiveError as e:
        _fail(reporter, e)

    reporter.report_version(detected)
    if detected is not ExportVersion.CURRENT:
        raise typer.Exit(1)


@app.command()
def show(source: str = typer.Argument(..., help="Archive file path or URL")):
    """Show the contents of a history, newest first."""
    reporter = Reporter()
    archive = HistoryArchive(source, Settings())
    try:
        tree = archive.history()
    except HistoryArchiveError as e:
        _fail(reporter, e)

    reporter.report_history(tree)
    if tree.metadata.get("history_size") == UNKNOWN_SIZE:
        reporter.report_warning("Unable to estimate the history size")


@app.command()
def export(
    source: str = typer.Argument(..., help="Archive file path or URL"),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the JSON output"),
    output: Path = typer.Option(None, "--output", "-o", help="Write JSON to this file"),
):
    """Export the reconstructed history as JSON."""
    reporter = Reporter(stderr=True)
    archive = HistoryArchive(source, Settings())
    try:
        if output is None:
            archive.write_history_json(typer.get_binary_stream("stdout"), pretty=pretty)
            typer.echo("")
            return
        with atomic_write(output, mode="wb", overwrite=True) as f:
            archive.write_history_json(f, pretty=pretty)
            f.write(b"\n")
    except HistoryArchiveError as e:
        _fail(reporter, e)

    reporter.report_written(output.stat().st_size, str(output))


@app.command()
def dataset(
    source: str = typer.Argument(..., help="Archive file path or URL"),
    dataset_id: str = typer.Argument(..., help="Encoded id of the dataset"),
    extra_file: str = typer.Option(
        None, "--extra-file", "-x", help="Path of an extra file relative to the dataset"
    ),
    start: int = typer.Option(-1, "--start", help="First byte of the range (inclusive)"),
    end: int = typer.Option(-1, "--end", help="Last byte of the range (inclusive)"),
    decompress: bool = typer.Option(
        None, "--decompress/--no-decompress", help="Decompress .gz/.bz2 files"
    ),
    output: Path = typer.Option(None, "--output", "-o", help="Write bytes to this file"),
):
    """Write a dataset file (or one of its extra files) to stdout or a file."""
    config = Settings()
    reporter = Reporter(stderr=True)
    archive = HistoryArchive(source, config)
    decompress = config.decompress if decompress is None else decompress

    def _write(sink) -> int:
        if extra_file:
            return archive.output_extra_file(sink, dataset_id, extra_file, start, end, decompress)
        return archive.output_dataset(sink, dataset_id, start, end, decompress)

    try:
        if output is None:
            _write(typer.get_binary_stream("stdout"))
            return
        with atomic_write(output, mode="wb", overwrite=True) as f:
            written = _write(f)
    except HistoryArchiveError as e:
        _fail(reporter, e)

    reporter.report_written(written, str(output))


@app.command("content-type")
def content_type(
    source: str = typer.Argument(..., help="Archive file path or URL"),
    dataset_id: str = typer.Argument(..., help="Encoded id of the dataset"),
    extra_file: str = typer.Option(
        None, "--extra-file", "-x", help="Path of an extra file relative to the dataset"
    ),
    decompress: bool = typer.Option(
        None, "--decompress/--no-decompress", help="Type of decompressed content"
    ),
):
    """Show the MIME type a dataset (or extra file) should be served with."""
    config = Settings()
    reporter = Reporter()
    archive = HistoryArchive(source, config)
    decompress = config.decompress if decompress is None else decompress
    try:
        if extra_file:
            mime_type = archive.content_type_for_extra_file(extra_file, decompress)
        else:
            mime_type = archive.content_type_for_dataset(dataset_id, decompress)
    except HistoryArchiveError as e:
        _fail(reporter, e)

    typer.echo(mime_type)


if __name__ == "__main__":
    app()

"""
CLI for Prompt Gallery.

Commands:
- scan: Build a catalog from archives and list it
- show: Detail view of one image
- info: Show configuration
"""

import asyncio
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .catalog import Catalog, DirectoryDownloader, ImageRecord
from .catalog.render import render_catalog, render_record_detail
from .config import settings
from .ingestion import ArchiveReport, ExtractionPipeline, UploadedFile
from .logging import setup_logging

app = typer.Typer(
    name="prompt-gallery",
    help="Browse zip archives of generated images and their prompt metadata",
)
console = Console()


def _read_uploads(files: list[Path]) -> list[UploadedFile]:
    uploads = []
    for path in files:
        if not path.is_file():
            logger.error("File not found: {}", path)
            console.print(f"[red]File not found: {path}[/]")
            raise typer.Exit(1)
        uploads.append(UploadedFile.from_path(path))
    return uploads


def _build_catalog(uploads: list[UploadedFile]) -> tuple[Catalog, list[ArchiveReport]]:
    catalog = Catalog()
    pipeline = ExtractionPipeline(
        catalog,
        archive_extension=settings.archive_extension,
        image_extensions=settings.image_extensions,
        sentinel=settings.sentinel,
        comment_tags=settings.comment_tags,
        max_concurrent_entries=settings.max_concurrent_entries,
    )
    reports = asyncio.run(pipeline.process_files(uploads, show_progress=True))
    return catalog, reports


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Also write logs to this file (overrides LOG_FILE)"
    ),
):
    """Prompt Gallery - catalog generated images inside zip archives."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(
        level=log_level,
        json_output=settings.log_json,
        log_file=log_file or settings.log_file,
    )
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def scan(
    files: list[Path] = typer.Argument(..., help="Archives to load, in order"),
    raw: bool = typer.Option(False, "--raw", "-r", help="Include raw metadata text"),
    export_dir: Path | None = typer.Option(
        None,
        "--export-dir",
        "-e",
        help="Save every extracted image into this directory",
    ),
):
    """Load archives and list every image with its generation parameters."""
    uploads = _read_uploads(files)
    catalog, reports = _build_catalog(uploads)

    render_catalog(catalog, console, show_raw=raw)

    if export_dir is not None:
        downloader = DirectoryDownloader(export_dir)
        for record in catalog.records():
            downloader.save(record.display_resource, record.filename)
        logger.info("Exported {} images to {}", len(catalog), export_dir)
        console.print(f"[green]✓ Saved {len(catalog)} images to {export_dir}[/]")

    summary = Table(title="Summary")
    summary.add_column("File", style="cyan")
    summary.add_column("Images", style="green")
    summary.add_column("Unreadable", style="yellow")
    summary.add_column("Status")
    for report in reports:
        status = report.diagnostics[0].message if report.diagnostics else "ok"
        summary.add_row(
            escape(report.file_name),
            str(len(report.records)),
            str(len(report.entry_failures)),
            escape(status),
        )
    console.print(summary)

    catalog.clear()


@app.command()
def show(
    archive: Path = typer.Argument(..., help="Archive containing the image"),
    entry: str = typer.Argument(..., help="Entry path or file name inside the archive"),
    save: bool = typer.Option(False, "--save", "-s", help="Also save the image"),
    export_dir: Path = typer.Option(
        settings.export_path, "--export-dir", "-e", help="Directory used by --save"
    ),
):
    """Show the detail view of one image."""
    uploads = _read_uploads([archive])
    catalog, reports = _build_catalog(uploads)

    if reports[0].diagnostics:
        console.print(f"[red]{escape(reports[0].diagnostics[0].message)}[/]")
        raise typer.Exit(1)

    record = catalog.find(entry, archive_name=archive.name)
    if record is None:
        logger.error("No image named {} in {}", entry, archive)
        console.print(f"[red]No image named {entry} in {archive.name}[/]")
        catalog.clear()
        raise typer.Exit(1)

    def on_select(selected: ImageRecord) -> None:
        render_record_detail(selected, console)
        if save:
            path = DirectoryDownloader(export_dir).save(
                selected.display_resource, selected.filename
            )
            console.print(f"[green]✓ Saved to {path}[/]")

    catalog.on_select(on_select)
    catalog.select(record.anchor)
    catalog.clear()


@app.command()
def info():
    """Show configuration."""
    logger.debug("Displaying configuration")
    console.print("[bold blue]Prompt Gallery Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Archive Extension", settings.archive_extension)
    table.add_row("Image Extensions", ", ".join(settings.image_extensions))
    table.add_row("Missing Value", settings.sentinel)
    table.add_row("Comment Tags", ", ".join(settings.comment_tags))
    table.add_row("Max Concurrent Entries", str(settings.max_concurrent_entries))
    table.add_row("Export Directory", settings.export_dir)
    table.add_row("Log Level", settings.log_level)
    table.add_row("Log File", settings.log_file or "-")

    console.print(table)


if __name__ == "__main__":
    app()

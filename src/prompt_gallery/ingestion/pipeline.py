"""
Archive extraction pipeline.

Opens uploaded archives, decodes every image entry as its own asyncio task,
normalizes the embedded generation metadata, and pushes the resulting records
to the catalog as they complete.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import aclosing
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from ..archive import ArchiveEntry, ArchiveReader, create_archive_reader
from ..catalog.base import (
    CatalogSink,
    ComponentContent,
    Diagnostic,
    DisplayResource,
    ImageRecord,
    TextContent,
    media_type_for,
)
from ..classifier import IMAGE_EXTENSIONS, has_extension, is_image
from ..exceptions import ArchiveOpenError, EntryReadError, InvalidArchiveError
from ..metadata import PillowTagDecoder, TagDecoder, extract_fields
from ..metadata.base import SENTINEL
from ..metadata.normalizer import COMMENT_TAGS
from ..utils.hashing import AnchorAllocator

console = Console()


class UploadedFile(BaseModel):
    """A user-submitted file: a name and its bytes."""

    name: str
    data: bytes = Field(repr=False)

    @classmethod
    def from_path(cls, path: Path | str) -> UploadedFile:
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())


class ArchiveReport(BaseModel):
    """Outcome of processing one uploaded file."""

    file_name: str
    anchor: str | None = None
    records: list[ImageRecord] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(
        default_factory=list, description="File-level problems shown in the catalog"
    )
    entry_failures: list[Diagnostic] = Field(
        default_factory=list, description="Entries that were skipped because they could not be read"
    )
    entries_total: int = 0
    entries_skipped: int = 0


class ExtractionPipeline:
    """Turns uploaded archives into catalog records."""

    def __init__(
        self,
        sink: CatalogSink,
        archive_reader: ArchiveReader | None = None,
        tag_decoder: TagDecoder | None = None,
        archive_extension: str = "zip",
        image_extensions: Iterable[str] = IMAGE_EXTENSIONS,
        sentinel: str = SENTINEL,
        comment_tags: Iterable[str] = COMMENT_TAGS,
        max_concurrent_entries: int = 8,
        anchors: AnchorAllocator | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            sink: Catalog receiving sections and records
            archive_reader: Archive decoder (zip by default)
            tag_decoder: Image tag decoder (Pillow by default)
            archive_extension: Extension an upload must have to be opened
            image_extensions: Entry extensions treated as images
            sentinel: Placeholder for missing metadata fields
            comment_tags: Tag names searched for the JSON parameter blob
            max_concurrent_entries: Entries decoded at the same time
            anchors: Anchor allocator shared with other pipelines on the same catalog
        """
        if max_concurrent_entries < 1:
            raise ValueError("max_concurrent_entries must be at least 1")
        self.sink = sink
        self.archive_reader = archive_reader or create_archive_reader(archive_extension)
        self.tag_decoder = tag_decoder or PillowTagDecoder()
        self.archive_extension = archive_extension
        self.image_extensions = tuple(image_extensions)
        self.sentinel = sentinel
        self.comment_tags = tuple(comment_tags)
        self.max_concurrent_entries = max_concurrent_entries
        self.anchors = anchors or AnchorAllocator()

    async def stream(
        self, upload: UploadedFile, report: ArchiveReport | None = None
    ) -> AsyncIterator[ImageRecord]:
        """
        Process one upload, yielding records in completion order.

        Every yielded record has already been appended to the sink. Closing
        the iterator early (or cancelling the consumer) cancels the entries
        still in flight. Use ``contextlib.aclosing`` when not exhausting it.

        Args:
            upload: File to process
            report: Optional report to fill in with diagnostics and counts

        Yields:
            ImageRecord for every readable image entry
        """
        report = report if report is not None else ArchiveReport(file_name=upload.name)
        anchor = self.anchors.allocate(upload.name)
        report.anchor = anchor

        try:
            self._check_extension(upload)
        except InvalidArchiveError as e:
            logger.warning("Rejected upload: {}", e)
            self._report_file_problem(report, anchor, "invalid_input", str(e))
            return

        try:
            handle = await asyncio.to_thread(self.archive_reader.open, upload.name, upload.data)
        except ArchiveOpenError as e:
            self._report_file_problem(report, anchor, "archive_open", str(e))
            return

        self.sink.register_section(anchor, upload.name, ComponentContent())
        tasks: list[asyncio.Task] = []
        try:
            entries = self.archive_reader.entries(handle)
            report.entries_total = len(entries)
            semaphore = asyncio.Semaphore(self.max_concurrent_entries)

            for entry in entries:
                if not is_image(entry.path, self.image_extensions):
                    report.entries_skipped += 1
                    continue
                tasks.append(
                    asyncio.create_task(
                        self._process_entry(
                            upload.name, entry, self.anchors.allocate(entry.path), semaphore, report
                        ),
                        name=f"entry:{entry.path}",
                    )
                )

            logger.info(
                "Processing {} image entries from {} ({} other entries skipped)",
                len(tasks),
                upload.name,
                report.entries_skipped,
            )

            for next_done in asyncio.as_completed(tasks):
                record = await next_done
                if record is None:
                    continue
                self.sink.append_record(anchor, record)
                report.records.append(record)
                yield record
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                logger.debug("Cancelled {} in-flight entries of {}", len(pending), upload.name)
                await asyncio.gather(*pending, return_exceptions=True)
            self.archive_reader.close(handle)

    def _check_extension(self, upload: UploadedFile) -> None:
        """Raise InvalidArchiveError unless the upload carries the archive extension."""
        if not has_extension(upload.name, self.archive_extension):
            raise InvalidArchiveError(f"{upload.name} is not a {self.archive_extension} file!")

    async def process(self, upload: UploadedFile) -> ArchiveReport:
        """
        Process one upload to completion.

        Args:
            upload: File to process

        Returns:
            ArchiveReport once every entry task has finished
        """
        report = ArchiveReport(file_name=upload.name)
        async with aclosing(self.stream(upload, report)) as records:
            async for _ in records:
                pass

        logger.info(
            "{}: {} records, {} unreadable entries, {} diagnostics",
            upload.name,
            len(report.records),
            len(report.entry_failures),
            len(report.diagnostics),
        )
        return report

    async def process_files(
        self, uploads: Iterable[UploadedFile], show_progress: bool = False
    ) -> list[ArchiveReport]:
        """
        Process uploads one after another in submission order.

        A failing file only produces its own diagnostic; later files still run.

        Args:
            uploads: Files in submission order
            show_progress: Show a rich progress bar on the console

        Returns:
            One ArchiveReport per upload, in the same order
        """
        uploads = list(uploads)
        logger.info("Processing {} uploaded files", len(uploads))
        reports = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            disable=not show_progress,
        ) as progress:
            task = progress.add_task("Reading archives...", total=len(uploads))
            for upload in uploads:
                reports.append(await self.process(upload))
                progress.advance(task)

        return reports

    async def _process_entry(
        self,
        archive_name: str,
        entry: ArchiveEntry,
        anchor: str,
        semaphore: asyncio.Semaphore,
        report: ArchiveReport,
    ) -> ImageRecord | None:
        """Read, decode and normalize one image entry. Returns None if unreadable."""
        async with semaphore:
            try:
                data = await asyncio.to_thread(entry.read)
            except EntryReadError as e:
                self._report_entry_failure(report, archive_name, entry, str(e))
                return None
            except Exception as e:
                self._report_entry_failure(report, archive_name, entry, f"{type(e).__name__}: {e}")
                return None

            try:
                raw_tags = await asyncio.to_thread(self.tag_decoder.decode, data)
            except Exception as e:
                logger.warning("Tag decoding failed for {}: {}", entry.path, e)
                raw_tags = None

        if raw_tags is None:
            logger.debug("No embedded tags in {}", entry.path)

        metadata = extract_fields(raw_tags, sentinel=self.sentinel, comment_tags=self.comment_tags)
        return ImageRecord(
            filename=entry.path,
            archive_name=archive_name,
            anchor=anchor,
            display_resource=DisplayResource(data, media_type_for(entry.path)),
            tags=metadata.tags,
            raw_metadata_text=metadata.raw_metadata_text,
        )

    def _report_entry_failure(
        self, report: ArchiveReport, archive_name: str, entry: ArchiveEntry, message: str
    ) -> None:
        """Record an entry that was skipped because its payload could not be read."""
        logger.warning("Skipping unreadable entry in {}: {}", archive_name, message)
        report.entry_failures.append(
            Diagnostic(kind="entry_read", file_name=archive_name, entry=entry.path, message=message)
        )

    def _report_file_problem(
        self, report: ArchiveReport, anchor: str, kind: str, message: str
    ) -> None:
        """Record a file-level diagnostic and show it in place of the section."""
        report.diagnostics.append(Diagnostic(kind=kind, file_name=report.file_name, message=message))
        self.sink.register_section(anchor, report.file_name, TextContent(text=message))

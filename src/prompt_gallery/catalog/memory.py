"""
In-memory catalog.

Holds sections and records for the lifetime of one session and owns the
release of every record's display resource.
"""

from collections.abc import Iterator

from loguru import logger

from .base import CatalogSection, CatalogSink, ImageRecord, SectionContent, SelectionCallback


class Catalog(CatalogSink):
    """Ordered, append-only collection of catalog sections."""

    def __init__(self):
        self._sections: dict[str, CatalogSection] = {}
        self._callbacks: list[SelectionCallback] = []

    @property
    def sections(self) -> list[CatalogSection]:
        """Sections in registration order."""
        return list(self._sections.values())

    def get_section(self, anchor: str) -> CatalogSection | None:
        return self._sections.get(anchor)

    def register_section(self, anchor: str, title: str, content: SectionContent) -> None:
        """Register a section; anchors must be unique."""
        if anchor in self._sections:
            raise ValueError(f"Section anchor already registered: {anchor}")
        self._sections[anchor] = CatalogSection(anchor=anchor, title=title, content=content)
        logger.debug("Registered section {} ({}, {})", anchor, title, content.kind)

    def append_record(self, anchor: str, record: ImageRecord) -> None:
        """Append a record to an existing section."""
        section = self._sections.get(anchor)
        if section is None:
            raise KeyError(f"Unknown section anchor: {anchor}")
        section.records.append(record)
        logger.debug("Appended {} to section {}", record.filename, anchor)

    def on_select(self, callback: SelectionCallback) -> None:
        self._callbacks.append(callback)

    def records(self) -> Iterator[ImageRecord]:
        """Iterate over every record in every section."""
        for section in self._sections.values():
            yield from section.records

    def find(self, filename: str, archive_name: str | None = None) -> ImageRecord | None:
        """Find the first record with the given entry path or base name."""
        for record in self.records():
            if archive_name is not None and record.archive_name != archive_name:
                continue
            if record.filename == filename or record.filename.rsplit("/", 1)[-1] == filename:
                return record
        return None

    def select(self, record_anchor: str) -> ImageRecord:
        """
        Open the detail view of a record.

        Args:
            record_anchor: Anchor of the record

        Returns:
            The selected record, after every selection callback has run

        Raises:
            KeyError: If no record has that anchor
        """
        for record in self.records():
            if record.anchor == record_anchor:
                for callback in self._callbacks:
                    callback(record)
                return record
        raise KeyError(f"Unknown record anchor: {record_anchor}")

    def dispose_record(self, record: ImageRecord) -> None:
        """Release a record's resource and remove it from its section."""
        record.display_resource.release()
        for section in self._sections.values():
            for i, existing in enumerate(section.records):
                if existing is record:
                    del section.records[i]
                    return

    def clear(self) -> None:
        """Release every display resource and drop all sections."""
        released = 0
        for record in self.records():
            record.display_resource.release()
            released += 1
        self._sections.clear()
        logger.debug("Catalog cleared, released {} resources", released)

    def __len__(self) -> int:
        return sum(len(section.records) for section in self._sections.values())

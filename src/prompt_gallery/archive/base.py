"""
Abstract archive decoder.

The pipeline only needs to open an archive, list its entries, and read one
entry's bytes on demand. Keeping that behind an interface lets tests and other
container formats plug in without touching the pipeline.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ArchiveHandle:
    """An opened archive, owned by exactly one pipeline run."""

    name: str
    backend: Any = field(repr=False)
    closed: bool = False


@dataclass(frozen=True)
class ArchiveEntry:
    """A named entry with a lazy payload accessor."""

    path: str
    size: int = 0
    loader: Callable[[], bytes] = field(repr=False, compare=False, default=lambda: b"")

    @property
    def name(self) -> str:
        """Return the last path component."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def read(self) -> bytes:
        """Fetch the payload bytes. May raise EntryReadError."""
        return self.loader()


class ArchiveReader(ABC):
    """Abstract interface for archive decoders."""

    @abstractmethod
    def open(self, name: str, data: bytes) -> ArchiveHandle:
        """
        Open archive bytes.

        Args:
            name: Name of the uploaded file, for diagnostics
            data: Raw archive bytes

        Returns:
            Handle to the opened archive

        Raises:
            ArchiveOpenError: If the bytes cannot be decoded
        """
        pass

    @abstractmethod
    def entries(self, handle: ArchiveHandle) -> list[ArchiveEntry]:
        """
        List file entries in archive order (directories excluded).

        Args:
            handle: Handle returned by open()

        Returns:
            Entries with lazy payload accessors
        """
        pass

    @abstractmethod
    def close(self, handle: ArchiveHandle) -> None:
        """Release the archive. Calling it twice is a no-op."""
        pass

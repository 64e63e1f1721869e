"""
Zip archive decoder built on the standard library zipfile module.
"""

import lzma
import zipfile
import zlib
from io import BytesIO

from loguru import logger

from ..exceptions import ArchiveOpenError, EntryReadError
from .base import ArchiveEntry, ArchiveHandle, ArchiveReader

# Errors zipfile raises for damaged members, unsupported methods or encryption
_READ_ERRORS = (
    zipfile.BadZipFile,
    NotImplementedError,
    RuntimeError,
    ValueError,
    OSError,
    EOFError,
    zlib.error,
    lzma.LZMAError,
)


class ZipArchiveReader(ArchiveReader):
    """Reads zip archives held fully in memory."""

    def open(self, name: str, data: bytes) -> ArchiveHandle:
        """Open zip bytes, raising ArchiveOpenError on corrupt input."""
        try:
            archive = zipfile.ZipFile(BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as e:
            logger.warning("Cannot open archive {}: {}", name, e)
            raise ArchiveOpenError(f"Can't read {name}: {e}") from e

        logger.debug("Opened archive {} ({} members)", name, len(archive.infolist()))
        return ArchiveHandle(name=name, backend=archive)

    def entries(self, handle: ArchiveHandle) -> list[ArchiveEntry]:
        """List file members of the archive, skipping directories."""
        archive: zipfile.ZipFile = handle.backend
        return [
            ArchiveEntry(
                path=info.filename,
                size=info.file_size,
                loader=self._make_loader(handle, info),
            )
            for info in archive.infolist()
            if not info.is_dir()
        ]

    def close(self, handle: ArchiveHandle) -> None:
        """Close the underlying zip file."""
        if handle.closed:
            return
        handle.backend.close()
        handle.closed = True
        logger.debug("Closed archive {}", handle.name)

    @staticmethod
    def _make_loader(handle: ArchiveHandle, info: zipfile.ZipInfo):
        """Build a payload accessor bound to one member."""

        def load() -> bytes:
            if handle.closed:
                raise EntryReadError(f"{info.filename}: archive {handle.name} is closed")
            try:
                return handle.backend.read(info)
            except _READ_ERRORS as e:
                raise EntryReadError(f"{info.filename}: {e}") from e

        return load

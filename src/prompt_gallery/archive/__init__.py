"""Archive decoders package.

Provides a factory function to create the archive reader for an extension.
"""

from .base import ArchiveEntry, ArchiveHandle, ArchiveReader
from .zip_reader import ZipArchiveReader


def create_archive_reader(archive_type: str = "zip") -> ArchiveReader:
    """Create an archive reader instance.

    Args:
        archive_type: Archive extension without the dot (currently only "zip")

    Returns:
        Configured ArchiveReader instance

    Raises:
        ValueError: If archive_type is not recognized

    """
    if archive_type.lower() == "zip":
        return ZipArchiveReader()
    else:
        raise ValueError(f"Unknown archive type: {archive_type}")


__all__ = [
    "ArchiveEntry",
    "ArchiveHandle",
    "ArchiveReader",
    "ZipArchiveReader",
    "create_archive_reader",
]

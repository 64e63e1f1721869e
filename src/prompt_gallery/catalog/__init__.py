"""
Catalog package.

Holds normalized image records per archive and renders them for the terminal.
"""

from .base import (
    CatalogSection,
    CatalogSink,
    ComponentContent,
    Diagnostic,
    DisplayResource,
    ImageRecord,
    SectionContent,
    TextContent,
    media_type_for,
)
from .download import DirectoryDownloader, DownloadTrigger
from .memory import Catalog

__all__ = [
    "Catalog",
    "CatalogSection",
    "CatalogSink",
    "ComponentContent",
    "Diagnostic",
    "DirectoryDownloader",
    "DisplayResource",
    "DownloadTrigger",
    "ImageRecord",
    "SectionContent",
    "TextContent",
    "media_type_for",
]

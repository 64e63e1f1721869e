"""
Catalog data models and the abstract catalog sink.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ResourceReleasedError
from ..metadata.base import ImageTags

MEDIA_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
}


def media_type_for(filename: str) -> str:
    """Guess a MIME type from an image filename."""
    suffix = filename.rsplit(".", 1)[-1].lower()
    return MEDIA_TYPES.get(suffix, "application/octet-stream")


class DisplayResource:
    """Decoded image bytes held for display until explicitly released."""

    def __init__(self, data: bytes, media_type: str = "application/octet-stream"):
        self._data: bytes | None = data
        self.media_type = media_type
        self.size = len(data)

    @property
    def released(self) -> bool:
        return self._data is None

    def read(self) -> bytes:
        """Return the bytes, raising ResourceReleasedError once released."""
        if self._data is None:
            raise ResourceReleasedError("Display resource has been released")
        return self._data

    def release(self) -> None:
        """Drop the bytes. Safe to call more than once."""
        self._data = None

    def __repr__(self) -> str:
        state = "released" if self.released else f"{self.size} bytes"
        return f"DisplayResource({self.media_type}, {state})"


class ImageRecord(BaseModel):
    """One normalized image extracted from an archive."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    filename: str = Field(description="Entry path inside the archive")
    archive_name: str = Field(description="Name of the archive the entry came from")
    anchor: str = Field(description="Catalog anchor addressing this record")
    display_resource: DisplayResource = Field(description="Image bytes for display")
    tags: ImageTags = Field(default_factory=ImageTags)
    raw_metadata_text: str = Field(default="", description="Diagnostic metadata text")


class Diagnostic(BaseModel):
    """A non-fatal problem reported for one file or entry."""

    kind: Literal["invalid_input", "archive_open", "entry_read"]
    file_name: str
    message: str
    entry: str | None = None


class TextContent(BaseModel):
    """Section body that is plain text, such as a diagnostic line."""

    kind: Literal["text"] = "text"
    text: str


class ComponentContent(BaseModel):
    """Section body that is a component, such as the image grid of an archive."""

    kind: Literal["component"] = "component"
    component: str = "image-grid"


SectionContent = Annotated[TextContent | ComponentContent, Field(discriminator="kind")]


class CatalogSection(BaseModel):
    """A titled catalog section and the records appended to it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    anchor: str
    title: str
    content: SectionContent
    records: list[ImageRecord] = Field(default_factory=list)


SelectionCallback = Callable[[ImageRecord], None]


class CatalogSink(ABC):
    """Abstract interface for whatever displays the catalog."""

    @abstractmethod
    def register_section(self, anchor: str, title: str, content: SectionContent) -> None:
        """
        Register a new section.

        Args:
            anchor: Unique section anchor
            title: Section heading (the archive file name)
            content: Text diagnostic or component body
        """
        pass

    @abstractmethod
    def append_record(self, anchor: str, record: ImageRecord) -> None:
        """
        Append a record to a registered section.

        Args:
            anchor: Anchor of a previously registered section
            record: Record to append
        """
        pass

    @abstractmethod
    def on_select(self, callback: SelectionCallback) -> None:
        """Register a callback invoked when the user opens a record's detail view."""
        pass

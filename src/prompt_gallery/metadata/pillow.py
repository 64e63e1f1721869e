"""
Tag decoding with Pillow.

Collects PNG text chunks, GIF/JPEG comments and the descriptive EXIF fields
into one flat mapping of tag name to string.
"""

from io import BytesIO

from loguru import logger
from PIL import ExifTags, UnidentifiedImageError
from PIL import Image as PILImage

from .base import TagDecoder

# info keys that hold raw bytes but are really text
_TEXT_BYTE_KEYS = ("comment",)

_EXIF_TEXT_TAGS = {
    0x010E: "ImageDescription",
    0x0131: "Software",
    0x013B: "Artist",
}
_USER_COMMENT = 0x9286

_CHARSET_PREFIXES = {
    b"ASCII\x00\x00\x00": "ascii",
    b"UNICODE\x00": "utf-16-be",
    b"JIS\x00\x00\x00\x00\x00": "shift_jis",
    b"\x00" * 8: "utf-8",
}


def _decode_user_comment(value: bytes | str) -> str:
    """Decode an EXIF UserComment, which starts with an 8-byte charset marker."""
    if isinstance(value, str):
        return value
    encoding = _CHARSET_PREFIXES.get(value[:8])
    if encoding is None:
        return value.decode("utf-8", errors="replace")
    text = value[8:]
    if encoding == "utf-16-be" and text[:1] != b"\x00" and text[1:2] == b"\x00":
        encoding = "utf-16-le"
    return text.decode(encoding, errors="replace").rstrip("\x00")


class PillowTagDecoder(TagDecoder):
    """Reads text tags from any image format Pillow can identify."""

    def decode(self, data: bytes) -> dict[str, str] | None:
        """Return the image's text tags, or None when it carries none."""
        try:
            with PILImage.open(BytesIO(data)) as img:
                tags = self._info_tags(img.info)
                # PNG text chunks placed after the image data only show up here
                tags.update(getattr(img, "text", None) or {})
                tags.update(self._exif_tags(img))
                fmt = img.format
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
            logger.debug("No decodable image metadata: {}", e)
            return None

        if not tags:
            logger.debug("{} image has no text tags", fmt)
            return None

        logger.debug("Decoded {} tags from {} image", len(tags), fmt)
        return tags

    @staticmethod
    def _info_tags(info: dict) -> dict[str, str]:
        """Keep the textual entries of Pillow's info dict."""
        tags = {}
        for key, value in info.items():
            if isinstance(value, str):
                tags[str(key)] = value
            elif isinstance(value, bytes) and key in _TEXT_BYTE_KEYS:
                tags[str(key)] = value.decode("utf-8", errors="replace")
        return tags

    @staticmethod
    def _exif_tags(img: PILImage.Image) -> dict[str, str]:
        """Extract descriptive EXIF fields, including the UserComment."""
        exif = img.getexif()
        if not exif:
            return {}

        tags = {}
        for tag_id, name in _EXIF_TEXT_TAGS.items():
            value = exif.get(tag_id)
            if isinstance(value, bytes):
                value = value.decode("utf-8", errors="replace")
            if value:
                tags[name] = str(value).rstrip("\x00")

        comment = exif.get_ifd(ExifTags.IFD.Exif).get(_USER_COMMENT)
        if comment:
            tags["UserComment"] = _decode_user_comment(comment)
        return tags

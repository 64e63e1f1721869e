"""
Image metadata package.

Decodes text tags out of image bytes and normalizes them into ImageTags.
"""

from .base import SENTINEL, ImageTags, NormalizedMetadata, TagDecoder
from .normalizer import extract_fields, json_to_string, parse_parameters
from .pillow import PillowTagDecoder

__all__ = [
    "SENTINEL",
    "ImageTags",
    "NormalizedMetadata",
    "TagDecoder",
    "PillowTagDecoder",
    "extract_fields",
    "json_to_string",
    "parse_parameters",
]

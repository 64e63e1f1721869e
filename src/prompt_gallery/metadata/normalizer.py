"""
Metadata normalization.

Generation tools store their parameters as a JSON object in the image's
comment tag, the prompt sometimes only in the description tag, and the model
name in a source tag. This module folds those into a fixed ImageTags shape and
renders whatever is left over as indented text for the detail view.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from ..exceptions import MetadataParseError
from .base import SENTINEL, ImageTags, NormalizedMetadata

COMMENT_TAGS = ("Comment", "comment", "UserComment")
DESCRIPTION_TAGS = ("Description", "ImageDescription")
MODEL_TAGS = ("Source", "model", "Software")
NEGATIVE_PROMPT_KEYS = ("uc", "negative_prompt")

# Parameters already shown as tags and left out of the serialized remainder
SURFACED_KEYS = ("prompt", *NEGATIVE_PROMPT_KEYS)

INDENT = "    "


def parse_parameters(text: str) -> dict:
    """
    Parse a comment tag value as a JSON object.

    Args:
        text: Raw tag value

    Returns:
        The parsed object, keys in their original order

    Raises:
        MetadataParseError: If the text is not JSON or not an object
    """
    try:
        parsed = json.loads(text)
    except (ValueError, TypeError) as e:
        raise MetadataParseError(f"Comment is not valid JSON: {e}") from e
    except RecursionError as e:
        raise MetadataParseError("Comment is nested too deeply to parse") from e
    if not isinstance(parsed, dict):
        raise MetadataParseError(f"Comment is a JSON {type(parsed).__name__}, not an object")
    return parsed


def _expand(value: Any) -> Any:
    """Parse strings that hold embedded JSON; leave everything else alone."""
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not stripped or stripped[0] not in "{[":
        return value
    try:
        return json.loads(stripped)
    except (ValueError, RecursionError) as e:
        logger.debug("Nested value is not JSON, rendering verbatim: {!r}", e)
        return value


def _render_value(value: Any, level: int) -> str:
    value = _expand(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        body = json_to_string(value, level=level + 1)
        return "{\n" + body + "\n" + INDENT * level + "}"
    if isinstance(value, list):
        return "[" + ", ".join(_render_value(item, level) for item in value) + "]"
    if isinstance(value, str):
        return value
    return json.dumps(value)


def json_to_string(data: Mapping, ignore: Iterable[str] = (), level: int = 0) -> str:
    """
    Render a parsed structure as indented ``key: value`` lines.

    Nested objects become brace blocks indented one level deeper, arrays
    become ``[a, b]`` with structured elements rendered the same way, and
    strings are shown without quotes. Keys keep their insertion order.

    Args:
        data: Parsed JSON object
        ignore: Top-level keys to leave out
        level: Current nesting depth

    Returns:
        Multi-line text, empty for an empty mapping

    Example:
        >>> print(json_to_string({"a": 1, "b": {"c": 2}}))
        a: 1
        b: {
            c: 2
        }
    """
    skipped = set(ignore)
    pad = INDENT * level
    lines = []
    for key, value in data.items():
        if key in skipped:
            continue
        lines.append(f"{pad}{key}: {_render_value(value, level)}")
    return "\n".join(lines)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _first(mapping: Mapping, keys: Iterable[str]) -> Any | None:
    for key in keys:
        value = mapping.get(key)
        if value is not None and value != "":
            return value
    return None


def extract_fields(
    raw_tags: Mapping[str, str] | None,
    sentinel: str = SENTINEL,
    comment_tags: Iterable[str] = COMMENT_TAGS,
) -> NormalizedMetadata:
    """
    Normalize an image's raw tag mapping.

    Never raises on bad input: an unparseable comment is logged, treated as
    an empty structure, and its text kept as the raw metadata.

    Args:
        raw_tags: Tag name to value, as returned by a TagDecoder (None if none)
        sentinel: Value used for every missing field
        comment_tags: Tag names searched for the JSON parameter blob

    Returns:
        NormalizedMetadata with tags, raw text and the parsed parameters
    """
    raw_tags = raw_tags or {}
    parameters: dict = {}
    raw_text = ""

    comment = _first(raw_tags, comment_tags)
    if comment is not None:
        try:
            parameters = parse_parameters(comment)
        except MetadataParseError as e:
            logger.warning("Ignoring unparseable metadata comment: {}", e)
            raw_text = str(comment)
        else:
            try:
                raw_text = json_to_string(parameters, ignore=SURFACED_KEYS)
            except RecursionError:
                logger.warning("Metadata comment too deeply nested to render, kept verbatim")
                raw_text = str(comment)

    def pick(keys: Iterable[str], fallback: Any | None = None) -> str:
        value = _first(parameters, keys)
        if value is None:
            value = fallback
        return sentinel if value is None else _stringify(value)

    tags = ImageTags(
        model=pick((), fallback=_first(raw_tags, MODEL_TAGS)),
        prompt=pick(("prompt",), fallback=_first(raw_tags, DESCRIPTION_TAGS)),
        negative_prompt=pick(NEGATIVE_PROMPT_KEYS),
        seed=pick(("seed",)),
        sampler=pick(("sampler",)),
        steps=pick(("steps",)),
        scale=pick(("scale",)),
    )
    return NormalizedMetadata(tags=tags, raw_metadata_text=raw_text, parameters=parameters)

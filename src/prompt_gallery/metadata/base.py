"""
Metadata models and the abstract tag decoder.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

SENTINEL = "N/A"


class ImageTags(BaseModel):
    """Generation parameters surfaced for one image."""

    model: str = Field(default=SENTINEL, description="Generating model or tool")
    prompt: str = Field(default=SENTINEL, description="Positive prompt")
    negative_prompt: str = Field(default=SENTINEL, description="Negative prompt (uc)")
    seed: str = Field(default=SENTINEL, description="Sampling seed")
    sampler: str = Field(default=SENTINEL, description="Sampler name")
    steps: str = Field(default=SENTINEL, description="Sampling step count")
    scale: str = Field(default=SENTINEL, description="Guidance scale")

    @classmethod
    def unknown(cls, sentinel: str = SENTINEL) -> "ImageTags":
        """Return tags with every field set to the sentinel."""
        return cls(**{name: sentinel for name in cls.model_fields})


class NormalizedMetadata(BaseModel):
    """Normalizer output: surfaced tags plus the diagnostic remainder."""

    tags: ImageTags = Field(default_factory=ImageTags)
    raw_metadata_text: str = Field(
        default="",
        description="Serialized leftover parameters, or the raw comment if it did not parse",
    )
    parameters: dict = Field(
        default_factory=dict,
        description="Parsed comment structure, empty when absent or malformed",
    )


class TagDecoder(ABC):
    """Abstract interface for reading textual tags out of image bytes."""

    @abstractmethod
    def decode(self, data: bytes) -> dict[str, str] | None:
        """
        Extract textual tags from an image.

        Args:
            data: Encoded image bytes

        Returns:
            Mapping of tag name to value, or None if the image has no tags
            or its format is not supported
        """
        pass

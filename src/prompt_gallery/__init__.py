"""
Prompt Gallery.

Browse zip archives of generated images together with the generation
parameters embedded in each image.

Usage:
    # List every image of one or more archives
    prompt-gallery scan renders.zip more.zip

    # Detail view of one image
    prompt-gallery show renders.zip images/0001.png

    # Show configuration
    prompt-gallery info
"""

__version__ = "0.1.0"

from .catalog import Catalog, ImageRecord
from .ingestion import ArchiveReport, ExtractionPipeline, UploadedFile

__all__ = [
    "ArchiveReport",
    "Catalog",
    "ExtractionPipeline",
    "ImageRecord",
    "UploadedFile",
]

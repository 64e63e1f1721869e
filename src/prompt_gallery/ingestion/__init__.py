"""
Archive ingestion package.
"""

from .pipeline import ArchiveReport, ExtractionPipeline, UploadedFile

__all__ = [
    "ArchiveReport",
    "ExtractionPipeline",
    "UploadedFile",
]

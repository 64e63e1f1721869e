"""Pytest fixtures and configuration for prompt-gallery tests.

This module provides shared fixtures for building in-memory zip archives and
images, plus catalog and pipeline instances wired to them.
"""

import json
import struct
import tempfile
import zipfile
from collections.abc import Callable, Generator
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from prompt_gallery.archive import ZipArchiveReader
from prompt_gallery.catalog import Catalog
from prompt_gallery.ingestion import ExtractionPipeline, UploadedFile

# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


# --- Image Builders ---


def make_png(text: dict[str, str] | None = None, color: str = "red") -> bytes:
    """Build a small PNG, optionally with tEXt chunks."""
    img = Image.new("RGB", (8, 8), color=color)
    pnginfo = None
    if text:
        pnginfo = PngInfo()
        for key, value in text.items():
            pnginfo.add_text(key, value)
    buffer = BytesIO()
    img.save(buffer, format="PNG", pnginfo=pnginfo)
    return buffer.getvalue()


def make_jpeg(comment: bytes | None = None) -> bytes:
    """Build a small JPEG, optionally with a COM segment."""
    img = Image.new("RGB", (8, 8), color="blue")
    buffer = BytesIO()
    if comment is None:
        img.save(buffer, format="JPEG")
    else:
        img.save(buffer, format="JPEG", comment=comment)
    return buffer.getvalue()


def make_zip(members: dict[str, bytes], directories: tuple[str, ...] = ()) -> bytes:
    """Build a zip archive from a name -> bytes mapping."""
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for directory in directories:
            archive.writestr(zipfile.ZipInfo(directory.rstrip("/") + "/"), b"")
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def make_zip_with_bad_lzma_member(good: bytes, bad_name: str = "broken.png") -> bytes:
    """
    Build a zip holding a stored `good.png` and an LZMA member whose
    compression properties are invalid, so decompressing it fails.
    """
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("good.png", good, compress_type=zipfile.ZIP_STORED)
        archive.writestr(bad_name, good, compress_type=zipfile.ZIP_LZMA)
    data = bytearray(buffer.getvalue())

    with zipfile.ZipFile(BytesIO(bytes(data))) as archive:
        info = archive.getinfo(bad_name)
    offset = info.header_offset
    name_len, extra_len = struct.unpack("<HH", data[offset + 26 : offset + 30])
    payload = offset + 30 + name_len + extra_len
    # 4-byte LZMA header (version, props size), then the lc/lp/pb byte
    data[payload + 4] = 0xFF
    return bytes(data)


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    """Return the PNG builder."""
    return make_png


@pytest.fixture
def jpeg_factory() -> Callable[..., bytes]:
    """Return the JPEG builder."""
    return make_jpeg


@pytest.fixture
def zip_factory() -> Callable[..., bytes]:
    """Return the zip builder."""
    return make_zip


@pytest.fixture
def bad_lzma_zip_factory() -> Callable[..., bytes]:
    """Return the builder for zips with an undecompressable LZMA member."""
    return make_zip_with_bad_lzma_member


# --- Sample Data Fixtures ---


@pytest.fixture
def sample_parameters() -> dict:
    """Generation parameters as a tool would store them in the Comment tag."""
    return {
        "prompt": "a cat sitting on a windowsill",
        "steps": 28,
        "sampler": "k_euler_ancestral",
        "seed": 1234567,
        "scale": 11.0,
        "uc": "lowres, bad anatomy",
        "strength": 0.7,
        "noise": 0.2,
    }


@pytest.fixture
def tagged_png(sample_parameters) -> bytes:
    """PNG carrying Description, Source and a JSON Comment."""
    return make_png(
        {
            "Title": "AI generated image",
            "Description": "a cat sitting on a windowsill",
            "Software": "NovelAI",
            "Source": "Stable Diffusion 1D44365E",
            "Comment": json.dumps(sample_parameters),
        }
    )


@pytest.fixture
def sample_archive(tagged_png) -> bytes:
    """Archive with two images, a text file and a directory."""
    return make_zip(
        {
            "images/cat.png": tagged_png,
            "images/plain.png": make_png(),
            "images/readme.txt": b"not an image",
        },
        directories=("images",),
    )


# --- Catalog / Pipeline Fixtures ---


@pytest.fixture
def catalog() -> Catalog:
    """Create an empty in-memory catalog."""
    return Catalog()


@pytest.fixture
def pipeline(catalog) -> ExtractionPipeline:
    """Create a pipeline writing into the catalog fixture."""
    return ExtractionPipeline(catalog, archive_reader=ZipArchiveReader())


@pytest.fixture
def upload_factory() -> Callable[[str, bytes], UploadedFile]:
    """Return a helper creating UploadedFile instances."""

    def create(name: str, data: bytes) -> UploadedFile:
        return UploadedFile(name=name, data=data)

    return create

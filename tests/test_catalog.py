"""
Tests for the catalog module.

Tests DisplayResource, the in-memory Catalog, section content and downloads.
"""

import pytest

from prompt_gallery.catalog import (
    Catalog,
    CatalogSection,
    ComponentContent,
    DirectoryDownloader,
    DisplayResource,
    ImageRecord,
    TextContent,
    media_type_for,
)
from prompt_gallery.exceptions import ResourceReleasedError
from prompt_gallery.metadata.base import ImageTags


def _record(filename: str = "images/cat.png", anchor: str = "1") -> ImageRecord:
    return ImageRecord(
        filename=filename,
        archive_name="renders.zip",
        anchor=anchor,
        display_resource=DisplayResource(b"\x89PNG data", media_type_for(filename)),
        tags=ImageTags(seed="42"),
    )


class TestDisplayResource:
    """Test DisplayResource class."""

    def test_read(self):
        """Test reading bytes before release."""
        resource = DisplayResource(b"abc", "image/png")

        assert resource.read() == b"abc"
        assert resource.size == 3
        assert not resource.released

    def test_release(self):
        """Test that released resources refuse reads."""
        resource = DisplayResource(b"abc")

        resource.release()
        resource.release()

        assert resource.released
        with pytest.raises(ResourceReleasedError):
            resource.read()

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("a.png", "image/png"),
            ("a.JPG", "image/jpeg"),
            ("a.tiff", "image/tiff"),
            ("a.xpng", "application/octet-stream"),
        ],
    )
    def test_media_type_for(self, name, expected):
        """Test MIME type guessing from file names."""
        assert media_type_for(name) == expected


class TestImageRecord:
    """Test ImageRecord model."""

    def test_defaults(self):
        """Test default tags and raw text."""
        record = ImageRecord(
            filename="a.png",
            archive_name="x.zip",
            anchor="1",
            display_resource=DisplayResource(b""),
        )

        assert record.tags == ImageTags()
        assert record.raw_metadata_text == ""

    def test_frozen(self):
        """Test that records cannot be mutated after creation."""
        record = _record()

        with pytest.raises(Exception):
            record.filename = "other.png"


class TestSectionContent:
    """Test the tagged section content union."""

    def test_text_variant(self):
        """Test that kind=text validates to TextContent."""
        section = CatalogSection.model_validate(
            {"anchor": "1", "title": "a.png", "content": {"kind": "text", "text": "bad"}}
        )

        assert isinstance(section.content, TextContent)
        assert section.content.text == "bad"

    def test_component_variant(self):
        """Test that kind=component validates to ComponentContent."""
        section = CatalogSection.model_validate(
            {"anchor": "1", "title": "a.zip", "content": {"kind": "component"}}
        )

        assert isinstance(section.content, ComponentContent)
        assert section.content.component == "image-grid"


class TestCatalog:
    """Test Catalog class."""

    def test_register_and_append(self, catalog):
        """Test appending records to a section."""
        catalog.register_section("10", "renders.zip", ComponentContent())
        record = _record()

        catalog.append_record("10", record)

        assert len(catalog) == 1
        assert catalog.get_section("10").records == [record]
        assert list(catalog.records()) == [record]

    def test_sections_keep_registration_order(self, catalog):
        """Test section ordering."""
        catalog.register_section("2", "b.zip", ComponentContent())
        catalog.register_section("1", "a.zip", TextContent(text="a.zip is not a zip file!"))

        assert [section.title for section in catalog.sections] == ["b.zip", "a.zip"]

    def test_duplicate_anchor_rejected(self, catalog):
        """Test that anchors must be unique."""
        catalog.register_section("1", "a.zip", ComponentContent())

        with pytest.raises(ValueError):
            catalog.register_section("1", "b.zip", ComponentContent())

    def test_append_unknown_section(self, catalog):
        """Test appending to a section that does not exist."""
        with pytest.raises(KeyError):
            catalog.append_record("missing", _record())

    def test_select_notifies_callbacks(self, catalog):
        """Test that selecting a record invokes every callback with it."""
        catalog.register_section("1", "a.zip", ComponentContent())
        record = _record(anchor="99")
        catalog.append_record("1", record)
        seen = []
        catalog.on_select(seen.append)
        catalog.on_select(lambda r: seen.append(r.filename))

        selected = catalog.select("99")

        assert selected is record
        assert seen == [record, "images/cat.png"]

    def test_select_unknown(self, catalog):
        """Test selecting an anchor that does not exist."""
        with pytest.raises(KeyError):
            catalog.select("nope")

    def test_find_by_path_or_name(self, catalog):
        """Test finding records by entry path or base name."""
        catalog.register_section("1", "renders.zip", ComponentContent())
        record = _record()
        catalog.append_record("1", record)

        assert catalog.find("images/cat.png") is record
        assert catalog.find("cat.png") is record
        assert catalog.find("cat.png", archive_name="other.zip") is None
        assert catalog.find("dog.png") is None

    def test_clear_releases_resources(self, catalog):
        """Test that clear releases every resource and empties the catalog."""
        catalog.register_section("1", "a.zip", ComponentContent())
        records = [_record(f"{i}.png", anchor=str(i)) for i in range(3)]
        for record in records:
            catalog.append_record("1", record)

        catalog.clear()

        assert len(catalog) == 0
        assert catalog.sections == []
        assert all(record.display_resource.released for record in records)

    def test_dispose_record(self, catalog):
        """Test disposing of a single record."""
        catalog.register_section("1", "a.zip", ComponentContent())
        keep, drop = _record("keep.png", "1"), _record("drop.png", "2")
        catalog.append_record("1", keep)
        catalog.append_record("1", drop)

        catalog.dispose_record(drop)

        assert list(catalog.records()) == [keep]
        assert drop.display_resource.released
        assert not keep.display_resource.released


class TestDirectoryDownloader:
    """Test DirectoryDownloader class."""

    def test_save_uses_base_name(self, temp_dir):
        """Test that archive paths are reduced to their base name."""
        downloader = DirectoryDownloader(temp_dir / "out")

        path = downloader.save(DisplayResource(b"img"), "nested/dir/cat.png")

        assert path == temp_dir / "out" / "cat.png"
        assert path.read_bytes() == b"img"

    def test_same_base_name_not_overwritten(self, temp_dir):
        """Test that entries sharing a base name are all kept."""
        downloader = DirectoryDownloader(temp_dir)

        first = downloader.save(DisplayResource(b"a"), "a/0001.png")
        second = downloader.save(DisplayResource(b"b"), "b/0001.png")
        third = downloader.save(DisplayResource(b"c"), "c/0001.png")

        assert [p.name for p in (first, second, third)] == ["0001.png", "0001-1.png", "0001-2.png"]
        assert [p.read_bytes() for p in (first, second, third)] == [b"a", b"b", b"c"]

    def test_suffixed_name_skips_real_entry(self, temp_dir):
        """Test that a generated name never replaces an entry saved under that name."""
        downloader = DirectoryDownloader(temp_dir)

        downloader.save(DisplayResource(b"real"), "cat-1.png")
        downloader.save(DisplayResource(b"x"), "cat.png")
        path = downloader.save(DisplayResource(b"y"), "dir/cat.png")

        assert path.name == "cat-2.png"
        assert (temp_dir / "cat-1.png").read_bytes() == b"real"

    def test_save_released_resource(self, temp_dir):
        """Test that released resources cannot be saved."""
        resource = DisplayResource(b"img")
        resource.release()

        with pytest.raises(ResourceReleasedError):
            DirectoryDownloader(temp_dir).save(resource, "cat.png")

        assert not (temp_dir / "cat.png").exists()

"""Tests for sort resolution and ordering.

Covers:
  - SortOverride.parse()            — field and field:direction forms
  - resolve_sort_spec()             — global defaults, overrides, fallback
  - sort_records()                  — fallback keys, NULL placement, tie-break
  - natural_key() / sort_gallery_names() / extract_display_name()
"""

import random
from datetime import datetime

import pytest

from photofolio.core.types import SortDirection
from photofolio.models import ExifData, ImageRecord
from photofolio.query.errors import ConfigurationError
from photofolio.sorting import (
    SortConfig,
    SortOverride,
    SortSpec,
    extract_display_name,
    natural_key,
    resolve_sort_spec,
    sort_gallery_names,
    sort_records,
)


def _image(filename: str, taken: datetime | None = None, **exif) -> ImageRecord:
    return ImageRecord(
        filename=filename,
        source_path=f"Events/{filename}",
        date_taken=taken,
        exif=ExifData(**exif) if exif else None,
    )


def _names(records: list[ImageRecord]) -> list[str]:
    return [r.filename for r in records]


class TestSortDirection:
    @pytest.mark.parametrize("text", ["asc", "ASC", " Asc "])
    def test_parse_ascending(self, text):
        assert SortDirection.parse(text) is SortDirection.ASC

    def test_parse_invalid(self):
        with pytest.raises(ValueError, match="Invalid sort direction"):
            SortDirection.parse("up")


class TestSortOverride:
    def test_field_only(self):
        assert SortOverride.parse("exif.iso") == SortOverride("exif.iso")

    def test_field_and_direction(self):
        assert SortOverride.parse("exif.iso:DESC") == SortOverride(
            "exif.iso", SortDirection.DESC
        )

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text):
        assert SortOverride.parse(text) is None

    def test_invalid_direction(self):
        with pytest.raises(ConfigurationError, match="Invalid sort direction"):
            SortOverride.parse("filename:sideways")

    def test_missing_field(self):
        with pytest.raises(ConfigurationError, match="has no field"):
            SortOverride.parse(":asc")

    def test_str_round_trips(self):
        assert str(SortOverride.parse("filename:asc")) == "filename:asc"


class TestResolveSortSpec:
    GLOBAL = SortConfig("dateTaken", SortDirection.DESC, "filename")

    def test_defaults(self):
        assert resolve_sort_spec() == SortSpec(
            "dateTaken", SortDirection.DESC, "filename"
        )

    def test_no_override_uses_global(self):
        assert resolve_sort_spec(self.GLOBAL, None) == SortSpec(
            "dateTaken", SortDirection.DESC, "filename"
        )

    def test_field_override_keeps_global_direction(self):
        spec = resolve_sort_spec(self.GLOBAL, "exif.focalLength")

        assert spec == SortSpec("exif.focalLength", SortDirection.DESC, "filename")

    def test_field_and_direction_override(self):
        spec = resolve_sort_spec(self.GLOBAL, "exif.focalLength:asc")

        assert spec == SortSpec("exif.focalLength", SortDirection.ASC, "filename")

    def test_fallback_always_from_global(self):
        config = SortConfig("dateTaken", SortDirection.ASC, "exif.iso")

        assert resolve_sort_spec(config, "filename:desc").fallback == "exif.iso"

    def test_unknown_field(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_sort_spec(self.GLOBAL, "bogus")

        assert "bogus" in exc_info.value.message

    def test_unknown_exif_field(self):
        with pytest.raises(ConfigurationError, match="shutter"):
            resolve_sort_spec(self.GLOBAL, "exif.shutter:asc")

    def test_unknown_fallback(self):
        config = SortConfig("dateTaken", SortDirection.ASC, "nope")

        with pytest.raises(ConfigurationError, match="fallback"):
            resolve_sort_spec(config)

    def test_from_dict(self):
        config = SortConfig.from_dict({"field": "exif.iso", "direction": "ASC"})

        assert config == SortConfig("exif.iso", SortDirection.ASC, "filename")

    def test_from_dict_without_fallback(self):
        assert SortConfig.from_dict({"fallback": None}).fallback is None


class TestSortRecords:
    def test_primary_key_descending(self):
        records = [
            _image("a.jpg", datetime(2024, 1, 1)),
            _image("b.jpg", datetime(2024, 3, 1)),
            _image("c.jpg", datetime(2024, 2, 1)),
        ]
        spec = SortSpec("dateTaken", SortDirection.DESC, "filename")

        assert _names(sort_records(records, spec)) == ["b.jpg", "c.jpg", "a.jpg"]

    def test_fallback_replaces_missing_primary(self):
        records = [
            _image("a.jpg", make="Canon"),
            _image("c.jpg", iso=800, make="Sony"),
            _image("b.jpg", iso=200),
        ]
        spec = SortSpec("exif.iso", SortDirection.ASC, "exif.make")

        # b (200) < c (800) as numbers; a falls back to the string 'Canon'
        assert _names(sort_records(records, spec)) == ["b.jpg", "c.jpg", "a.jpg"]

    def test_fallback_keyed_records_follow_primary_in_both_directions(self):
        records = [
            _image("new.jpg", datetime(2024, 5, 1)),
            _image("a_scan.jpg"),
            _image("old.jpg", datetime(2020, 1, 1)),
            _image("zz_scan.jpg"),
        ]

        for direction, expected in (
            (SortDirection.ASC, ["old.jpg", "new.jpg", "a_scan.jpg", "zz_scan.jpg"]),
            (SortDirection.DESC, ["new.jpg", "old.jpg", "zz_scan.jpg", "a_scan.jpg"]),
        ):
            spec = SortSpec("dateTaken", direction, "filename")
            assert _names(sort_records(records, spec)) == expected

    def test_missing_keys_sort_last_in_both_directions(self):
        records = [
            _image("z.jpg"),
            _image("a.jpg", datetime(2024, 1, 1)),
            _image("m.jpg", datetime(2024, 5, 1)),
        ]

        for direction, expected in (
            (SortDirection.ASC, ["a.jpg", "m.jpg", "z.jpg"]),
            (SortDirection.DESC, ["m.jpg", "a.jpg", "z.jpg"]),
        ):
            spec = SortSpec("dateTaken", direction, None)
            assert _names(sort_records(records, spec)) == expected

    def test_tie_break_by_filename_is_independent_of_input_order(self):
        records = [_image(f"img_{i:02d}.jpg", make="Canon") for i in range(12)]
        spec = SortSpec("dateTaken", SortDirection.DESC, "exif.make")
        expected = sorted(r.filename for r in records)

        shuffled = list(records)
        random.Random(7).shuffle(shuffled)

        assert _names(sort_records(shuffled, spec)) == expected
        assert _names(sort_records(list(reversed(records)), spec)) == expected

    def test_tie_break_is_ordinal(self):
        records = [_image("b.jpg"), _image("B.jpg"), _image("a.jpg")]
        spec = SortSpec("dateTaken", SortDirection.DESC, None)

        assert _names(sort_records(records, spec)) == ["B.jpg", "a.jpg", "b.jpg"]

    def test_tie_break_ignores_direction(self):
        records = [_image("b.jpg", iso=100), _image("a.jpg", iso=100)]
        spec = SortSpec("exif.iso", SortDirection.DESC, None)

        assert _names(sort_records(records, spec)) == ["a.jpg", "b.jpg"]

    def test_raw_values_sort_numerically(self):
        records = [
            _image("ten.jpg", raw={"Rating": "10"}),
            _image("two.jpg", raw={"Rating": "2"}),
            _image("none.jpg"),
        ]
        spec = SortSpec("exif.raw.Rating", SortDirection.ASC, None)

        assert _names(sort_records(records, spec)) == ["two.jpg", "ten.jpg", "none.jpg"]

    def test_mixed_raw_kinds_do_not_raise(self):
        records = [
            _image("text.jpg", raw={"Rating": "great"}),
            _image("num.jpg", raw={"Rating": "3"}),
        ]
        spec = SortSpec("exif.raw.Rating", SortDirection.ASC, None)

        assert _names(sort_records(records, spec)) == ["num.jpg", "text.jpg"]

    def test_empty_input(self):
        assert sort_records([], SortSpec("dateTaken", SortDirection.DESC)) == []


class TestGalleryOrdering:
    def test_natural_order(self):
        names = ["item10", "item2", "item1", "item20"]

        assert sort_gallery_names(names) == ["item1", "item2", "item10", "item20"]

    def test_numeric_prefixes(self):
        names = ["10 Portraits", "01 Events", "2 Wedding"]

        assert sort_gallery_names(names) == ["01 Events", "2 Wedding", "10 Portraits"]

    def test_descending(self):
        assert sort_gallery_names(["a1", "a10", "a2"], SortDirection.DESC) == [
            "a10",
            "a2",
            "a1",
        ]

    def test_natural_key_ignores_case_first(self):
        assert natural_key("apple") < natural_key("Banana")

    @pytest.mark.parametrize(
        "folder, expected",
        [
            ("01 Events", "Events"),
            ("99 Test", "Test"),
            ("1 Foo", "Foo"),
            ("2024 Summer", "2024 Summer"),
            ("Events", "Events"),
        ],
    )
    def test_extract_display_name(self, folder, expected):
        assert extract_display_name(folder) == expected

    def test_extract_display_name_rejects_blank(self):
        with pytest.raises(ValueError):
            extract_display_name("  ")

from datetime import datetime

import pytest

from snap_organizer.metadata.extract import MetadataExtractor
from snap_organizer.metadata.resolve import find_capture_tag, parse_exif_datetime, resolve_capture_time
from snap_organizer.models import MetadataEntry, ValueKind


def entry(name, value, kind=ValueKind.TEXT):
    return MetadataEntry(
        ifd_path="IFD", fq_ifd_path="IFD", ifd_index=0, tag_id=0, tag_name=name,
        tag_type_id=2, tag_type_name="ASCII", unit_count=20, kind=kind,
        value=value, value_string="" if value is None else str(value),
    )


def mapping(**values):
    return {name: entry(name, value) for name, value in values.items()}


def test_parse_exif_datetime():
    assert parse_exif_datetime("2023:05:14 09:30:00") == datetime(2023, 5, 14, 9, 30, 0)
    assert parse_exif_datetime(" 2023:05:14 09:30:00\n") == datetime(2023, 5, 14, 9, 30, 0)
    assert parse_exif_datetime("2023-05-14 09:30:00") is None
    assert parse_exif_datetime("0000:00:00 00:00:00") is None
    assert parse_exif_datetime("") is None


@pytest.mark.parametrize(
    "values,expected",
    [
        (
            dict(DateTimeOriginal="2023:05:14 09:30:00", DateTime="2024:01:01 00:00:00",
                 DateTimeDigitized="2022:02:02 02:02:02"),
            datetime(2023, 5, 14, 9, 30, 0),
        ),
        (
            dict(DateTime="2024:01:01 00:00:00", DateTimeDigitized="2022:02:02 02:02:02"),
            datetime(2024, 1, 1, 0, 0, 0),
        ),
        (
            dict(DateTimeDigitized="2022:02:02 02:02:02"),
            datetime(2022, 2, 2, 2, 2, 2),
        ),
        # A malformed higher-priority candidate falls through to the next one
        (
            dict(DateTimeOriginal="    :  :     :  :  ", DateTime="2024:01:01 00:00:00"),
            datetime(2024, 1, 1, 0, 0, 0),
        ),
    ],
)
def test_candidate_priority(values, expected, fallback_time):
    assert resolve_capture_time(mapping(**values), fallback_time) == expected


def test_fallback_when_nothing_usable(fallback_time):
    assert resolve_capture_time({}, fallback_time) is fallback_time
    assert resolve_capture_time(mapping(Make="Canon"), fallback_time) is fallback_time
    assert resolve_capture_time(mapping(DateTimeOriginal="garbage", DateTime="also garbage"),
                                fallback_time) is fallback_time


def test_opaque_candidate_is_ignored(fallback_time):
    metadata = {"DateTimeOriginal": entry("DateTimeOriginal", None, kind=ValueKind.OPAQUE)}
    assert resolve_capture_time(metadata, fallback_time) is fallback_time


def test_find_capture_tag_names_the_winner():
    found = find_capture_tag(mapping(DateTime="2024:01:01 00:00:00", DateTimeDigitized="2022:02:02 02:02:02"))
    assert found == ("DateTime", datetime(2024, 1, 1, 0, 0, 0))
    assert find_capture_tag({}) is None


def test_original_beats_datetime_through_extractor(jpeg_with_exif, fallback_time):
    data = jpeg_with_exif(
        date_time_original="2023:05:14 09:30:00",
        date_time="2024:06:01 10:00:00",
        date_time_digitized="2022:01:01 00:00:00",
    )
    exif = MetadataExtractor().extract(data)
    assert resolve_capture_time(exif, fallback_time) == datetime(2023, 5, 14, 9, 30, 0)

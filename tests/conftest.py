import os
import struct
from datetime import datetime

import pytest

from snap_organizer.config import Settings

ASCII = 2
SHORT = 3
LONG = 4
UNDEFINED = 7

EXIF_POINTER = 0x8769


def _pack_ifd(entries, offset):
    """Big-endian IFD at `offset`, followed by its out-of-line values."""
    entries = sorted(entries, key=lambda e: e[0])
    data_start = offset + 2 + 12 * len(entries) + 4
    head = struct.pack(">H", len(entries))
    data = b""
    for tag, typ, value in entries:
        if typ == ASCII:
            raw = value.encode("ascii") + b"\x00"
        elif typ == SHORT:
            raw = struct.pack(">H", value)
        elif typ == LONG:
            raw = struct.pack(">L", value)
        else:
            raw = bytes(value)
        count = len(raw) if typ in (ASCII, UNDEFINED) else 1

        if len(raw) <= 4:
            field = raw.ljust(4, b"\x00")
        else:
            field = struct.pack(">L", data_start + len(data))
            data += raw
            if len(data) % 2:
                data += b"\x00"
        head += struct.pack(">HHL", tag, typ, count) + field
    head += struct.pack(">L", 0)
    return head + data


def build_tiff(ifd0, exif=None):
    header = b"MM\x00\x2a" + struct.pack(">L", 8)
    if exif is None:
        return header + _pack_ifd(ifd0, 8)
    # Pointer value does not change the IFD0 size, so probe once for the offset
    exif_offset = 8 + len(_pack_ifd(ifd0 + [(EXIF_POINTER, LONG, 0)], 8))
    return (
        header
        + _pack_ifd(ifd0 + [(EXIF_POINTER, LONG, exif_offset)], 8)
        + _pack_ifd(exif, exif_offset)
    )


def wrap_jpeg(tiff):
    app1 = b"Exif\x00\x00" + tiff
    return b"\xff\xd8\xff\xe1" + struct.pack(">H", len(app1) + 2) + app1 + b"\xff\xd9"


@pytest.fixture
def tiff_bytes():
    """Factory: tiff_bytes(ifd0_entries, exif_entries=None) -> bytes."""
    return build_tiff


@pytest.fixture
def jpeg_with_exif():
    """Factory: minimal JPEG whose APP1 carries the given EXIF dates."""
    def make(date_time_original=None, date_time=None, date_time_digitized=None):
        ifd0 = [(0x0112, SHORT, 1)]
        if date_time:
            ifd0.append((0x0132, ASCII, date_time))
        exif = []
        if date_time_original:
            exif.append((0x9003, ASCII, date_time_original))
        if date_time_digitized:
            exif.append((0x9004, ASCII, date_time_digitized))
        return wrap_jpeg(build_tiff(ifd0, exif or None))
    return make


@pytest.fixture
def make_file(tmp_path):
    """Factory: make_file(rel, data=b'', mtime=None) -> Path under tmp_path/src."""
    src = tmp_path / "src"

    def make(rel, data=b"", mtime=None):
        p = src / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(p, (ts, ts))
        return p
    return make


@pytest.fixture
def settings(tmp_path):
    src = tmp_path / "src"
    src.mkdir(exist_ok=True)
    return Settings.from_paths(src, tmp_path / "dest")


@pytest.fixture
def fallback_time():
    return datetime(2021, 7, 4, 12, 0, 0)

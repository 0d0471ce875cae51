import io
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import exifread

from .. import config
from ..exceptions import MetadataExtractionError
from ..models import MetadataEntry, ValueKind
from .directories import DirectoryNode, DirectoryTree

# TIFF field types: id -> (unit size in bytes, name)
FIELD_TYPES = {
    1: (1, 'BYTE'),
    2: (1, 'ASCII'),
    3: (2, 'SHORT'),
    4: (4, 'LONG'),
    5: (8, 'RATIONAL'),
    6: (1, 'SBYTE'),
    7: (1, 'UNDEFINED'),
    8: (2, 'SSHORT'),
    9: (4, 'SLONG'),
    10: (8, 'SRATIONAL'),
    11: (4, 'FLOAT'),
    12: (8, 'DOUBLE'),
    13: (4, 'IFD'),
}
TYPE_ASCII = 2
TYPE_UNDEFINED = 7

# exifread names tags it has no registry entry for "Tag 0x...."
UNREGISTERED_PREFIX = 'Tag 0x'


def find_container(data: bytes) -> int:
    """
    Returns the offset of the first EXIF container signature, or -1.
    """
    if len(data) < config.MIN_CONTAINER_SIZE:
        return -1
    hits = [pos for pos in (data.find(sig) for sig in config.CONTAINER_SIGNATURES) if pos >= 0]
    return min(hits) if hits else -1


# --- UNDEFINED-type decoders ---

def _raw_bytes(values: Any) -> bytes:
    if isinstance(values, bytes):
        return values
    if isinstance(values, str):
        return values.encode('latin-1')
    return bytes(values)


def _decode_version(tag) -> str:
    # Stored as four ASCII digits, e.g. b"0232"
    return _raw_bytes(tag.values).decode('ascii').rstrip('\x00')


def _decode_first_byte(tag) -> int:
    raw = _raw_bytes(tag.values)
    if not raw:
        raise MetadataExtractionError("empty value")
    return raw[0]


def _decode_user_comment(tag) -> str:
    # First 8 bytes name the character code (ASCII, UNICODE, JIS or undefined)
    raw = _raw_bytes(tag.values)
    return raw[8:].decode('utf-8', errors='replace').rstrip('\x00 ')


def _decode_printable(tag) -> str:
    return str(tag.printable)


UNDEFINED_DECODERS: Dict[str, Callable[[Any], Any]] = {
    'ExifVersion': _decode_version,
    'FlashPixVersion': _decode_version,
    'FlashpixVersion': _decode_version,
    'InteroperabilityVersion': _decode_version,
    'ComponentsConfiguration': _decode_printable,
    'SceneType': _decode_first_byte,
    'FileSource': _decode_first_byte,
    'UserComment': _decode_user_comment,
}


class MetadataExtractor:
    """
    Parses the embedded EXIF block of an image into {tag name: MetadataEntry}.

    Parsing is delegated to 'exifread'; this class rebuilds the directory
    structure, drops unregistered tags and decodes each value. A tag that
    fails to decode is logged and skipped without affecting the others.
    """

    def extract_file(self, path: Path) -> Dict[str, MetadataEntry]:
        try:
            data = path.read_bytes()
        except OSError as e:
            logging.warning(f"Could not read {path}: {e}")
            return {}
        return self.extract(data, label=str(path))

    def extract(self, data: bytes, label: str = "<bytes>") -> Dict[str, MetadataEntry]:
        # No container at all is the normal case for many files, not an error
        if find_container(data) < 0:
            return {}

        try:
            tags = exifread.process_file(io.BytesIO(data), details=False, extract_thumbnail=False)
        except Exception as e:
            logging.warning(f"ExifRead failed for {label}: {e}")
            return {}

        if not tags:
            return {}

        tree = DirectoryTree.from_tags(tags)
        exif_data: Dict[str, MetadataEntry] = {}

        for node, tag_name, tag in tree.walk():
            if tag_name.startswith(UNREGISTERED_PREFIX):
                continue

            try:
                entry = self._build_entry(node, tag_name, tag)
            except Exception as e:
                logging.warning(f"Skipping tag [{node.fq_ifd_path}] {tag_name} in {label}: {e}")
                continue

            # Last occurrence wins when a name repeats across directories
            exif_data[tag_name] = entry

        return exif_data

    def _build_entry(self, node: DirectoryNode, tag_name: str, tag) -> MetadataEntry:
        type_id = int(tag.field_type)
        if type_id not in FIELD_TYPES:
            raise MetadataExtractionError(f"unknown field type {type_id}")
        unit_size, type_name = FIELD_TYPES[type_id]

        if type_id == TYPE_UNDEFINED:
            decoder = UNDEFINED_DECODERS.get(tag_name)
            # No decoder means the tag is opaque by nature; record it as None
            value = decoder(tag) if decoder else None
            value_string = "" if value is None else str(value)
            kind = ValueKind.OPAQUE
        else:
            value_string = self._format_first(tag.values)
            value = value_string
            kind = ValueKind.TEXT if type_id == TYPE_ASCII else ValueKind.NUMERIC

        return MetadataEntry(
            ifd_path=node.ifd_path,
            fq_ifd_path=node.fq_ifd_path,
            ifd_index=node.ifd_index,
            tag_id=int(tag.tag),
            tag_name=tag_name,
            tag_type_id=type_id,
            tag_type_name=type_name,
            unit_count=self._unit_count(tag, unit_size),
            kind=kind,
            value=value,
            value_string=value_string,
        )

    def _format_first(self, values: Any) -> str:
        """ASCII values come back as one string; everything else as a list."""
        if isinstance(values, str):
            return values
        if isinstance(values, bytes):
            return values.decode('utf-8', errors='replace')
        if isinstance(values, (list, tuple)):
            if not values:
                raise MetadataExtractionError("tag has no values")
            return str(values[0])
        return str(values)

    def _unit_count(self, tag, unit_size: int) -> int:
        field_length: Optional[int] = getattr(tag, 'field_length', None)
        if field_length is not None:
            return int(field_length) // unit_size
        values = tag.values
        return len(values) if hasattr(values, '__len__') else 1

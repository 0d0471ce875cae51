from datetime import datetime
from typing import Mapping, Optional, Tuple

from .. import config
from ..models import MetadataEntry


def parse_exif_datetime(text: str) -> Optional[datetime]:
    """Parses 'YYYY:MM:DD HH:MM:SS'. Returns None for anything else."""
    try:
        return datetime.strptime(text.strip(), config.EXIF_DATE_FORMAT)
    except ValueError:
        return None


def find_capture_tag(metadata: Mapping[str, MetadataEntry]) -> Optional[Tuple[str, datetime]]:
    """
    Returns (tag name, timestamp) for the first usable candidate in
    config.DATE_TAGS, or None if none of them is present and parseable.

    A candidate that is present but malformed does not stop the search.
    """
    for tag in config.DATE_TAGS:
        entry = metadata.get(tag)
        if entry is None or not isinstance(entry.value, str):
            continue
        dt = parse_exif_datetime(entry.value)
        if dt is not None:
            return tag, dt
    return None


def resolve_capture_time(metadata: Mapping[str, MetadataEntry], fallback: datetime) -> datetime:
    found = find_capture_tag(metadata)
    return found[1] if found else fallback

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Union


class ValueKind(Enum):
    TEXT = "text"          # ASCII
    NUMERIC = "numeric"    # byte/short/long/rational/float families
    OPAQUE = "opaque"      # UNDEFINED, decoded per tag or left as None


@dataclass(frozen=True)
class MetadataEntry:
    """
    One parsed EXIF tag.
    """
    ifd_path: str           # e.g. IFD/Exif (no occurrence indices)
    fq_ifd_path: str        # e.g. IFD1
    ifd_index: int
    tag_id: int
    tag_name: str
    tag_type_id: int
    tag_type_name: str
    unit_count: int
    kind: ValueKind
    value: Any
    value_string: str


@dataclass(frozen=True)
class FileRecord:
    """
    Represents a file found during a walk.
    """
    name: str
    extension: str          # lowercased, no dot
    size: int
    rel_path: Path
    modified: datetime
    captured: datetime

    # Only populated for EXIF-bearing image types
    metadata: Mapping[str, MetadataEntry] = field(default_factory=dict)
    capture_tag: Optional[str] = None   # None when captured fell back to modified


# --- Classification Outcomes ---

@dataclass(frozen=True)
class Media:
    bucket: str             # YYYY-MM


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class Unrecognized:
    pass


Outcome = Union[Media, Skip, Unrecognized]


@dataclass(frozen=True)
class Destination:
    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename


@dataclass(frozen=True)
class PlannedCopy:
    record: FileRecord
    source: Path
    outcome: Outcome
    destination: Destination

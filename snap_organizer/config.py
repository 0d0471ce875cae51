"""
Configuration constants for the snap organizer.
"""
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

# --- File Type Definitions ---
# Extensions are stored lowercased and without the leading dot
EXIF_EXTS = {'jpg', 'jpeg', 'heic', 'png'}
MEDIA_EXTS = {'jpg', 'jpeg', 'heic', 'mov', 'mp4', 'png', 'gif'}
SIDECAR_EXTS = {'aae'}

# --- Metadata Parsing ---
# Priority: Original -> Modified -> Digitized
DATE_TAGS = [
    'DateTimeOriginal',
    'DateTime',
    'DateTimeDigitized',
]
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Smallest buffer that can hold a TIFF header (byte order + magic + IFD offset)
MIN_CONTAINER_SIZE = 8
CONTAINER_SIGNATURES = (b'Exif\x00\x00', b'II*\x00', b'MM\x00*')

# --- Organization ---
OUTPUT_DIR_NAME = "output"
ERROR_DIR_NAME = "error"
LOG_FILE_NAME = "organizer.log"
BUCKET_FORMAT = "%Y-%m"
SNAP_TIME_FORMAT = "%Y-%m-%d-%H-%M-%S"
SNAP_PREFIX = "snap"

# --- Defaults (relative to the user's home directory) ---
DEFAULT_INPUT_DIR = "Pictures"
DEFAULT_OUTPUT_DIR = "Desktop/organizer"


@dataclass(frozen=True)
class Settings:
    """
    Source and destination roots for one run.

    Built once before the walk and never mutated afterwards.
    """
    src_root: Path
    dest_root: Path

    @property
    def output_root(self) -> Path:
        return self.dest_root / OUTPUT_DIR_NAME

    @property
    def error_root(self) -> Path:
        return self.dest_root / ERROR_DIR_NAME

    @property
    def log_file(self) -> Path:
        return self.dest_root / LOG_FILE_NAME

    @classmethod
    def default(cls, home: Optional[Path] = None) -> "Settings":
        home = home if home is not None else Path.home()
        return cls(src_root=home / DEFAULT_INPUT_DIR, dest_root=home / DEFAULT_OUTPUT_DIR)

    @classmethod
    def from_paths(cls, src: Path, dest: Path) -> "Settings":
        return cls(src_root=Path(src), dest_root=Path(dest))

import os
import logging
from pathlib import Path
from typing import Iterator, List
from datetime import datetime

from .. import config
from ..exceptions import WalkError
from ..models import FileRecord
from ..metadata.extract import MetadataExtractor
from ..metadata.resolve import find_capture_tag


def file_extension(name: str) -> str:
    """Lowercased text after the final '.', or '' when there is none."""
    _, dot, ext = name.rpartition('.')
    return ext.lower() if dot else ''


class DiskScanner:
    def __init__(self):
        self.metadata = MetadataExtractor()

    def walk(self, root: Path) -> List[FileRecord]:
        """
        Builds one FileRecord per regular file under root, sorted by relative path.

        Any traversal error aborts the whole walk with WalkError: a partially
        enumerated tree is never handed on for processing.
        """
        root = Path(root)
        if not root.is_dir():
            raise WalkError(f"Source path {root} does not exist or is not a directory.")

        records = [self._process_single_file(root, path) for path in self._iter_files(root)]
        records.sort(key=lambda r: str(r.rel_path))

        logging.info(f"Walk complete. Found {len(records)} files under {root}.")
        return records

    def _process_single_file(self, root: Path, path: Path) -> FileRecord:
        try:
            stat_result = path.stat()
        except OSError as e:
            raise WalkError(f"Cannot stat {path}: {e}") from e

        modified = datetime.fromtimestamp(stat_result.st_mtime)
        ext = file_extension(path.name)

        exif_data = {}
        captured = modified
        capture_tag = None

        if ext in config.EXIF_EXTS:
            exif_data = self.metadata.extract_file(path)
            found = find_capture_tag(exif_data)
            if found:
                capture_tag, captured = found
                logging.debug(f"{path.name}: captured {captured} ({capture_tag})")

        return FileRecord(
            name=path.name,
            extension=ext,
            size=stat_result.st_size,
            rel_path=path.relative_to(root),
            modified=modified,
            captured=captured,
            metadata=exif_data,
            capture_tag=capture_tag,
        )

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [root]
        while stack:
            current = stack.pop()

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                raise WalkError(f"Cannot list {current}: {e}") from e

            dirs = []
            files = []
            for e in entries:
                try:
                    if e.is_dir(follow_symlinks=False):
                        dirs.append(Path(e.path))
                    elif e.is_file(follow_symlinks=False):
                        files.append(Path(e.path))
                    else:
                        logging.debug(f"Skipping non-regular file {e.path}")
                except OSError as err:
                    raise WalkError(f"Cannot inspect {e.path}: {err}") from err

            # Order here is cosmetic; walk() sorts the final records
            stack.extend(sorted(dirs, reverse=True))
            yield from sorted(files)

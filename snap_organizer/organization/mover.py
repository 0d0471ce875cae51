import shutil
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from tqdm import tqdm

from .. import config
from ..exceptions import FileOperationError, LayoutError
from ..models import PlannedCopy


def ensure_layout(settings: config.Settings):
    """Creates output/ and error/ under the destination root. Safe to repeat."""
    for directory in (settings.output_root, settings.error_root):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LayoutError(f"Error creating directory '{directory}': {e}") from e


def copy_file(src: Path, dst: Path):
    """Byte-for-byte copy; creates or overwrites dst."""
    try:
        src_file = open(src, 'rb')
    except OSError as e:
        raise FileOperationError(f"unable to open source file: {e}") from e

    with src_file:
        try:
            dst_file = open(dst, 'wb')
        except OSError as e:
            raise FileOperationError(f"unable to create destination file: {e}") from e

        with dst_file:
            try:
                shutil.copyfileobj(src_file, dst_file)
            except OSError as e:
                raise FileOperationError(f"error during file copy: {e}") from e


@dataclass
class CopyResult:
    copied: int = 0
    failed: int = 0


class FileCopier:
    def execute(self, plan: List[PlannedCopy], dry_run: bool = False) -> CopyResult:
        """
        Applies the plan one file at a time. Per-file failures are logged and
        the remaining files are still processed.
        """
        result = CopyResult()

        if not plan:
            logging.info("No files need copying.")
            return result

        logging.info(f"Processing {len(plan)} files (DryRun={dry_run})...")

        for item in tqdm(plan, desc="Organizing"):
            src = item.source
            dest = item.destination.path

            if dry_run:
                logging.info(f"[DRY RUN] Copy {src} -> {dest}")
                continue

            try:
                item.destination.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logging.error(f"Error creating directory '{item.destination.directory}': {e}")
                result.failed += 1
                continue

            try:
                copy_file(src, dest)
            except FileOperationError as e:
                logging.error(f"Error copying file '{src}' to '{dest}': {e}")
                result.failed += 1
                continue

            result.copied += 1

        return result

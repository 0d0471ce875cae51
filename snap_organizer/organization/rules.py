from typing import List, Optional, Tuple

from .. import config
from ..models import (
    Destination,
    FileRecord,
    Media,
    Outcome,
    PlannedCopy,
    Skip,
    Unrecognized,
)


def classify(record: FileRecord) -> Outcome:
    """Decided by extension alone; file content is never inspected."""
    ext = record.extension.lower()
    if ext in config.MEDIA_EXTS:
        return Media(record.captured.strftime(config.BUCKET_FORMAT))
    if ext in config.SIDECAR_EXTS:
        return Skip()
    return Unrecognized()


def normalize_name(name: str) -> str:
    return name.lower().replace('_', '')


class DestinationPlanner:
    def __init__(self, settings: config.Settings):
        self.settings = settings

    def build_destination(self, record: FileRecord, outcome: Outcome) -> Optional[Destination]:
        """
        Media:        output/<YYYY-MM>/snap-<YYYY-MM-DD-HH-MM-SS>-<normalized name>
        Unrecognized: error/<original name>
        Skip:         None

        Pure function of the record: no counters or collision suffixes, so the
        same input tree always produces the same names.
        """
        if isinstance(outcome, Media):
            stamp = record.captured.strftime(config.SNAP_TIME_FORMAT)
            return Destination(
                directory=self.settings.output_root / outcome.bucket,
                filename=f"{config.SNAP_PREFIX}-{stamp}-{normalize_name(record.name)}",
            )
        if isinstance(outcome, Unrecognized):
            # Original name kept verbatim so the file is easy to trace back
            return Destination(directory=self.settings.error_root, filename=record.name)
        return None

    def plan_all(self, records: List[FileRecord]) -> Tuple[List[PlannedCopy], List[FileRecord]]:
        """
        Returns (planned copies, skipped records), both in input order.
        """
        plan: List[PlannedCopy] = []
        skipped: List[FileRecord] = []

        for record in records:
            outcome = classify(record)
            dest = self.build_destination(record, outcome)
            if dest is None:
                skipped.append(record)
                continue
            plan.append(PlannedCopy(
                record=record,
                source=self.settings.src_root / record.rel_path,
                outcome=outcome,
                destination=dest,
            ))

        return plan, skipped

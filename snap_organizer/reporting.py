import csv
import logging
from pathlib import Path
from typing import List

from .models import FileRecord, Media, PlannedCopy

HEADERS = [
    "Source Path",
    "Outcome",
    "Destination Path",
    "Captured",
    "Time Source",
]


class ReportGenerator:
    def __init__(self, src_root: Path):
        self.src_root = Path(src_root)

    def generate_plan_report(self, plan: List[PlannedCopy], skipped: List[FileRecord], output_csv: Path):
        """
        Writes one CSV row per discovered file, in processing order, showing
        where it goes (or that it was skipped) and where its timestamp came from.
        """
        rows = [(item.record, self._outcome_label(item), str(item.destination.path)) for item in plan]
        rows += [(record, "skip", "") for record in skipped]
        rows.sort(key=lambda row: str(row[0].rel_path))

        logging.info(f"Writing plan report for {len(rows)} files -> {output_csv}")

        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADERS)
            for record, outcome, dest in rows:
                writer.writerow([
                    str(self.src_root / record.rel_path),
                    outcome,
                    dest,
                    record.captured.isoformat(sep=" "),
                    record.capture_tag or "modified",
                ])

    def _outcome_label(self, item: PlannedCopy) -> str:
        if isinstance(item.outcome, Media):
            return f"media:{item.outcome.bucket}"
        return "unrecognized"

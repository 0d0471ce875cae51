import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import config
from .organization.mover import FileCopier, ensure_layout
from .organization.rules import DestinationPlanner
from .reporting import ReportGenerator
from .scanning.filesystem import DiskScanner


@dataclass
class OrganizeSummary:
    discovered: int = 0
    copied: int = 0
    skipped: int = 0
    failed: int = 0


class OrganizerApp:
    def __init__(self, settings: config.Settings):
        self.settings = settings

    def organize(self, dry_run: bool = False, report_csv: Optional[Path] = None) -> OrganizeSummary:
        """
        Runs the pipeline:
        1. Layout (output/ and error/)
        2. Walk (records sorted by relative path)
        3. Plan (classify + destination)
        4. Execute (copy)

        LayoutError and WalkError propagate; per-file copy failures do not.
        """
        # Idempotent; main() may already have created it for the log file
        ensure_layout(self.settings)

        # --- Step 1: Walk ---
        logging.info(f"Scanning {self.settings.src_root}...")
        records = DiskScanner().walk(self.settings.src_root)

        # --- Step 2: Planning ---
        planner = DestinationPlanner(self.settings)
        plan, skipped = planner.plan_all(records)
        for record in skipped:
            logging.debug(f"Skipping sidecar {record.rel_path}")

        if report_csv is not None:
            ReportGenerator(self.settings.src_root).generate_plan_report(plan, skipped, report_csv)

        # --- Step 3: Execution ---
        result = FileCopier().execute(plan, dry_run=dry_run)

        summary = OrganizeSummary(
            discovered=len(records),
            copied=result.copied,
            skipped=len(skipped),
            failed=result.failed,
        )
        logging.info(
            f"Organization complete. Discovered={summary.discovered} Copied={summary.copied} "
            f"Skipped={summary.skipped} Failed={summary.failed}"
        )
        return summary

import argparse
import logging
import sys
from pathlib import Path

from .config import Settings
from .core import OrganizerApp
from .exceptions import LayoutError, WalkError
from .organization.mover import ensure_layout

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(verbose: bool):
    """Console logging. The file handler is attached once the destination exists."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def attach_log_file(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Snap Organizer: copy media into output/YYYY-MM by capture time"
    )

    p.add_argument("paths", nargs="*", type=Path, metavar="SRC DEST",
                   help="Source directory and destination root (default: ~/Pictures ~/Desktop/organizer)")

    p.add_argument("--dry-run", action="store_true", help="Plan and log copies without touching disk")
    p.add_argument("--report", type=Path, default=None, help="Write a CSV of the copy plan to this path")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args(argv)
    if len(args.paths) not in (0, 2):
        p.error("expected either no positional arguments or exactly two (SRC DEST)")
    return args


def build_settings(args) -> Settings:
    if args.paths:
        src, dest = args.paths
        return Settings.from_paths(src, dest)
    return Settings.default()


def main(argv=None):
    args = parse_args(argv)
    settings = build_settings(args)

    setup_logging(args.verbose)

    logging.info("=== Snap Organizer Started ===")
    logging.info(f"Source: {settings.src_root}")
    logging.info(f"Dest:   {settings.dest_root}")

    try:
        ensure_layout(settings)
    except LayoutError as e:
        logging.error(f"Fatal: {e}")
        sys.exit(1)

    file_handler = attach_log_file(settings.log_file)
    app = OrganizerApp(settings)

    try:
        app.organize(dry_run=args.dry_run, report_csv=args.report)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except (LayoutError, WalkError) as e:
        logging.error(f"Fatal: {e}")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during organization.")
        sys.exit(1)
    finally:
        logging.getLogger().removeHandler(file_handler)
        file_handler.close()


if __name__ == "__main__":
    main()

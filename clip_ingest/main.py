import argparse
import logging
import sys
from pathlib import Path

from .config import IngestConfig, default_mediainfo_path, DEFAULT_TOUCH_PATH, LOG_NAME
from .core import ClipImportApp

def setup_logging(dest_root: Path, verbose: bool):
    """Sets up logging to both console and a file in the destination."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Create dest root if it doesn't exist so we can log there
    dest_root.mkdir(parents=True, exist_ok=True)
    log_file = dest_root / LOG_NAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Clip Ingest: import recorder clips into an editing library")

    p.add_argument("src", type=Path, help="Mounted memory card (contains VIDEO/HVR)")
    p.add_argument("dest", type=Path, help="Destination library root")

    p.add_argument("--auto", action="store_true", help="Unattended: import every NEW clip without prompting")
    p.add_argument("--dry-run", action="store_true", help="Simulate actions without modifying disk")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    p.add_argument("--mediainfo", type=Path, default=None, help="Path to the mediainfo executable")
    p.add_argument("--touch", type=Path, default=Path(DEFAULT_TOUCH_PATH), help="Path to the touch executable")
    p.add_argument("--tool-timeout", type=float, default=None, help="Seconds to wait for each external tool call")

    return p.parse_args(argv)

def build_config(args) -> IngestConfig:
    return IngestConfig(
        mediainfo_path=args.mediainfo if args.mediainfo else default_mediainfo_path(),
        touch_path=args.touch,
        tool_timeout=args.tool_timeout,
    )

def main(argv=None):
    args = parse_args(argv)

    # 1. Setup
    dest_root = args.dest.resolve()
    src_root = args.src.resolve()

    setup_logging(dest_root, args.verbose)

    logging.info("=== Clip Ingest Started ===")
    logging.info(f"Source: {src_root}")
    logging.info(f"Dest:   {dest_root}")

    # 2. Config
    cfg = build_config(args)
    if not cfg.has_probe:
        logging.warning(f"mediainfo not found at {cfg.mediainfo_path} - metadata extraction will be limited")

    # 3. Execution
    app = ClipImportApp(cfg)

    try:
        result = app.run(
            source_root=src_root,
            dest_root=dest_root,
            interactive=not args.auto,
            dry_run=args.dry_run,
        )
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during import.")
        sys.exit(1)

    if result.failed:
        logging.warning(f"{result.failed} clip(s) failed to import.")
    logging.info("Import phase complete.")

if __name__ == "__main__":
    main()

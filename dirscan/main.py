import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from . import config
from .core import DirScanApp
from .exceptions import DirScanError
from .scanning.filesystem import ErrorPolicy

def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Logs to stderr (stdout carries only the success line) and optionally a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n

def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="dirscan",
        description="Recursively record file metadata into a SQLite store.",
    )

    p.add_argument("src", type=Path, help="Directory to scan")
    p.add_argument("db", type=Path, help="SQLite store file (created if missing)")

    p.add_argument("--profile", choices=sorted(config.PROFILES), default="fast",
                   help="Store profile: 'fast' (no fsync, in-memory journal; may corrupt on crash) or 'safe'")
    p.add_argument("--durability", choices=config.DURABILITY_MODES, default=None,
                   help="Override the profile's durability")
    p.add_argument("--journal", choices=config.JOURNAL_MODES, default=None,
                   help="Override the profile's journal location")
    p.add_argument("--cache-pages", type=int, default=None,
                   help=f"Page cache upper bound (default: {config.DEFAULT_CACHE_PAGES})")

    p.add_argument("--on-error", choices=[policy.value for policy in ErrorPolicy], default=ErrorPolicy.ABORT.value,
                   help="What to do with unreadable paths (default: abort and roll back)")
    p.add_argument("--batch-size", type=positive_int, default=None,
                   help="Commit every N records (default: one transaction for the whole scan)")

    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    return p.parse_args(argv)

def build_store_config(args) -> config.StoreConfig:
    store_config = config.PROFILES[args.profile]
    overrides = {}
    if args.durability:
        overrides['durability'] = args.durability
    if args.journal:
        overrides['journal'] = args.journal
    if args.cache_pages is not None:
        overrides['cache_pages'] = args.cache_pages
    return replace(store_config, **overrides).validate()

def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        app = DirScanApp(args.db, build_store_config(args))
        app.scan(
            args.src,
            error_policy=ErrorPolicy(args.on_error),
            batch_size=args.batch_size,
        )
    except DirScanError as e:
        logging.error(f"Error scanning directory: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logging.warning("Scan cancelled by user.")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during scan.")
        sys.exit(1)

    print(config.SUCCESS_MESSAGE)

if __name__ == "__main__":
    main()

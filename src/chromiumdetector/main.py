import argparse
import logging
import sys
from colorama import init

from .config import BACKENDS, ConfigError, load_config
from .detector import ChromiumDetector
from .inspector.binary import BinaryInspector, make_lister
from .reporter import SORT_KEYS, Reporter, records_to_json, sort_records
from .scanner.applications import ApplicationScanner

init(autoreset=True)

logger = logging.getLogger("chromiumdetector")


def setup_logging(level: str):
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr
    )


def build_scanner(config) -> ApplicationScanner:
    lister = make_lister(config.inspector)
    inspector = BinaryInspector(lister, config.detection, max_concurrent=config.inspector.max_concurrent)
    detector = ChromiumDetector(config.detection, inspector)
    return ApplicationScanner(detector, max_workers=config.max_workers, size_max_depth=config.size_max_depth)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="chromium-detector",
        description="chromium-detector: find Chromium-based applications on macOS",
    )
    parser.add_argument("directories", nargs="*", help="Directories to scan (default: config search_dirs)")
    parser.add_argument("--config", "-c", default=None, help="Path to config.yml")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--output", "-o", help="Also write JSON results to this file")
    parser.add_argument("--sort", choices=["none"] + sorted(SORT_KEYS), default="none", help="Sort results")
    parser.add_argument("--workers", type=int, help="Bundles classified in parallel")
    parser.add_argument("--backend", choices=BACKENDS, help="Dependency lister backend")
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
        if args.workers is not None:
            config.max_workers = max(1, args.workers)
        if args.backend:
            config.inspector.backend = args.backend
        setup_logging("DEBUG" if args.verbose else config.logging.get("level", "WARNING"))
        scanner = build_scanner(config)
    except ConfigError as e:
        print(f"chromium-detector: {e}", file=sys.stderr)
        return 2

    directories = args.directories or config.search_dirs
    logger.info("Scanning %s", ", ".join(directories) or "(no directories)")
    result = scanner.run(directories)
    records = sort_records(result.records, args.sort)

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(records_to_json(result, records))
            logger.info("Exported %d records to %s", len(records), args.output)
        except OSError as e:
            logger.error("Failed to write %s: %s", args.output, e)

    if args.json:
        print(records_to_json(result, records))
    else:
        Reporter(quiet=args.quiet).report(result, records)
    return 0


if __name__ == "__main__":
    sys.exit(main())

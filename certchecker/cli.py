from __future__ import annotations
import argparse
import os
import sys
from typing import List, Optional

from certchecker import __version__
from certchecker.core.models import AppConfig
from certchecker.export.csv_writer import write_records
from certchecker.tls.analyzer import CertAnalyzer
from certchecker.utils.errors import ConfigError
from certchecker.utils.log import get_logger, setup_logging
from certchecker.utils.targets import read_hostnames

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(PROJECT_ROOT, "data")
DEFAULT_CONFIG = os.path.join(DATA_DIR, "defaults.yaml")

log = get_logger("certchecker")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tls-cert-checker",
        description="A simple remote TLS certificate information fetcher",
    )
    parser.add_argument("-i", "--input-filename", required=True,
                        help="Input filename. One domain or hostname per line.")
    parser.add_argument("-o", "--output-filename", required=True, help="Output CSV file")
    parser.add_argument("--config", default=DEFAULT_CONFIG,
                        help="YAML config file (default: data/defaults.yaml, skipped if absent)")
    parser.add_argument("--workers", type=int, default=None,
                        help="parallel fetches (default: config max_workers, 1 = sequential)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-dir", default=None, help="also write certchecker.log to this directory")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _merge(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.workers is not None:
        config.max_workers = args.workers
    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.log_dir:
        config.log_dir = args.log_dir
    return config.validate()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _merge(AppConfig.load(args.config), args)
    except ConfigError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_dir, config.log_level)
    log.debug("config: %s", config.to_dict())

    try:
        hostnames = read_hostnames(args.input_filename, min_length=config.min_hostname_length)
    except OSError as e:
        log.error("Error opening input file: %s", e)
        return 1

    analyzer = CertAnalyzer(max_workers=config.max_workers)
    result = analyzer.analyze_hosts(hostnames)
    log.info(
        "%d of %d hostname(s) fetched, %d failed",
        len(result.records), len(hostnames), len(result.errors),
    )

    try:
        write_records(args.output_filename, result.records)
    except OSError as e:
        log.error("error writing data to output file: %s", e)
        return 1

    log.info("hostname certificate data written to output")
    return 0


if __name__ == "__main__":
    sys.exit(main())

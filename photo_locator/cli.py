"""Command-line entry point: scan a directory and geocode photo locations."""
from __future__ import annotations

import argparse
import logging
import sys

from .config import API_KEY_ENV, DEFAULT_DIRECTORY, LOG_LEVELS, Config, api_key_from_env
from .errors import ConfigError
from .geocoder import DEFAULT_TIMEOUT
from .services.pipeline import run_pipeline

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_QUOTA_EXCEEDED = 3
EXIT_INTERRUPTED = 130

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

log = logging.getLogger("photo_locator")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-locator",
        description="Find photos with GPS data and look up the place they were taken",
    )
    parser.add_argument("--key", type=str, default=None,
                        help=f"Google API key (or set {API_KEY_ENV})")
    parser.add_argument("--directory", type=str, default=DEFAULT_DIRECTORY,
                        help="Directory to search")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help="HTTP timeout in seconds for each places request")
    parser.add_argument("--log-level", type=str.upper, default="INFO", choices=LOG_LEVELS,
                        help="Logging verbosity")
    return parser


def build_config(args: argparse.Namespace, environ=None) -> Config:
    return Config(
        api_key=(args.key or "").strip() or api_key_from_env(environ),
        directory=args.directory,
        timeout=args.timeout,
        log_level=args.log_level,
    ).validate()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        config = build_config(args)
    except ConfigError as e:
        log.error("%s", e)
        return EXIT_CONFIG

    try:
        summary = run_pipeline(config, logger=log)
    except FileNotFoundError as e:
        log.error("%s", e)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        log.warning("Interrupted")
        return EXIT_INTERRUPTED

    if summary.halted:
        return EXIT_QUOTA_EXCEEDED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

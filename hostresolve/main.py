"""resolve-hosts command line entry point.

Looks for ``*.hosts`` files in a directory, resolves every host listed in
them and writes the addresses to a file of the same name without the
suffix.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from hostresolve import __version__
from hostresolve.config import settings
from hostresolve.options import parse_options
from hostresolve.pipeline.dns_resolve import Lookup
from hostresolve.pipeline.run_pipeline import StartupError, run_pipeline, validate_root

logger = logging.getLogger("hostresolve")

LOG_FORMAT = "resolve-hosts: %(asctime)s %(levelname)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resolve-hosts",
        description="Resolve the hostnames listed in host files and write their addresses next to them.",
    )
    parser.add_argument(
        "-d", "--dir",
        default=None,
        help=f"The directory to look in for host files to resolve. (default: {settings.RESOLVE_DIR})",
    )
    parser.add_argument("-w", "--workers", type=int, default=None, help=f"Concurrent resolvers (default: {settings.NUM_RESOLVERS})")
    parser.add_argument("--suffix", default=None, help=f"Host file suffix (default: {settings.HOSTS_SUFFIX})")
    parser.add_argument("-r", "--recursive", action="store_true", default=None, help="Also scan subdirectories")
    parser.add_argument(
        "--resolver",
        choices=["dns", "system"],
        default=None,
        help=f"dns: query A/AAAA records directly; system: use the host's resolver (default: {settings.RESOLVER_BACKEND})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every lookup failure")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: list[str] | None = None, *, lookup: Lookup | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        options = parse_options({
            "root": args.dir,
            "workers": args.workers,
            "suffix": args.suffix,
            "recursive": args.recursive,
            "resolver": args.resolver,
        })
        validate_root(options.root)
    except (StartupError, ValidationError) as e:
        logger.error("%s", e)
        parser.print_help(sys.stderr)
        return 1

    try:
        summary = asyncio.run(run_pipeline(options, lookup=lookup))
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 1

    logger.info(
        "Resolved %d/%d hosts from %d files in %.1fs",
        summary["resolved"], summary["requests"], summary["host_files"], summary["elapsed_seconds"],
    )
    for path in summary["files_failed"]:
        logger.warning("Output abandoned: %s", path)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

#!/usr/bin/env python3
"""
CLI entry point for the wloc Wi-Fi locator.

Defines the following commands:
  wloc lookup BSSID[@SIGNAL] [BSSID[@SIGNAL] ...] [--all]
  wloc serve [--host 127.0.0.1] [--port 8000]
  wloc version
"""

import sys
from argparse import ArgumentParser, Namespace
from importlib.metadata import PackageNotFoundError, version as _get_version

import uvicorn
from rich.console import Console

from wloc.utils.log import get_logger
from wloc.errors import WlocError
from wloc.server import create_app
from wloc.analysis.pipeline import LocatePipeline
from wloc.transport.client import WlocClient
from wloc.transport.config import ServiceConfig

logger = get_logger(__name__)


def parse_point(arg: str) -> tuple[str, str | None]:
    """
    Split "BSSID@SIGNAL" into its parts; the signal is optional.
    """
    bssid, sep, signal = arg.partition("@")
    return bssid, (signal if sep else None)


def lookup(points: list[str], include_all: bool) -> int:
    """
    Resolve access points and print the result as JSON.

    Parameters
    ----------
    points
        "BSSID" or "BSSID@SIGNAL" strings, e.g. "34:db:fd:43:e3:a1@-52".
    include_all
        Also return nearby access points known to the service.

    Returns
    -------
    int
        Process exit status.
    """
    logger.info("Lookup: points=%s, all=%s", points, include_all)
    pipeline = LocatePipeline(WlocClient(ServiceConfig.from_env()))
    try:
        result = pipeline.run([parse_point(p) for p in points], include_all)
    except WlocError as exc:
        logger.error("Lookup failed (%s): %s", exc.reason, exc)
        return 1
    Console().print_json(data=result.to_json_dict())
    return 0


def serve(host: str, port: int) -> None:
    """
    Spin up FastAPI+Uvicorn to serve the lookup API.

    Parameters
    ----------
    host
        Interface to bind.
    port
        Port on which to serve HTTP.
    """
    logger.info("Serve: host=%s, port=%d", host, port)
    app = create_app(ServiceConfig.from_env())
    uvicorn.run(app, host=host, port=port)

def version() -> None:
    """
    Print the installed wloc package version.
    """
    try:
        ver = _get_version("wloc")
    except PackageNotFoundError:
        ver = "unknown"
    logger.info("wloc version %s", ver)


def parse_args(argv: list[str] | None = None) -> Namespace:
    """
    Parse command-line arguments and return the populated namespace.
    """
    parser = ArgumentParser(prog="wloc")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # wloc lookup
    p = subparsers.add_parser("lookup", help="Locate access points by BSSID.")
    p.add_argument(
        "points", nargs="+", metavar="BSSID[@SIGNAL]",
        help="Access point BSSID, optionally with its signal in dBm.",
    )
    p.add_argument(
        "--all", dest="include_all", action="store_true",
        help="Include nearby access points known to the service.",
    )

    # wloc serve
    p = subparsers.add_parser("serve", help="Serve via FastAPI + Uvicorn.")
    p.add_argument(
        "--host", type=str, default="127.0.0.1", help="Interface to bind."
    )
    p.add_argument(
        "--port", type=int, default=8000, help="Port number to serve on."
    )

    # wloc version
    subparsers.add_parser("version", help="Show wloc version and exit.")

    return parser.parse_args(argv)


def main() -> None:
    """
    Entry point: dispatch to the selected subcommand.
    """
    args = parse_args()
    match args.command:
        case "lookup":
            sys.exit(lookup(args.points, args.include_all))
        case "serve":
            serve(args.host, args.port)
        case "version":
            version()
        case _:
            sys.exit(1)


if __name__ == "__main__":
    main()

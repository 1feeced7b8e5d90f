"""
Command-line entry point for the tape catalog.

Notes
-----
The CLI only parses arguments, builds the Flask app and runs it on a single
thread. All catalog logic lives in :mod:`cassettes.catalog`.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from cassettes.app import create_app
from cassettes.errors import StorageError


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="cassettes",
        description="Catalog of video tapes",
    )
    parser.add_argument("db_path", type=Path, help="Path to the tapes SQLite database")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=5000, help="Port to listen on")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app = create_app(args.db_path)
    except StorageError as exc:
        print(f"ERROR: {exc}")
        return 1

    store = app.extensions["cassettes"]["store"]
    try:
        # One thread owns the connection and the in-memory catalog.
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=False, use_reloader=False)
    finally:
        store.close()
        logging.info("Closed tape database", extra={"event": "catalog_closed"})
    return 0

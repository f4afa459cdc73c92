"""Command line entry point.

Usage::

    procaudit [-c CONNECTION] [-v {none,quiet,normal,verbose}] [-x]

Exit status is 0 when every object compiled (and, with ``-x``, every probe
succeeded), 1 otherwise or on any error.
"""
from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

import procaudit
from procaudit.config import ValidatorSettings
from procaudit.errors import ProcAuditError
from procaudit.schema.verbosity import Verbosity


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procaudit",
        description=(
            "Compile-check every stored procedure, view and function of a "
            "SQL Server database without changing it."
        ),
    )
    parser.add_argument(
        "-c", "--connection",
        metavar="CONNECTION",
        help="SQLAlchemy URL or ODBC connection string "
             "(default: PROCAUDIT_CONNECTION_STRING)",
    )
    parser.add_argument(
        "-v", "--verbosity",
        metavar="LEVEL",
        help="q (quiet - errors only), n (normal), v (verbose), or none",
    )
    parser.add_argument(
        "-x", "--execute",
        action="store_true",
        default=None,
        help="execute objects that appear safe (no INSERT, UPDATE, DELETE, "
             "CREATE, DROP or EXEC)",
    )
    return parser


def load_settings(args: argparse.Namespace) -> ValidatorSettings:
    """Merge command-line flags over environment settings."""
    overrides = {
        "connection_string": args.connection,
        "verbosity": args.verbosity,
        "execute": args.execute,
    }
    return ValidatorSettings(**{k: v for k, v in overrides.items() if v is not None})


def configure_logging(verbosity: Verbosity) -> None:
    logging.basicConfig(
        level=logging.INFO if verbosity is not Verbosity.NONE else logging.CRITICAL,
        format="%(message)s",
        stream=sys.stdout,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
        configure_logging(settings.verbosity)
        valid = procaudit.database_is_valid(
            settings.require_connection_string(),
            settings.verbosity,
            settings.execute,
        )
    except (ProcAuditError, ValidationError) as exc:
        print(f"Error: {exc}")
        parser.print_usage(sys.stdout)
        return 1

    return 0 if valid else 1


if __name__ == "__main__":
    sys.exit(main())

"""Command line entry point: ``python -m schema_doctor``."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from schema_doctor.config import CONFIG, ConfigurationError
from schema_doctor.detectors import DETECTORS
from schema_doctor.introspection import connect
from schema_doctor.models import load_snapshot
from schema_doctor.printers import IOPrinter
from schema_doctor.task import EXIT_ERROR, Runner, exit_code

logger = logging.getLogger("schema_doctor")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="schema_doctor",
        description="Report schema problems such as missing indexes or foreign keys.",
    )
    parser.add_argument("detectors", nargs="*", help="Detectors to run (default: all).")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: env DATABASE_URL).")
    parser.add_argument("--schema", help="Schema to inspect (default: the connection's default schema).")
    parser.add_argument("--models", help="Declarative base or registry to snapshot, as module:attribute.")
    parser.add_argument(
        "--ignore-table",
        action="append",
        default=[],
        dest="ignore_tables",
        help="Table to ignore in every detector; may be repeated.",
    )
    parser.add_argument("--list", action="store_true", help="List available detectors and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def list_detectors(printer: IOPrinter) -> None:
    for name in sorted(DETECTORS):
        printer.write(f"{name} - {DETECTORS[name].description}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )
    printer = IOPrinter(sys.stdout)
    if args.list:
        list_detectors(printer)
        return 0

    config = dict(CONFIG)
    if args.ignore_tables:
        shared = dict(CONFIG["GLOBAL"])
        shared["ignore_tables"] = list(shared.get("ignore_tables", [])) + args.ignore_tables
        config["GLOBAL"] = shared

    try:
        models = load_snapshot(args.models) if args.models else ()
        introspector = connect(args.database_url, args.schema)
        success = Runner(introspector, printer, models=models, config=config).run(args.detectors)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_ERROR
    except SQLAlchemyError as exc:
        logger.error("Could not inspect the database: %s", exc)
        return EXIT_ERROR
    return exit_code(success)


if __name__ == "__main__":
    sys.exit(main())

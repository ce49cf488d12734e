"""Command line runner: bulk-load CSV data and print report tables."""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from delivery_analytics.core import database
from delivery_analytics.core.exceptions import (
    DatasetLoadError,
    InvalidReportParameterError,
    ReportNotFoundError,
)
from delivery_analytics.reporting.formatter import ReportFormatter
from delivery_analytics.reporting.service import ReportService
from delivery_analytics.store.loader import DatasetLoader

logger = logging.getLogger(__name__)


def parse_params(pairs: List[str]) -> Dict[str, Any]:
    """Turn `name=value` strings into a dict; values are coerced later per report."""
    params = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"Expected name=value, got '{pair}'")
        params[name.strip()] = value.strip()
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run food delivery analytics reports")
    parser.add_argument("--load", metavar="DIR", help="Bulk-load <table>.csv files from DIR first")
    parser.add_argument("--report", metavar="KEY", action="append", default=[],
                        help="Report to run (repeatable)")
    parser.add_argument("--all", action="store_true", help="Run every report")
    parser.add_argument("--param", metavar="NAME=VALUE", action="append", default=[],
                        help="Parameter override for the selected reports (repeatable)")
    parser.add_argument("--list", action="store_true", help="List the available reports")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None, session_factory=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = parse_params(args.param)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    session_factory = session_factory or database.SessionLocal
    db = session_factory()
    try:
        database.create_all_tables(bind=db.get_bind())

        if args.load:
            summary = DatasetLoader(db).load_csv_directory(args.load)
            print(f"Loaded: {summary.model_dump()}")

        service = ReportService(db)
        if args.list:
            for definition in service.list_reports():
                print(f"{definition.number:>2}  {definition.key:<30} {definition.title}")

        keys = service.catalog.keys() if args.all else args.report
        definitions = [service.catalog.get(key) for key in keys]
        unused = set(params) - {p.name for d in definitions for p in d.parameters}
        if unused:
            raise InvalidReportParameterError(
                f"No selected report takes parameter(s): {', '.join(sorted(unused))}"
            )

        formatter = ReportFormatter(service.catalog)
        for definition in definitions:
            # Each report only receives the overrides it declares
            overrides = {name: value for name, value in params.items() if definition.get_parameter(name)}
            result = service.run_report(definition.key, overrides)
            print(formatter.render_table(result))
            print()
    except (DatasetLoadError, FileNotFoundError) as e:
        logger.error(f"Load failed: {e}")
        return 1
    except (ReportNotFoundError, InvalidReportParameterError) as e:
        logger.error(str(e))
        return 2
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Prints the county demographics and voter registration report for one state.

Usage:
    python run_report.py --state Washington --year 2018
"""
import argparse
import asyncio
import sys

from loguru import logger

from config import SURVEY_YEAR_RANGES, load_settings
from errors import ReportError
from report import build_report, render_text


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--state", help="Full state name (default: REPORT_STATE or Washington)")
    parser.add_argument("--year", type=int, help="ACS release year (default: REPORT_YEAR or 2018)")
    parser.add_argument("--survey", choices=list(SURVEY_YEAR_RANGES), help="ACS product (default: ACS_SURVEY or acs/acs5)")
    parser.add_argument("--env-file", help="Path to a .env file with CENSUS_API_KEY and EAVS_DATASET_URL")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if not args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    try:
        settings = load_settings(env_file=args.env_file, state=args.state, year=args.year, survey=args.survey)
        report = asyncio.run(build_report(settings))
    except ReportError as e:
        logger.error(f"❌ Report aborted: {type(e).__name__}: {e}")
        return 1

    print(render_text(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())

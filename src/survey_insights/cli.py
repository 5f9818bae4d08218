# src/survey_insights/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .app.config import Settings
from .app.errors import AppError
from .app.logging import get_logger, setup_logging
from .db.repository import SurveyRepository
from .workflows.graph import analyze_workbook
from .workflows.survey_analysis import analyze_survey


logger = get_logger(__name__)


def _write_report(markdown: str, out: Optional[str]) -> None:
    if out:
        Path(out).write_text(markdown, encoding="utf-8")
        logger.info("Report written to %s", out)
    else:
        sys.stdout.write(markdown)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="survey-insights", description="School survey analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    wb = sub.add_parser("workbook", help="Analyze an exported spreadsheet (.xlsx or .csv)")
    wb.add_argument("path")
    wb.add_argument("--sheet", default=0, help="Sheet name or index (Excel only)")
    wb.add_argument("--out", help="Write the Markdown report to this file")

    sv = sub.add_parser("survey", help="Analyze a closed survey stored in the database")
    sv.add_argument("survey_id", type=int)
    sv.add_argument("--out", help="Write the Markdown report to this file")

    sub.add_parser("init-db", help="Create the database schema")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_json)

    if args.command == "workbook":
        sheet = int(args.sheet) if str(args.sheet).isdigit() else args.sheet
        result = analyze_workbook(args.path, settings, sheet_name=sheet)
        if not result.success:
            logger.error("Workbook analysis failed: %s", result.error)
            return 1
        _write_report(result.report_markdown or "", args.out)
        return 0

    repo = SurveyRepository(settings.db_path)
    repo.init_schema()
    if args.command == "init-db":
        logger.info("Database ready at %s", settings.db_path)
        return 0

    try:
        record = analyze_survey(repo, args.survey_id, settings)
    except AppError as e:
        logger.error("Survey analysis failed: %s", e)
        return 1
    _write_report((record.report_markdown if record else "") or "", args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())

import os
import tempfile
import unittest
from unittest import mock

from helpers import make_settings
from survey_insights import cli
from survey_insights.app.errors import SurveyNotReady
from survey_insights.db.models import AnalysisRecord
from survey_insights.workflows.state import WorkbookAnalysisResult


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = make_settings(os.path.join(self.tmp.name, "surveys.db"))
        patches = [
            mock.patch.object(cli.Settings, "from_env", return_value=self.settings),
            mock.patch.object(cli, "setup_logging"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self):
        self.tmp.cleanup()

    def test_workbook_report_written(self):
        out = os.path.join(self.tmp.name, "report.md")
        result = WorkbookAnalysisResult(success=True, summary="s", report_markdown="# تقرير\n")
        with mock.patch.object(cli, "analyze_workbook", return_value=result) as run:
            code = cli.main(["workbook", "survey.xlsx", "--sheet", "1", "--out", out])

        self.assertEqual(code, 0)
        run.assert_called_once_with("survey.xlsx", self.settings, sheet_name=1)
        with open(out, encoding="utf-8") as f:
            self.assertEqual(f.read(), "# تقرير\n")

    def test_workbook_failure(self):
        result = WorkbookAnalysisResult(success=False, error="Excel file is empty")
        with mock.patch.object(cli, "analyze_workbook", return_value=result):
            self.assertEqual(cli.main(["workbook", "empty.csv"]), 1)

    def test_init_db(self):
        self.assertEqual(cli.main(["init-db"]), 0)
        self.assertTrue(os.path.exists(self.settings.db_path))

    def test_survey_not_ready(self):
        with mock.patch.object(cli, "analyze_survey", side_effect=SurveyNotReady("not closed")):
            self.assertEqual(cli.main(["survey", "3"]), 1)

    def test_survey_report(self):
        out = os.path.join(self.tmp.name, "survey.md")
        record = AnalysisRecord(survey_id=3, status="completed", report_markdown="# تقرير تفسيري مفصل\n")
        with mock.patch.object(cli, "analyze_survey", return_value=record):
            self.assertEqual(cli.main(["survey", "3", "--out", out]), 0)
        with open(out, encoding="utf-8") as f:
            self.assertIn("تقرير تفسيري", f.read())

    def test_command_is_required(self):
        with self.assertRaises(SystemExit):
            cli.build_parser().parse_args([])


if __name__ == "__main__":
    unittest.main()

import os
import tempfile
import unittest

import pandas as pd

from survey_insights.app.errors import WorkbookError
from survey_insights.db.workbook import (
    parse_dataframe,
    read_workbook,
    should_ignore_column,
    type_breakdown,
    validate_dataframe,
)


def _comment(i: int) -> str:
    return f"Comment {i}: the teachers are supportive and the classrooms are well organised"


def sample_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "ID": [1, 2, 3, 4, 5, 6],
            "Start time": ["2024-01-01 08:00"] * 6,
            "Email": [f"parent{i}@example.com" for i in range(6)],
            "مستوى الرضا": [5, 4, None, 4, 5, 3],
            "هل تشعر بالأمان": ["نعم", "لا", "نعم", "نعم", "لا", "نعم"],
            "ملاحظات": [_comment(i) for i in range(5)] + [None],
        }
    )


class TestIgnoredColumns(unittest.TestCase):

    def test_admin_columns(self):
        for col in ("ID", "Start time", "Completion time", "Email address", "Last modified time", "الاسم الكامل"):
            self.assertTrue(should_ignore_column(col), col)

    def test_question_columns(self):
        for col in ("مستوى الرضا", "هل تشعر بالأمان", "ملاحظات"):
            self.assertFalse(should_ignore_column(col), col)


class TestValidation(unittest.TestCase):

    def test_empty_frame(self):
        check = validate_dataframe(pd.DataFrame())
        self.assertFalse(check.valid)
        self.assertEqual(check.error, "Excel file is empty")
        self.assertFalse(validate_dataframe(None).valid)

    def test_too_few_rows(self):
        check = validate_dataframe(pd.DataFrame({"q": [1, 2, 3]}))
        self.assertFalse(check.valid)
        self.assertEqual(check.error, "Excel file must contain at least 5 responses for meaningful analysis")

    def test_threshold_is_configurable(self):
        self.assertTrue(validate_dataframe(pd.DataFrame({"q": [1, 2, 3]}), min_responses=3).valid)

    def test_enough_rows(self):
        self.assertTrue(validate_dataframe(sample_frame()).valid)


class TestParseDataFrame(unittest.TestCase):

    def test_parse_infers_types_and_skips_admin_columns(self):
        parsed = parse_dataframe(sample_frame())

        self.assertEqual(parsed.total_responses, 6)
        self.assertEqual(
            [q.column_name for q in parsed.questions],
            ["مستوى الرضا", "هل تشعر بالأمان", "ملاحظات"],
        )
        types = {q.column_name: q.question_type for q in parsed.questions}
        self.assertEqual(types, {"مستوى الرضا": "rating", "هل تشعر بالأمان": "yes_no", "ملاحظات": "text"})
        self.assertEqual(type_breakdown(parsed), {"rating": 1, "yes_no": 1, "text": 1})

    def test_blank_cells_become_none(self):
        parsed = parse_dataframe(sample_frame())
        rating = parsed.questions[0]

        self.assertEqual(len(rating.responses), 6)
        self.assertIsNone(rating.responses[2])
        self.assertEqual(rating.unique_values, [5.0, 4.0, 3.0])
        self.assertIsNone(parsed.questions[2].responses[-1])

    def test_metadata(self):
        meta = parse_dataframe(sample_frame()).metadata
        self.assertTrue(meta.has_timestamps)
        self.assertTrue(meta.has_emails)
        self.assertIn("ID", meta.columns)

    def test_metadata_without_admin_columns(self):
        meta = parse_dataframe(pd.DataFrame({"q": ["a", "b"]})).metadata
        self.assertFalse(meta.has_timestamps)
        self.assertFalse(meta.has_emails)

    def test_no_data(self):
        with self.assertRaises(WorkbookError) as ctx:
            parse_dataframe(pd.DataFrame())
        self.assertEqual(str(ctx.exception), "No data found in Excel file")

    def test_only_admin_columns(self):
        with self.assertRaises(WorkbookError) as ctx:
            parse_dataframe(pd.DataFrame({"ID": [1, 2], "Email": ["a", "b"]}))
        self.assertEqual(str(ctx.exception), "No question columns found in Excel file")


class TestReadWorkbook(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def test_reads_csv(self):
        path = os.path.join(self.tmp.name, "survey.csv")
        sample_frame().to_csv(path, index=False)

        df = read_workbook(path)
        self.assertEqual(len(df), 6)
        self.assertEqual(parse_dataframe(df).questions[0].question_type, "rating")

    def test_reads_xlsx(self):
        path = os.path.join(self.tmp.name, "survey.xlsx")
        sample_frame().to_excel(path, index=False)

        parsed = parse_dataframe(read_workbook(path))
        self.assertEqual(parsed.total_responses, 6)
        self.assertEqual([q.question_type for q in parsed.questions], ["rating", "yes_no", "text"])

    def test_missing_file(self):
        with self.assertRaises(WorkbookError):
            read_workbook(os.path.join(self.tmp.name, "missing.xlsx"))


if __name__ == "__main__":
    unittest.main()

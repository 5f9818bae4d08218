# src/survey_insights/db/workbook.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from ..analysis.inference import infer_question_type
from ..analysis.models import QuestionType, RawAnswer, is_missing
from ..app.errors import WorkbookError
from ..app.logging import get_logger


logger = get_logger(__name__)

# Administrative columns of MS Forms exports (English and Arabic headers).
IGNORED_COLUMNS = (
    "ID",
    "Start time",
    "Completion time",
    "Email",
    "Name",
    "Last modified time",
    "الوقت",
    "البريد الإلكتروني",
    "الاسم",
)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


@dataclass(frozen=True)
class ParsedQuestion:
    column_name: str
    question_text: str
    question_type: QuestionType
    responses: List[RawAnswer]
    unique_values: List[Any]


@dataclass(frozen=True)
class WorkbookMetadata:
    has_timestamps: bool
    has_emails: bool
    columns: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParsedWorkbook:
    total_responses: int
    questions: List[ParsedQuestion]
    metadata: WorkbookMetadata


@dataclass(frozen=True)
class WorkbookValidation:
    valid: bool
    error: Optional[str] = None


def should_ignore_column(column_name: str) -> bool:
    col = column_name.lower()
    return any(ignored.lower() in col for ignored in IGNORED_COLUMNS)


def read_workbook(file_path: Union[str, Path], sheet_name: Union[str, int] = 0) -> pd.DataFrame:
    """Read the first sheet of an Excel export (or a CSV file) into a DataFrame."""
    path = Path(file_path)
    try:
        if path.suffix.lower() in EXCEL_SUFFIXES:
            return pd.read_excel(path, sheet_name=sheet_name)
        return pd.read_csv(path)
    except Exception as e:
        raise WorkbookError(f"Failed to read workbook: {e}") from e


def validate_dataframe(df: Optional[pd.DataFrame], min_responses: int = 5) -> WorkbookValidation:
    if df is None or df.empty:
        return WorkbookValidation(valid=False, error="Excel file is empty")
    if len(df) < min_responses:
        return WorkbookValidation(
            valid=False,
            error=f"Excel file must contain at least {min_responses} responses for meaningful analysis",
        )
    return WorkbookValidation(valid=True)


def _cell(value: Any) -> RawAnswer:
    # NaN / blank cells become None; numpy scalars become Python scalars.
    if is_missing(value) or (not isinstance(value, str) and pd.isna(value)):
        return None
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, (str, int, float)):
        return value
    return str(value)


def parse_dataframe(df: Optional[pd.DataFrame]) -> ParsedWorkbook:
    if df is None or df.empty:
        raise WorkbookError("No data found in Excel file")

    all_columns = [str(c) for c in df.columns]
    question_columns = [c for c in df.columns if not should_ignore_column(str(c))]
    if not question_columns:
        raise WorkbookError("No question columns found in Excel file")

    questions: List[ParsedQuestion] = []
    for col in question_columns:
        responses = [_cell(v) for v in df[col].tolist()]

        unique_values: List[Any] = []
        for r in responses:
            if r is not None and r not in unique_values:
                unique_values.append(r)

        questions.append(
            ParsedQuestion(
                column_name=str(col),
                question_text=str(col),
                question_type=infer_question_type(responses),
                responses=responses,
                unique_values=unique_values,
            )
        )

    metadata = WorkbookMetadata(
        has_timestamps=any("time" in c.lower() or "وقت" in c for c in all_columns),
        has_emails=any("email" in c.lower() or "بريد" in c for c in all_columns),
        columns=all_columns,
    )

    logger.info("Parsed %d questions from %d responses", len(questions), len(df))
    return ParsedWorkbook(total_responses=int(len(df)), questions=questions, metadata=metadata)


def type_breakdown(parsed: ParsedWorkbook) -> Dict[str, int]:
    # Count of inferred question types, for logging and summaries.
    counts: Dict[str, int] = {}
    for q in parsed.questions:
        counts[q.question_type] = counts.get(q.question_type, 0) + 1
    return counts

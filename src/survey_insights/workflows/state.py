# src/survey_insights/workflows/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..agents.models import OverallAnalysis, QuestionInterpretation
from ..analysis.models import QuestionStatistics
from ..db.workbook import ParsedWorkbook


@dataclass
class WorkbookAnalysisState:
    # Identity / input
    analysis_id: str
    file_path: str
    sheet_name: Any = 0

    # Ingestion
    parsed: Optional[ParsedWorkbook] = None

    # Statistics + narrative
    statistics: List[QuestionStatistics] = field(default_factory=list)
    interpretations: List[QuestionInterpretation] = field(default_factory=list)
    overall: Optional[OverallAnalysis] = None

    # Output
    report_markdown: str = ""
    error: Optional[str] = None

    # Internal bookkeeping (e.g. inferred type counts)
    notes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkbookAnalysisResult:
    success: bool
    summary: Optional[str] = None
    report_markdown: Optional[str] = None
    statistics: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

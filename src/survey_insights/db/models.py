# models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union


SurveyStatus = Literal["draft", "active", "closed", "analyzed"]
AnalysisStatus = Literal["processing", "completed", "failed"]


@dataclass(frozen=True)
class School:
    school_id: int
    school_name: str
    principal_name: str = ""
    academic_deputy_name: str = ""
    administrative_deputy_name: str = ""
    academic_year: str = ""


@dataclass(frozen=True)
class Survey:
    survey_id: int
    school_id: int
    title: str
    description: Optional[str] = None
    purpose: Optional[str] = None
    target_audience: Optional[str] = None
    status: SurveyStatus = "draft"


@dataclass(frozen=True)
class QuestionDraft:
    # A question as submitted by the survey author, before it has an id.
    question_text: str
    question_type: str
    options: Optional[List[str]] = None
    is_required: bool = True
    order_index: int = 0


@dataclass(frozen=True)
class ResponseRecord:
    response_id: int
    survey_id: int
    question_id: int
    respondent_id: Optional[str] = None
    answer_text: Optional[str] = None
    answer_option: Optional[str] = None
    answer_value: Optional[float] = None

    @property
    def answer(self) -> Union[str, float, None]:
        # The raw answer fed to the statistics core.
        for v in (self.answer_option, self.answer_value, self.answer_text):
            if v is not None:
                return v
        return None


@dataclass(frozen=True)
class AnalysisRecord:
    survey_id: int
    status: AnalysisStatus = "processing"
    statistical_data: List[Dict[str, Any]] = field(default_factory=list)
    educational_interpretation: List[Dict[str, Any]] = field(default_factory=list)
    overall_summary: Optional[str] = None
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    report_markdown: Optional[str] = None
    error_message: Optional[str] = None
    completed_at: Optional[str] = None

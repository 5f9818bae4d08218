from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..db.models import School, Survey


NOT_SPECIFIED = "غير محدد"

TARGET_AUDIENCE_LABELS = {
    "teachers": "المعلمون",
    "students": "الطلاب",
    "parents": "أولياء الأمور",
    "staff": "الموظفون الإداريون",
    "all": "جميع الفئات",
}


def target_audience_label(audience: Optional[str]) -> str:
    if not audience:
        return NOT_SPECIFIED
    return TARGET_AUDIENCE_LABELS.get(audience, NOT_SPECIFIED)


@dataclass(frozen=True)
class SurveyContext:
    # School and survey metadata quoted in prompts and reports.
    survey_title: str
    school_name: str = NOT_SPECIFIED
    academic_year: str = ""
    principal_name: str = ""
    academic_deputy_name: str = ""
    administrative_deputy_name: str = ""
    description: Optional[str] = None
    purpose: Optional[str] = None
    target_audience: Optional[str] = None

    @staticmethod
    def from_records(school: School, survey: Survey) -> "SurveyContext":
        return SurveyContext(
            survey_title=survey.title,
            school_name=school.school_name,
            academic_year=school.academic_year,
            principal_name=school.principal_name,
            academic_deputy_name=school.academic_deputy_name,
            administrative_deputy_name=school.administrative_deputy_name,
            description=survey.description,
            purpose=survey.purpose,
            target_audience=survey.target_audience,
        )


@dataclass(frozen=True)
class QuestionInterpretation:
    question_id: Any
    interpretation: str
    pedagogical_insights: str
    impact: str
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionId": self.question_id,
            "interpretation": self.interpretation,
            "pedagogicalInsights": self.pedagogical_insights,
            "impact": self.impact,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class OverallAnalysis:
    overall_summary: str
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

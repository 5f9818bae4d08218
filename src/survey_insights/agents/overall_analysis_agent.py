# src/survey_insights/agents/overall_analysis_agent.py
from __future__ import annotations

from typing import Any, Dict, Sequence

from .base import BaseAgent
from .models import OverallAnalysis, SurveyContext, target_audience_label
from ..analysis.models import QuestionStatistics


def questions_overview(statistics: Sequence[QuestionStatistics]) -> str:
    # Numbered list of questions with response counts, averages and modes.
    out = ""
    for index, qs in enumerate(statistics, start=1):
        out += f"\n{index}. {qs.question_text}\n"
        out += f"   - عدد الإجابات: {qs.total_responses}\n"
        average = getattr(qs.statistics, "average", None)
        if average:
            out += f"   - المتوسط: {average}\n"
        mode = getattr(qs.statistics, "mode", None)
        if mode:
            out += f"   - الإجابة الأكثر تكراراً: {mode}\n"
    return out


class OverallAnalysisAgent(BaseAgent):
    name = "overall_analysis_agent"
    prompt_file = "overall_analysis.md"
    output_schema = {
        "type": "object",
        "properties": {
            "overallSummary": {"type": "string"},
            "strengths": {"type": "array", "items": {"type": "string"}},
            "improvements": {"type": "array", "items": {"type": "string"}},
            "recommendations": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["overallSummary", "strengths", "improvements", "recommendations"],
        "additionalProperties": True,
    }

    system_prompt = """
أنت محلل تربوي متخصص في تقييم الأداء التعليمي. مهمتك هي تقديم تحليل شامل للاستبيان يتضمن:

1. ملخص عام للنتائج
2. نقاط القوة (3-5 نقاط)
3. نقاط التحسين (3-5 نقاط)
4. توصيات عملية قابلة للتطبيق (5-7 توصيات)

يجب أن يكون أسلوبك تربوياً احترافياً، واضحاً ومباشراً، داعماً ويركز على التحسين المستمر.

قدم إجابتك بصيغة JSON فقط:
{
  "overallSummary": "...",
  "strengths": ["..."],
  "improvements": ["..."],
  "recommendations": ["..."]
}
""".strip()

    default_prompt = """
المدرسة: {{school_name}}
المديرة: {{principal_name}}
النائبة الأكاديمية: {{academic_deputy_name}}
النائبة الإدارية: {{administrative_deputy_name}}
العام الأكاديمي: {{academic_year}}

عنوان الاستبيان: {{survey_title}}
{{survey_details}}
الفئة المستهدفة: {{target_audience}}

ملخص الأسئلة والنتائج:
{{questions_overview}}

بناءً على هذه النتائج، قدم تحليلاً شاملاً يتضمن:
1. ملخص عام للنتائج
2. نقاط القوة (3-5 نقاط)
3. نقاط التحسين (3-5 نقاط)
4. توصيات عملية قابلة للتطبيق داخل المدرسة (5-7 توصيات)
""".strip()

    def build_variables(self, context: SurveyContext, statistics: Sequence[QuestionStatistics]) -> Dict[str, Any]:
        details = []
        if context.description:
            details.append(f"الوصف: {context.description}")
        if context.purpose:
            details.append(f"الهدف: {context.purpose}")
        return {
            "school_name": context.school_name,
            "principal_name": context.principal_name,
            "academic_deputy_name": context.academic_deputy_name,
            "administrative_deputy_name": context.administrative_deputy_name,
            "academic_year": context.academic_year,
            "survey_title": context.survey_title,
            "survey_details": "\n".join(details),
            "target_audience": target_audience_label(context.target_audience),
            "questions_overview": questions_overview(statistics),
        }

    def analyze(self, context: SurveyContext, statistics: Sequence[QuestionStatistics]) -> OverallAnalysis:
        payload = self.invoke(self.build_variables(context, statistics))
        return OverallAnalysis(
            overall_summary=payload["overallSummary"],
            strengths=list(payload["strengths"]),
            improvements=list(payload["improvements"]),
            recommendations=list(payload["recommendations"]),
        )

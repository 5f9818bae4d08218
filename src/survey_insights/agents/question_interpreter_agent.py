# src/survey_insights/agents/question_interpreter_agent.py
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .base import AgentError, BaseAgent
from .models import QuestionInterpretation, SurveyContext, target_audience_label
from ..analysis.models import QuestionStatistics
from ..analysis.summary import build_statistical_summary
from ..app.logging import get_logger


logger = get_logger(__name__)

FALLBACK_INTERPRETATION = "تعذر إنشاء التفسير التلقائي لهذا السؤال."
FALLBACK_INSIGHTS = "يرجى مراجعة النتائج الإحصائية يدوياً."
FALLBACK_IMPACT = "غير متوفر"


def fallback_interpretation(question_id: Any) -> QuestionInterpretation:
    return QuestionInterpretation(
        question_id=question_id,
        interpretation=FALLBACK_INTERPRETATION,
        pedagogical_insights=FALLBACK_INSIGHTS,
        impact=FALLBACK_IMPACT,
        is_fallback=True,
    )


def _str_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [str(x) for x in v if str(x).strip()]


class QuestionInterpreterAgent(BaseAgent):
    name = "question_interpreter_agent"
    prompt_file = "question_interpreter.md"
    output_schema = {
        "type": "object",
        "properties": {
            "interpretation": {"type": "string"},
            "pedagogicalInsights": {"type": "string"},
            "impact": {"type": "string"},
            "strengths": {"type": "array", "items": {"type": "string"}},
            "improvements": {"type": "array", "items": {"type": "string"}},
            "recommendations": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["interpretation", "pedagogicalInsights", "impact"],
        "additionalProperties": True,
    }

    system_prompt = """
أنت محلل تربوي متخصص في تحليل نتائج الاستبيانات التعليمية. مهمتك هي تقديم تفسير تربوي احترافي ومفيد للنتائج الإحصائية.

يجب أن يكون تحليلك:
- تربوياً ومهنياً
- واضحاً ومباشراً
- داعماً وإيجابياً
- يركز على التحسين المستمر
- يقدم رؤى قابلة للتطبيق

لا تخترع أرقاماً؛ استخدم النتائج المقدمة فقط.

قدم إجابتك بصيغة JSON فقط بالشكل التالي:
{
  "interpretation": "قراءة دقيقة للنتائج وماذا تعني الأرقام",
  "pedagogicalInsights": "تفسير تربوي: ماذا تعني هذه النتيجة تربوياً وكيف تؤثر على جودة التعليم",
  "impact": "الأثر المتوقع على العملية التعليمية",
  "strengths": ["نقاط القوة إن وجدت"],
  "improvements": ["نقاط التحسين إن وجدت"],
  "recommendations": ["توصيات عملية"]
}
""".strip()

    default_prompt = """
المدرسة: {{school_name}}
العام الأكاديمي: {{academic_year}}
عنوان الاستبيان: {{survey_title}}
الفئة المستهدفة: {{target_audience}}

نوع السؤال: {{question_type}}

النتائج الإحصائية:
{{statistics}}

قم بتحليل هذه النتائج تربوياً وقدم تفسيراً مهنياً.
""".strip()

    def build_variables(self, context: SurveyContext, qs: QuestionStatistics) -> Dict[str, Any]:
        return {
            "school_name": context.school_name,
            "academic_year": context.academic_year,
            "survey_title": context.survey_title,
            "target_audience": target_audience_label(context.target_audience),
            "question_type": qs.question_type,
            "statistics": build_statistical_summary(qs),
        }

    def interpret(self, context: SurveyContext, qs: QuestionStatistics) -> QuestionInterpretation:
        payload = self.invoke(self.build_variables(context, qs))
        return QuestionInterpretation(
            question_id=qs.question_id,
            interpretation=payload["interpretation"],
            pedagogical_insights=payload["pedagogicalInsights"],
            impact=payload["impact"],
            strengths=_str_list(payload.get("strengths")),
            improvements=_str_list(payload.get("improvements")),
            recommendations=_str_list(payload.get("recommendations")),
        )


def interpret_all(
    agent: QuestionInterpreterAgent,
    context: SurveyContext,
    statistics: Sequence[QuestionStatistics],
) -> List[QuestionInterpretation]:
    """
    Interpret every question; a failed question gets the fixed fallback text so
    the rest of the survey is still interpreted.
    """
    out: List[QuestionInterpretation] = []
    for qs in statistics:
        try:
            out.append(agent.interpret(context, qs))
        except AgentError as e:
            logger.warning(
                "Interpretation failed for question %s: %s", qs.question_id, e,
                extra={"question_id": str(qs.question_id)},
            )
            out.append(fallback_interpretation(qs.question_id))
    return out

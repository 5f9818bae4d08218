"""
Markdown reports built from computed statistics and narrative interpretations.

Percentages are always shown with one decimal and averages / standard
deviations with two, so the same analysis renders to the same report text.
"""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Sequence

from ..agents.models import OverallAnalysis, QuestionInterpretation, SurveyContext
from ..analysis.formatting import format_number, format_percentage_fixed
from ..analysis.models import QuestionStatistics


FOOTER = "*تم إنشاء هذا التقرير تلقائياً بواسطة منصة تحليل الاستبيانات التعليمية*"


def _numbered(items: Sequence[str]) -> str:
    return "".join(f"{i}. {item}\n" for i, item in enumerate(items, start=1))


def _by_question(interpretations: Sequence[QuestionInterpretation]) -> Dict[object, QuestionInterpretation]:
    return {i.question_id: i for i in interpretations}


def render_workbook_report(
    statistics: Sequence[QuestionStatistics],
    interpretations: Sequence[QuestionInterpretation],
    overall: OverallAnalysis,
    report_date: Optional[str] = None,
) -> str:
    """Report for an imported spreadsheet: summary lists first, then each question."""
    md = "# تقرير تحليل الاستبيان التعليمي\n\n"
    md += f"**التاريخ:** {report_date or date.today().isoformat()}\n\n"
    md += "---\n\n"

    md += "## الملخص التنفيذي\n\n"
    md += f"{overall.overall_summary}\n\n"
    md += "---\n\n"

    md += "## نقاط القوة\n\n" + _numbered(overall.strengths) + "\n---\n\n"
    md += "## نقاط التحسين\n\n" + _numbered(overall.improvements) + "\n---\n\n"
    md += "## التوصيات\n\n" + _numbered(overall.recommendations) + "\n---\n\n"

    md += "## التحليل التفصيلي\n\n"
    interp = _by_question(interpretations)
    for idx, qs in enumerate(statistics, start=1):
        md += f"### السؤال {idx}: {qs.question_text}\n\n"
        md += f"**نوع السؤال:** {qs.question_type}\n\n"

        percentages = getattr(qs.statistics, "percentages", None)
        if percentages:
            md += "**النسب المئوية:**\n"
            for key, value in percentages.items():
                md += f"- {key}: {format_percentage_fixed(value)}\n"
            md += "\n"

        average = getattr(qs.statistics, "average", None)
        if average is not None:
            md += f"**المتوسط:** {format_number(average)}\n\n"

        qi = interp.get(qs.question_id)
        if qi is not None:
            md += f"**التفسير التربوي:**\n{qi.interpretation}\n\n"

        md += "---\n\n"

    return md


def render_detailed_report(
    context: SurveyContext,
    statistics: Sequence[QuestionStatistics],
    interpretations: Sequence[QuestionInterpretation],
    overall: OverallAnalysis,
) -> str:
    """Interpretive report for a stored survey, with school header and per-question sections."""
    md = "# تقرير تفسيري مفصل\n\n"
    md += f"## {context.survey_title}\n\n"
    md += f"**المدرسة:** {context.school_name}\n"
    md += f"**العام الأكاديمي:** {context.academic_year}\n"
    md += f"**المديرة:** {context.principal_name}\n"
    md += f"**النائبة الأكاديمية:** {context.academic_deputy_name}\n"
    md += f"**النائبة الإدارية:** {context.administrative_deputy_name}\n\n"
    md += "---\n\n"

    md += "## الملخص التنفيذي\n\n"
    md += f"{overall.overall_summary or 'تم تحليل الاستبيان بنجاح.'}\n\n"

    md += "## التحليل التفصيلي لكل سؤال\n\n"
    interp = _by_question(interpretations)
    for idx, qs in enumerate(statistics, start=1):
        md += f"### السؤال {idx}: {qs.question_text}\n\n"
        md += f"**نوع السؤال:** {qs.question_type}\n"
        md += f"**عدد الإجابات:** {qs.total_responses}\n\n"

        stats = qs.statistics
        percentages = getattr(stats, "percentages", None)
        if percentages:
            md += "#### النسب المئوية:\n\n"
            for option, pct in percentages.items():
                md += f"- **{option}:** {format_percentage_fixed(pct)}\n"
            md += "\n"

        average = getattr(stats, "average", None)
        if average is not None:
            md += f"**المتوسط:** {format_number(average)}\n"
        std = getattr(stats, "standard_deviation", None)
        if std is not None:
            md += f"**الانحراف المعياري:** {format_number(std)}\n"
        mode = getattr(stats, "mode", None)
        if mode:
            md += f"**الإجابة الأكثر تكراراً:** {mode}\n"
        md += "\n"

        qi = interp.get(qs.question_id)
        if qi is not None:
            md += "#### التفسير الإحصائي\n\n"
            md += f"{qi.interpretation}\n\n"
            md += "#### التفسير التربوي\n\n"
            md += f"{qi.pedagogical_insights}\n\n"
            md += "#### الأثر على جودة التعليم\n\n"
            md += f"{qi.impact}\n\n"

        md += "---\n\n"

    sections: List[tuple] = [
        ("## نقاط القوة", overall.strengths),
        ("## نقاط التحسين والتحديات", overall.improvements),
        ("## التوصيات والمقترحات العملية", overall.recommendations),
    ]
    for title, items in sections:
        md += f"{title}\n\n" + _numbered(items) + "\n"

    md += "---\n\n"
    md += f"{FOOTER}\n"
    return md

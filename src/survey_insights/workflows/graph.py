"""
Workbook analysis pipeline.

    validate -> parse -> analyze -> interpret -> summarize -> report

Built as a LangGraph state graph over WorkbookAnalysisState. Every node returns
a patch of the fields it produced.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from langgraph.graph import END, StateGraph

from ..agents.base import build_chat_model
from ..agents.models import OverallAnalysis, QuestionInterpretation, SurveyContext
from ..agents.question_interpreter_agent import QuestionInterpreterAgent, interpret_all
from ..analysis.formatting import format_percentage_fixed
from ..analysis.models import Question, QuestionStatistics
from ..analysis.statistics import calculate_survey_statistics
from ..app.config import Settings
from ..app.errors import AppError
from ..app.logging import analysis_scope, get_logger
from ..db.workbook import parse_dataframe, read_workbook, type_breakdown, validate_dataframe
from ..reporting.markdown import render_workbook_report
from .state import WorkbookAnalysisResult, WorkbookAnalysisState


logger = get_logger(__name__)

WORKBOOK_SURVEY_TITLE = "تحليل الاستبيان"
WORKBOOK_SCHOOL_NAME = "المدرسة"

# Answer labels counted as positive in the workbook summary.
POSITIVE_MARKERS = ("نعم", "موافق", "ممتاز")


def _dedupe(items: Sequence[str], limit: int) -> List[str]:
    out: List[str] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out[:limit]


def positive_rate(statistics: Sequence[QuestionStatistics]) -> float:
    """Mean over questions of the summed share of positive-looking answer labels."""
    if not statistics:
        return 0.0
    total = 0.0
    for qs in statistics:
        percentages = getattr(qs.statistics, "percentages", None) or {}
        total += sum(v for k, v in percentages.items() if any(m in k for m in POSITIVE_MARKERS))
    return total / len(statistics)


def workbook_summary(question_count: int, rate: float) -> str:
    return (
        f"تم تحليل {question_count} سؤالاً بمشاركة واسعة من المستجيبين. "
        f"تشير النتائج الإجمالية إلى مستوى إيجابي من الرضا بنسبة {format_percentage_fixed(rate)}، "
        "مع وجود مجالات واضحة للتحسين والتطوير."
    )


def summarize_interpretations(
    statistics: Sequence[QuestionStatistics],
    interpretations: Sequence[QuestionInterpretation],
    settings: Settings,
) -> OverallAnalysis:
    strengths: List[str] = []
    improvements: List[str] = []
    recommendations: List[str] = []
    for qi in interpretations:
        strengths.extend(qi.strengths)
        improvements.extend(qi.improvements)
        recommendations.extend(qi.recommendations)

    return OverallAnalysis(
        overall_summary=workbook_summary(len(statistics), positive_rate(statistics)),
        strengths=_dedupe(strengths, settings.max_strengths),
        improvements=_dedupe(improvements, settings.max_improvements),
        recommendations=_dedupe(recommendations, settings.max_recommendations),
    )


def build_workbook_graph(settings: Settings, interpreter: QuestionInterpreterAgent):
    context = SurveyContext(
        survey_title=WORKBOOK_SURVEY_TITLE,
        school_name=WORKBOOK_SCHOOL_NAME,
        academic_year=str(date.today().year),
    )

    def validate(state: WorkbookAnalysisState) -> Dict[str, Any]:
        df = read_workbook(state.file_path, sheet_name=state.sheet_name)
        check = validate_dataframe(df, min_responses=settings.min_workbook_responses)
        if not check.valid:
            return {"error": check.error}
        return {"parsed": parse_dataframe(df)}

    def analyze(state: WorkbookAnalysisState) -> Dict[str, Any]:
        parsed = state.parsed
        questions = [
            Question(
                question_id=q.column_name,
                question_text=q.question_text,
                question_type=q.question_type,
                order_index=i,
            )
            for i, q in enumerate(parsed.questions)
        ]
        answers = {q.column_name: q.responses for q in parsed.questions}
        types = type_breakdown(parsed)
        logger.info("Analyzing %d questions (%s)", len(questions), types)
        return {
            "statistics": calculate_survey_statistics(questions, answers),
            "notes": {**state.notes, "question_types": types},
        }

    def interpret(state: WorkbookAnalysisState) -> Dict[str, Any]:
        return {"interpretations": interpret_all(interpreter, context, state.statistics)}

    def summarize(state: WorkbookAnalysisState) -> Dict[str, Any]:
        return {"overall": summarize_interpretations(state.statistics, state.interpretations, settings)}

    def report(state: WorkbookAnalysisState) -> Dict[str, Any]:
        md = render_workbook_report(state.statistics, state.interpretations, state.overall)
        return {"report_markdown": md}

    workflow = StateGraph(WorkbookAnalysisState)
    workflow.add_node("validate", validate)
    workflow.add_node("analyze", analyze)
    workflow.add_node("interpret", interpret)
    workflow.add_node("summarize", summarize)
    workflow.add_node("report", report)

    workflow.set_entry_point("validate")

    def validation_check(state: WorkbookAnalysisState) -> str:
        if state.error:
            return END
        return "analyze"

    workflow.add_conditional_edges("validate", validation_check)
    workflow.add_edge("analyze", "interpret")
    workflow.add_edge("interpret", "summarize")
    workflow.add_edge("summarize", "report")
    workflow.add_edge("report", END)

    return workflow.compile()


def analyze_workbook(
    file_path: str,
    settings: Settings,
    interpreter: Optional[QuestionInterpreterAgent] = None,
    sheet_name: Any = 0,
) -> WorkbookAnalysisResult:
    """
    Run the whole workbook pipeline. Domain failures (unreadable file, too few
    responses, no question columns) come back as success=False with the message.
    """
    if interpreter is None:
        interpreter = QuestionInterpreterAgent(build_chat_model(settings, settings.interpreter_model))

    analysis_id = f"workbook-{uuid4().hex[:12]}"
    with analysis_scope(analysis_id):
        try:
            graph = build_workbook_graph(settings, interpreter)
            logger.info("Starting workbook analysis of %s", file_path)
            final = graph.invoke(
                WorkbookAnalysisState(analysis_id=analysis_id, file_path=str(file_path), sheet_name=sheet_name)
            )
        except AppError as e:
            logger.error("Workbook analysis failed: %s", e)
            return WorkbookAnalysisResult(success=False, error=str(e))

        if final.get("error"):
            logger.warning("Workbook rejected: %s", final["error"])
            return WorkbookAnalysisResult(success=False, error=final["error"])
        logger.info("Workbook analysis complete")

    overall: OverallAnalysis = final["overall"]
    return WorkbookAnalysisResult(
        success=True,
        summary=overall.overall_summary,
        report_markdown=final["report_markdown"],
        statistics=[qs.to_dict() for qs in final["statistics"]],
    )

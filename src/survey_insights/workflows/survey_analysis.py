# src/survey_insights/workflows/survey_analysis.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..agents.base import build_chat_model
from ..agents.models import SurveyContext
from ..agents.overall_analysis_agent import OverallAnalysisAgent
from ..agents.question_interpreter_agent import QuestionInterpreterAgent, interpret_all
from ..analysis.statistics import calculate_survey_statistics
from ..app.config import Settings
from ..app.errors import NoResponses, SchoolNotFound, SurveyNotFound, SurveyNotReady
from ..app.logging import analysis_scope, get_logger
from ..db.models import AnalysisRecord
from ..db.repository import SurveyRepository
from ..reporting.markdown import render_detailed_report


logger = get_logger(__name__)


@dataclass(frozen=True)
class ReadinessCheck:
    ready: bool
    reason: Optional[str] = None


def check_survey_ready(repo: SurveyRepository, survey_id: int) -> ReadinessCheck:
    survey = repo.get_survey(survey_id)
    if survey is None:
        return ReadinessCheck(ready=False, reason="Survey not found")
    if survey.status != "closed":
        return ReadinessCheck(ready=False, reason="Survey must be closed before analysis")
    if repo.count_responses(survey_id) == 0:
        return ReadinessCheck(ready=False, reason="No responses found")
    return ReadinessCheck(ready=True)


def require_survey_ready(repo: SurveyRepository, survey_id: int) -> None:
    # Raising counterpart of check_survey_ready, for callers that start an analysis.
    check = check_survey_ready(repo, survey_id)
    if check.ready:
        return
    if check.reason == "Survey not found":
        raise SurveyNotFound(f"Survey not found: {survey_id}")
    if check.reason == "No responses found":
        raise NoResponses(f"No responses found for survey {survey_id}")
    raise SurveyNotReady(check.reason)


def perform_complete_analysis(
    repo: SurveyRepository,
    survey_id: int,
    interpreter: QuestionInterpreterAgent,
    overall_agent: OverallAnalysisAgent,
) -> Optional[AnalysisRecord]:
    """
    Analyze a stored survey end to end and persist the result.

    Statistics are recomputed in full on every run and replace any prior
    analysis. On failure the analysis is marked failed and the error re-raised.
    """
    survey = repo.get_survey(survey_id)
    if survey is None:
        raise SurveyNotFound(f"Survey not found: {survey_id}")

    with analysis_scope(f"survey-{survey_id}"):
        logger.info("Starting analysis for survey %s", survey_id)
        try:
            school = repo.get_school(survey.school_id)
            if school is None:
                raise SchoolNotFound(f"School not found: {survey.school_id}")

            questions = repo.list_questions(survey_id)
            answers = repo.answers_by_question(survey_id)
            if not answers:
                raise NoResponses("No responses found for this survey")
            logger.info("Found %d questions and %d answered questions", len(questions), len(answers))

            statistics = calculate_survey_statistics(questions, answers)

            context = SurveyContext.from_records(school, survey)
            logger.info("Generating educational interpretations")
            interpretations = interpret_all(interpreter, context, statistics)

            logger.info("Generating overall analysis")
            overall = overall_agent.analyze(context, statistics)

            report = render_detailed_report(context, statistics, interpretations, overall)

            repo.upsert_analysis(
                AnalysisRecord(
                    survey_id=survey_id,
                    status="processing",
                    statistical_data=[qs.to_dict() for qs in statistics],
                    educational_interpretation=[i.to_dict() for i in interpretations],
                    overall_summary=overall.overall_summary,
                    strengths=overall.strengths,
                    improvements=overall.improvements,
                    recommendations=overall.recommendations,
                    report_markdown=report,
                )
            )
            repo.complete_analysis(survey_id)
            logger.info("Analysis completed for survey %s", survey_id)

            return repo.get_analysis(survey_id)
        except Exception as e:
            logger.exception("Error during analysis of survey %s", survey_id)
            repo.mark_analysis_failed(survey_id, str(e))
            raise


def analyze_survey(
    repo: SurveyRepository,
    survey_id: int,
    settings: Settings,
    interpreter: Optional[QuestionInterpreterAgent] = None,
    overall_agent: Optional[OverallAnalysisAgent] = None,
) -> Optional[AnalysisRecord]:
    """Check readiness, then run the complete analysis with agents built from settings."""
    require_survey_ready(repo, survey_id)
    if interpreter is None:
        interpreter = QuestionInterpreterAgent(build_chat_model(settings, settings.interpreter_model))
    if overall_agent is None:
        overall_agent = OverallAnalysisAgent(build_chat_model(settings, settings.overall_model))
    return perform_complete_analysis(repo, survey_id, interpreter, overall_agent)

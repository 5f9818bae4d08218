from .formatting import format_number, format_percentage, percentage_level, rating_level
from .inference import infer_question_type
from .models import (
    QUESTION_TYPES,
    CategoricalStats,
    EmptyStats,
    NumericStats,
    Question,
    QuestionStatistics,
    TextStats,
)
from .statistics import analyze_question, calculate_statistics, calculate_survey_statistics

__all__ = [
    "QUESTION_TYPES",
    "CategoricalStats",
    "EmptyStats",
    "NumericStats",
    "Question",
    "QuestionStatistics",
    "TextStats",
    "analyze_question",
    "calculate_statistics",
    "calculate_survey_statistics",
    "format_number",
    "format_percentage",
    "infer_question_type",
    "percentage_level",
    "rating_level",
]

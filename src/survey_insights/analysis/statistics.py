"""
Descriptive statistics for survey questions.

The calculator branches strictly on the question type it is given:
  - categorical (multiple_choice, likert_scale, yes_no): frequencies, percentages, mode
  - numeric (rating): average, standard deviation, median, min, max plus a
    frequency breakdown over the discrete values observed
  - text: a single "total textual answers" count

Everything here is pure. Degenerate input (no answers, non-numeric ratings,
unknown types) yields sparse results instead of exceptions, so one bad question
never aborts the analysis of a whole survey.
"""
from __future__ import annotations

import statistics
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .formatting import round_half_up
from .models import (
    CATEGORICAL_TYPES,
    NUMERIC_TYPES,
    TEXT_TOTAL_LABEL,
    CategoricalStats,
    EmptyStats,
    Number,
    NumericStats,
    Question,
    QuestionStatistics,
    Statistics,
    TextStats,
    answer_label,
    is_missing,
    number_label,
    to_number,
)


def present_answers(answers: Iterable[Any]) -> List[Any]:
    return [a for a in answers if not is_missing(a)]


def _percentages(frequencies: Mapping[str, int], total: int) -> Dict[str, float]:
    if total <= 0:
        return {k: 0.0 for k in frequencies}
    return {k: (c / total) * 100 for k, c in frequencies.items()}


def _mode(frequencies: Mapping[str, int]) -> Optional[str]:
    # First label reaching the highest count wins ties.
    mode: Optional[str] = None
    best = 0
    for label, count in frequencies.items():
        if count > best:
            best = count
            mode = label
    return mode


def categorical_statistics(answers: Sequence[Any], options: Optional[Sequence[str]] = None) -> CategoricalStats:
    frequencies: Dict[str, int] = {}
    # Declared options appear even when nobody picked them.
    for option in options or ():
        frequencies.setdefault(answer_label(option), 0)

    present = present_answers(answers)
    for a in present:
        label = answer_label(a)
        frequencies[label] = frequencies.get(label, 0) + 1

    return CategoricalStats(
        frequencies=frequencies,
        percentages=_percentages(frequencies, len(present)),
        mode=_mode(frequencies),
    )


def numeric_values(answers: Iterable[Any]) -> List[Number]:
    nums: List[Number] = []
    for a in answers:
        if is_missing(a):
            continue
        n = to_number(a)
        if n is not None:
            nums.append(n)
    return nums


def numeric_statistics(answers: Sequence[Any]) -> Statistics:
    nums = numeric_values(answers)
    if not nums:
        return EmptyStats()

    n = len(nums)
    mean = sum(nums) / n
    # Population standard deviation around the unrounded mean.
    std = statistics.pstdev(nums, mu=mean) if n >= 2 else 0.0
    median = statistics.median(nums)

    frequencies: Dict[str, int] = {}
    for v in nums:
        label = number_label(v)
        frequencies[label] = frequencies.get(label, 0) + 1

    return NumericStats(
        average=round_half_up(mean, 2),
        standard_deviation=round_half_up(std, 2),
        median=median,
        min=min(nums),
        max=max(nums),
        frequencies=frequencies,
        percentages=_percentages(frequencies, n),
        mode=_mode(frequencies),
    )


def text_statistics(answers: Sequence[Any]) -> TextStats:
    return TextStats(frequencies={TEXT_TOTAL_LABEL: len(present_answers(answers))})


def calculate_statistics(
    answers: Sequence[Any],
    question_type: str,
    options: Optional[Sequence[str]] = None,
) -> Statistics:
    """
    Compute the statistics variant for one question's raw answers.

    `options` only matters for categorical types, where every declared option is
    reported even with a zero count. Unknown types give EmptyStats.
    """
    if question_type in CATEGORICAL_TYPES:
        return categorical_statistics(answers, options)
    if question_type in NUMERIC_TYPES:
        return numeric_statistics(answers)
    if question_type == "text":
        return text_statistics(answers)
    return EmptyStats()


def analyze_question(question: Question, answers: Sequence[Any]) -> QuestionStatistics:
    # total_responses counts answered cells, even when they are not numeric.
    return QuestionStatistics(
        question_id=question.question_id,
        question_text=question.question_text,
        question_type=question.question_type,
        total_responses=len(present_answers(answers)),
        statistics=calculate_statistics(answers, question.question_type, question.options),
    )


def calculate_survey_statistics(
    questions: Iterable[Question],
    answers_by_question: Mapping[Any, Sequence[Any]],
) -> List[QuestionStatistics]:
    """
    Analyze every question of a survey in display order.

    Questions without an entry in `answers_by_question` are analyzed over no answers.
    """
    ordered: List[Tuple[int, int, Question]] = [
        (q.order_index, i, q) for i, q in enumerate(questions)
    ]
    ordered.sort(key=lambda t: (t[0], t[1]))
    return [
        analyze_question(q, answers_by_question.get(q.question_id, ()))
        for _, _, q in ordered
    ]

"""
Question-type inference for imported spreadsheet columns.

Imported workbooks (MS Forms exports and similar) carry no type annotations, so
each column is classified from the shape of its values. The rules are an ordered
list and the first match wins; later rules assume the numeric checks already ran.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .models import QuestionType, answer_label, is_missing, to_number


YES_NO_PATTERNS = ("نعم", "لا", "yes", "no", "احيانا", "أحياناً", "sometimes")
LIKERT_PATTERNS = ("موافق", "غير موافق", "محايد", "agree", "disagree", "neutral")

MAX_YES_NO_LABELS = 3
LIKERT_LABEL_RANGE = (3, 7)
CHOICE_LABEL_RANGE = (2, 10)
MAX_CHOICE_AVG_LENGTH = 50


def _contains_any(label: str, patterns: Sequence[str]) -> bool:
    low = label.lower()
    return any(p.lower() in low for p in patterns)


def unique_labels(values: Sequence[Any]) -> List[str]:
    # Distinct trimmed labels of the non-empty values, in first-seen order.
    seen: List[str] = []
    for v in values:
        if is_missing(v):
            continue
        label = answer_label(v)
        if label not in seen:
            seen.append(label)
    return seen


def _rating_range(numbers: Sequence[float], label_count: int) -> Optional[QuestionType]:
    lo, hi = min(numbers), max(numbers)
    if lo >= 1 and hi <= 5 and label_count <= 5:
        return "rating"
    if lo >= 1 and hi <= 10 and label_count <= 10:
        return "rating"
    return None


def infer_question_type(values: Sequence[Any]) -> QuestionType:
    """
    Classify a column of raw cell values as one of the five question types.

    Never raises; empty or unclassifiable columns default to "text".
    """
    non_empty = [v for v in values if not is_missing(v)]
    if not non_empty:
        return "text"

    labels = unique_labels(non_empty)
    n_labels = len(labels)

    numbers = [to_number(v) for v in non_empty]
    if all(n is not None for n in numbers):
        rating = _rating_range(numbers, n_labels)  # type: ignore[arg-type]
        if rating is not None:
            return rating

    if n_labels <= MAX_YES_NO_LABELS and all(_contains_any(lb, YES_NO_PATTERNS) for lb in labels):
        return "yes_no"

    lo, hi = LIKERT_LABEL_RANGE
    if lo <= n_labels <= hi and any(_contains_any(lb, LIKERT_PATTERNS) for lb in labels):
        return "likert_scale"

    lo, hi = CHOICE_LABEL_RANGE
    if lo <= n_labels <= hi:
        avg_length = sum(len(lb) for lb in labels) / n_labels
        if avg_length < MAX_CHOICE_AVG_LENGTH:
            return "multiple_choice"

    return "text"

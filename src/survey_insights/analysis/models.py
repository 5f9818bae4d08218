# models.py
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Literal, Optional, Tuple, Union


QuestionType = Literal["multiple_choice", "likert_scale", "rating", "text", "yes_no"]

QUESTION_TYPES: Tuple[str, ...] = ("multiple_choice", "likert_scale", "rating", "text", "yes_no")
CATEGORICAL_TYPES = frozenset({"multiple_choice", "likert_scale", "yes_no"})
NUMERIC_TYPES = frozenset({"rating"})

# Raw cell / stored answer as it reaches the core.
RawAnswer = Union[str, int, float, None]
Number = Union[int, float]

# Label used for the single frequency entry of a free-text question.
TEXT_TOTAL_LABEL = "إجمالي الإجابات النصية"


@dataclass(frozen=True)
class Question:
    question_id: Any
    question_text: str
    question_type: str
    options: Optional[Tuple[str, ...]] = None
    is_required: bool = True
    order_index: int = 0


# -------------------------
# Statistics variants (one per question family)
# -------------------------

@dataclass(frozen=True)
class CategoricalStats:
    frequencies: Dict[str, int]
    percentages: Dict[str, float]
    mode: Optional[str] = None

    kind: ClassVar[str] = "categorical"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "frequencies": dict(self.frequencies),
            "percentages": dict(self.percentages),
        }
        if self.mode is not None:
            out["mode"] = self.mode
        return out


@dataclass(frozen=True)
class NumericStats:
    average: float
    standard_deviation: float
    median: Number
    min: Number
    max: Number
    frequencies: Dict[str, int] = field(default_factory=dict)
    percentages: Dict[str, float] = field(default_factory=dict)
    mode: Optional[str] = None

    kind: ClassVar[str] = "numeric"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "average": self.average,
            "standardDeviation": self.standard_deviation,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "frequencies": dict(self.frequencies),
            "percentages": dict(self.percentages),
        }
        if self.mode is not None:
            out["mode"] = self.mode
        return out


@dataclass(frozen=True)
class TextStats:
    frequencies: Dict[str, int]

    kind: ClassVar[str] = "text"

    @property
    def text_answers(self) -> int:
        return self.frequencies.get(TEXT_TOTAL_LABEL, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {"frequencies": dict(self.frequencies)}


@dataclass(frozen=True)
class EmptyStats:
    # No statistics could be computed (no numeric values, unknown question type).
    kind: ClassVar[str] = "empty"

    def to_dict(self) -> Dict[str, Any]:
        return {}


Statistics = Union[CategoricalStats, NumericStats, TextStats, EmptyStats]


@dataclass(frozen=True)
class QuestionStatistics:
    question_id: Any
    question_text: str
    question_type: str
    total_responses: int
    statistics: Statistics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionId": self.question_id,
            "questionText": self.question_text,
            "questionType": self.question_type,
            "totalResponses": self.total_responses,
            "statistics": self.statistics.to_dict(),
        }


# -------------------------
# Raw value helpers
# -------------------------

def is_missing(value: Any) -> bool:
    """
    Missing logic shared by inference and statistics:
      - None / NaN -> missing
      - empty or whitespace-only string -> missing
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def to_number(value: Any) -> Optional[Number]:
    # Returns a finite int/float for numeric-looking values, else None.
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        f = float(value)
        return f if math.isfinite(f) else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            pass
        try:
            f = float(s)
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


def number_label(value: Number) -> str:
    # 5 and 5.0 share the label "5".
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def answer_label(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    n = to_number(value)
    if n is not None:
        return number_label(n)
    return str(value).strip()

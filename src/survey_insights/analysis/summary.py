from __future__ import annotations

from typing import List

from .formatting import format_number, format_percentage_fixed
from .models import NumericStats, QuestionStatistics, Statistics


def _sorted_percentages(stats: Statistics) -> List[tuple]:
    percentages = getattr(stats, "percentages", None) or {}
    return sorted(percentages.items(), key=lambda kv: kv[1], reverse=True)


def build_statistical_summary(qs: QuestionStatistics) -> str:
    """
    Plain-text summary of one analyzed question: response count, answer
    distribution (highest first), mean and spread for ratings, most common answer.

    This is the statistics block the question interpreter quotes in its prompt.
    """
    out = f'تحليل السؤال: "{qs.question_text}"\n\n'
    out += f"عدد الاستجابات: {qs.total_responses}\n\n"

    stats = qs.statistics
    ranked = _sorted_percentages(stats)
    if ranked:
        out += "توزيع الإجابات:\n"
        for option, pct in ranked:
            out += f"- {option}: {format_percentage_fixed(pct)}\n"
        out += "\n"

    if isinstance(stats, NumericStats):
        out += f"المتوسط: {format_number(stats.average)}\n"
        out += f"الانحراف المعياري: {format_number(stats.standard_deviation)}\n"

    mode = getattr(stats, "mode", None)
    if mode:
        out += f"\nالإجابة الأكثر تكراراً: {mode}\n"

    return out

"""Shared fakes for the test suite."""
import json
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union


@dataclass
class FakeMessage:
    content: Any


class FakeLLM:
    """
    Stand-in for a LangChain chat model.

    `reply` is either a fixed string/dict (dicts are JSON-encoded) or a callable
    receiving the prompt text. `error` makes every call raise.
    """

    def __init__(self, reply: Union[str, dict, Callable[[str], Any], None] = None,
                 error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[List[Any]] = []

    def invoke(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        reply = self.reply
        if callable(reply):
            reply = reply(messages[-1].content)
        if isinstance(reply, dict):
            reply = json.dumps(reply, ensure_ascii=False)
        return FakeMessage(content=reply)


QUESTION_REPLY = {
    "interpretation": "النتائج إيجابية",
    "pedagogicalInsights": "بيئة تعليمية داعمة",
    "impact": "أثر إيجابي على التعلم",
    "strengths": ["تعاون المعلمات"],
    "improvements": ["التواصل مع الأسر"],
    "recommendations": ["تنظيم ورش عمل"],
}

OVERALL_REPLY = {
    "overallSummary": "ملخص عام",
    "strengths": ["قوة 1", "قوة 2"],
    "improvements": ["تحسين 1"],
    "recommendations": ["توصية 1", "توصية 2"],
}


def make_settings(db_path: str = ":memory:", **overrides: Any):
    from survey_insights.app.config import Settings

    values = dict(
        db_path=db_path,
        log_level="INFO",
        log_json=False,
        llm_base_url=None,
        llm_api_key=None,
        interpreter_model="test-interpreter",
        overall_model="test-overall",
        min_workbook_responses=5,
        max_strengths=5,
        max_improvements=5,
        max_recommendations=7,
    )
    values.update(overrides)
    return Settings(**values)

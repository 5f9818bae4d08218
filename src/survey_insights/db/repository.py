# repository.py
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .connection import connect
from .models import AnalysisRecord, QuestionDraft, ResponseRecord, School, Survey
from ..analysis.models import Question


SCHEMA_PATH = Path(__file__).with_name("schema.sql")

_JSON_ANALYSIS_FIELDS = {
    "statistical_data",
    "educational_interpretation",
    "strengths",
    "improvements",
    "recommendations",
}
_ANALYSIS_FIELDS = _JSON_ANALYSIS_FIELDS | {
    "overall_summary",
    "report_markdown",
    "status",
    "error_message",
    "completed_at",
}


def _now_iso_sqlite() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _loads(raw: Optional[str], default: Any) -> Any:
    return json.loads(raw) if raw else default


class SurveyRepository:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def init_schema(self, schema_sql: Optional[str] = None) -> None:
        # Execute schema SQL in a single script; statements are idempotent.
        sql = schema_sql if schema_sql is not None else SCHEMA_PATH.read_text(encoding="utf-8")
        conn = connect(self.db_path)
        try:
            conn.executescript(sql)
            conn.commit()
        finally:
            conn.close()

    # -------------------------
    # Schools
    # -------------------------
    def create_school(
        self,
        school_name: str,
        principal_name: str = "",
        academic_deputy_name: str = "",
        administrative_deputy_name: str = "",
        academic_year: str = "",
    ) -> School:
        conn = connect(self.db_path)
        try:
            cur = conn.execute(
                """
                INSERT INTO schools(school_name, principal_name, academic_deputy_name,
                                    administrative_deputy_name, academic_year)
                VALUES (?, ?, ?, ?, ?)
                """,
                (school_name, principal_name, academic_deputy_name, administrative_deputy_name, academic_year),
            )
            conn.commit()
            school_id = int(cur.lastrowid)
        finally:
            conn.close()
        return School(
            school_id=school_id,
            school_name=school_name,
            principal_name=principal_name,
            academic_deputy_name=academic_deputy_name,
            administrative_deputy_name=administrative_deputy_name,
            academic_year=academic_year,
        )

    def get_school(self, school_id: int) -> Optional[School]:
        conn = connect(self.db_path)
        try:
            r = conn.execute(
                """
                SELECT school_id, school_name, principal_name, academic_deputy_name,
                       administrative_deputy_name, academic_year
                FROM schools WHERE school_id = ?
                """,
                (school_id,),
            ).fetchone()
            if not r:
                return None
            return School(**dict(r))
        finally:
            conn.close()

    # -------------------------
    # Surveys + questions
    # -------------------------
    def create_survey(
        self,
        school_id: int,
        title: str,
        questions: Sequence[QuestionDraft],
        description: Optional[str] = None,
        purpose: Optional[str] = None,
        target_audience: Optional[str] = None,
    ) -> Survey:
        conn = connect(self.db_path)
        try:
            cur = conn.execute(
                """
                INSERT INTO surveys(school_id, title, description, purpose, target_audience)
                VALUES (?, ?, ?, ?, ?)
                """,
                (school_id, title, description, purpose, target_audience),
            )
            survey_id = int(cur.lastrowid)

            for q in questions:
                conn.execute(
                    """
                    INSERT INTO questions(survey_id, question_text, question_type, options,
                                          is_required, order_index)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        survey_id,
                        q.question_text,
                        q.question_type,
                        json.dumps(q.options, ensure_ascii=False) if q.options else None,
                        1 if q.is_required else 0,
                        q.order_index,
                    ),
                )
            conn.commit()
        finally:
            conn.close()

        return Survey(
            survey_id=survey_id,
            school_id=school_id,
            title=title,
            description=description,
            purpose=purpose,
            target_audience=target_audience,
        )

    def get_survey(self, survey_id: int) -> Optional[Survey]:
        conn = connect(self.db_path)
        try:
            r = conn.execute(
                """
                SELECT survey_id, school_id, title, description, purpose, target_audience, status
                FROM surveys WHERE survey_id = ?
                """,
                (survey_id,),
            ).fetchone()
            if not r:
                return None
            return Survey(**dict(r))
        finally:
            conn.close()

    def update_survey_status(self, survey_id: int, status: str) -> None:
        conn = connect(self.db_path)
        try:
            conn.execute(
                """
                UPDATE surveys
                SET status = ?,
                    updated_at = datetime('now'),
                    closed_at = CASE WHEN ? = 'closed' THEN datetime('now') ELSE closed_at END
                WHERE survey_id = ?
                """,
                (status, status, survey_id),
            )
            conn.commit()
        finally:
            conn.close()

    def list_questions(self, survey_id: int) -> List[Question]:
        conn = connect(self.db_path)
        try:
            rows = conn.execute(
                """
                SELECT question_id, question_text, question_type, options, is_required, order_index
                FROM questions
                WHERE survey_id = ?
                ORDER BY order_index ASC, question_id ASC
                """,
                (survey_id,),
            ).fetchall()

            out: List[Question] = []
            for r in rows:
                options = _loads(r["options"], None)
                out.append(
                    Question(
                        question_id=r["question_id"],
                        question_text=r["question_text"],
                        question_type=r["question_type"],
                        options=tuple(options) if options else None,
                        is_required=bool(r["is_required"]),
                        order_index=r["order_index"],
                    )
                )
            return out
        finally:
            conn.close()

    # -------------------------
    # Responses
    # -------------------------
    def add_response(
        self,
        survey_id: int,
        question_id: int,
        respondent_id: Optional[str] = None,
        answer_text: Optional[str] = None,
        answer_option: Optional[str] = None,
        answer_value: Optional[float] = None,
    ) -> int:
        conn = connect(self.db_path)
        try:
            cur = conn.execute(
                """
                INSERT INTO responses(survey_id, question_id, respondent_id,
                                      answer_text, answer_option, answer_value)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (survey_id, question_id, respondent_id, answer_text, answer_option, answer_value),
            )
            conn.commit()
            return int(cur.lastrowid)
        finally:
            conn.close()

    def list_responses(self, survey_id: int) -> List[ResponseRecord]:
        conn = connect(self.db_path)
        try:
            rows = conn.execute(
                """
                SELECT response_id, survey_id, question_id, respondent_id,
                       answer_text, answer_option, answer_value
                FROM responses
                WHERE survey_id = ?
                ORDER BY response_id ASC
                """,
                (survey_id,),
            ).fetchall()
            return [ResponseRecord(**dict(r)) for r in rows]
        finally:
            conn.close()

    def count_responses(self, survey_id: int) -> int:
        conn = connect(self.db_path)
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM responses WHERE survey_id = ?",
                (survey_id,),
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def answers_by_question(self, survey_id: int) -> Dict[int, List[Any]]:
        # Group raw answers per question_id, preserving submission order.
        grouped: Dict[int, List[Any]] = {}
        for r in self.list_responses(survey_id):
            grouped.setdefault(r.question_id, []).append(r.answer)
        return grouped

    # -------------------------
    # Analyses
    # -------------------------
    def upsert_analysis(self, rec: AnalysisRecord) -> None:
        # A new run replaces the prior analysis of the survey in full.
        conn = connect(self.db_path)
        try:
            conn.execute(
                """
                INSERT INTO analyses(survey_id, statistical_data, educational_interpretation,
                                     overall_summary, strengths, improvements, recommendations,
                                     report_markdown, status, error_message, completed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(survey_id) DO UPDATE SET
                  statistical_data=excluded.statistical_data,
                  educational_interpretation=excluded.educational_interpretation,
                  overall_summary=excluded.overall_summary,
                  strengths=excluded.strengths,
                  improvements=excluded.improvements,
                  recommendations=excluded.recommendations,
                  report_markdown=excluded.report_markdown,
                  status=excluded.status,
                  error_message=excluded.error_message,
                  completed_at=excluded.completed_at,
                  updated_at=datetime('now')
                """,
                (
                    rec.survey_id,
                    json.dumps(rec.statistical_data, ensure_ascii=False),
                    json.dumps(rec.educational_interpretation, ensure_ascii=False),
                    rec.overall_summary,
                    json.dumps(rec.strengths, ensure_ascii=False),
                    json.dumps(rec.improvements, ensure_ascii=False),
                    json.dumps(rec.recommendations, ensure_ascii=False),
                    rec.report_markdown,
                    rec.status,
                    rec.error_message,
                    rec.completed_at,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def patch_analysis(self, survey_id: int, **fields: Any) -> None:
        # Update any subset of columns safely; unknown keys are ignored.
        set_parts = []
        params: List[Any] = []

        for k, v in fields.items():
            if k not in _ANALYSIS_FIELDS:
                continue
            set_parts.append(f"{k} = ?")
            if k in _JSON_ANALYSIS_FIELDS and v is not None:
                params.append(json.dumps(v, ensure_ascii=False))
            else:
                params.append(v)

        if not set_parts:
            return

        params.append(survey_id)
        conn = connect(self.db_path)
        try:
            conn.execute(
                f"UPDATE analyses SET {', '.join(set_parts)}, updated_at = datetime('now') WHERE survey_id = ?",
                params,
            )
            conn.commit()
        finally:
            conn.close()

    def mark_analysis_failed(self, survey_id: int, error_message: str) -> None:
        # Creates the record when the run failed before anything was stored.
        if self.get_analysis(survey_id) is None:
            self.upsert_analysis(AnalysisRecord(survey_id=survey_id, status="failed", error_message=error_message))
        else:
            self.patch_analysis(survey_id, status="failed", error_message=error_message)

    def complete_analysis(self, survey_id: int) -> None:
        self.patch_analysis(survey_id, status="completed", completed_at=_now_iso_sqlite())

    def get_analysis(self, survey_id: int) -> Optional[AnalysisRecord]:
        conn = connect(self.db_path)
        try:
            r = conn.execute(
                """
                SELECT survey_id, statistical_data, educational_interpretation, overall_summary,
                       strengths, improvements, recommendations, report_markdown,
                       status, error_message, completed_at
                FROM analyses WHERE survey_id = ?
                """,
                (survey_id,),
            ).fetchone()
            if not r:
                return None
            return AnalysisRecord(
                survey_id=r["survey_id"],
                status=r["status"],
                statistical_data=_loads(r["statistical_data"], []),
                educational_interpretation=_loads(r["educational_interpretation"], []),
                overall_summary=r["overall_summary"],
                strengths=_loads(r["strengths"], []),
                improvements=_loads(r["improvements"], []),
                recommendations=_loads(r["recommendations"], []),
                report_markdown=r["report_markdown"],
                error_message=r["error_message"],
                completed_at=r["completed_at"],
            )
        finally:
            conn.close()

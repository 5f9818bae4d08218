from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def _env_int(key: str, default: int) -> int:
    v = _env_str(key)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    v = _env_str(key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # Storage
    db_path: str

    # Logging
    log_level: str
    log_json: bool

    # LLM access (used by the narrative agents)
    llm_base_url: Optional[str]
    llm_api_key: Optional[str]
    interpreter_model: str
    overall_model: str

    # Workbook ingestion
    min_workbook_responses: int

    # Report shaping
    max_strengths: int
    max_improvements: int
    max_recommendations: int

    @staticmethod
    def from_env() -> "Settings":
        # Read configuration from environment variables (and .env when present).
        load_dotenv()

        db_path = _env_str("APP_DB_PATH", "data/surveys.db") or "data/surveys.db"

        # Create the parent directory only; the DB file is created on first connect.
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        return Settings(
            db_path=db_path,

            log_level=_env_str("APP_LOG_LEVEL", "INFO") or "INFO",
            log_json=_env_bool("APP_LOG_JSON", True),

            llm_base_url=_env_str("APP_LLM_BASE_URL"),
            llm_api_key=_env_str("OPENAI_API_KEY"),
            interpreter_model=_env_str("APP_MODEL_INTERPRETER", "gpt-4.1-mini") or "gpt-4.1-mini",
            overall_model=_env_str("APP_MODEL_OVERALL", "gpt-4.1") or "gpt-4.1",

            min_workbook_responses=_env_int("APP_MIN_WORKBOOK_RESPONSES", 5),

            max_strengths=_env_int("APP_MAX_STRENGTHS", 5),
            max_improvements=_env_int("APP_MAX_IMPROVEMENTS", 5),
            max_recommendations=_env_int("APP_MAX_RECOMMENDATIONS", 7),
        )

# src/survey_insights/agents/base.py
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..app.config import Settings


class AgentError(Exception):
    pass


class PromptNotFound(AgentError):
    pass


class AgentOutputParseError(AgentError):
    pass


class AgentOutputValidationError(AgentError):
    pass


def _read_text_file(path: Path) -> str:
    if not path.exists() or not path.is_file():
        raise PromptNotFound(f"Prompt file not found: {path}")
    return path.read_text(encoding="utf-8")


def render_prompt(template: str, variables: Dict[str, Any]) -> str:
    def repl(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if key not in variables:
            return match.group(0)
        v = variables[key]
        if isinstance(v, (dict, list)):
            return json.dumps(v, ensure_ascii=False, indent=2)
        return str(v)

    return re.sub(r"\{\{\s*([a-zA-Z0-9_\.]+)\s*\}\}", repl, template)


def parse_json_object(text: str) -> Dict[str, Any]:
    s = text.strip()
    # Strip Markdown fences such as ```json
    if s.startswith("```"):
        newline_idx = s.find("\n")
        if newline_idx != -1:
            s = s[newline_idx + 1:]
        if s.endswith("```"):
            s = s[:-3]
    s = s.strip()

    try:
        obj = json.loads(s)
    except json.JSONDecodeError:
        start = s.find("{")
        end = s.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise AgentOutputParseError(f"Could not find a JSON object in output: {text[:100]}...")
        try:
            obj = json.loads(s[start:end + 1])
        except json.JSONDecodeError as e:
            raise AgentOutputParseError(f"Failed to parse JSON object: {e}") from e

    if not isinstance(obj, dict):
        raise AgentOutputParseError("Expected a JSON object at top level.")
    return obj


def validate_with_jsonschema(payload: Dict[str, Any], schema: Optional[Dict[str, Any]]) -> None:
    if schema is None:
        return
    try:
        jsonschema.validate(instance=payload, schema=schema)
    except jsonschema.ValidationError as e:
        raise AgentOutputValidationError(e.message) from e


def build_chat_model(settings: Settings, model: str) -> ChatOpenAI:
    return ChatOpenAI(
        model=model,
        temperature=0,
        openai_api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
    )


class BaseAgent:
    """
    Base class for the narrative agents.

    Builds a prompt from a template, sends it with the agent's system message,
    and parses/validates the JSON object the model answers with. `llm` is any
    object with a LangChain-style `invoke(messages)`; tests pass a fake one.
    """

    name: str = "base_agent"
    prompt_file: Optional[str] = None
    system_prompt: str = ""
    default_prompt: str = ""
    output_schema: Optional[Dict[str, Any]] = None

    def __init__(self, llm: Any, prompts_dir: Optional[str] = None):
        self.llm = llm
        self.prompts_dir = Path(prompts_dir) if prompts_dir else None

    def invoke(self, variables: Dict[str, Any]) -> Dict[str, Any]:
        if self.llm is None:
            raise AgentError(f"LLM is not configured for agent '{self.name}'.")

        prompt_text = render_prompt(self._load_prompt_template(), variables)
        messages: List[Any] = []
        if self.system_prompt:
            messages.append(SystemMessage(content=self.system_prompt))
        messages.append(HumanMessage(content=prompt_text))

        try:
            ai_msg = self.llm.invoke(messages)
        except Exception as e:
            raise AgentError(f"LLM call failed for agent '{self.name}': {e}") from e
        raw = ai_msg.content
        if not isinstance(raw, str) or not raw.strip():
            raise AgentOutputParseError(f"No response from LLM for agent '{self.name}'.")

        payload = parse_json_object(raw)
        validate_with_jsonschema(payload, self.output_schema)
        return payload

    def _load_prompt_template(self) -> str:
        if self.prompt_file and self.prompts_dir is not None:
            path = self.prompts_dir / self.prompt_file
            if path.exists():
                return _read_text_file(path)

        if self.default_prompt.strip():
            return self.default_prompt

        raise PromptNotFound(f"No prompt_file/default_prompt defined for agent '{self.name}'.")

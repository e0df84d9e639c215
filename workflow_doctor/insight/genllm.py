# workflow_doctor/insight/genllm.py

from __future__ import annotations
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from openai import OpenAI

from workflow_doctor.insight.prompt import SYSTEM_INSTRUCTION, build_insight_prompt
from workflow_doctor.model.workflow import Workflow
from workflow_doctor.utils.logger import get_logger

log = get_logger("insight")

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MODEL_LABEL = "AI Model"


class InsightError(RuntimeError):
    """The text-generation service answered with something unusable."""


class InsightUnavailableError(InsightError):
    """No text-generation client could be configured."""


@dataclass(frozen=True)
class Insight:
    """Free-text tips (markdown) and the label of the model that wrote them."""
    text: str
    model: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def default_model() -> str:
    return os.environ.get("WORKFLOW_DOCTOR_MODEL") or DEFAULT_MODEL


def get_client() -> Any:
    """Return an OpenAI client configured from the environment."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise InsightUnavailableError("OPENAI_API_KEY is not set; AI insight is unavailable")
    kwargs: Dict[str, Any] = {"api_key": api_key}
    org = os.environ.get("OPENAI_ORG")
    if org:
        kwargs["organization"] = org
    base_url = os.environ.get("OPENAI_BASE_URL")
    if base_url:
        kwargs["base_url"] = base_url
    return OpenAI(**kwargs)


def generate_insight(
    workflow: Workflow,
    model: Optional[str] = None,
    client: Optional[Any] = None,
) -> Insight:
    """
    Ask the text-generation service for improvement tips on a workflow.

    The returned text is passed through untouched. Errors raised by the
    client (timeouts, HTTP errors) propagate to the caller.
    """
    client = client if client is not None else get_client()
    model = model or default_model()
    prompt = build_insight_prompt(workflow)
    log.info("requesting insight from %s (%d nodes, %d prompt chars)", model, len(workflow.nodes), len(prompt))

    resp = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": prompt},
        ],
        temperature=0.2,
        max_tokens=300,
    )

    choices = getattr(resp, "choices", None)
    if not choices:
        raise InsightError(f"LLM response malformed: no choices in {resp!r}")
    text = choices[0].message.content or ""
    label = getattr(resp, "model", None) or DEFAULT_MODEL_LABEL
    return Insight(text=text.strip(), model=label)

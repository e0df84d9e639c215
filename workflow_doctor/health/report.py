# workflow_doctor/health/report.py

from typing import Any, Dict, List, Optional, Sequence, Tuple

from workflow_doctor.health.rules import (
    Finding,
    is_custom_code,
    is_default_name,
    is_error_handler,
    is_trigger,
)
from workflow_doctor.health.scorer import BASE_SCORE, health_score
from workflow_doctor.model.workflow import Workflow

HEALTHY_ABOVE = 80

ISSUE_TAGS = {
    "missing_error_handling": "ERROR_HANDLING",
    "moderate_size": "SIZE",
    "large_size": "SIZE",
    "no_trigger": "TRIGGER",
    "too_many_triggers": "TRIGGER",
    "excess_custom_code": "CODE",
    "default_naming": "NAMING",
}

EXPLANATION = {
    "missing_error_handling": "Complex workflows without any failure path are high risk",
    "moderate_size": "Larger graphs carry more undiscovered interaction bugs",
    "large_size": "Very large graphs; stacks with the moderate size penalty",
    "no_trigger": "A workflow with no entry point is malformed",
    "too_many_triggers": "Ambiguous entry points reduce maintainability",
    "excess_custom_code": "Imperative code inside a declarative graph is hard to review",
    "default_naming": "Unedited default names suggest the workflow was never reviewed",
}


def format_issue(finding: Finding) -> str:
    """Render a finding as a tagged, human-readable issue line."""
    tag = ISSUE_TAGS.get(finding.rule, finding.rule.upper())
    return f"[{tag}] {finding.detail} ({finding.delta:+d})"


def health_band(score: int) -> str:
    return "healthy" if score > HEALTHY_ABOVE else "needs_attention"


def health_check(workflow: Any) -> Tuple[int, List[str], Dict[str, Any]]:
    """
    Score a workflow (a Workflow or a raw export dict) and collect issues.

    Returns:
        score (int in [0, 100]), issues (List[str]), detail
    """
    if not isinstance(workflow, Workflow):
        workflow = Workflow.from_export(workflow)

    score, findings = health_score(workflow)
    nodes = workflow.nodes

    detail = {
        "workflow": workflow.name,
        "n_nodes": len(nodes),
        "n_triggers": sum(1 for n in nodes if is_trigger(n)),
        "n_error_handlers": sum(1 for n in nodes if is_error_handler(n)),
        "n_code_nodes": sum(1 for n in nodes if is_custom_code(n)),
        "n_default_names": sum(1 for n in nodes if is_default_name(n)),
        "raw_total": BASE_SCORE + sum(f.delta for f in findings),
        "score": score,
        "band": health_band(score),
        "findings": [f.to_dict() for f in findings],
        "explanation": {f.rule: EXPLANATION[f.rule] for f in findings if f.rule in EXPLANATION},
    }
    return score, [format_issue(f) for f in findings], detail


def report_payload(
    source: str,
    score: int,
    findings: Sequence[Finding],
    detail: Optional[Dict[str, Any]] = None,
    insight: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """JSON-serialisable report for --report output and API responses."""
    return {
        "input": source,
        "score": score,
        "band": health_band(score),
        "findings": [f.to_dict() for f in findings],
        "issues": [format_issue(f) for f in findings],
        "detail": detail or {},
        "insight": insight,
    }

# workflow_doctor/health/scorer.py

from typing import List, Tuple

from workflow_doctor.health.rules import RULES, Finding
from workflow_doctor.model.workflow import Workflow
from workflow_doctor.utils.logger import get_logger

log = get_logger("health")

BASE_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100


def health_score(workflow: Workflow) -> Tuple[int, List[Finding]]:
    """
    Deterministic health score of a workflow.

    Starts from 100, applies every rule independently and clamps once at the
    end, so a single rule can push the raw total below zero.

    Returns:
        score (int in [0, 100]), findings (rules that fired, in rule order)
    """
    nodes = workflow.nodes
    findings: List[Finding] = []
    for rule in RULES:
        f = rule(nodes)
        if f is not None:
            log.debug("%s: %s (%+d)", f.rule, f.detail, f.delta)
            findings.append(f)

    raw = BASE_SCORE + sum(f.delta for f in findings)
    score = max(MIN_SCORE, min(MAX_SCORE, raw))
    log.debug("workflow %r: raw=%d score=%d", workflow.name, raw, score)
    return score, findings

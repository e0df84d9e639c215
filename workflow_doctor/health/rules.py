# workflow_doctor/health/rules.py
#
# Node classifiers and the individual health rules. Every rule looks only at
# node names/types and counts; none of them follows connections.

from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List, Optional, Sequence

from workflow_doctor.model.workflow import Node

ERROR_KEYS = ("error", "catch")          # matched on lowercased type
TRIGGER_KEYS = ("trigger", "webhook")    # matched on lowercased type
CODE_KEYS = ("Code", "Function")         # matched on the type as written

DEFAULT_NAME_RE = re.compile(r"Node \d+")

COMPLEX_WORKFLOW_NODES = 5
MODERATE_SIZE_NODES = 10
LARGE_SIZE_NODES = 20
MAX_TRIGGERS = 2
MAX_CODE_NODES = 3

MISSING_ERROR_HANDLING_DELTA = -20
MODERATE_SIZE_DELTA = -5
LARGE_SIZE_DELTA = -10
NO_TRIGGER_DELTA = -10
TOO_MANY_TRIGGERS_DELTA = -5
EXCESS_CODE_DELTA = -5
DEFAULT_NAME_DELTA = -2


@dataclass(frozen=True)
class Finding:
    """One triggered rule: its id, the points it moves the score by, and why."""
    rule: str
    delta: int
    detail: str

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# --- classifiers ---

def is_error_handler(node: Node) -> bool:
    t = node.type.lower()
    return any(k in t for k in ERROR_KEYS)


def is_trigger(node: Node) -> bool:
    t = node.type.lower()
    return any(k in t for k in TRIGGER_KEYS)


def is_custom_code(node: Node) -> bool:
    # Case-sensitive on purpose: "n8n-nodes-base.code" does not count.
    return any(k in node.type for k in CODE_KEYS)


def is_default_name(node: Node) -> bool:
    return DEFAULT_NAME_RE.search(node.name) is not None


# --- rules ---

def missing_error_handling(nodes: Sequence[Node]) -> Optional[Finding]:
    if len(nodes) <= COMPLEX_WORKFLOW_NODES or any(is_error_handler(n) for n in nodes):
        return None
    return Finding(
        "missing_error_handling",
        MISSING_ERROR_HANDLING_DELTA,
        f"{len(nodes)} nodes and no error/catch node (no failure path)",
    )


def moderate_size(nodes: Sequence[Node]) -> Optional[Finding]:
    if len(nodes) <= MODERATE_SIZE_NODES:
        return None
    return Finding(
        "moderate_size",
        MODERATE_SIZE_DELTA,
        f"{len(nodes)} nodes (more than {MODERATE_SIZE_NODES})",
    )


def large_size(nodes: Sequence[Node]) -> Optional[Finding]:
    if len(nodes) <= LARGE_SIZE_NODES:
        return None
    return Finding(
        "large_size",
        LARGE_SIZE_DELTA,
        f"{len(nodes)} nodes (more than {LARGE_SIZE_NODES})",
    )


def no_trigger(nodes: Sequence[Node]) -> Optional[Finding]:
    if any(is_trigger(n) for n in nodes):
        return None
    return Finding(
        "no_trigger",
        NO_TRIGGER_DELTA,
        "no trigger or webhook node (workflow has no entry point)",
    )


def too_many_triggers(nodes: Sequence[Node]) -> Optional[Finding]:
    triggers = [n.name for n in nodes if is_trigger(n)]
    if len(triggers) <= MAX_TRIGGERS:
        return None
    return Finding(
        "too_many_triggers",
        TOO_MANY_TRIGGERS_DELTA,
        f"{len(triggers)} entry points: {triggers}",
    )


def excess_custom_code(nodes: Sequence[Node]) -> Optional[Finding]:
    code = [n.name for n in nodes if is_custom_code(n)]
    if len(code) <= MAX_CODE_NODES:
        return None
    return Finding(
        "excess_custom_code",
        EXCESS_CODE_DELTA,
        f"{len(code)} Code/Function nodes (more than {MAX_CODE_NODES}): {code}",
    )


def default_naming(nodes: Sequence[Node]) -> Optional[Finding]:
    named = [n.name for n in nodes if is_default_name(n)]
    if not named:
        return None
    return Finding(
        "default_naming",
        DEFAULT_NAME_DELTA * len(named),
        f"{len(named)} node(s) still carry a default name: {named}",
    )


Rule = Callable[[Sequence[Node]], Optional[Finding]]

# Evaluation (and findings) order.
RULES: List[Rule] = [
    missing_error_handling,
    moderate_size,
    large_size,
    no_trigger,
    too_many_triggers,
    excess_custom_code,
    default_naming,
]

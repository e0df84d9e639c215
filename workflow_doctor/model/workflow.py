# workflow_doctor/model/workflow.py
from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from jsonschema import validate, ValidationError

from workflow_doctor.model.schema import N8N_EXPORT_SCHEMA
from workflow_doctor.utils.io import PathLike, read_json


class WorkflowFormatError(ValueError):
    """Raised when a document cannot be read as a workflow export."""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _position(value: Any) -> Optional[Tuple[float, float]]:
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return (value[0], value[1])
    if isinstance(value, dict) and "x" in value and "y" in value:
        return (value["x"], value["y"])
    return None


@dataclass(frozen=True)
class Node:
    """One step of a workflow. Only name and type are read by the scorer."""
    name: str = ""
    type: str = ""
    position: Optional[Tuple[float, float]] = None

    @classmethod
    def from_export(cls, raw: Mapping[str, Any]) -> "Node":
        return cls(
            name=_text(raw.get("name")),
            type=_text(raw.get("type")),
            position=_position(raw.get("position")),
        )


@dataclass(frozen=True)
class Workflow:
    """
    A workflow export materialized for one analysis.

    `connections` is kept for display and round-tripping only; nothing in the
    health scorer reads it. `raw` is the untouched source document.
    """
    name: str = ""
    nodes: Tuple[Node, ...] = ()
    connections: Mapping[str, Any] = field(default_factory=dict)
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_export(cls, doc: Any) -> "Workflow":
        """
        Build a Workflow from an exported n8n document.

        A missing or non-list `nodes` field is rejected with WorkflowFormatError.
        Nodes lacking a name or type are kept with empty strings.
        """
        try:
            validate(instance=doc, schema=N8N_EXPORT_SCHEMA)
        except ValidationError as e:
            where = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise WorkflowFormatError(f"Not a workflow export ({where}): {e.message}") from e

        # Detached from the caller's dict.
        doc = copy.deepcopy(doc)
        return cls(
            name=_text(doc.get("name")),
            nodes=tuple(Node.from_export(n) for n in doc["nodes"]),
            connections=doc.get("connections") or {},
            raw=doc,
        )

    def to_export(self) -> Dict[str, Any]:
        """Return the document this workflow was built from, or a minimal export."""
        if self.raw:
            return copy.deepcopy(dict(self.raw))
        return {
            "name": self.name,
            "nodes": [
                {"name": n.name, "type": n.type, "position": list(n.position) if n.position else None}
                for n in self.nodes
            ],
            "connections": copy.deepcopy(dict(self.connections)),
        }


def load_workflow(path: PathLike) -> Workflow:
    """Read a workflow export from a JSON file."""
    try:
        doc = read_json(path)
    except json.JSONDecodeError as e:
        raise WorkflowFormatError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})") from e
    return Workflow.from_export(doc)


def raw_view(workflow: Workflow, indent: int = 2) -> str:
    """Pretty JSON of the export, every source field included."""
    return json.dumps(workflow.to_export(), ensure_ascii=False, indent=indent)


def short_type(node: Node) -> str:
    """Last dotted segment of the node type, e.g. 'n8n-nodes-base.webhook' -> 'webhook'."""
    return node.type.split(".")[-1]


def node_category(node: Node) -> str:
    """Display category used when listing nodes: trigger, ai or default."""
    t = node.type
    if "trigger" in t or "webhook" in t:
        return "trigger"
    if "google" in t or "ai" in t:
        return "ai"
    return "default"

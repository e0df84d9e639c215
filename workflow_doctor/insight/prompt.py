# workflow_doctor/insight/prompt.py

import json
from typing import Dict, List

from workflow_doctor.model.workflow import Workflow

SYSTEM_INSTRUCTION = "You are an expert n8n workflow engineer. Be concise."

PROMPT_TEMPLATE = """Analyze this n8n workflow: {nodes}.
Provide exactly 3 short bullet points (~10 words each) on improvements.
CRITICAL: You MUST start every line with a hyphen (-).

Example:
- Add error handling node.
- Remove redundant webhooks.
- Optimize HTTP request batching.

Your Output (Exactly 3 bullets):"""


def node_summary(workflow: Workflow) -> List[Dict[str, str]]:
    """name/type pairs of every node, in source order."""
    return [{"name": n.name, "type": n.type} for n in workflow.nodes]


def build_insight_prompt(workflow: Workflow) -> str:
    nodes = json.dumps(node_summary(workflow), ensure_ascii=False, separators=(",", ":"))
    return PROMPT_TEMPLATE.format(nodes=nodes)

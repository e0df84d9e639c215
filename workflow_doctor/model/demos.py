# workflow_doctor/model/demos.py
from __future__ import annotations

from pathlib import Path
from typing import List

from workflow_doctor.model.workflow import Workflow, load_workflow

DEMO_DIR = Path(__file__).resolve().parent.parent / "demo_workflows"

DEFAULT_DEMO = "email-classifier"


def list_demos() -> List[str]:
    """Names of the bundled demo workflows, sorted."""
    return sorted(p.stem for p in DEMO_DIR.glob("*.json"))


def load_demo(name: str = DEFAULT_DEMO) -> Workflow:
    """Load a bundled demo workflow by name (file stem)."""
    path = DEMO_DIR / f"{name}.json"
    if not path.is_file():
        raise KeyError(f"Unknown demo '{name}'. Choose one of: {', '.join(list_demos())}")
    return load_workflow(path)

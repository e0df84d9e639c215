# workflow_doctor/session.py
#
# Stateful orchestration around the pure scorer: holds the current workflow
# and the current analysis. State flow: idle -> loaded -> analyzing -> analyzed.

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List, Optional

from workflow_doctor.health.rules import Finding
from workflow_doctor.health.scorer import health_score
from workflow_doctor.insight.genllm import Insight
from workflow_doctor.model.demos import load_demo
from workflow_doctor.model.workflow import Workflow
from workflow_doctor.utils.logger import get_logger

log = get_logger("session")

InsightFn = Callable[[Workflow], Insight]


class SessionState(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"


class SessionStateError(RuntimeError):
    """Operation not allowed in the session's current state."""


class DoctorSession:
    def __init__(self) -> None:
        self.state = SessionState.IDLE
        self.workflow: Optional[Workflow] = None
        self.score: Optional[int] = None
        self.findings: List[Finding] = []
        self.insight: Optional[Insight] = None

    def _require(self, *allowed: SessionState) -> None:
        if self.state not in allowed:
            names = ", ".join(s.value for s in allowed)
            raise SessionStateError(f"cannot do that while {self.state.value} (needs: {names})")

    def _clear_analysis(self) -> None:
        self.score = None
        self.findings = []
        self.insight = None

    def load(self, workflow: Any) -> Workflow:
        """Make `workflow` (a Workflow or raw export dict) current; drops any previous analysis."""
        self._require(SessionState.IDLE, SessionState.LOADED, SessionState.ANALYZED)
        if not isinstance(workflow, Workflow):
            workflow = Workflow.from_export(workflow)
        self.workflow = workflow
        self._clear_analysis()
        self.state = SessionState.LOADED
        log.info("loaded workflow %r (%d nodes)", workflow.name, len(workflow.nodes))
        return workflow

    def load_demo(self, name: str) -> Workflow:
        return self.load(load_demo(name))

    def analyze(self, insight_fn: Optional[InsightFn] = None) -> int:
        """
        Score the current workflow and optionally fetch AI insight for it.

        If insight_fn raises, the session falls back to `loaded` and the
        exception propagates.
        """
        self._require(SessionState.LOADED, SessionState.ANALYZED)
        self._clear_analysis()
        self.state = SessionState.ANALYZING

        score, findings = health_score(self.workflow)
        try:
            insight = insight_fn(self.workflow) if insight_fn is not None else None
        except Exception:
            self.state = SessionState.LOADED
            log.warning("insight failed for %r; session back to loaded", self.workflow.name)
            raise

        self.score, self.findings, self.insight = score, findings, insight
        self.state = SessionState.ANALYZED
        return score

    def reset(self) -> None:
        self.workflow = None
        self._clear_analysis()
        self.state = SessionState.IDLE

# tests/test_scorer.py

from collections.abc import Mapping

import pytest

from workflow_doctor.health.scorer import health_score
from workflow_doctor.model.workflow import Node, Workflow


class _UntouchableConnections(Mapping):
    def __getitem__(self, key):
        raise AssertionError("connections must not be read while scoring")

    def __iter__(self):
        raise AssertionError("connections must not be read while scoring")

    def __len__(self):
        raise AssertionError("connections must not be read while scoring")


def wf(*nodes, name="test"):
    return Workflow(name=name, nodes=tuple(nodes))


def test_empty_workflow_scores_90():
    score, findings = health_score(wf())
    assert score == 90
    assert [(f.rule, f.delta) for f in findings] == [("no_trigger", -10)]


def test_zero_penalties_scores_100():
    score, findings = health_score(wf(Node("Hook", "n8n-nodes-base.webhook")))
    assert score == 100
    assert findings == []


@pytest.mark.parametrize("n", range(0, 6))
def test_small_untriggered_workflows_score_90(n):
    nodes = [Node(f"Step {i}", "n8n-nodes-base.set") for i in range(n)]
    score, _ = health_score(wf(*nodes))
    assert score == 90


def test_six_nodes_without_error_handling_or_trigger():
    nodes = [Node(f"Step {i}", "n8n-nodes-base.httpRequest") for i in range(5)]
    nodes.append(Node("Transform", "n8n-nodes-base.Code"))
    score, findings = health_score(wf(*nodes))
    assert [f.delta for f in findings] == [-20, -10]
    assert score == 70


def test_twenty_five_nodes_with_default_names():
    nodes = [
        Node("On Failure", "errorHandler"),
        Node("Inbound", "webhookTrigger"),
        Node("Node 1", "n8n-nodes-base.set"),
        Node("Node 12", "n8n-nodes-base.set"),
    ]
    nodes += [Node(f"Sync {i}", "n8n-nodes-base.hubspot") for i in range(21)]
    score, findings = health_score(wf(*nodes))
    assert [(f.rule, f.delta) for f in findings] == [
        ("moderate_size", -5),
        ("large_size", -10),
        ("default_naming", -4),
    ]
    assert score == 81


def test_score_clamps_at_zero():
    nodes = [Node(f"Node {i}", "n8n-nodes-base.noOp") for i in range(100)]
    score, findings = health_score(wf(*nodes))
    assert sum(f.delta for f in findings) < -100
    assert score == 0


def test_idempotent():
    w = wf(*[Node(f"Node {i}", "x.Code") for i in range(8)])
    assert health_score(w) == health_score(w)


def test_adding_default_named_node_never_raises_score():
    nodes = [Node("Hook", "x.webhook"), Node("Handle", "x.errorTrigger")]
    previous, _ = health_score(wf(*nodes))
    for i in range(1, 40):
        nodes.append(Node(f"Node {i}", "x.set"))
        current, _ = health_score(wf(*nodes))
        assert current <= previous
        previous = current


def test_connections_are_never_read():
    w = Workflow(name="opaque", nodes=(Node("Hook", "x.webhook"),), connections=_UntouchableConnections())
    score, _ = health_score(w)
    assert score == 100


def test_node_order_does_not_matter():
    nodes = [Node("A", "x.webhook"), Node("Node 3", "x.set")] + [Node(f"S{i}", "x.Code") for i in range(5)]
    forward, _ = health_score(wf(*nodes))
    backward, _ = health_score(wf(*reversed(nodes)))
    assert forward == backward

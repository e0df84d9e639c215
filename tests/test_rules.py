# tests/test_rules.py

import pytest

from workflow_doctor.health import rules
from workflow_doctor.model.workflow import Node


def nodes_of(*types, name_prefix="Step"):
    return [Node(name=f"{name_prefix} {chr(65 + i)}", type=t) for i, t in enumerate(types)]


@pytest.mark.parametrize("type_, expected", [
    ("n8n-nodes-base.errorTrigger", True),
    ("ErrorHandler", True),
    ("n8n-nodes-base.stopAndError", True),
    ("custom.tryCatch", True),
    ("custom.CATCH", True),
    ("n8n-nodes-base.httpRequest", False),
    ("", False),
])
def test_is_error_handler(type_, expected):
    assert rules.is_error_handler(Node(type=type_)) is expected


@pytest.mark.parametrize("type_, expected", [
    ("n8n-nodes-base.webhook", True),
    ("n8n-nodes-base.scheduleTrigger", True),
    ("WEBHOOK", True),
    ("n8n-nodes-base.errorTrigger", True),
    ("n8n-nodes-base.cron", False),
    ("n8n-nodes-base.set", False),
])
def test_is_trigger(type_, expected):
    assert rules.is_trigger(Node(type=type_)) is expected


@pytest.mark.parametrize("type_, expected", [
    ("n8n-nodes-base.Code", True),
    ("n8n-nodes-base.executeFunction", True),
    ("n8n-nodes-base.code", False),
    ("n8n-nodes-base.function", False),
    ("n8n-nodes-base.functionItem", False),
])
def test_is_custom_code_is_case_sensitive(type_, expected):
    assert rules.is_custom_code(Node(type=type_)) is expected


@pytest.mark.parametrize("name, expected", [
    ("Node 1", True),
    ("Node 12", True),
    ("My Node 3 copy", True),
    ("Node", False),
    ("Node A", False),
    ("node 1", False),
    ("", False),
])
def test_is_default_name(name, expected):
    assert rules.is_default_name(Node(name=name)) is expected


def test_missing_error_handling_needs_more_than_five_nodes():
    assert rules.missing_error_handling(nodes_of(*["x.set"] * 5)) is None
    f = rules.missing_error_handling(nodes_of(*["x.set"] * 6))
    assert f.rule == "missing_error_handling"
    assert f.delta == -20


def test_missing_error_handling_satisfied_by_any_error_node():
    ns = nodes_of(*(["x.set"] * 7 + ["x.errorTrigger"]))
    assert rules.missing_error_handling(ns) is None


def test_size_rules_stack():
    ns = nodes_of(*["x.webhook"] + ["x.set"] * 20)
    assert len(ns) == 21
    assert rules.moderate_size(ns).delta == -5
    assert rules.large_size(ns).delta == -10
    assert rules.large_size(ns[:20]) is None
    assert rules.moderate_size(ns[:10]) is None


def test_trigger_rules():
    assert rules.no_trigger([]).delta == -10
    assert rules.no_trigger(nodes_of("x.webhook")) is None
    assert rules.too_many_triggers(nodes_of("x.webhook", "x.manualTrigger")) is None
    f = rules.too_many_triggers(nodes_of("x.webhook", "x.manualTrigger", "x.scheduleTrigger"))
    assert f.delta == -5
    assert "3 entry points" in f.detail


def test_excess_custom_code_threshold():
    assert rules.excess_custom_code(nodes_of(*["x.Code"] * 3)) is None
    assert rules.excess_custom_code(nodes_of(*["x.Code"] * 4)).delta == -5


def test_default_naming_is_uncapped():
    ns = [Node(name=f"Node {i}", type="x.set") for i in range(1, 41)]
    f = rules.default_naming(ns)
    assert f.delta == -80
    assert rules.default_naming(nodes_of("x.set")) is None


def test_rule_order():
    assert [r.__name__ for r in rules.RULES] == [
        "missing_error_handling",
        "moderate_size",
        "large_size",
        "no_trigger",
        "too_many_triggers",
        "excess_custom_code",
        "default_naming",
    ]

import pytest

from localstorage.core import (
    NamespacedName,
    Node,
    NodeSelector,
    NodeSelectorOperator,
    NodeSelectorRequirement,
    NodeSelectorTerm,
    ObjectMeta,
    match_node_selector_terms,
    node_selector_matches_node_labels,
)


def _node(name="worker-1", **labels):
    return Node(metadata=ObjectMeta(name=name, labels=dict(labels)))


def _selector(*requirements, fields=()):
    return NodeSelector(
        node_selector_terms=[
            NodeSelectorTerm(match_expressions=list(requirements), match_fields=list(fields))
        ]
    )


def test_namespaced_name_str_and_hash():
    a = NamespacedName(namespace="local-storage", name="fastdisks")
    assert str(a) == "local-storage/fastdisks"
    assert a == NamespacedName("local-storage", "fastdisks")
    assert len({a, NamespacedName("local-storage", "fastdisks")}) == 1


def test_operator_coerced_from_string():
    req = NodeSelectorRequirement(key="zone", operator="In", values=["a"])
    assert req.operator is NodeSelectorOperator.IN


def test_in_and_not_in():
    node = _node(zone="a")
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("zone", "In", ["a", "b"])))
    assert not match_node_selector_terms(node, _selector(NodeSelectorRequirement("zone", "In", ["b"])))
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("zone", "NotIn", ["b"])))
    assert not match_node_selector_terms(node, _selector(NodeSelectorRequirement("zone", "NotIn", ["a"])))
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("missing", "NotIn", ["a"])))


def test_exists_and_does_not_exist():
    node = _node(disk="ssd")
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("disk", "Exists")))
    assert not match_node_selector_terms(node, _selector(NodeSelectorRequirement("disk", "DoesNotExist")))
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("gpu", "DoesNotExist")))


def test_gt_and_lt():
    node = _node(cores="8")
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("cores", "Gt", ["4"])))
    assert not match_node_selector_terms(node, _selector(NodeSelectorRequirement("cores", "Gt", ["8"])))
    assert match_node_selector_terms(node, _selector(NodeSelectorRequirement("cores", "Lt", ["16"])))
    assert not match_node_selector_terms(_node(cores="many"), _selector(NodeSelectorRequirement("cores", "Gt", ["1"])))


def test_requirements_in_a_term_are_anded():
    node = _node(zone="a", disk="ssd")
    sel = _selector(
        NodeSelectorRequirement("zone", "In", ["a"]),
        NodeSelectorRequirement("disk", "In", ["hdd"]),
    )
    assert not match_node_selector_terms(node, sel)


def test_terms_are_ored():
    node = _node(zone="a")
    sel = NodeSelector(
        node_selector_terms=[
            NodeSelectorTerm(match_expressions=[NodeSelectorRequirement("zone", "In", ["b"])]),
            NodeSelectorTerm(match_expressions=[NodeSelectorRequirement("zone", "In", ["a"])]),
        ]
    )
    assert match_node_selector_terms(node, sel)


def test_match_fields_on_name():
    node = _node(name="worker-2")
    field_in = NodeSelectorRequirement("metadata.name", "In", ["worker-2"])
    field_out = NodeSelectorRequirement("metadata.name", "NotIn", ["worker-2"])
    assert match_node_selector_terms(node, _selector(fields=[field_in]))
    assert not match_node_selector_terms(node, _selector(fields=[field_out]))


def test_empty_term_selects_nothing():
    assert not match_node_selector_terms(_node(zone="a"), NodeSelector([NodeSelectorTerm()]))


def test_invalid_term_raises_when_nothing_matches():
    bad = _selector(NodeSelectorRequirement("zone", "In", []))
    with pytest.raises(ValueError):
        match_node_selector_terms(_node(zone="a"), bad)


def test_invalid_field_operator_raises():
    bad = _selector(fields=[NodeSelectorRequirement("metadata.name", "Exists")])
    with pytest.raises(ValueError):
        match_node_selector_terms(_node(), bad)


def test_invalid_term_ignored_when_another_matches():
    node = _node(zone="a")
    sel = NodeSelector(
        node_selector_terms=[
            NodeSelectorTerm(match_expressions=[NodeSelectorRequirement("zone", "Exists", ["x"])]),
            NodeSelectorTerm(match_expressions=[NodeSelectorRequirement("zone", "Exists")]),
        ]
    )
    assert match_node_selector_terms(node, sel) is True


def test_missing_node_does_not_match():
    assert match_node_selector_terms(None, _selector(NodeSelectorRequirement("zone", "Exists"))) is False


def test_no_selector_matches_every_node():
    assert node_selector_matches_node_labels(None, None) is True
    assert node_selector_matches_node_labels(_node(), None) is True


def test_selector_without_node_raises():
    with pytest.raises(ValueError, match="the node var is nil"):
        node_selector_matches_node_labels(None, _selector(NodeSelectorRequirement("zone", "Exists")))


def test_selector_with_node_delegates():
    sel = _selector(NodeSelectorRequirement("zone", "In", ["a"]))
    assert node_selector_matches_node_labels(_node(zone="a"), sel) is True
    assert node_selector_matches_node_labels(_node(zone="b"), sel) is False
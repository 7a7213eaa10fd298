"""Core object types shared across the package and node selector matching."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping

# Labels put on persistent volumes by their owning LocalVolume.
LOCAL_VOLUME_OWNER_NAME_FOR_PV = "storage.openshift.com/local-volume-owner-name"
LOCAL_VOLUME_OWNER_NAMESPACE_FOR_PV = "storage.openshift.com/local-volume-owner-namespace"

# Labels describing the custom resource that created a persistent volume.
PV_OWNER_KIND_LABEL = "storage.openshift.com/owner-kind"
PV_OWNER_NAME_LABEL = "storage.openshift.com/owner-name"
PV_OWNER_NAMESPACE_LABEL = "storage.openshift.com/owner-namespace"
PV_DEVICE_NAME_LABEL = "storage.openshift.com/device-name"
PV_DEVICE_ID_LABEL = "storage.openshift.com/device-id"

# These labels could hold values that are not valid label values; they now
# live in annotations instead.
DEPRECATED_LABELS = (PV_DEVICE_NAME_LABEL, PV_DEVICE_ID_LABEL)

LABEL_HOSTNAME = "kubernetes.io/hostname"

_INTEGER = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, order=True)
class NamespacedName:
    """A namespace and name pair identifying an object."""

    namespace: str = ""
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ObjectMeta:
    """Metadata common to all stored objects."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    generation: int = 0
    uid: str = ""
    creation_timestamp: datetime | None = None


class NodeSelectorOperator(str, Enum):
    """Operators allowed in a node selector requirement."""

    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"
    GT = "Gt"
    LT = "Lt"


@dataclass
class NodeSelectorRequirement:
    """A key, an operator and a set of values."""

    key: str
    operator: NodeSelectorOperator
    values: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.operator = NodeSelectorOperator(self.operator)


@dataclass
class NodeSelectorTerm:
    """Requirements that must all hold; an empty term selects nothing."""

    match_expressions: list[NodeSelectorRequirement] = field(default_factory=list)
    match_fields: list[NodeSelectorRequirement] = field(default_factory=list)


@dataclass
class NodeSelector:
    """Terms of which at least one must hold."""

    node_selector_terms: list[NodeSelectorTerm] = field(default_factory=list)


@dataclass
class Toleration:
    """Allows scheduling onto nodes with a matching taint."""

    key: str = ""
    operator: str = ""
    value: str = ""
    effect: str = ""
    toleration_seconds: int | None = None


@dataclass
class Node:
    """A cluster node."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def labels(self) -> dict[str, str]:
        return self.metadata.labels


class PersistentVolumePhase(str, Enum):
    """Lifecycle phase of a persistent volume."""

    PENDING = "Pending"
    AVAILABLE = "Available"
    BOUND = "Bound"
    RELEASED = "Released"
    FAILED = "Failed"


@dataclass
class PersistentVolume:
    """A persistent volume and the parts of its spec and status in use here."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    storage_class_name: str = ""
    phase: PersistentVolumePhase = PersistentVolumePhase.PENDING
    capacity: int = 0
    local_path: str = ""
    volume_mode: str | None = None
    reclaim_policy: str = "Delete"
    mount_options: list[str] = field(default_factory=list)
    fs_type: str | None = None
    node_affinity: NodeSelector | None = None

    @property
    def name(self) -> str:
        return self.metadata.name


class ManagementState(str, Enum):
    """Whether and how an operator manages a component."""

    MANAGED = "Managed"
    UNMANAGED = "Unmanaged"
    REMOVED = "Removed"
    FORCE = "Force"


class LogLevel(str, Enum):
    """Coarse grained logging intent for a component."""

    NORMAL = "Normal"
    DEBUG = "Debug"
    TRACE = "Trace"
    TRACE_ALL = "TraceAll"


@dataclass
class OperatorCondition:
    """A single status condition reported by an operator."""

    type: str
    status: str
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""


def _label_requirement_errors(req: NodeSelectorRequirement) -> list[str]:
    op = req.operator
    if op in (NodeSelectorOperator.IN, NodeSelectorOperator.NOT_IN):
        if not req.values:
            return [f"values set can't be empty for operator {op.value!r} on key {req.key!r}"]
    elif op in (NodeSelectorOperator.EXISTS, NodeSelectorOperator.DOES_NOT_EXIST):
        if req.values:
            return [f"values set must be empty for operator {op.value!r} on key {req.key!r}"]
    else:
        if len(req.values) != 1:
            return [f"exactly one value is required for operator {op.value!r} on key {req.key!r}"]
        if not _INTEGER.fullmatch(req.values[0]):
            return [f"value {req.values[0]!r} for operator {op.value!r} must be an integer"]
    return []


def _field_requirement_errors(req: NodeSelectorRequirement) -> list[str]:
    if req.operator not in (NodeSelectorOperator.IN, NodeSelectorOperator.NOT_IN):
        return [f"{req.operator.value!r} is not a valid node field selector operator"]
    if len(req.values) != 1:
        return [
            f"unexpected number of value ({len(req.values)}) for node field "
            f"selector operator {req.operator.value!r}"
        ]
    return []


def _label_requirement_matches(req: NodeSelectorRequirement, labels: Mapping[str, str]) -> bool:
    op = req.operator
    present = req.key in labels
    if op is NodeSelectorOperator.IN:
        return present and labels[req.key] in req.values
    if op is NodeSelectorOperator.NOT_IN:
        return not present or labels[req.key] not in req.values
    if op is NodeSelectorOperator.EXISTS:
        return present
    if op is NodeSelectorOperator.DOES_NOT_EXIST:
        return not present
    if not present or not _INTEGER.fullmatch(labels[req.key]):
        return False
    actual, expected = int(labels[req.key]), int(req.values[0])
    return actual > expected if op is NodeSelectorOperator.GT else actual < expected


def _field_requirement_matches(req: NodeSelectorRequirement, fields: Mapping[str, str]) -> bool:
    value = fields.get(req.key, "")
    if req.operator is NodeSelectorOperator.IN:
        return value == req.values[0]
    return value != req.values[0]


def match_node_selector_terms(node: Node | None, node_selector: NodeSelector) -> bool:
    """Return whether any term of the selector matches the node.

    Raises ValueError if no term matched and some term was invalid.
    """
    if node is None:
        return False
    labels = node.labels
    fields = {"metadata.name": node.name}
    errors: list[str] = []
    for term in node_selector.node_selector_terms:
        if not term.match_expressions and not term.match_fields:
            continue
        term_errors = [e for r in term.match_expressions for e in _label_requirement_errors(r)]
        term_errors += [e for r in term.match_fields for e in _field_requirement_errors(r)]
        if term_errors:
            errors.extend(term_errors)
            continue
        if all(_label_requirement_matches(r, labels) for r in term.match_expressions) and all(
            _field_requirement_matches(r, fields) for r in term.match_fields
        ):
            return True
    if errors:
        raise ValueError("; ".join(errors))
    return False


def node_selector_matches_node_labels(node: Node | None, node_selector: NodeSelector | None) -> bool:
    """Return whether the node satisfies the selector; no selector matches every node."""
    if node_selector is None:
        return True
    if node is None:
        raise ValueError("the node var is nil")
    return match_node_selector_terms(node, node_selector)
"""The local.storage.openshift.io/v1 API: LocalVolume."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from localstorage.core import (
    LogLevel,
    ManagementState,
    NodeSelector,
    NodeSelectorRequirement,
    ObjectMeta,
    OperatorCondition,
    Toleration,
)
from localstorage.scheme import GroupVersion, SchemeBuilder

GROUP = "local.storage.openshift.io"
GROUP_VERSION = GroupVersion(GROUP, "v1")
LOCAL_VOLUME_KIND = "LocalVolume"


def _value(item: Any) -> Any:
    return item.value if isinstance(item, Enum) else item


def _prune(values: dict[str, Any]) -> dict[str, Any]:
    """Drop entries holding empty values, as omitempty does."""
    return {k: v for k, v in values.items() if v is not None and v != "" and v != [] and v != {}}


def _timestamp(moment: datetime | None) -> str | None:
    if moment is None:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _meta_to_dict(meta: ObjectMeta) -> dict[str, Any]:
    out = _prune(
        {
            "name": meta.name,
            "namespace": meta.namespace,
            "uid": meta.uid,
            "labels": dict(meta.labels),
            "annotations": dict(meta.annotations),
            "finalizers": list(meta.finalizers),
            "creationTimestamp": _timestamp(meta.creation_timestamp),
        }
    )
    if meta.generation:
        out["generation"] = meta.generation
    return out


def _requirement_to_dict(req: NodeSelectorRequirement) -> dict[str, Any]:
    out: dict[str, Any] = {"key": req.key, "operator": _value(req.operator)}
    if req.values:
        out["values"] = list(req.values)
    return out


def _node_selector_to_dict(selector: NodeSelector) -> dict[str, Any]:
    return {
        "nodeSelectorTerms": [
            _prune(
                {
                    "matchExpressions": [_requirement_to_dict(r) for r in term.match_expressions],
                    "matchFields": [_requirement_to_dict(r) for r in term.match_fields],
                }
            )
            for term in selector.node_selector_terms
        ]
    }


def _toleration_to_dict(toleration: Toleration) -> dict[str, Any]:
    out = _prune(
        {
            "key": toleration.key,
            "operator": toleration.operator,
            "value": toleration.value,
            "effect": toleration.effect,
        }
    )
    if toleration.toleration_seconds is not None:
        out["tolerationSeconds"] = toleration.toleration_seconds
    return out


def _condition_to_dict(condition: OperatorCondition) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": condition.type,
        "status": condition.status,
        "lastTransitionTime": _timestamp(condition.last_transition_time),
    }
    if condition.reason:
        out["reason"] = condition.reason
    if condition.message:
        out["message"] = condition.message
    return out


class PersistentVolumeMode(str, Enum):
    """How a volume is meant to be consumed."""

    BLOCK = "Block"
    FILESYSTEM = "Filesystem"


@dataclass
class StorageClassDevice:
    """A storage class and the device paths that feed it."""

    storage_class_name: str = ""
    volume_mode: PersistentVolumeMode | None = None
    fs_type: str = ""
    device_paths: list[str] = field(default_factory=list)
    force_wipe_devices_and_destroy_all_data: bool = False


def _device_to_dict(device: StorageClassDevice) -> dict[str, Any]:
    out: dict[str, Any] = {"storageClassName": device.storage_class_name}
    out.update(
        _prune(
            {
                "volumeMode": _value(device.volume_mode),
                "fsType": device.fs_type,
                "devicePaths": list(device.device_paths),
            }
        )
    )
    if device.force_wipe_devices_and_destroy_all_data:
        out["forceWipeDevicesAndDestroyAllData"] = True
    return out


@dataclass
class LocalVolumeSpec:
    """Desired state of a LocalVolume."""

    management_state: ManagementState | None = None
    log_level: LogLevel | None = None
    node_selector: NodeSelector | None = None
    storage_class_devices: list[StorageClassDevice] = field(default_factory=list)
    tolerations: list[Toleration] = field(default_factory=list)


@dataclass
class LocalVolumeStatus:
    """Observed state of a LocalVolume."""

    observed_generation: int | None = None
    state: ManagementState | None = None
    conditions: list[OperatorCondition] = field(default_factory=list)
    ready_replicas: int = 0
    generations: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class LocalVolume:
    """Devices on selected nodes to be offered as local persistent volumes."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeSpec = field(default_factory=LocalVolumeSpec)
    status: LocalVolumeStatus = field(default_factory=LocalVolumeStatus)

    @property
    def kind(self) -> str:
        return LOCAL_VOLUME_KIND

    @property
    def api_version(self) -> str:
        return str(GROUP_VERSION)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def set_defaults(self) -> None:
        """Fill in the log level and management state when unset."""
        if not self.spec.log_level:
            self.spec.log_level = LogLevel.NORMAL
        if not self.spec.management_state:
            self.spec.management_state = ManagementState.MANAGED

    def to_dict(self) -> dict[str, Any]:
        """Return the object in its JSON wire shape."""
        spec = self.spec
        spec_out = _prune(
            {
                "managementState": _value(spec.management_state),
                "logLevel": _value(spec.log_level),
                "nodeSelector": (
                    _node_selector_to_dict(spec.node_selector) if spec.node_selector else None
                ),
                "storageClassDevices": [_device_to_dict(d) for d in spec.storage_class_devices],
                "tolerations": [_toleration_to_dict(t) for t in spec.tolerations],
            }
        )
        status = self.status
        status_out: dict[str, Any] = {}
        if status.observed_generation is not None:
            status_out["observedGeneration"] = status.observed_generation
        status_out.update(
            _prune(
                {
                    "managementState": _value(status.state),
                    "conditions": [_condition_to_dict(c) for c in status.conditions],
                }
            )
        )
        status_out["readyReplicas"] = status.ready_replicas
        if status.generations:
            status_out["generations"] = [dict(g) for g in status.generations]
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": _meta_to_dict(self.metadata),
            "spec": spec_out,
            "status": status_out,
        }


@dataclass
class LocalVolumeList:
    """A list of LocalVolume objects."""

    items: list[LocalVolume] = field(default_factory=list)
    resource_version: str = ""


SCHEME_BUILDER = SchemeBuilder(GROUP_VERSION).register(LocalVolume, LocalVolumeList)
add_to_scheme = SCHEME_BUILDER.add_to_scheme
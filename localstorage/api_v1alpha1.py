"""The local.storage.openshift.io/v1alpha1 API: discovery and volume sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from localstorage.api_v1 import (
    GROUP,
    PersistentVolumeMode,
    _condition_to_dict,
    _meta_to_dict,
    _node_selector_to_dict,
    _prune,
    _toleration_to_dict,
    _value,
)
from localstorage.core import NodeSelector, ObjectMeta, OperatorCondition, Toleration
from localstorage.scheme import GroupVersion, SchemeBuilder

GROUP_VERSION = GroupVersion(GROUP, "v1alpha1")
LOCAL_VOLUME_SET_KIND = "LocalVolumeSet"


class DiscoveryPhase(str, Enum):
    """Phase of the device discovery process."""

    DISCOVERING = "Discovering"
    DISCOVERY_FAILED = "DiscoveryFailed"


class DiscoveredDeviceType(str, Enum):
    """Device types reported by discovery."""

    DISK = "disk"
    PART = "part"
    LVM = "lvm"
    MULTI_PATH = "mpath"


class DeviceState(str, Enum):
    """Availability of a discovered device."""

    AVAILABLE = "Available"
    NOT_AVAILABLE = "NotAvailable"
    UNKNOWN = "Unknown"


class DeviceMechanicalProperty(str, Enum):
    """Whether a device is rotational."""

    ROTATIONAL = "Rotational"
    NON_ROTATIONAL = "NonRotational"


class DeviceType(str, Enum):
    """Device types a LocalVolumeSet can select."""

    RAW_DISK = "disk"
    PARTITION = "part"
    LOOP = "loop"
    MULTI_PATH = "mpath"


@dataclass
class LocalVolumeDiscoverySpec:
    """Desired state of a LocalVolumeDiscovery."""

    node_selector: NodeSelector | None = None
    tolerations: list[Toleration] = field(default_factory=list)


@dataclass
class LocalVolumeDiscoveryStatus:
    """Observed state of a LocalVolumeDiscovery."""

    phase: DiscoveryPhase | None = None
    conditions: list[OperatorCondition] = field(default_factory=list)
    observed_generation: int = 0


@dataclass
class LocalVolumeDiscovery:
    """Request to discover devices on selected nodes."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeDiscoverySpec = field(default_factory=LocalVolumeDiscoverySpec)
    status: LocalVolumeDiscoveryStatus = field(default_factory=LocalVolumeDiscoveryStatus)


@dataclass
class LocalVolumeDiscoveryList:
    """A list of LocalVolumeDiscovery objects."""

    items: list[LocalVolumeDiscovery] = field(default_factory=list)
    resource_version: str = ""


@dataclass
class DeviceStatus:
    """Availability of a device."""

    state: DeviceState | str = ""


@dataclass
class DiscoveredDevice:
    """A device found on a node, with its properties."""

    device_id: str = ""
    path: str = ""
    model: str = ""
    type: DiscoveredDeviceType | str = ""
    vendor: str = ""
    serial: str = ""
    size: int = 0
    property: DeviceMechanicalProperty | str = ""
    fs_type: str = ""
    status: DeviceStatus = field(default_factory=DeviceStatus)

    def to_dict(self) -> dict[str, Any]:
        """Return the device in its JSON wire shape."""
        return {
            "deviceID": self.device_id,
            "path": self.path,
            "model": self.model,
            "type": _value(self.type),
            "vendor": self.vendor,
            "serial": self.serial,
            "size": self.size,
            "property": _value(self.property),
            "fstype": self.fs_type,
            "status": {"state": _value(self.status.state)},
        }


@dataclass
class LocalVolumeDiscoveryResultSpec:
    """The node a discovery result belongs to."""

    node_name: str = ""


@dataclass
class LocalVolumeDiscoveryResultStatus:
    """Devices found on a node and when they were found."""

    discovered_time_stamp: str = ""
    discovered_devices: list[DiscoveredDevice] = field(default_factory=list)


@dataclass
class LocalVolumeDiscoveryResult:
    """Result of device discovery on one node."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeDiscoveryResultSpec = field(default_factory=LocalVolumeDiscoveryResultSpec)
    status: LocalVolumeDiscoveryResultStatus = field(
        default_factory=LocalVolumeDiscoveryResultStatus
    )


@dataclass
class LocalVolumeDiscoveryResultList:
    """A list of LocalVolumeDiscoveryResult objects."""

    items: list[LocalVolumeDiscoveryResult] = field(default_factory=list)
    resource_version: str = ""


@dataclass
class DeviceInclusionSpec:
    """Filter deciding which discovered devices a volume set takes.

    Sizes are quantities such as "1Gi".
    """

    device_types: list[DeviceType] = field(default_factory=list)
    device_mechanical_properties: list[DeviceMechanicalProperty] = field(default_factory=list)
    min_size: str | None = None
    max_size: str | None = None
    models: list[str] = field(default_factory=list)
    vendors: list[str] = field(default_factory=list)


def _inclusion_to_dict(spec: DeviceInclusionSpec) -> dict[str, Any]:
    return _prune(
        {
            "deviceTypes": [_value(t) for t in spec.device_types],
            "deviceMechanicalProperties": [_value(p) for p in spec.device_mechanical_properties],
            "minSize": spec.min_size,
            "maxSize": spec.max_size,
            "models": list(spec.models),
            "vendors": list(spec.vendors),
        }
    )


@dataclass
class LocalVolumeSetSpec:
    """Desired state of a LocalVolumeSet."""

    storage_class_name: str = ""
    node_selector: NodeSelector | None = None
    max_device_count: int | None = None
    volume_mode: PersistentVolumeMode | None = None
    fs_type: str = ""
    tolerations: list[Toleration] = field(default_factory=list)
    device_inclusion_spec: DeviceInclusionSpec | None = None


@dataclass
class LocalVolumeSetStatus:
    """Observed state of a LocalVolumeSet."""

    conditions: list[OperatorCondition] = field(default_factory=list)
    total_provisioned_device_count: int | None = None
    observed_generation: int = 0


@dataclass
class LocalVolumeSet:
    """Automatic selection of discovered devices into a storage class."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeSetSpec = field(default_factory=LocalVolumeSetSpec)
    status: LocalVolumeSetStatus = field(default_factory=LocalVolumeSetStatus)

    @property
    def kind(self) -> str:
        return LOCAL_VOLUME_SET_KIND

    @property
    def api_version(self) -> str:
        return str(GROUP_VERSION)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def to_dict(self) -> dict[str, Any]:
        """Return the object in its JSON wire shape."""
        spec = self.spec
        spec_out: dict[str, Any] = {}
        if spec.node_selector is not None:
            spec_out["nodeSelector"] = _node_selector_to_dict(spec.node_selector)
        spec_out["storageClassName"] = spec.storage_class_name
        if spec.max_device_count is not None:
            spec_out["maxDeviceCount"] = spec.max_device_count
        spec_out.update(
            _prune(
                {
                    "volumeMode": _value(spec.volume_mode),
                    "fsType": spec.fs_type,
                    "tolerations": [_toleration_to_dict(t) for t in spec.tolerations],
                }
            )
        )
        if spec.device_inclusion_spec is not None:
            spec_out["deviceInclusionSpec"] = _inclusion_to_dict(spec.device_inclusion_spec)

        status = self.status
        status_out = _prune({"conditions": [_condition_to_dict(c) for c in status.conditions]})
        if status.total_provisioned_device_count is not None:
            status_out["totalProvisionedDeviceCount"] = status.total_provisioned_device_count
        if status.observed_generation:
            status_out["observedGeneration"] = status.observed_generation
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": _meta_to_dict(self.metadata),
            "spec": spec_out,
            "status": status_out,
        }


@dataclass
class LocalVolumeSetList:
    """A list of LocalVolumeSet objects."""

    items: list[LocalVolumeSet] = field(default_factory=list)
    resource_version: str = ""


SCHEME_BUILDER = SchemeBuilder(GROUP_VERSION).register(
    LocalVolumeDiscovery,
    LocalVolumeDiscoveryList,
    LocalVolumeDiscoveryResult,
    LocalVolumeDiscoveryResultList,
    LocalVolumeSet,
    LocalVolumeSetList,
)
add_to_scheme = SCHEME_BUILDER.add_to_scheme
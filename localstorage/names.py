"""Well-known names, environment overrides and persistent volume naming."""

from __future__ import annotations

import logging
import os
import re

from localstorage.api_v1 import LocalVolume
from localstorage.core import (
    LOCAL_VOLUME_OWNER_NAME_FOR_PV,
    LOCAL_VOLUME_OWNER_NAMESPACE_FOR_PV,
    Node,
    PersistentVolume,
)

log = logging.getLogger(__name__)

DEFAULT_DISK_MAKER_IMAGE = "quay.io/openshift/origin-local-storage-diskmaker"
DEFAULT_KUBE_PROXY_IMAGE = "quay.io/openshift/origin-kube-rbac-proxy:latest"
DEFAULT_LOCAL_DISK_LOCATION = "/mnt/local-storage"

OWNER_NAMESPACE_LABEL = "local.storage.openshift.io/owner-namespace"
OWNER_NAME_LABEL = "local.storage.openshift.io/owner-name"

DISK_MAKER_IMAGE_ENV = "DISKMAKER_IMAGE"
KUBE_RBAC_PROXY_IMAGE_ENV = "KUBE_RBAC_PROXY_IMAGE"
LOCAL_DISK_LOCATION_ENV = "LOCAL_DISK_LOCATION"

PROVISIONER_CONFIG_MAP_NAME = "local-provisioner"
DISCOVERY_NODE_LABEL = "discovery-result-node"

LOCAL_VOLUME_STORAGE_CLASS_TEMPLATE = "templates/localvolume-storageclass.yaml"
LOCAL_PROVISIONER_CONFIG_MAP_TEMPLATE = "templates/local-provisioner-configmap.yaml"
DISK_MAKER_MANAGER_DAEMON_SET_TEMPLATE = "templates/diskmaker-manager-daemonset.yaml"
DISK_MAKER_DISCOVERY_DAEMON_SET_TEMPLATE = "templates/diskmaker-discovery-daemonset.yaml"
METRICS_SERVICE_TEMPLATE = "templates/localmetrics/service.yaml"
METRICS_SERVICE_MONITOR_TEMPLATE = "templates/localmetrics/service-monitor.yaml"
PROMETHEUS_RULE_TEMPLATE = "templates/localmetrics/prometheus-rule.yaml"

DISK_MAKER_SERVICE_NAME = "local-storage-diskmaker-metrics"
DISCOVERY_SERVICE_NAME = "local-storage-discovery-metrics"
DISK_MAKER_METRICS_SERVING_CERT = "diskmaker-metric-serving-cert"
DISCOVERY_METRICS_SERVING_CERT = "discovery-metric-serving-cert"

# Keeps the owning object around long enough to honour the PV reclaim policy.
LOCAL_VOLUME_PROTECTION_FINALIZER = "storage.openshift.com/local-volume-protection"

# Annotation naming the provisioner that created a persistent volume.
ANN_PROVISIONED_BY = "pv.kubernetes.io/provisioned-by"

_ENDS_WITH_UID = re.compile(r"(\w{8}(-\w{4}){3}-\w{12}\Z)", re.ASCII)

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def _env_or(name: str, default: str) -> str:
    return os.environ.get(name) or default


def get_disk_maker_image() -> str:
    """Return the diskmaker image, overridable through DISKMAKER_IMAGE."""
    return _env_or(DISK_MAKER_IMAGE_ENV, DEFAULT_DISK_MAKER_IMAGE)


def get_kube_rbac_proxy_image() -> str:
    """Return the RBAC proxy sidecar image, overridable through KUBE_RBAC_PROXY_IMAGE."""
    return _env_or(KUBE_RBAC_PROXY_IMAGE_ENV, DEFAULT_KUBE_PROXY_IMAGE)


def get_local_disk_location_path() -> str:
    """Return the host directory for disk symlinks, overridable through LOCAL_DISK_LOCATION."""
    return _env_or(LOCAL_DISK_LOCATION_ENV, DEFAULT_LOCAL_DISK_LOCATION)


def local_volume_key(lv: LocalVolume) -> str:
    """Return "namespace/name" for a LocalVolume."""
    return f"{lv.namespace}/{lv.name}"


def get_provisioned_by_value(node: Node) -> str:
    """Return the provisioned-by annotation value for PVs created on the node."""
    return f"local-volume-provisioner-{node.name}"


def pv_matches_provisioner(pv: PersistentVolume, provisioner_name: str) -> bool:
    """Return whether the PV was provisioned by the named provisioner.

    Besides an exact match, an annotation that starts with the name and ends
    with a node UID also matches.
    """
    annotation = pv.metadata.annotations.get(ANN_PROVISIONED_BY)
    if annotation is None:
        log.debug("PV %s has no provisioner annotation - skipping", pv.name)
        return False

    if annotation == provisioner_name:
        log.debug("PV %s matches provisioner %s", pv.name, provisioner_name)
        return True

    ends_with_uid = _ENDS_WITH_UID.search(annotation)
    starts_with_name = re.search(f"^{provisioner_name}", annotation, re.ASCII)
    if ends_with_uid and starts_with_name:
        log.debug(
            "PV %s matches provisioner %s (UID %s ignored)",
            pv.name,
            provisioner_name,
            ends_with_uid.group(1),
        )
        return True

    log.debug("PV %s does not match provisioner %s - skipping", pv.name, provisioner_name)
    return False


def generate_pv_name(file: str, node: str, storage_class: str) -> str:
    """Return a stable PV name from the FNV-1a 32-bit hash of its inputs.

    The output must never change for the same inputs.
    """
    digest = _FNV32_OFFSET
    for byte in (file + node + storage_class).encode("utf-8"):
        digest ^= byte
        digest = (digest * _FNV32_PRIME) & 0xFFFFFFFF
    return f"local-pv-{digest:x}"


def get_pv_owner_selector(lv: LocalVolume) -> dict[str, str]:
    """Return the labels selecting PVs owned by the LocalVolume."""
    return {
        LOCAL_VOLUME_OWNER_NAME_FOR_PV: lv.name,
        LOCAL_VOLUME_OWNER_NAMESPACE_FOR_PV: lv.namespace,
    }
# localstorage

Data types and helper functions for describing local persistent volumes on
cluster nodes: the `LocalVolume`, `LocalVolumeSet` and discovery resources,
node selector matching, persistent volume naming, storage class ownership
bookkeeping and a type registry mapping classes to API kinds.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `localstorage.core`: basic cluster objects (`NamespacedName`, `ObjectMeta`,
  `Node`, `NodeSelector`, `NodeSelectorTerm`, `NodeSelectorRequirement`,
  `Toleration`, `PersistentVolume`, `OperatorCondition`) and the enums
  `NodeSelectorOperator`, `PersistentVolumePhase`, `ManagementState` and
  `LogLevel`. `node_selector_matches_node_labels(node, selector)` returns
  `True` when no selector is given, raises `ValueError` when the node is
  `None`, and otherwise checks the node's labels and name against the
  selector's terms (`match_node_selector_terms`). An invalid term raises
  `ValueError` if no other term matched. The module also holds the PV owner
  label names (`PV_OWNER_KIND_LABEL`, `PV_OWNER_NAME_LABEL`, ...).
- `localstorage.capacity`: the units `KIB`, `MIB`, `GIB`, `TIB` and
  `round_down_capacity_pretty`, which rounds a byte count down to whole GiB,
  or failing that whole MiB, when that leaves at least ten units, and
  otherwise returns it unchanged.
- `localstorage.storage_class_owner`: `StorageClassOwnerMap`, a thread-safe
  one-to-many map from a storage class name to the `NamespacedName`s of the
  objects that own it.
- `localstorage.scheme`: `GroupVersion`, `GroupVersionKind`, `Scheme`,
  `SchemeBuilder` and `SchemeError` for mapping classes to kinds and back.
- `localstorage.api_v1`: `LocalVolume` with its spec, status and
  `StorageClassDevice`, `PersistentVolumeMode`, `LocalVolume.set_defaults()`
  and `LocalVolume.to_dict()` for the JSON wire shape.
- `localstorage.api_v1alpha1`: `LocalVolumeSet`, `LocalVolumeDiscovery`,
  `LocalVolumeDiscoveryResult`, `DiscoveredDevice`, `DeviceInclusionSpec`
  and the device enums; `LocalVolumeSet.to_dict()` and
  `DiscoveredDevice.to_dict()` give the JSON wire shape.
- `localstorage.registry`: `add_to_scheme(scheme)` registers every kind from
  both API versions.
- `localstorage.names`: well-known names and template paths;
  `get_disk_maker_image`, `get_kube_rbac_proxy_image` and
  `get_local_disk_location_path` return defaults that the environment
  variables `DISKMAKER_IMAGE`, `KUBE_RBAC_PROXY_IMAGE` and
  `LOCAL_DISK_LOCATION` override; `generate_pv_name` (FNV-1a 32-bit hash of
  file, node and storage class), `get_provisioned_by_value`,
  `pv_matches_provisioner`, `local_volume_key` and `get_pv_owner_selector`.
- `localstorage.controller_utils`: `enqueue_only_labeled_subcomponents`
  returns a `LabelPredicate` that passes create, update, delete and generic
  events only for objects whose `app` label is one of the given names;
  `contains_finalizer`; `get_node_name_env_var` (reads `MY_NODE_NAME`);
  `get_watch_namespace` (raises `LookupError` when `WATCH_NAMESPACE` is
  unset); `get_bound_and_released_pvs(obj, client)`, which asks `client`
  for the PVs carrying `obj`'s owner labels through its
  `list_persistent_volumes(match_labels)` method and splits them into bound
  and released.
- `localstorage.volumes`: `Volume` and `VolumeMount` definitions for the
  symlink directory (`symlink_host_dir_volume()`, `symlink_mount()`, which
  follow `LOCAL_DISK_LOCATION`), `/dev`, `/run/udev` and the provisioner
  config map.
- `localstorage.assets`: `read_file(name, root)` reads a file below a root
  directory; `read_file_and_replace(name, pairs, root)` also replaces
  placeholders given as alternating old and new strings, in one pass.

## Examples

```python
from localstorage.capacity import round_down_capacity_pretty
from localstorage.core import NamespacedName
from localstorage.names import generate_pv_name
from localstorage.storage_class_owner import StorageClassOwnerMap

round_down_capacity_pretty(13 * 1024**3 - 1)    # 12 GiB in bytes

generate_pv_name("sdb", "worker-0", "local-sc")  # "local-pv-" + hex hash

owners = StorageClassOwnerMap()
owners.register_storage_class_owner(
    "fast", NamespacedName(namespace="local-storage", name="fastdisks")
)
owners.get_storage_class_owners("fast")
```

Registering all resource kinds in a scheme:

```python
from localstorage.api_v1 import GROUP_VERSION
from localstorage.registry import add_to_scheme
from localstorage.scheme import Scheme

scheme = Scheme()
add_to_scheme(scheme)
scheme.recognizes(GROUP_VERSION.with_kind("LocalVolume"))  # True
```

Filling in defaults and serialising a volume:

```python
from localstorage.api_v1 import LocalVolume, StorageClassDevice
from localstorage.core import ObjectMeta

lv = LocalVolume(metadata=ObjectMeta(name="disks", namespace="local-storage"))
lv.spec.storage_class_devices.append(
    StorageClassDevice(storage_class_name="local-sc", device_paths=["/dev/sdb"])
)
lv.set_defaults()
lv.to_dict()["spec"]["managementState"]   # "Managed"
```

## What the package does not do

This is a library of data types and pure helpers. It does not connect to a
cluster, run controllers or device discovery, create persistent volumes,
look at block devices or mounts on a host, or serve metrics, and it has no
command-line program. No template files are bundled: `localstorage.assets`
reads from whatever root directory the caller passes in.
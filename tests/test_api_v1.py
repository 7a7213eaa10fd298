import json
from datetime import datetime, timezone

from localstorage.api_v1 import (
    GROUP_VERSION,
    LocalVolume,
    LocalVolumeList,
    LocalVolumeSpec,
    LocalVolumeStatus,
    PersistentVolumeMode,
    StorageClassDevice,
    add_to_scheme,
)
from localstorage.core import (
    LogLevel,
    ManagementState,
    NodeSelector,
    NodeSelectorRequirement,
    NodeSelectorTerm,
    ObjectMeta,
    OperatorCondition,
    Toleration,
)
from localstorage.scheme import GroupVersionKind, Scheme


def test_group_version_identity():
    assert LocalVolume().to_dict()["apiVersion"] == "local.storage.openshift.io/v1"
    assert GROUP_VERSION.with_kind("LocalVolume") == GroupVersionKind(
        "local.storage.openshift.io", "v1", "LocalVolume"
    )


def test_set_defaults_fills_empty_values():
    lv = LocalVolume()
    lv.set_defaults()
    assert lv.spec.log_level is LogLevel.NORMAL
    assert lv.spec.management_state is ManagementState.MANAGED


def test_set_defaults_keeps_existing_values():
    lv = LocalVolume(
        spec=LocalVolumeSpec(
            management_state=ManagementState.UNMANAGED, log_level=LogLevel.DEBUG
        )
    )
    lv.set_defaults()
    assert lv.spec.log_level is LogLevel.DEBUG
    assert lv.spec.management_state is ManagementState.UNMANAGED


def test_to_dict_type_meta_and_empty_fields():
    lv = LocalVolume(metadata=ObjectMeta(name="disks", namespace="local-storage"))
    out = lv.to_dict()
    assert out["apiVersion"] == str(GROUP_VERSION)
    assert out["kind"] == "LocalVolume"
    assert out["metadata"] == {"name": "disks", "namespace": "local-storage"}
    assert out["spec"] == {}
    assert out["status"] == {"readyReplicas": 0}


def test_to_dict_storage_class_devices():
    lv = LocalVolume(
        spec=LocalVolumeSpec(
            storage_class_devices=[
                StorageClassDevice(
                    storage_class_name="fast",
                    volume_mode=PersistentVolumeMode.BLOCK,
                    device_paths=["/dev/sda", "/dev/sdb"],
                )
            ]
        )
    )
    devices = lv.to_dict()["spec"]["storageClassDevices"]
    assert devices == [
        {"storageClassName": "fast", "volumeMode": "Block", "devicePaths": ["/dev/sda", "/dev/sdb"]}
    ]


def test_to_dict_force_wipe_flag_only_when_set():
    spec = LocalVolumeSpec(
        storage_class_devices=[
            StorageClassDevice(storage_class_name="a"),
            StorageClassDevice(storage_class_name="b", force_wipe_devices_and_destroy_all_data=True),
        ]
    )
    devices = LocalVolume(spec=spec).to_dict()["spec"]["storageClassDevices"]
    assert "forceWipeDevicesAndDestroyAllData" not in devices[0]
    assert devices[1]["forceWipeDevicesAndDestroyAllData"] is True


def test_to_dict_node_selector_and_tolerations():
    selector = NodeSelector(
        [NodeSelectorTerm(match_fields=[NodeSelectorRequirement("metadata.name", "In", ["worker"])])]
    )
    lv = LocalVolume(
        spec=LocalVolumeSpec(
            node_selector=selector,
            tolerations=[Toleration(key="localstorage", operator="Equal", value="testvalue")],
        )
    )
    spec = lv.to_dict()["spec"]
    assert spec["nodeSelector"] == {
        "nodeSelectorTerms": [
            {"matchFields": [{"key": "metadata.name", "operator": "In", "values": ["worker"]}]}
        ]
    }
    assert spec["tolerations"] == [{"key": "localstorage", "operator": "Equal", "value": "testvalue"}]


def test_to_dict_status_fields():
    when = datetime(2021, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    lv = LocalVolume(
        status=LocalVolumeStatus(
            observed_generation=0,
            state=ManagementState.MANAGED,
            conditions=[OperatorCondition("Available", "True", last_transition_time=when)],
            ready_replicas=2,
        )
    )
    status = lv.to_dict()["status"]
    assert status["observedGeneration"] == 0
    assert status["managementState"] == "Managed"
    assert status["readyReplicas"] == 2
    assert status["conditions"] == [
        {"type": "Available", "status": "True", "lastTransitionTime": "2021-01-02T03:04:05Z"}
    ]


def test_to_dict_is_json_round_trippable():
    lv = LocalVolume(metadata=ObjectMeta(name="x", namespace="y", labels={"a": "b"}))
    lv.set_defaults()
    out = lv.to_dict()
    assert json.loads(json.dumps(out)) == out


def test_add_to_scheme_registers_types():
    scheme = Scheme()
    add_to_scheme(scheme)
    assert scheme.recognizes(GROUP_VERSION.with_kind("LocalVolume"))
    assert isinstance(scheme.new_object(GROUP_VERSION.with_kind("LocalVolume")), LocalVolume)
    assert scheme.kind_for(LocalVolumeList()) == GROUP_VERSION.with_kind("LocalVolumeList")
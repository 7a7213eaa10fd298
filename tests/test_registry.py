import pytest

from localstorage import api_v1, api_v1alpha1
from localstorage.registry import add_to_scheme
from localstorage.scheme import GroupVersionKind, Scheme, SchemeError


def test_registers_both_versions():
    scheme = Scheme()
    add_to_scheme(scheme)
    assert scheme.recognizes(api_v1.GROUP_VERSION.with_kind("LocalVolume"))
    assert scheme.recognizes(api_v1alpha1.GROUP_VERSION.with_kind("LocalVolumeSet"))
    assert scheme.recognizes(api_v1alpha1.GROUP_VERSION.with_kind("LocalVolumeDiscoveryResult"))


def test_kind_for_registered_type():
    scheme = Scheme()
    add_to_scheme(scheme)
    assert scheme.kind_for(api_v1alpha1.LocalVolumeSet()) == GroupVersionKind(
        "local.storage.openshift.io", "v1alpha1", "LocalVolumeSet"
    )


def test_adding_twice_is_harmless():
    scheme = Scheme()
    add_to_scheme(scheme)
    add_to_scheme(scheme)
    assert scheme.kind_for(api_v1.LocalVolume()) == GroupVersionKind(
        "local.storage.openshift.io", "v1", "LocalVolume"
    )
    assert scheme.kind_for(api_v1alpha1.LocalVolumeDiscovery()) == GroupVersionKind(
        "local.storage.openshift.io", "v1alpha1", "LocalVolumeDiscovery"
    )


def test_conflicting_registration_raises():
    class LocalVolume:
        pass

    scheme = Scheme()
    scheme.add_known_type(api_v1.GROUP_VERSION, "LocalVolume", LocalVolume)
    with pytest.raises(SchemeError):
        add_to_scheme(scheme)


def test_unregistered_kind_is_unknown():
    scheme = Scheme()
    add_to_scheme(scheme)
    gvk = api_v1.GROUP_VERSION.with_kind("LocalVolumeSet")
    assert not scheme.recognizes(gvk)
    with pytest.raises(SchemeError):
        scheme.new_object(gvk)
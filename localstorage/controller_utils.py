"""Helpers for controllers: event filtering, environment, finalizers, owned PVs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

from localstorage.core import (
    PV_OWNER_KIND_LABEL,
    PV_OWNER_NAME_LABEL,
    PV_OWNER_NAMESPACE_LABEL,
    ObjectMeta,
    PersistentVolume,
    PersistentVolumePhase,
)

NODE_NAME_ENV = "MY_NODE_NAME"
WATCH_NAMESPACE_ENV = "WATCH_NAMESPACE"


class PersistentVolumeLister(Protocol):
    """Anything able to list persistent volumes carrying the given labels."""

    def list_persistent_volumes(
        self, match_labels: Mapping[str, str]
    ) -> Iterable[PersistentVolume]: ...


def _labels_of(obj: Any) -> Mapping[str, str]:
    meta = getattr(obj, "metadata", obj)
    return getattr(meta, "labels", None) or {}


def app_label_in(meta: Any, components: Iterable[str]) -> bool:
    """Return whether the object's "app" label is one of the components."""
    app_name = _labels_of(meta).get("app")
    if app_name is None:
        return False
    return app_name in components


@dataclass(frozen=True)
class LabelPredicate:
    """Event filter that lets through objects whose "app" label is a listed component."""

    components: tuple[str, ...]

    def create(self, obj: Any) -> bool:
        return app_label_in(obj, self.components)

    def update(self, old: Any, new: Any) -> bool:
        return app_label_in(old, self.components) or app_label_in(new, self.components)

    def delete(self, obj: Any) -> bool:
        return app_label_in(obj, self.components)

    def generic(self, obj: Any) -> bool:
        return app_label_in(obj, self.components)


def enqueue_only_labeled_subcomponents(*args: str) -> LabelPredicate:
    """Return a predicate passing only objects labelled with one of the given apps."""
    return LabelPredicate(tuple(args))


def init_map_if_nil(m: dict[str, str] | None) -> dict[str, str]:
    """Return m when it holds more than one entry, otherwise a fresh empty dict."""
    if m is not None and len(m) > 1:
        return m
    return {}


def get_node_name_env_var() -> str:
    """Return the node name from MY_NODE_NAME, or "" when unset."""
    return os.environ.get(NODE_NAME_ENV, "")


def get_watch_namespace() -> str:
    """Return the namespace to watch; raises LookupError if WATCH_NAMESPACE is unset."""
    try:
        return os.environ[WATCH_NAMESPACE_ENV]
    except KeyError:
        raise LookupError(f"{WATCH_NAMESPACE_ENV} must be set") from None


def contains_finalizer(metadata: ObjectMeta, finalizer: str) -> bool:
    """Return whether the finalizer is present in the metadata."""
    return finalizer in metadata.finalizers


def get_bound_and_released_pvs(
    obj: Any, client: PersistentVolumeLister
) -> tuple[list[PersistentVolume], list[PersistentVolume]]:
    """Return the bound and the released PVs owned by obj."""
    meta = getattr(obj, "metadata", None)
    if meta is None or not hasattr(meta, "name") or not hasattr(meta, "namespace"):
        raise ValueError(f"could not get object metadata accessor from obj: {obj!r}")

    name = meta.name
    namespace = meta.namespace
    kind = getattr(obj, "kind", "") or ""
    if not name or not namespace or not kind:
        raise ValueError(
            f"name: {name!r}, namespace: {namespace!r}, or  kind: {kind!r} is empty for obj: {obj!r}"
        )

    selector = {
        PV_OWNER_KIND_LABEL: kind,
        PV_OWNER_NAME_LABEL: name,
        PV_OWNER_NAMESPACE_LABEL: namespace,
    }
    try:
        volumes = list(client.list_persistent_volumes(selector))
    except Exception as err:
        raise RuntimeError(f"failed to list persistent volumes: {err}") from err

    bound = [pv for pv in volumes if pv.phase == PersistentVolumePhase.BOUND]
    released = [pv for pv in volumes if pv.phase == PersistentVolumePhase.RELEASED]
    return bound, released
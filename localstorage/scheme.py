"""Mapping between API object types and their group, version and kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Union


class SchemeError(Exception):
    """Raised for unknown or conflicting type registrations."""


@dataclass(frozen=True)
class GroupVersion:
    """An API group and version."""

    group: str
    version: str

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def with_kind(self, kind: str) -> GroupVersionKind:
        """Return the group, version and kind for a kind in this group version."""
        return GroupVersionKind(self.group, self.version, kind)


@dataclass(frozen=True)
class GroupVersionKind:
    """An API group, version and kind."""

    group: str
    version: str
    kind: str

    @property
    def group_version(self) -> GroupVersion:
        return GroupVersion(self.group, self.version)

    def __str__(self) -> str:
        return f"{self.group_version}, Kind={self.kind}"


class Scheme:
    """Registry of object types by group, version and kind."""

    def __init__(self) -> None:
        self._types: dict[GroupVersionKind, type] = {}
        self._kinds: dict[type, list[GroupVersionKind]] = {}

    def add_known_type(self, group_version: GroupVersion, kind: str, cls: type) -> None:
        """Register cls under the given group version and kind."""
        gvk = group_version.with_kind(kind)
        existing = self._types.get(gvk)
        if existing is not None:
            if existing is cls:
                return
            raise SchemeError(
                f"double registration of different types for {gvk}: "
                f"old={existing.__qualname__}, new={cls.__qualname__}"
            )
        self._types[gvk] = cls
        self._kinds.setdefault(cls, []).append(gvk)

    def kind_for(self, obj: Any) -> GroupVersionKind:
        """Return the first group, version and kind registered for obj's type."""
        cls = obj if isinstance(obj, type) else type(obj)
        kinds = self._kinds.get(cls)
        if not kinds:
            raise SchemeError(f"no kind is registered for the type {cls.__qualname__}")
        return kinds[0]

    def new_object(self, gvk: GroupVersionKind) -> Any:
        """Create an empty object of the type registered for gvk."""
        cls = self._types.get(gvk)
        if cls is None:
            raise SchemeError(f"no kind {gvk.kind!r} is registered for version {gvk.group_version}")
        return cls()

    def recognizes(self, gvk: GroupVersionKind) -> bool:
        """Return whether a type is registered for gvk."""
        return gvk in self._types


SchemeFunc = Callable[[Scheme], None]


class SchemeBuilder:
    """Collects types and functions to add to a scheme.

    Classes passed to register are added under the builder's group version,
    with their class name as kind; other callables are called with the scheme.
    """

    def __init__(self, group_version: GroupVersion | None = None) -> None:
        self.group_version = group_version
        self._items: list[Union[type, SchemeFunc]] = []

    def register(self, *args: Union[type, SchemeFunc]) -> SchemeBuilder:
        """Queue types or scheme functions; returns the builder."""
        for item in args:
            if isinstance(item, type):
                if self.group_version is None:
                    raise SchemeError(
                        f"cannot register type {item.__qualname__} without a group version"
                    )
            elif not callable(item):
                raise SchemeError(f"cannot register {item!r}: not a type or a scheme function")
            self._items.append(item)
        return self

    def add_to_scheme(self, scheme: Scheme) -> None:
        """Apply every queued registration to the scheme, in order."""
        for item in self._items:
            if isinstance(item, type):
                assert self.group_version is not None
                scheme.add_known_type(self.group_version, item.__name__, item)
            else:
                item(scheme)
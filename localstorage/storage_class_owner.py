"""Thread-safe association from storage classes to the objects that own them."""

from __future__ import annotations

import threading

from localstorage.core import NamespacedName


class StorageClassOwnerMap:
    """One-to-many map from storage class name to owner names.

    Lets a single volume or storage class event fan out to every owner.
    """

    def __init__(self) -> None:
        self._owners: dict[str, set[NamespacedName]] = {}
        self._lock = threading.Lock()

    def get_storage_class_owners(self, storage_class: str) -> list[NamespacedName]:
        """Return the owners registered for the storage class."""
        with self._lock:
            return list(self._owners.get(storage_class, ()))

    def register_storage_class_owner(self, storage_class: str, name: NamespacedName) -> None:
        """Record that the named object owns the storage class."""
        with self._lock:
            self._owners.setdefault(storage_class, set()).add(name)

    def deregister_storage_class_owner(self, storage_class: str, name: NamespacedName) -> None:
        """Forget that the named object owns the storage class."""
        with self._lock:
            names = self._owners.get(storage_class)
            if names:
                names.discard(name)
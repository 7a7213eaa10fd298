"""Host volumes and mounts used by the diskmaker daemons."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from localstorage.names import PROVISIONER_CONFIG_MAP_NAME, get_local_disk_location_path

SYMLINK_DIR_VOL_NAME = "local-disks"
DEV_DIR_VOL_NAME = "device-dir"
DEV_DIR_PATH = "/dev"
PROVISIONER_CONFIG_VOL_NAME = "provisioner-config"
PROVISIONER_CONFIG_MOUNT_PATH = "/etc/provisioner/config"
UDEV_VOL_NAME = "run-udev"
UDEV_PATH = "/run/udev"


class MountPropagationMode(str, Enum):
    """How mounts propagate between host and container."""

    NONE = "None"
    HOST_TO_CONTAINER = "HostToContainer"
    BIDIRECTIONAL = "Bidirectional"


class HostPathType(str, Enum):
    """Checks applied to a host path before mounting it."""

    UNSET = ""
    DIRECTORY_OR_CREATE = "DirectoryOrCreate"
    DIRECTORY = "Directory"
    FILE_OR_CREATE = "FileOrCreate"
    FILE = "File"
    SOCKET = "Socket"
    CHAR_DEVICE = "CharDevice"
    BLOCK_DEVICE = "BlockDevice"


@dataclass(frozen=True)
class Volume:
    """A pod volume backed by a host path or a config map."""

    name: str
    host_path: str | None = None
    host_path_type: HostPathType | None = None
    config_map_name: str | None = None


@dataclass(frozen=True)
class VolumeMount:
    """Where a volume is mounted inside a container."""

    name: str
    mount_path: str
    read_only: bool = False
    mount_propagation: MountPropagationMode | None = None


def symlink_host_dir_volume() -> Volume:
    """Return the host directory holding disk symlinks; its path follows LOCAL_DISK_LOCATION."""
    return Volume(name=SYMLINK_DIR_VOL_NAME, host_path=get_local_disk_location_path())


def symlink_mount() -> VolumeMount:
    """Return the mount for symlink_host_dir_volume()."""
    return VolumeMount(
        name=SYMLINK_DIR_VOL_NAME,
        mount_path=get_local_disk_location_path(),
        mount_propagation=MountPropagationMode.HOST_TO_CONTAINER,
    )


DEV_HOST_DIR_VOLUME = Volume(
    name=DEV_DIR_VOL_NAME,
    host_path=DEV_DIR_PATH,
    host_path_type=HostPathType.DIRECTORY,
)
DEV_MOUNT = VolumeMount(
    name=DEV_DIR_VOL_NAME,
    mount_path=DEV_DIR_PATH,
    mount_propagation=MountPropagationMode.HOST_TO_CONTAINER,
)

PROVISIONER_CONFIG_HOST_DIR_VOLUME = Volume(
    name=PROVISIONER_CONFIG_VOL_NAME,
    config_map_name=PROVISIONER_CONFIG_MAP_NAME,
)
PROVISIONER_CONFIG_MOUNT = VolumeMount(
    name=PROVISIONER_CONFIG_VOL_NAME,
    mount_path=PROVISIONER_CONFIG_MOUNT_PATH,
    read_only=True,
)

# Bind-mounting /run/udev gives lsblk more accurate output.
UDEV_HOST_DIR_VOLUME = Volume(name=UDEV_VOL_NAME, host_path=UDEV_PATH)
UDEV_MOUNT = VolumeMount(
    name=UDEV_VOL_NAME,
    mount_path=UDEV_PATH,
    mount_propagation=MountPropagationMode.HOST_TO_CONTAINER,
)
"""Byte size units and capacity rounding."""

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB
TIB = 1024 * GIB

_EASY_TO_READ_UNITS = (GIB, MIB)


def round_down_capacity_pretty(capacity_bytes: int) -> int:
    """Round down to whole GiB or MiB when that leaves at least 10 units.

    Larger units are tried first; if neither gives 10 units the value is
    returned unchanged.
    """
    for unit in _EASY_TO_READ_UNITS:
        size = capacity_bytes // unit
        if size >= 10:
            return size * unit
    return capacity_bytes
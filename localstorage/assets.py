"""Reading bundled template files, with placeholder substitution."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Sequence


def _check_name(name: str) -> None:
    """Reject names that are not clean relative slash-separated paths."""
    if name == ".":
        return
    parts = name.split("/")
    if not name or any(part in ("", ".", "..") for part in parts) or "\\" in name:
        raise ValueError(f"invalid asset name: {name!r}")


def read_file(name: str, root: str | os.PathLike[str]) -> bytes:
    """Return the content of the named file below root.

    The name must be a relative, slash-separated path without "." or ".."
    elements.
    """
    _check_name(name)
    path = Path(root).joinpath(*name.split("/"))
    if path.is_dir():
        raise IsADirectoryError(f"{name} is a directory")
    return path.read_bytes()


def read_file_and_replace(
    name: str, pairs: Sequence[str], root: str | os.PathLike[str]
) -> bytes:
    """Read the named file and replace every old string with its new one.

    pairs alternates old and new strings. Replacement runs in a single pass
    from left to right without overlapping matches; where several olds match
    at one position, the earliest pair wins.
    """
    if len(pairs) % 2:
        raise ValueError("read_file_and_replace: odd number of replacement strings")
    content = read_file(name, root)
    if not pairs:
        return content

    replacements: dict[str, str] = {}
    for old, new in zip(pairs[::2], pairs[1::2]):
        replacements.setdefault(old, new)
    pattern = re.compile("|".join(re.escape(old) for old in replacements))

    text = content.decode("utf-8", "surrogateescape")
    result = pattern.sub(lambda m: replacements[m.group(0)], text)
    return result.encode("utf-8", "surrogateescape")
"""Virtual/host path transforms.

Archive member names are always '/'-separated regardless of the host.
Packing converts host paths to virtual paths; unpacking lets the host's
native join reinterpret the slashes.
"""

from __future__ import annotations

import os

_ROOT_NAMES = frozenset({"", ".", "./."})


def strip_dot_slash(path: str) -> str:
    if path.startswith("./"):
        return path[2:]
    return path


def apply_prefix(rel_path: str, prefix: str) -> str:
    """Prepend ``prefix`` to ``rel_path``.

    A prefix starting with ``./`` is concatenated as-is; any other prefix is
    joined as a path segment and the result normalized.
    """
    if not prefix:
        return rel_path
    if prefix.startswith("./"):
        return prefix + rel_path
    return os.path.normpath(os.path.join(prefix, rel_path))


def to_virtual_path(path: str) -> str:
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        path = path.replace(os.altsep, "/")
    return path


def is_root_path(virtual: str) -> bool:
    return virtual in _ROOT_NAMES


def archive_name(rel_path: str, prefix: str) -> str | None:
    """Member name for a walked path relative to the source root.

    Returns None when the name denotes the archive root itself.
    """
    name = apply_prefix(strip_dot_slash(rel_path), prefix)
    if is_root_path(name):
        return None
    return to_virtual_path(name)


def to_host_path(target_dir: str, virtual: str) -> str:
    parts = [p for p in strip_dot_slash(virtual).split("/") if p]
    if not parts:
        return os.path.normpath(target_dir)
    return os.path.normpath(os.path.join(target_dir, *parts))


def is_within(target_dir: str, host_path: str) -> bool:
    root = os.path.abspath(target_dir)
    path = os.path.abspath(host_path)
    return os.path.commonpath([root, path]) == root

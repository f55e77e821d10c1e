"""Path utilities for comparing and resolving runtime locations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def canonical_path(path: PathLike) -> str:
    """Canonical string form of a path for identity comparisons.

    Expands ``~``, makes the path absolute, resolves symlinks and applies
    the platform's case folding (``os.path.normcase`` lowercases on
    Windows and is a no-op elsewhere).

    Examples:
        >>> canonical_path("~/envs/../envs/foo")
        "/home/me/envs/foo"
    """
    expanded = os.path.expanduser(str(path))
    return os.path.normcase(os.path.realpath(os.path.abspath(expanded)))


def same_file(a: PathLike, b: PathLike) -> bool:
    """Check whether two paths denote the same file.

    When both paths exist the operating system decides (``os.path.samefile``
    compares device and inode, so symlinks, hard links, relative paths and
    case-insensitive filesystems all compare equal). When either is missing
    the canonical forms are compared instead, so a path still compares
    equal to itself before the file has been created.
    """
    try:
        return os.path.samefile(os.path.expanduser(str(a)), os.path.expanduser(str(b)))
    except OSError:
        return canonical_path(a) == canonical_path(b)


def has_path_separator(value: str) -> bool:
    """True if ``value`` looks like a path rather than a bare name."""
    return "/" in value or "\\" in value


def resolve_workspace_path(
    path: PathLike,
    project_root: PathLike,
) -> Path:
    """Resolve a path relative to the project workspace.

    Handles both absolute and relative paths correctly:
    - Absolute paths: returned as-is (``~`` expanded)
    - Relative paths: resolved relative to project_root

    Symlinks are deliberately not resolved: a virtualenv's ``bin/python``
    is usually a symlink and callers need the path inside the environment.

    Args:
        path: Path to resolve (can be absolute or relative)
        project_root: Root directory of the project workspace

    Returns:
        Absolute Path object

    Examples:
        >>> resolve_workspace_path(".venv", "/project")
        Path("/project/.venv")

        >>> resolve_workspace_path("/abs/env", "/project")
        Path("/abs/env")
    """
    path_obj = Path(path).expanduser()

    if path_obj.is_absolute():
        return Path(os.path.normpath(path_obj))

    return Path(os.path.normpath(Path(project_root).absolute() / path_obj))

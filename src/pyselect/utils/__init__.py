"""Utility modules (path)."""

from .path import (
    canonical_path,
    has_path_separator,
    resolve_workspace_path,
    same_file,
)

__all__ = [
    "canonical_path",
    "has_path_separator",
    "resolve_workspace_path",
    "same_file",
]

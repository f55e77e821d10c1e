"""Location of the managed Miniconda installation."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from .conda import conda_binary, is_condaenv

DIRECTORY_NAME = "pyselect-miniconda"


def default_miniconda_path(platform: str = sys.platform) -> str:
    """Per-platform default install location."""
    if platform.startswith("win"):
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return str(Path(base) / DIRECTORY_NAME)
    if platform == "darwin":
        return str(Path.home() / "Library" / DIRECTORY_NAME)
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return str(Path(data_home) / DIRECTORY_NAME)


def miniconda_path(configured: Optional[str] = None) -> str:
    """Miniconda prefix: ``configured`` or the platform default."""
    if configured:
        return os.path.expanduser(configured)
    return default_miniconda_path()


def miniconda_exists(path: Optional[str] = None) -> bool:
    return is_condaenv(miniconda_path(path))


def miniconda_conda(path: Optional[str] = None) -> str:
    return conda_binary(miniconda_path(path))

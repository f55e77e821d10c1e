"""Conda discovery and environment catalog."""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..runtime.errors import CondaError
from ..runtime.specs import CONDA_EXECUTABLE, get_layout
from ..runtime.types import EnvironmentDescriptor
from ..utils.path import has_path_separator

logger = logging.getLogger(__name__)

# Standard install prefixes, relative to the home directory
HOME_INSTALL_DIRS = ["miniconda3", "anaconda3", "miniforge3", "mambaforge"]

SYSTEM_INSTALL_DIRS = ["/opt/conda", "/opt/miniconda3", "/opt/anaconda3"]


def conda_python(prefix: Union[str, Path], platform: str = sys.platform) -> str:
    """Path of the Python binary inside a conda environment."""
    layout = get_layout("conda")
    return os.path.join(str(prefix), *layout.executable_for(platform).split("/"))


def conda_binary(prefix: Union[str, Path], platform: str = sys.platform) -> str:
    """Path of the conda executable inside a conda installation."""
    return os.path.join(str(prefix), *CONDA_EXECUTABLE.executable_for(platform).split("/"))


def is_condaenv(path: Union[str, Path]) -> bool:
    """Check whether ``path`` is a conda environment (has ``conda-meta``)."""
    return (Path(path) / get_layout("conda").marker).is_dir()


def canonicalize_condaenv(
    raw: Optional[str],
    default_env: str = "base",
) -> str:
    """Normalize a conda environment selector.

    ``None`` and ``"default"`` become ``default_env``; surrounding
    whitespace is dropped; path-like values are expanded and made absolute.
    """
    if raw is None:
        return default_env

    value = raw.strip()
    if not value or value == "default":
        return default_env

    if has_path_separator(value) or value.startswith("~"):
        return os.path.abspath(os.path.expanduser(value))

    return value


def _candidate_locations(managed_prefix: Optional[str] = None) -> List[str]:
    locations = []
    if managed_prefix:
        locations.append(conda_binary(managed_prefix))
    home = Path.home()
    for name in HOME_INSTALL_DIRS:
        locations.append(conda_binary(home / name))
    for prefix in SYSTEM_INSTALL_DIRS:
        locations.append(conda_binary(prefix))
    return locations


def find_conda(
    conda: str = "auto",
    managed_prefix: Optional[str] = None,
) -> str:
    """Locate the conda executable.

    Priority when ``conda`` is ``"auto"``:
    1. ``$CONDA_EXE``
    2. ``conda`` on ``PATH``
    3. The managed Miniconda installation
    4. Standard install locations

    Args:
        conda: ``"auto"`` or an explicit path to a conda executable
        managed_prefix: Managed Miniconda prefix to consider

    Returns:
        Path to the conda executable

    Raises:
        CondaError: If no conda executable can be found
    """
    if conda != "auto":
        if not os.path.isfile(os.path.expanduser(conda)):
            raise CondaError(f"Specified conda binary '{conda}' does not exist.", conda)
        return os.path.expanduser(conda)

    conda_exe = os.environ.get("CONDA_EXE")
    if conda_exe and os.path.isfile(conda_exe):
        return conda_exe

    on_path = shutil.which("conda")
    if on_path:
        return on_path

    tried = _candidate_locations(managed_prefix)
    for location in tried:
        if os.path.isfile(location):
            return location

    raise CondaError(
        "Unable to find conda binary. Is Anaconda installed?\n"
        "Tried $CONDA_EXE, PATH and:\n"
        + "\n".join(f"  {location}" for location in tried)
    )


def parse_conda_info(info: dict, platform: str = sys.platform) -> List[EnvironmentDescriptor]:
    """Build catalog rows from ``conda info --json`` output.

    Rows keep conda's order. The installation root is named ``base``;
    every other environment is named after its directory.
    """
    root_prefix = info.get("root_prefix")
    envs: Sequence[str] = info.get("envs") or []

    descriptors = []
    for prefix in envs:
        if root_prefix and os.path.normcase(os.path.normpath(prefix)) == os.path.normcase(
            os.path.normpath(root_prefix)
        ):
            name = "base"
        else:
            name = os.path.basename(os.path.normpath(prefix))
        descriptors.append(
            EnvironmentDescriptor(
                name=name,
                python=conda_python(prefix, platform),
                prefix=prefix,
            )
        )
    return descriptors


def conda_list(
    conda: str = "auto",
    managed_prefix: Optional[str] = None,
    timeout_s: int = 30,
) -> List[EnvironmentDescriptor]:
    """Enumerate conda environments known to a conda installation.

    Args:
        conda: ``"auto"`` or a path to a conda executable
        managed_prefix: Managed Miniconda prefix considered by ``"auto"``
        timeout_s: Timeout for the conda command

    Returns:
        Catalog rows in the order conda reports them

    Raises:
        CondaError: If conda is missing, fails, or prints unparsable output
    """
    executable = find_conda(conda, managed_prefix)

    try:
        result = subprocess.run(
            [executable, "info", "--json"],
            capture_output=True,
            text=True,
            timeout=timeout_s,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise CondaError(f"Error running '{executable} info --json': {e}", executable) from e

    if result.returncode != 0:
        raise CondaError(
            f"'{executable} info --json' exited with status {result.returncode}:\n"
            f"{result.stderr.strip()}",
            executable,
        )

    try:
        info = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise CondaError(f"Unable to parse output of '{executable} info --json': {e}", executable) from e

    envs = parse_conda_info(info)
    logger.debug(f"conda at {executable} reported {len(envs)} environment(s)")
    return envs

"""Environment managers: virtualenv, conda and the managed Miniconda."""

from .conda import (
    canonicalize_condaenv,
    conda_binary,
    conda_list,
    conda_python,
    find_conda,
    is_condaenv,
    parse_conda_info,
)
from .miniconda import miniconda_conda, miniconda_exists, miniconda_path
from .virtualenv import (
    detect_project_virtualenv,
    is_virtualenv,
    virtualenv_home,
    virtualenv_python,
    virtualenv_root,
)

__all__ = [
    # conda
    "canonicalize_condaenv",
    "conda_binary",
    "conda_list",
    "conda_python",
    "find_conda",
    "is_condaenv",
    "parse_conda_info",
    # miniconda
    "miniconda_conda",
    "miniconda_exists",
    "miniconda_path",
    # virtualenv
    "detect_project_virtualenv",
    "is_virtualenv",
    "virtualenv_home",
    "virtualenv_python",
    "virtualenv_root",
]

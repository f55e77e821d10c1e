"""Queries the resolvers make against the filesystem and environment managers.

Every query is a plain callable so tests (and embedders) can swap any of
them out. ``Collaborators.from_config`` binds the defaults from
``pyselect.environments`` to a loaded configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Callable, List, Optional

from ..environments.conda import canonicalize_condaenv, conda_list, conda_python, is_condaenv
from ..environments.miniconda import miniconda_conda, miniconda_exists, miniconda_path
from ..environments.virtualenv import is_virtualenv, virtualenv_root
from ..utils.path import same_file
from .types import EnvironmentDescriptor

if TYPE_CHECKING:
    from ..config import PySelectConfig


@dataclass
class Collaborators:
    """External queries used by ``RuntimeResolver``."""

    same_file: Callable[[str, str], bool] = same_file
    is_file: Callable[[str], bool] = os.path.isfile
    is_dir: Callable[[str], bool] = os.path.isdir
    virtualenv_root: Callable[[Optional[str]], str] = virtualenv_root
    is_virtualenv: Callable[[str], bool] = is_virtualenv
    is_condaenv: Callable[[str], bool] = is_condaenv
    conda_python: Callable[[str, str], str] = conda_python
    canonicalize_condaenv: Callable[[Optional[str]], str] = canonicalize_condaenv
    list_environments: Callable[[str], List[EnvironmentDescriptor]] = conda_list
    miniconda_exists: Callable[[], bool] = miniconda_exists
    miniconda_conda: Callable[[], str] = miniconda_conda
    miniconda_path: Callable[[], str] = miniconda_path

    @classmethod
    def from_config(cls, config: "PySelectConfig") -> "Collaborators":
        """Bind the default queries to ``config``."""
        managed = config.miniconda.path
        return cls(
            virtualenv_root=partial(
                virtualenv_root,
                home=config.virtualenv.home,
                default_name=config.virtualenv.default_name,
                project_root=config.project_root,
                patterns=config.virtualenv.patterns,
            ),
            canonicalize_condaenv=partial(
                canonicalize_condaenv,
                default_env=config.conda.default_env,
            ),
            list_environments=partial(
                conda_list,
                managed_prefix=miniconda_path(managed),
                timeout_s=config.conda.timeout_s,
            ),
            miniconda_exists=partial(miniconda_exists, managed),
            miniconda_conda=partial(miniconda_conda, managed),
            miniconda_path=partial(miniconda_path, managed),
        )

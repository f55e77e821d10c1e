"""Configuration file parser for pyselect."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ..environments.virtualenv import detect_project_virtualenv
from ..utils.path import has_path_separator, resolve_workspace_path

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".pyselect.toml"
ENV_PYTHON = "PYSELECT_PYTHON"
ENV_MINICONDA_PATH = "PYSELECT_MINICONDA_PATH"


@dataclass
class PythonConfig:
    """Runtime hints declared by the project."""

    path: Optional[str] = None
    virtualenv: Optional[str] = None
    condaenv: Optional[str] = None
    conda: str = "auto"
    miniconda: bool = False
    miniconda_env: Optional[str] = None
    required: bool = False
    # From $PYSELECT_PYTHON; always treated as required
    env_python: Optional[str] = None


@dataclass
class VirtualenvConfig:
    """Where named virtualenvs live."""

    home: Optional[str] = None  # Defaults to $WORKON_HOME or ~/.virtualenvs
    default_name: str = "pyselect"
    # Project-local virtualenv directories, checked in order
    patterns: List[str] = field(
        default_factory=lambda: [".venv", "venv", "env", ".env"]
    )


@dataclass
class CondaConfig:
    """Conda lookup configuration."""

    executable: str = "auto"
    default_env: str = "base"
    timeout_s: int = 30


@dataclass
class MinicondaConfig:
    """Managed Miniconda configuration."""

    path: Optional[str] = None  # Defaults to a per-platform location


@dataclass
class PySelectConfig:
    """Complete pyselect configuration."""

    python: PythonConfig = field(default_factory=PythonConfig)
    virtualenv: VirtualenvConfig = field(default_factory=VirtualenvConfig)
    conda: CondaConfig = field(default_factory=CondaConfig)
    miniconda: MinicondaConfig = field(default_factory=MinicondaConfig)

    # Project root for resolving paths
    project_root: Path = field(default_factory=Path.cwd)

    def resolve_path(self, path_template: str) -> str:
        """Resolve template variables in paths.

        Supports:
            ${PROJECT_ROOT} - absolute path to project root
            ${VENV} - auto-detected virtualenv path
        """
        result = path_template

        # ${PROJECT_ROOT}
        result = result.replace("${PROJECT_ROOT}", str(self.project_root))

        # ${VENV} - auto-detect virtualenv
        if "${VENV}" in result:
            venv_path = detect_project_virtualenv(self.project_root, self.virtualenv.patterns)
            if venv_path is not None:
                result = result.replace("${VENV}", str(venv_path))
            else:
                # Fallback to project root if no venv found
                result = result.replace("${VENV}", str(self.project_root))

        return result


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .pyselect.toml in project root.

    Args:
        project_path: Root path of the project

    Returns:
        Path to .pyselect.toml if found, None otherwise
    """
    config_file = project_path / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def _optional_str(data: Dict[str, Any], key: str, config: PySelectConfig) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return config.resolve_path(str(value))


def _optional_path(data: Dict[str, Any], key: str, config: PySelectConfig) -> Optional[str]:
    """Read a path setting; relative values are anchored at the project root."""
    value = _optional_str(data, key, config)
    if value is None:
        return None
    return str(resolve_workspace_path(value, config.project_root))


def load_config(project_path: Path) -> PySelectConfig:
    """Load configuration from .pyselect.toml, .env and the environment.

    Variables from ``<project>/.env`` are loaded first but never override
    variables already set in the process environment.

    Args:
        project_path: Root path of the project

    Returns:
        PySelectConfig with loaded or default configuration
    """
    project_path = Path(project_path)
    config = PySelectConfig(project_root=project_path)

    dotenv_file = project_path / ".env"
    if dotenv_file.is_file():
        load_dotenv(dotenv_file, override=False)

    config_file = find_config_file(project_path)
    data: Dict[str, Any] = {}
    if config_file:
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            # If TOML parsing fails, fall back to defaults
            logger.warning(f"Ignoring unreadable {config_file}: {e}")
            data = {}

    # Parse virtualenv config
    if "virtualenv" in data:
        venv_data = data["virtualenv"]
        config.virtualenv.home = _optional_path(venv_data, "home", config)
        config.virtualenv.default_name = venv_data.get("default_name", "pyselect")
        if "patterns" in venv_data:
            config.virtualenv.patterns = list(venv_data["patterns"])

    # Parse python hints
    if "python" in data:
        python_data = data["python"]
        config.python.path = _optional_path(python_data, "path", config)
        config.python.virtualenv = _optional_str(python_data, "virtualenv", config)
        # condaenv is a name unless it looks like a path
        condaenv = _optional_str(python_data, "condaenv", config)
        if condaenv and (has_path_separator(condaenv) or condaenv.startswith("~")):
            condaenv = str(resolve_workspace_path(condaenv, config.project_root))
        config.python.condaenv = condaenv
        config.python.conda = python_data.get("conda", "auto")
        config.python.required = python_data.get("required", False)

        # miniconda = true, or miniconda = "env-name"
        miniconda_value = python_data.get("miniconda", False)
        if isinstance(miniconda_value, str):
            config.python.miniconda = True
            config.python.miniconda_env = miniconda_value
        else:
            config.python.miniconda = bool(miniconda_value)

    # Parse conda config
    if "conda" in data:
        conda_data = data["conda"]
        config.conda.executable = conda_data.get("executable", "auto")
        config.conda.default_env = conda_data.get("default_env", "base")
        config.conda.timeout_s = conda_data.get("timeout_s", 30)

    # Parse miniconda config
    if "miniconda" in data:
        config.miniconda.path = _optional_path(data["miniconda"], "path", config)

    # Environment variables win over the file
    env_python = os.environ.get(ENV_PYTHON)
    if env_python:
        config.python.env_python = env_python
    env_miniconda = os.environ.get(ENV_MINICONDA_PATH)
    if env_miniconda:
        config.miniconda.path = env_miniconda

    return config

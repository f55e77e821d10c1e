"""Resolve user hints (paths, virtualenvs, conda environments) to a Python binary."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import PySelectConfig, load_config
from ..environments.virtualenv import detect_project_virtualenv, virtualenv_python
from ..utils.path import has_path_separator
from .active import ActiveRuntime
from .collaborators import Collaborators
from .errors import (
    CondaError,
    EnvironmentNotFoundError,
    InvalidPathError,
    ManagedDistributionMissingError,
    NotAnEnvironmentError,
    RuntimeNotFoundError,
)
from .registry import HintRegistry
from .specs import SYSTEM_COMMANDS, VERSION_CHECK, VersionCheck
from .types import EnvironmentDescriptor, Resolution, RuntimeInfo
from .validator import ConflictValidator

logger = logging.getLogger(__name__)


class RuntimeResolver:
    """Collects Python hints and selects the runtime for this process.

    Each ``use_*`` method turns a user-facing selector into a candidate
    binary and records it in the hint registry. With ``required=False`` a
    selector that cannot be resolved returns None and changes nothing;
    with ``required=True`` it raises instead, so a required call never
    returns None.

    One resolver owns one registry; construct a new resolver for a fresh one.
    """

    def __init__(
        self,
        project_path: Optional[Path] = None,
        config: Optional[PySelectConfig] = None,
        collaborators: Optional[Collaborators] = None,
        active: Optional[ActiveRuntime] = None,
        platform: str = sys.platform,
    ):
        """Initialize resolver.

        Args:
            project_path: Root path of the project (defaults to the
                config's project root, then the working directory)
            config: Configuration; defaults are used when omitted
            collaborators: External queries; bound to ``config`` when omitted
            active: The process' active runtime holder
            platform: Target platform for environment layouts
        """
        if config is None:
            config = PySelectConfig(project_root=Path(project_path or Path.cwd()))
        self.config = config
        self.project_path = Path(project_path) if project_path else config.project_root
        self.platform = platform
        self.collaborators = collaborators or Collaborators.from_config(config)
        self.active = active or ActiveRuntime(self.collaborators.same_file)
        self.validator = ConflictValidator(self.active, self.collaborators.same_file)
        self.registry = HintRegistry(self.validator, self.collaborators.same_file)

    @classmethod
    def from_project(cls, project_path: Path, **kwargs) -> "RuntimeResolver":
        """Create a resolver with configuration loaded from ``project_path``."""
        return cls(project_path, config=load_config(Path(project_path)), **kwargs)

    # ------------------------------------------------------------------
    # Hint resolvers
    # ------------------------------------------------------------------

    def use_python(self, python: str, required: bool = False) -> Optional[Resolution]:
        """Register an explicit Python binary.

        Args:
            python: Path to a Python binary, or an environment directory
                holding one
            required: Insist on this binary

        Returns:
            Resolution, or None if not required and the path does not exist

        Raises:
            InvalidPathError: If required and the path does not exist
            RuntimeConflictError: If required and another Python is active
        """
        return self._use(python, required, source="python", selector=python)

    def use_virtualenv(
        self,
        virtualenv: Optional[str] = None,
        required: bool = False,
    ) -> Optional[Resolution]:
        """Register the Python binary of a virtualenv.

        Args:
            virtualenv: Virtualenv directory or name; None for the default
            required: Insist on this virtualenv

        Raises:
            NotAnEnvironmentError: If required and the directory is not a virtualenv
            InvalidPathError: If required and the binary does not exist
            RuntimeConflictError: If required and another Python is active
        """
        root = self.collaborators.virtualenv_root(virtualenv)

        if required and not self.collaborators.is_virtualenv(root):
            raise NotAnEnvironmentError(root, kind="virtualenv")

        python = virtualenv_python(root, self.platform)
        return self._use(python, required, source="virtualenv", selector=virtualenv)

    def use_condaenv(
        self,
        condaenv: Optional[str] = None,
        conda: str = "auto",
        required: bool = False,
    ) -> Optional[Resolution]:
        """Register the Python binary of a conda environment.

        Args:
            condaenv: Environment name or path; None for the default environment
            conda: Conda executable, or "auto" to search for one
            required: Insist on this environment

        Returns:
            Resolution (with a warning if several environments share the
            name), or None if not required and nothing matched

        Raises:
            EnvironmentNotFoundError: If required and no environment matches
            CondaError: If required and conda cannot list its environments
            RuntimeConflictError: If required and another Python is active
        """
        return self._resolve_condaenv(condaenv, conda, required, source="condaenv")

    def use_miniconda(
        self,
        condaenv: Optional[str] = None,
        required: bool = False,
    ) -> Optional[Resolution]:
        """Register a Python from the managed Miniconda installation.

        Raises:
            ManagedDistributionMissingError: If Miniconda is not installed,
                whether or not the hint is required
        """
        if not self.collaborators.miniconda_exists():
            raise ManagedDistributionMissingError(self.collaborators.miniconda_path())

        return self._resolve_condaenv(
            condaenv,
            self.collaborators.miniconda_conda(),
            required,
            source="miniconda",
        )

    def apply_config(self) -> List[Resolution]:
        """Register the hints declared in the configuration.

        ``$PYSELECT_PYTHON`` is applied last and always as required, so it
        takes precedence over the configuration file.
        """
        python_config = self.config.python
        required = python_config.required
        results: List[Optional[Resolution]] = []

        if python_config.path:
            results.append(self.use_python(python_config.path, required))
        if python_config.virtualenv:
            results.append(self.use_virtualenv(python_config.virtualenv, required))
        if python_config.condaenv:
            results.append(
                self.use_condaenv(python_config.condaenv, python_config.conda, required)
            )
        if python_config.miniconda:
            results.append(self.use_miniconda(python_config.miniconda_env, required))
        if python_config.env_python:
            results.append(self.use_python(python_config.env_python, required=True))

        return [result for result in results if result is not None]

    def _resolve_condaenv(
        self,
        condaenv: Optional[str],
        conda: str,
        required: bool,
        source: str,
    ) -> Optional[Resolution]:
        collaborators = self.collaborators
        name = collaborators.canonicalize_condaenv(condaenv)

        # An environment given by path needs no catalog lookup
        if has_path_separator(name) and collaborators.is_condaenv(name):
            python = collaborators.conda_python(name, self.platform)
            return self._use(python, required, source=source, selector=condaenv)

        if conda == "auto":
            conda = self.config.conda.executable

        try:
            catalog = collaborators.list_environments(conda)
        except CondaError as e:
            if required:
                raise
            logger.debug(f"Skipping conda environment '{name}': {e}")
            return None

        matches = [env for env in catalog if env.name == name]
        if not matches:
            if required:
                raise EnvironmentNotFoundError(condaenv or name, catalog)
            logger.debug(f"Skipping conda environment '{name}': not found")
            return None

        warnings = []
        if len(matches) > 1:
            message = _format_ambiguous_matches(name, matches)
            logger.warning(message)
            warnings.append(message)

        return self._use(
            matches[0].python,
            required,
            source=source,
            selector=condaenv,
            matches=matches,
            warnings=warnings,
        )

    def _use(
        self,
        python: str,
        required: bool,
        source: str,
        selector: Optional[str],
        matches: Sequence[EnvironmentDescriptor] = (),
        warnings: Sequence[str] = (),
    ) -> Optional[Resolution]:
        collaborators = self.collaborators
        if collaborators.is_dir(python):
            python = self._binary_in(python)
        if not collaborators.is_file(python):
            if required:
                raise InvalidPathError(python)
            logger.debug(f"Skipping {source} hint {python}: not a file")
            return None

        self.registry.register(python, required=required)

        return Resolution(
            python=python,
            required=required,
            source=source,
            selector=selector,
            matches=list(matches),
            warnings=list(warnings),
        )

    def _binary_in(self, directory: str) -> str:
        """The Python binary inside an environment directory.

        Falls back to the virtualenv location when neither layout has one.
        """
        candidates = [
            virtualenv_python(directory, self.platform),
            self.collaborators.conda_python(directory, self.platform),
        ]
        for candidate in candidates:
            if self.collaborators.is_file(candidate):
                return candidate
        return candidates[0]

    # ------------------------------------------------------------------
    # Runtime selection
    # ------------------------------------------------------------------

    def resolve_runtime(self) -> RuntimeInfo:
        """Select the Python to start from the collected hints.

        Priority:
        1. The already-active runtime
        2. The required Python
        3. Hints, in the order they were registered
        4. A virtualenv in the project directory
        5. System Python

        Returns:
            RuntimeInfo with resolved runtime details

        Raises:
            InvalidPathError: If the required Python no longer exists
            RuntimeNotFoundError: If no Python can be found
        """
        # 1. Active runtime (fixed for the life of the process)
        if self.active.info is not None:
            return self.active.info

        # 2. Required
        required = self.registry.get_required()
        if required:
            if not self.collaborators.is_file(required):
                raise InvalidPathError(required)
            return self._runtime_info(required, "required")

        # 3. Hints
        for hint in self.registry.get_hints():
            if self.collaborators.is_file(hint):
                return self._runtime_info(hint, "hint")

        # 4. Project virtualenv
        runtime = self._auto_detect()
        if runtime:
            return runtime

        # 5. System fallback
        runtime = self._system_fallback()
        if runtime:
            return runtime

        raise RuntimeNotFoundError(
            [
                "Python hints registered with use_python/use_virtualenv/use_condaenv",
                f"Virtualenv in {self.project_path}",
                f"System {' / '.join(SYSTEM_COMMANDS)} on PATH",
            ]
        )

    def initialize(self) -> RuntimeInfo:
        """Select the runtime and mark it active for this process."""
        return self.active.activate(self.resolve_runtime())

    def _auto_detect(self) -> Optional[RuntimeInfo]:
        """Detect a virtualenv in the project directory."""
        venv_path = detect_project_virtualenv(
            self.project_path, self.config.virtualenv.patterns
        )
        if venv_path is None:
            return None

        python = virtualenv_python(venv_path.absolute(), self.platform)
        if not self.collaborators.is_file(python):
            return None

        return self._runtime_info(python, "auto_detect_venv")

    def _system_fallback(self) -> Optional[RuntimeInfo]:
        """Try system commands as fallback."""
        for cmd in SYSTEM_COMMANDS:
            path = shutil.which(cmd)
            if path:
                return self._runtime_info(path, "system")

        return None

    def _runtime_info(self, python: str, source: str) -> RuntimeInfo:
        path_obj = Path(python).expanduser().absolute()
        is_symlink = path_obj.is_symlink()
        return RuntimeInfo(
            path=str(path_obj),
            source=source,
            version=self._get_version(str(path_obj), VERSION_CHECK),
            real_path=str(path_obj.resolve()) if is_symlink else None,
            is_symlink=is_symlink,
        )

    def _get_version(self, executable: str, version_check: VersionCheck) -> Optional[str]:
        """Get version of a Python executable."""
        try:
            result = subprocess.run(
                [executable] + version_check.args,
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Version check failed for {executable}: {e}")
            return None

        output = result.stdout + result.stderr
        match = re.search(version_check.parse, output)
        if match:
            return match.group(1)

        return None


def _format_ambiguous_matches(name: str, matches: Sequence[EnvironmentDescriptor]) -> str:
    lines = [f"multiple conda environments named '{name}' found; the first-listed will be chosen."]
    for i, env in enumerate(matches, start=1):
        location = env.prefix or os.path.dirname(env.python)
        lines.append(f"  {i}. {env.name}: {env.python} ({location})")
    return "\n".join(lines)

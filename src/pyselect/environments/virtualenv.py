"""Virtualenv location and detection."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..runtime.specs import get_layout
from ..utils.path import has_path_separator, resolve_workspace_path

DEFAULT_PATTERNS: List[str] = [".venv", "venv", "env", ".env"]


def virtualenv_home(home: Optional[str] = None) -> Path:
    """Directory holding named virtualenvs.

    Priority: explicit ``home``, ``$WORKON_HOME``, ``~/.virtualenvs``.
    """
    if home:
        return Path(home).expanduser()
    workon_home = os.environ.get("WORKON_HOME")
    if workon_home:
        return Path(workon_home).expanduser()
    return Path.home() / ".virtualenvs"


def detect_project_virtualenv(
    project_root: Union[str, Path],
    patterns: Optional[Sequence[str]] = None,
) -> Optional[Path]:
    """Find the first project-local directory that is a virtualenv."""
    for pattern in patterns or DEFAULT_PATTERNS:
        candidate = Path(project_root) / pattern
        if candidate.is_dir() and is_virtualenv(candidate):
            return candidate
    return None


def virtualenv_root(
    selector: Optional[str] = None,
    *,
    home: Optional[str] = None,
    default_name: str = "pyselect",
    project_root: Optional[Union[str, Path]] = None,
    patterns: Optional[Sequence[str]] = None,
) -> str:
    """Turn a virtualenv selector into the environment's root directory.

    Args:
        selector: A path, a name under the virtualenv home, or None for the
            default (``$VIRTUAL_ENV``, then a project-local virtualenv,
            then ``<home>/<default_name>``)
        home: Override for the virtualenv home
        default_name: Name used when nothing else applies
        project_root: Directory relative selectors and project-local
            detection are based on (defaults to the working directory)
        patterns: Project-local directory names to try

    Returns:
        Absolute path of the virtualenv root (it may not exist)
    """
    root = Path(project_root) if project_root is not None else Path.cwd()

    if selector is None:
        active = os.environ.get("VIRTUAL_ENV")
        if active:
            return str(resolve_workspace_path(active, root))
        detected = detect_project_virtualenv(root, patterns)
        if detected is not None:
            return str(detected.absolute())
        return str(virtualenv_home(home) / default_name)

    selector = selector.strip()
    if has_path_separator(selector) or selector.startswith(("~", ".")):
        return str(resolve_workspace_path(selector, root))

    return str(virtualenv_home(home) / selector)


def virtualenv_python(root: Union[str, Path], platform: str = sys.platform) -> str:
    """Path of the Python binary inside a virtualenv for ``platform``."""
    layout = get_layout("virtualenv")
    return os.path.join(str(root), *layout.executable_for(platform).split("/"))


def is_virtualenv(path: Union[str, Path]) -> bool:
    """Check whether ``path`` is a Python virtualenv.

    A directory qualifies if it holds ``pyvenv.cfg`` (venv, virtualenv >= 20)
    or an ``activate`` script in ``bin``/``Scripts`` (older virtualenv).
    """
    env_dir = Path(path)
    if not env_dir.is_dir():
        return False

    layout = get_layout("virtualenv")
    if (env_dir / layout.marker).is_file():
        return True

    return (env_dir / "bin" / "activate").is_file() or (
        env_dir / "Scripts" / "activate.bat"
    ).is_file()

"""Data types for runtime selection."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RuntimeInfo:
    """Information about a selected Python runtime.

    Attributes:
        path: Absolute path to the Python binary, as selected
        source: How the runtime was selected
        version: Python version string (if available)
        real_path: Target of the symlink at path (if it is one)
        is_symlink: Whether path is a symlink
    """

    path: str
    source: str  # "required", "hint", "auto_detect_venv", "system"
    version: Optional[str] = None
    real_path: Optional[str] = None
    is_symlink: bool = False

    def __repr__(self) -> str:
        version_str = f" v{self.version}" if self.version else ""
        symlink_note = " (symlink)" if self.is_symlink else ""
        return f"<RuntimeInfo python{version_str} @ {self.path}{symlink_note} ({self.source})>"


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """One row of an environment manager's catalog.

    Names are not unique: two conda installations (or two envs_dirs) can
    both hold an environment called ``ml``.
    """

    name: str
    python: str
    prefix: Optional[str] = None


@dataclass
class Resolution:
    """Outcome of a successful resolver call.

    Attributes:
        python: The candidate registered in the hint registry
        required: Whether it was registered as the required runtime
        source: Which resolver produced it
        selector: The user-facing selector the resolver was given
        matches: Catalog rows that matched a named environment
        warnings: Advisory diagnostics (e.g. ambiguous catalog matches)
    """

    python: str
    required: bool
    source: str  # "python", "virtualenv", "condaenv", "miniconda"
    selector: Optional[str] = None
    matches: List[EnvironmentDescriptor] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

"""Errors raised while selecting a Python runtime.

Every error keeps the structured data it was raised with (paths,
selectors, catalog snapshots) as attributes so callers can render their
own diagnostics; ``str(error)`` gives a ready-made message.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .types import EnvironmentDescriptor


class PythonSelectionError(Exception):
    """Base class for runtime selection failures."""


class InvalidPathError(PythonSelectionError):
    """Raised when a required Python path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Specified version of Python '{path}' does not exist.")


class RuntimeConflictError(PythonSelectionError):
    """Raised when a required Python differs from the already-active one."""

    def __init__(self, requested: str, active: str):
        self.requested = requested
        self.active = active
        super().__init__(self._format_error_message())

    def _format_error_message(self) -> str:
        lines = [
            f"The requested version of Python ('{self.requested}') cannot be used,",
            f"as another version of Python ('{self.active}') has already been initialized.",
            "Please start a new process if you need to switch to a different version of Python.",
        ]
        return "\n".join(lines)


class NotAnEnvironmentError(PythonSelectionError):
    """Raised when a required environment directory fails validation."""

    def __init__(self, path: str, kind: str = "virtualenv"):
        self.path = path
        self.kind = kind
        label = "Python virtualenv" if kind == "virtualenv" else "conda environment"
        super().__init__(f"Directory {path} is not a {label}")


class EnvironmentNotFoundError(PythonSelectionError):
    """Raised when a required named environment has no catalog entry."""

    def __init__(
        self,
        selector: str,
        catalog: Optional[Sequence[EnvironmentDescriptor]] = None,
    ):
        self.selector = selector
        self.catalog: List[EnvironmentDescriptor] = list(catalog or [])
        message = f"Unable to locate conda environment '{selector}'."
        if self.catalog:
            known = ", ".join(sorted({env.name for env in self.catalog}))
            message += f"\nAvailable environments: {known}"
        super().__init__(message)


class ManagedDistributionMissingError(PythonSelectionError):
    """Raised when Miniconda is requested but not installed."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Miniconda is not installed (looked in {path}).\n"
            "Install Miniconda there first, or point PYSELECT_MINICONDA_PATH "
            "at an existing installation."
        )


class CondaError(PythonSelectionError):
    """Raised when the conda catalog cannot be enumerated."""

    def __init__(self, message: str, conda: Optional[str] = None):
        self.conda = conda
        super().__init__(message)


class RuntimeNotFoundError(PythonSelectionError):
    """Raised when no usable Python could be selected."""

    def __init__(self, tried: Sequence[str]):
        self.tried = list(tried)
        lines = ["Python runtime not found.", "", "Tried:"]
        for i, step in enumerate(self.tried, start=1):
            lines.append(f"  {i}. {step}")
        lines.extend(
            [
                "",
                "Install Python or configure it in .pyselect.toml:",
                "  [python]",
                '  path = "/path/to/python"',
            ]
        )
        super().__init__("\n".join(lines))

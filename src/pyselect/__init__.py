"""Select which Python installation to use from path, virtualenv and conda hints."""

from .runtime import (
    ActiveRuntime,
    Collaborators,
    EnvironmentDescriptor,
    PythonSelectionError,
    Resolution,
    RuntimeInfo,
    RuntimeResolver,
)
from .config import PySelectConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "RuntimeResolver",
    "ActiveRuntime",
    "Collaborators",
    "EnvironmentDescriptor",
    "Resolution",
    "RuntimeInfo",
    "PythonSelectionError",
    "PySelectConfig",
    "load_config",
]

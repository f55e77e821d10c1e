"""Runtime selection: hint registry, conflict checks and resolvers."""

from .active import ActiveRuntime
from .collaborators import Collaborators
from .errors import (
    CondaError,
    EnvironmentNotFoundError,
    InvalidPathError,
    ManagedDistributionMissingError,
    NotAnEnvironmentError,
    PythonSelectionError,
    RuntimeConflictError,
    RuntimeNotFoundError,
)
from .registry import HintRegistry
from .resolver import RuntimeResolver
from .specs import LAYOUTS, get_layout
from .types import EnvironmentDescriptor, Resolution, RuntimeInfo
from .validator import ConflictValidator

__all__ = [
    "RuntimeResolver",
    "HintRegistry",
    "ConflictValidator",
    "ActiveRuntime",
    "Collaborators",
    "RuntimeInfo",
    "Resolution",
    "EnvironmentDescriptor",
    "LAYOUTS",
    "get_layout",
    # Errors
    "PythonSelectionError",
    "InvalidPathError",
    "RuntimeConflictError",
    "NotAnEnvironmentError",
    "EnvironmentNotFoundError",
    "ManagedDistributionMissingError",
    "CondaError",
    "RuntimeNotFoundError",
]

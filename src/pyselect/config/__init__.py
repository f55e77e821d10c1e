"""Configuration management for pyselect."""

from .parser import (
    CondaConfig,
    MinicondaConfig,
    PySelectConfig,
    PythonConfig,
    VirtualenvConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "PySelectConfig",
    "PythonConfig",
    "VirtualenvConfig",
    "CondaConfig",
    "MinicondaConfig",
    "load_config",
    "find_config_file",
]

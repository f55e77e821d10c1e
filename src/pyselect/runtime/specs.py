"""Declarative environment layouts.

This is DATA, not code. To support a new kind of environment, add its
layout here.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class VersionCheck:
    """Configuration for checking runtime version."""
    args: List[str]
    parse: str  # Regex pattern to extract version


@dataclass(frozen=True)
class EnvironmentLayout:
    """Where an environment keeps its Python binary.

    Selection between the two paths depends only on the target platform,
    never on what the environment directory contains.
    """
    kind: str
    executable_path: str  # POSIX layout
    executable_path_win: str  # Windows layout
    marker: str  # Entry whose presence identifies the environment

    def executable_for(self, platform: str) -> str:
        """Relative path of the Python binary for ``platform``."""
        if is_windows(platform):
            return self.executable_path_win
        return self.executable_path


LAYOUTS: Dict[str, EnvironmentLayout] = {
    "virtualenv": EnvironmentLayout(
        kind="virtualenv",
        executable_path="bin/python",
        executable_path_win="Scripts/python.exe",
        marker="pyvenv.cfg",
    ),
    "conda": EnvironmentLayout(
        kind="conda",
        executable_path="bin/python",
        executable_path_win="python.exe",
        marker="conda-meta",
    ),
}

# Conda's own binary inside an installation prefix
CONDA_EXECUTABLE = EnvironmentLayout(
    kind="conda_binary",
    executable_path="bin/conda",
    executable_path_win="condabin/conda.bat",
    marker="conda-meta",
)

SYSTEM_COMMANDS = ["python3", "python"]  # Try in order

VERSION_CHECK = VersionCheck(
    args=["--version"],
    parse=r"Python (\d+\.\d+\.\d+)",
)


def is_windows(platform: str) -> bool:
    return platform.startswith("win")


def get_layout(kind: str) -> EnvironmentLayout:
    """Get the layout for an environment kind.

    Args:
        kind: Environment kind ("virtualenv" or "conda")

    Returns:
        Environment layout (typed dataclass)

    Raises:
        ValueError: If the kind is not supported
    """
    if kind not in LAYOUTS:
        supported = ", ".join(LAYOUTS.keys())
        raise ValueError(
            f"Environment kind '{kind}' not supported. "
            f"Supported kinds: {supported}"
        )

    return LAYOUTS[kind]

"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from typing import Callable, Generator, Iterable, Optional

import pytest

from pyselect.config import PySelectConfig
from pyselect.runtime import Collaborators, EnvironmentDescriptor, RuntimeResolver


@pytest.fixture
def temp_project() -> Generator[Path, None, None]:
    """Create a temporary project directory."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def clean_env(monkeypatch) -> None:
    """Remove environment variables that steer discovery."""
    for name in (
        "VIRTUAL_ENV",
        "WORKON_HOME",
        "CONDA_EXE",
        "PYSELECT_PYTHON",
        "PYSELECT_MINICONDA_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_resolver(temp_project: Path, clean_env) -> Callable[..., RuntimeResolver]:
    """Factory for resolvers rooted at ``temp_project``.

    ``catalog`` replaces conda enumeration with a fixed list of rows; any
    other keyword overrides the matching collaborator.
    """

    def factory(
        catalog: Optional[Iterable[EnvironmentDescriptor]] = None,
        platform: str = "linux",
        **overrides,
    ) -> RuntimeResolver:
        config = PySelectConfig(project_root=temp_project)
        config.miniconda.path = str(temp_project / "miniconda")
        collaborators = Collaborators.from_config(config)
        if catalog is not None:
            rows = list(catalog)
            collaborators.list_environments = lambda conda: list(rows)
        for name, value in overrides.items():
            setattr(collaborators, name, value)
        return RuntimeResolver(
            temp_project,
            config=config,
            collaborators=collaborators,
            platform=platform,
        )

    return factory

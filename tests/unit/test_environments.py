"""Unit tests for virtualenv, conda and Miniconda helpers."""

import json
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pyselect.environments import conda as conda_module
from pyselect.environments import (
    canonicalize_condaenv,
    conda_binary,
    conda_list,
    conda_python,
    find_conda,
    is_condaenv,
    is_virtualenv,
    miniconda_conda,
    miniconda_exists,
    parse_conda_info,
    virtualenv_python,
    virtualenv_root,
)
from pyselect.environments.miniconda import default_miniconda_path
from pyselect.runtime import CondaError, EnvironmentDescriptor
from tests.helpers.environments import make_condaenv, make_virtualenv, touch_python


class TestVirtualenvRoot:
    """Test virtualenv selector resolution."""

    def test_absolute_path(self, temp_project, clean_env):
        """Absolute paths are used as given."""
        root = virtualenv_root(str(temp_project / "env"), project_root=temp_project)
        assert root == str(temp_project / "env")

    def test_relative_path(self, temp_project, clean_env):
        """Relative paths are resolved against the project."""
        root = virtualenv_root("./envs/dev", project_root=temp_project)
        assert root == str(temp_project / "envs" / "dev")

    def test_name_under_workon_home(self, temp_project, clean_env, monkeypatch):
        """Bare names live under $WORKON_HOME."""
        monkeypatch.setenv("WORKON_HOME", str(temp_project / "workon"))
        root = virtualenv_root("science", project_root=temp_project)
        assert root == str(temp_project / "workon" / "science")

    def test_name_under_configured_home(self, temp_project, clean_env):
        """An explicit home beats $WORKON_HOME."""
        root = virtualenv_root("science", home=str(temp_project / "mine"), project_root=temp_project)
        assert root == str(temp_project / "mine" / "science")

    def test_name_under_default_home(self, temp_project, clean_env):
        """Without $WORKON_HOME names live under ~/.virtualenvs."""
        with patch("pathlib.Path.home", return_value=temp_project):
            root = virtualenv_root("science", project_root=temp_project)
        assert root == str(temp_project / ".virtualenvs" / "science")

    def test_default_uses_virtual_env(self, temp_project, clean_env, monkeypatch):
        """$VIRTUAL_ENV is the default when set."""
        monkeypatch.setenv("VIRTUAL_ENV", str(temp_project / "active"))
        make_virtualenv(temp_project / ".venv")

        assert virtualenv_root(project_root=temp_project) == str(temp_project / "active")

    def test_default_project_virtualenv(self, temp_project, clean_env):
        """The first project-local virtualenv is the next default."""
        make_virtualenv(temp_project / "venv")
        make_virtualenv(temp_project / ".venv")

        assert virtualenv_root(project_root=temp_project) == str(temp_project / ".venv")

    def test_default_skips_non_virtualenv_dirs(self, temp_project, clean_env):
        """Project directories without virtualenv markers are ignored."""
        (temp_project / ".venv").mkdir()
        make_virtualenv(temp_project / "env")

        assert virtualenv_root(project_root=temp_project) == str(temp_project / "env")

    def test_default_name(self, temp_project, clean_env):
        """Falls back to <home>/<default_name>."""
        root = virtualenv_root(
            home=str(temp_project / "home"),
            default_name="tools",
            project_root=temp_project,
        )
        assert root == str(temp_project / "home" / "tools")


class TestVirtualenvDetection:
    """Test is_virtualenv and binary layout."""

    def test_pyvenv_cfg(self, temp_project):
        """pyvenv.cfg marks a virtualenv."""
        make_virtualenv(temp_project / "env")
        assert is_virtualenv(temp_project / "env")

    def test_legacy_activate_script(self, temp_project):
        """Older virtualenvs only ship an activate script."""
        (temp_project / "old" / "bin").mkdir(parents=True)
        (temp_project / "old" / "bin" / "activate").write_text("# activate\n")
        assert is_virtualenv(temp_project / "old")

    def test_plain_directory(self, temp_project):
        """A directory with only a python binary is not a virtualenv."""
        touch_python(temp_project / "plain" / "bin" / "python")
        assert not is_virtualenv(temp_project / "plain")

    def test_missing_directory(self, temp_project):
        """A missing directory is not a virtualenv."""
        assert not is_virtualenv(temp_project / "missing")

    @pytest.mark.parametrize(
        "platform, parts",
        [
            ("linux", ("bin", "python")),
            ("darwin", ("bin", "python")),
            ("win32", ("Scripts", "python.exe")),
        ],
    )
    def test_virtualenv_python(self, platform, parts):
        """Binary suffix depends only on the platform."""
        assert virtualenv_python("/envs/app", platform) == os.path.join("/envs/app", *parts)


class TestCondaHelpers:
    """Test conda layout, detection and selector normalization."""

    def test_conda_python_layouts(self):
        """conda puts python.exe at the prefix on Windows."""
        assert conda_python("/c/envs/ml", "linux") == os.path.join("/c/envs/ml", "bin", "python")
        assert conda_python("/c/envs/ml", "win32") == os.path.join("/c/envs/ml", "python.exe")

    def test_conda_binary_layouts(self):
        """conda's own executable location per platform."""
        assert conda_binary("/c", "linux") == os.path.join("/c", "bin", "conda")
        assert conda_binary("/c", "win32") == os.path.join("/c", "condabin", "conda.bat")

    def test_is_condaenv(self, temp_project):
        """conda-meta marks a conda environment."""
        make_condaenv(temp_project / "ml")
        (temp_project / "other").mkdir()

        assert is_condaenv(temp_project / "ml")
        assert not is_condaenv(temp_project / "other")

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, "base"),
            ("default", "base"),
            ("", "base"),
            ("  ml  ", "ml"),
            ("r-reticulate", "r-reticulate"),
        ],
    )
    def test_canonicalize_names(self, raw, expected):
        """Names are trimmed and defaults resolved."""
        assert canonicalize_condaenv(raw) == expected

    def test_canonicalize_custom_default(self):
        """The default environment name is configurable."""
        assert canonicalize_condaenv(None, default_env="py311") == "py311"

    def test_canonicalize_path(self, temp_project, monkeypatch):
        """Path selectors become absolute."""
        monkeypatch.chdir(temp_project)
        assert canonicalize_condaenv("./envs/ml") == os.path.abspath(os.path.join("envs", "ml"))

    def test_canonicalize_home_path(self, temp_project, monkeypatch):
        """~ is expanded in path selectors."""
        monkeypatch.setenv("HOME", str(temp_project))
        assert canonicalize_condaenv("~/envs/ml") == str(temp_project / "envs" / "ml")


class TestCondaCatalog:
    """Test conda discovery and catalog enumeration."""

    INFO = {
        "root_prefix": "/opt/conda",
        "envs": [
            "/opt/conda",
            "/opt/conda/envs/ml",
            "/home/me/.conda/envs/ml",
        ],
    }

    def test_parse_conda_info(self):
        """Rows keep conda's order; the root is named base."""
        envs = parse_conda_info(self.INFO, platform="linux")

        assert [env.name for env in envs] == ["base", "ml", "ml"]
        assert envs[1] == EnvironmentDescriptor(
            name="ml",
            python=os.path.join("/opt/conda/envs/ml", "bin", "python"),
            prefix="/opt/conda/envs/ml",
        )

    def test_parse_conda_info_empty(self):
        """Missing keys give an empty catalog."""
        assert parse_conda_info({}) == []

    @patch("subprocess.run")
    def test_conda_list(self, mock_run):
        """conda_list runs 'conda info --json' and parses it."""
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(self.INFO), stderr="")

        with patch.object(conda_module, "find_conda", return_value="/opt/conda/bin/conda"):
            envs = conda_list()

        assert [env.prefix for env in envs] == self.INFO["envs"]
        args = mock_run.call_args[0][0]
        assert args == ["/opt/conda/bin/conda", "info", "--json"]

    @patch("subprocess.run")
    def test_conda_list_failure(self, mock_run):
        """A failing conda command raises CondaError."""
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="boom")

        with patch.object(conda_module, "find_conda", return_value="/opt/conda/bin/conda"):
            with pytest.raises(CondaError, match="boom") as excinfo:
                conda_list()

        assert excinfo.value.conda == "/opt/conda/bin/conda"

    @patch("subprocess.run")
    def test_conda_list_bad_json(self, mock_run):
        """Unparsable output raises CondaError."""
        mock_run.return_value = MagicMock(returncode=0, stdout="not json", stderr="")

        with patch.object(conda_module, "find_conda", return_value="/opt/conda/bin/conda"):
            with pytest.raises(CondaError, match="Unable to parse"):
                conda_list()

    @patch("subprocess.run")
    def test_conda_list_not_executable(self, mock_run):
        """An unrunnable conda raises CondaError."""
        mock_run.side_effect = OSError("Permission denied")

        with patch.object(conda_module, "find_conda", return_value="/opt/conda/bin/conda"):
            with pytest.raises(CondaError, match="Permission denied"):
                conda_list()

    def test_find_conda_explicit(self, temp_project):
        """An explicit conda path is returned as is."""
        conda = touch_python(temp_project / "bin" / "conda")
        assert find_conda(str(conda)) == str(conda)

    def test_find_conda_explicit_missing(self, temp_project):
        """A missing explicit conda path raises."""
        with pytest.raises(CondaError, match="does not exist"):
            find_conda(str(temp_project / "nope"))

    def test_find_conda_env_var(self, temp_project, clean_env, monkeypatch):
        """$CONDA_EXE wins in auto mode."""
        conda = touch_python(temp_project / "bin" / "conda")
        monkeypatch.setenv("CONDA_EXE", str(conda))

        assert find_conda() == str(conda)

    def test_find_conda_on_path(self, clean_env):
        """conda on PATH is used next."""
        with patch.object(conda_module.shutil, "which", return_value="/usr/local/bin/conda"):
            assert find_conda() == "/usr/local/bin/conda"

    def test_find_conda_managed(self, temp_project, clean_env):
        """The managed Miniconda is tried before standard locations."""
        prefix = temp_project / "miniconda"
        conda = touch_python(prefix / "bin" / "conda")

        with patch.object(conda_module.shutil, "which", return_value=None):
            assert find_conda(managed_prefix=str(prefix)) == str(conda)

    def test_find_conda_home_install(self, temp_project, clean_env):
        """Standard install locations under the home directory are searched."""
        conda = touch_python(temp_project / "miniforge3" / "bin" / "conda")

        with patch.object(conda_module.shutil, "which", return_value=None), patch(
            "pathlib.Path.home", return_value=temp_project
        ):
            assert find_conda() == str(conda)

    def test_find_conda_not_found(self, temp_project, clean_env):
        """Nothing found raises CondaError listing the locations tried."""
        with patch.object(conda_module.shutil, "which", return_value=None), patch(
            "pathlib.Path.home", return_value=temp_project
        ), patch.object(conda_module, "SYSTEM_INSTALL_DIRS", []):
            with pytest.raises(CondaError, match="Unable to find conda binary"):
                find_conda()


class TestMiniconda:
    """Test managed Miniconda location."""

    def test_exists(self, temp_project):
        """An installation is a prefix with conda-meta."""
        make_condaenv(temp_project / "mc")

        assert miniconda_exists(str(temp_project / "mc"))
        assert not miniconda_exists(str(temp_project / "missing"))

    def test_conda_binary(self, temp_project):
        """Miniconda's conda lives inside its prefix."""
        assert miniconda_conda(str(temp_project / "mc")) == conda_binary(temp_project / "mc")

    def test_default_path_linux(self, temp_project, monkeypatch):
        """Linux honours $XDG_DATA_HOME."""
        monkeypatch.setenv("XDG_DATA_HOME", str(temp_project))

        assert default_miniconda_path("linux") == str(temp_project / "pyselect-miniconda")

    def test_default_path_macos(self, temp_project):
        """macOS installs under ~/Library."""
        with patch("pathlib.Path.home", return_value=temp_project):
            path = default_miniconda_path("darwin")

        assert path == str(temp_project / "Library" / "pyselect-miniconda")

    def test_default_path_windows(self, temp_project, monkeypatch):
        """Windows installs under %LOCALAPPDATA%."""
        monkeypatch.setenv("LOCALAPPDATA", str(temp_project))

        assert default_miniconda_path("win32") == str(Path(temp_project) / "pyselect-miniconda")

"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from mlinstall.adapters.mock import MockRunner
from mlinstall.core.data import DATA_DIR
from mlinstall.core.models.settings import InstallerSettings


@pytest.fixture
def source_dir() -> Path:
    """The bundled templates and manifests."""
    return DATA_DIR


@pytest.fixture
def settings(source_dir: Path) -> InstallerSettings:
    return InstallerSettings(source_dir=str(source_dir))


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory for default-root prompts."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def fake_which():
    """PATH lookup that only knows python3 and python3.10."""
    paths = {
        "python3": "/usr/bin/python3",
        "python3.10": "/usr/bin/python3.10",
    }
    return paths.get


@pytest.fixture
def runner() -> MockRunner:
    """Mock runner where python3 is 3.8.10 and python3.10 is 3.10.12."""
    mock = MockRunner()
    mock.set_program_output("python3", "Python 3.8.10")
    mock.set_program_output("python3.10", "Python 3.10.12")
    return mock

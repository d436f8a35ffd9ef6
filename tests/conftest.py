"""
Pytest configuration and shared fixtures.
"""
from pathlib import Path

import pytest
from typer.testing import CliRunner

SNIPPETSTORE_ENV_VARS = [
    "SNIPPETSTORE_DIR",
    "SNIPPETSTORE_CONFIG",
    "SNIPPETSTORE_DEBUG",
    "XDG_CONFIG_HOME",
]


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """
    Point HOME at an empty temporary directory and clear every SnippetStore
    environment override, so nothing touches the real user's files.

    Returns the fake home directory.
    """
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    for var in SNIPPETSTORE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    return home


@pytest.fixture
def default_store_dir(isolated_home):
    """Return where the default storage directory lives under the fake home."""
    return isolated_home / ".local" / "share" / "snippetstore"


@pytest.fixture
def config_file(isolated_home):
    """Return where the config file lives under the fake home."""
    return isolated_home / ".config" / "snippetstore" / "config.yml"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def repo_root():
    """Return the path to the repository root."""
    return Path(__file__).parent.parent

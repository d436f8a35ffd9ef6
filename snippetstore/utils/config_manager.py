"""
Per-user configuration for SnippetStore.

The configuration is a small YAML mapping. `snippetstore init` records the
chosen storage directory here and every other command reads it back:

  directory: /absolute/path/to/snippets

Location, first match wins:
  $SNIPPETSTORE_CONFIG
  $XDG_CONFIG_HOME/snippetstore/config.yml
  $HOME/.config/snippetstore/config.yml
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from snippetstore.errors import ConfigurationError, SnippetIOError
from snippetstore.utils.logging_utils import rich_log

APP_NAME = "snippetstore"
CONFIG_FILE_NAME = "config.yml"
DIRECTORY_KEY = "directory"


def get_config_path() -> Optional[Path]:
    """Return the configuration file path, or None if no location can be determined."""
    override = os.environ.get('SNIPPETSTORE_CONFIG')
    if override:
        return Path(override).expanduser()

    xdg_config_home = os.environ.get('XDG_CONFIG_HOME')
    if xdg_config_home:
        return Path(xdg_config_home).expanduser() / APP_NAME / CONFIG_FILE_NAME

    home = os.environ.get('HOME')
    if home:
        return Path(home) / ".config" / APP_NAME / CONFIG_FILE_NAME

    return None


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the configuration mapping.

    A missing file yields an empty mapping. A file that cannot be read or
    does not hold a YAML mapping raises ConfigurationError.
    """
    if config_path is None:
        config_path = get_config_path()
    if config_path is None or not config_path.exists():
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {config_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed config file {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    rich_log("debug", f"Loaded config from {config_path}")
    return config


def save_config(config: Dict[str, Any], config_path: Optional[Path] = None) -> Path:
    """Write the configuration mapping atomically and return where it was written."""
    if config_path is None:
        config_path = get_config_path()
    if config_path is None:
        raise ConfigurationError("Cannot determine config location: HOME is not set")

    tmp_name = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        # Temp file lives beside the target so the rename stays on one filesystem
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=config_path.parent,
                                         prefix=f".{config_path.name}.", suffix=".tmp",
                                         delete=False) as f:
            tmp_name = f.name
            yaml.safe_dump(config, f, default_flow_style=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, config_path)
        tmp_name = None
    except OSError as e:
        raise SnippetIOError(f"Could not write config file {config_path}: {e.strerror or e}",
                             path=config_path) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    rich_log("debug", f"Saved config to {config_path}")
    return config_path


def get_configured_directory(config_path: Optional[Path] = None) -> Optional[Path]:
    """Return the storage directory recorded by `init`, if any."""
    value = load_config(config_path).get(DIRECTORY_KEY)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"Config key '{DIRECTORY_KEY}' must be a non-empty path string")
    return Path(value).expanduser()


def set_configured_directory(directory: Path, config_path: Optional[Path] = None) -> Path:
    """Record the storage directory, keeping any other keys already in the file."""
    if config_path is None:
        config_path = get_config_path()
    config = load_config(config_path)
    config[DIRECTORY_KEY] = str(directory)
    return save_config(config, config_path)

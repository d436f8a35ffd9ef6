"""
Snippet storage on the local filesystem.

Each snippet is a plain text file directly inside the storage directory; the
file name is the snippet name and the file content is the snippet text.

The storage directory is resolved in this order:
  1. SNIPPETSTORE_DIR environment variable
  2. `directory` recorded in the config file by `snippetstore init`
  3. $HOME/.local/share/snippetstore
"""

import os
import stat
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from snippetstore.errors import (
    ConfigurationError,
    InvalidArgumentError,
    SnippetIOError,
    SnippetNotFoundError,
)
from snippetstore.utils.config_manager import (
    get_config_path,
    get_configured_directory,
    set_configured_directory,
)
from snippetstore.utils.logging_utils import rich_log

DEFAULT_DIR_PARTS = (".local", "share", "snippetstore")
DIR_ENV_VAR = "SNIPPETSTORE_DIR"
ENCODING = "utf-8"

GUIDANCE_MESSAGE = (
    "Couldn't find snippetstore folder, creating {directory}\n"
    "To use a different folder run `snippetstore init <full path to folder>`"
)


def default_directory() -> Path:
    """Return <home>/.local/share/snippetstore."""
    home = os.environ.get("HOME")
    if not home:
        raise ConfigurationError("ENV variable HOME not found")
    return Path(home).joinpath(*DEFAULT_DIR_PARTS)


def _ensure_directory(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SnippetIOError(f"Could not create directory {directory}: {e.strerror or e}",
                             path=directory) from e


def resolve_directory() -> Path:
    """
    Find the storage directory, creating it if it does not exist yet.

    A guidance message is printed to stdout when the directory has to be
    created.
    """
    override = os.environ.get(DIR_ENV_VAR)
    if override:
        directory = Path(override).expanduser()
        rich_log("debug", f"Using directory from {DIR_ENV_VAR}: {directory}")
    else:
        directory = get_configured_directory()
        if directory is not None:
            rich_log("debug", f"Using configured directory: {directory}")
        else:
            directory = default_directory()
            rich_log("debug", f"Using default directory: {directory}")

    directory = Path(os.path.abspath(directory))

    if not directory.exists():
        print(GUIDANCE_MESSAGE.format(directory=directory), flush=True)
        _ensure_directory(directory)
    elif not directory.is_dir():
        raise SnippetIOError(f"Storage path {directory} is not a directory", path=directory)

    return directory


def initialize(path: Optional[str] = None) -> Path:
    """
    Create the storage directory and remember it for later invocations.

    Args:
        path: Explicit directory to use; defaults to $HOME/.local/share/snippetstore

    Returns:
        Path: Absolute path of the storage directory
    """
    if path is not None:
        if not path.strip():
            raise InvalidArgumentError("Directory path must not be empty")
        directory = Path(os.path.abspath(os.path.expanduser(path)))
    else:
        directory = default_directory()

    _ensure_directory(directory)
    rich_log("info", f"Storage directory ready at {directory}")

    if get_config_path() is None:
        rich_log("warning", f"Cannot determine config location, {directory} will not be remembered")
    else:
        config_path = set_configured_directory(directory)
        rich_log("info", f"Recorded storage directory in {config_path}")

    return directory


def validate_name(name: Optional[str]) -> str:
    """Check that a snippet name refers to a direct child of the storage directory."""
    if name is None or name == "":
        raise InvalidArgumentError("Snippet name is required")
    if name in (".", ".."):
        raise InvalidArgumentError(f"Invalid snippet name: {name!r}")
    separators = [os.sep, "/", "\0"]
    if os.altsep:
        separators.append(os.altsep)
    if any(sep in name for sep in separators):
        raise InvalidArgumentError(f"Snippet name must not contain path separators: {name!r}")
    return name


def _file_mode() -> int:
    # Match the permissions a plain open() would give the new file
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class SnippetStore:
    """Reads and writes snippets inside a single storage directory."""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """Use the given directory, or resolve it from the environment and config."""
        if directory is None:
            self.directory = resolve_directory()
        else:
            self.directory = Path(os.path.abspath(directory))
            _ensure_directory(self.directory)
        rich_log("debug", f"Initialized SnippetStore at {self.directory}")

    def snippet_path(self, name: Optional[str]) -> Path:
        return self.directory / validate_name(name)

    def read(self, name: Optional[str]) -> str:
        """Return the full text of a snippet."""
        path = self.snippet_path(name)
        if path.is_dir():
            raise SnippetIOError(f"{path} is a directory, not a snippet", path=path)

        try:
            # newline='' keeps the content byte-for-byte as it was written
            with open(path, 'r', encoding=ENCODING, newline='') as f:
                content = f.read()
        except FileNotFoundError as e:
            raise SnippetNotFoundError(f"Snippet '{name}' not found in {self.directory}", path=path) from e
        except OSError as e:
            raise SnippetIOError(f"Could not read snippet {path}: {e.strerror or e}", path=path) from e
        except UnicodeDecodeError as e:
            raise SnippetIOError(f"Snippet {path} is not valid {ENCODING} text", path=path) from e

        rich_log("debug", f"Read {len(content)} characters from {path}")
        return content

    def create(self, name: Optional[str], content: Optional[str]) -> Path:
        """
        Write a snippet, silently replacing any existing snippet of the same name.

        Overwriting keeps the existing file's permissions, and a snippet that is
        a symlink is written through to the file it points at.
        """
        path = self.snippet_path(name)
        if content is None:
            raise InvalidArgumentError("Snippet content is required")
        if path.is_dir():
            raise SnippetIOError(f"{path} is a directory, cannot overwrite it with a snippet", path=path)

        target = Path(os.path.realpath(path)) if path.is_symlink() else path
        try:
            mode = stat.S_IMODE(os.stat(target).st_mode)
        except FileNotFoundError:
            mode = _file_mode()
        except OSError as e:
            raise SnippetIOError(f"Could not write snippet {path}: {e.strerror or e}", path=path) from e

        tmp_name = None
        try:
            # Temp file lives beside the target so the rename stays on one filesystem
            with tempfile.NamedTemporaryFile('w', encoding=ENCODING, newline='', dir=target.parent,
                                             prefix=f".{target.name}.", suffix=".tmp",
                                             delete=False) as f:
                tmp_name = f.name
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise SnippetIOError(f"Could not write snippet {path}: {e.strerror or e}", path=path) from e
        except UnicodeEncodeError as e:
            raise InvalidArgumentError(f"Snippet content is not valid {ENCODING} text") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        rich_log("info", f"Saved snippet {path}")
        return path

    def list(self) -> List[Tuple[int, str]]:
        """
        Return (index, name) for every snippet, in directory order.

        Subdirectories are skipped and do not consume an index.
        """
        snippets = []
        try:
            with os.scandir(self.directory) as entries:
                for entry in entries:
                    if entry.is_dir():
                        rich_log("debug", f"Skipping directory {entry.name}")
                        continue
                    snippets.append((len(snippets), entry.name))
        except OSError as e:
            raise SnippetIOError(f"Could not list {self.directory}: {e.strerror or e}",
                                 path=self.directory) from e
        return snippets

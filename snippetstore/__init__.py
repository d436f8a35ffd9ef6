"""SnippetStore - store and read short text snippets as files."""

from snippetstore.errors import (
    ConfigurationError,
    InvalidArgumentError,
    SnippetIOError,
    SnippetNotFoundError,
    SnippetStoreError,
)
from snippetstore.store import SnippetStore, initialize, resolve_directory

__version__ = "0.1.0"

__all__ = [
    "SnippetStore",
    "initialize",
    "resolve_directory",
    "SnippetStoreError",
    "ConfigurationError",
    "InvalidArgumentError",
    "SnippetIOError",
    "SnippetNotFoundError",
]

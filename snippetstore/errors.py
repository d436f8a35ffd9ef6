"""
Error types raised by SnippetStore.

Every error derives from SnippetStoreError so the CLI can turn any of them
into a message on stderr and a non-zero exit status.
"""


class SnippetStoreError(Exception):
    """Base class for all SnippetStore failures."""


class ConfigurationError(SnippetStoreError):
    """Required environment or configuration information is missing or invalid."""


class InvalidArgumentError(SnippetStoreError):
    """A required argument was not supplied or is not acceptable."""


class SnippetIOError(SnippetStoreError):
    """A filesystem operation failed."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class SnippetNotFoundError(SnippetIOError):
    """The requested snippet does not exist."""

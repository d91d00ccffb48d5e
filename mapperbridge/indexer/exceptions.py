"""Custom exceptions for the indexer module.

Malformed mapper files are not errors: extractors return None or an empty
list for them. These classes cover the failure modes that do need explicit
handling.
"""


class MapperIndexError(Exception):
    """Base class for all indexer errors."""


class FileReadError(MapperIndexError):
    """Raised when a candidate file cannot be read.

    The file may have been deleted between enumeration and read, or it may
    be unreadable. The index logs it and leaves the file out.

    Attributes:
        uri: URI of the file that failed to load
    """

    def __init__(self, uri: str, message: str | None = None):
        super().__init__(message or f"Could not read {uri}")
        self.uri = uri


class IndexInitializationError(MapperIndexError):
    """Raised by workspace collaborators when a full scan cannot proceed.

    Attributes:
        message: Human-readable error description
        details: Dict with extra context for debugging
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

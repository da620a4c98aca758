"""
Exception types raised by cdda_harvest.

Per-release failures (malformed JSON, unreachable archives) abort only the
release being processed; the harvest service logs them and moves on.
"""

from typing import Optional


class HarvestError(Exception):
    """Base class for all harvest errors."""


class MalformedObjectError(HarvestError):
    """Raised when a game data file is not valid UTF-8 or holds invalid or
    unbalanced JSON.

    Attributes:
        offset: UTF-8 byte offset into the scanned text
        line: best-known 1-based line number
        path: file the text came from, when known
    """

    def __init__(
        self, message: str, offset: int, line: int, path: Optional[str] = None
    ):
        self.message = message
        self.offset = offset
        self.line = line
        self.path = path
        super().__init__(str(self))

    def with_path(self, path: str) -> "MalformedObjectError":
        """Return a copy of this error attributed to a source file."""
        return MalformedObjectError(self.message, self.offset, self.line, path)

    def __str__(self) -> str:
        where = f"{self.path}:" if self.path else "line "
        return f"{where}{self.line} (byte {self.offset}): {self.message}"


class CatalogHeaderMissing(HarvestError):
    """Raised when a parsed catalog has no reserved empty-key header."""


class ReleaseFetchError(HarvestError):
    """Raised when a release list or archive cannot be fetched."""


class SnapshotStoreError(HarvestError):
    """Raised when stored snapshot metadata cannot be read."""

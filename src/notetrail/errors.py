"""Error types raised by the notetrail core."""


class NoteTrailError(Exception):
    """Base class for notetrail errors."""


class NoteError(NoteTrailError):
    """A note could not be loaded."""


class NotFound(NoteError):
    """The server answered with a client or server error status."""

    def __init__(self, reason: str = "Note not found") -> None:
        super().__init__(reason)
        self.reason = reason


class DecodeError(NoteError):
    """The response body does not have the expected note shape."""


class TransportError(NoteError):
    """The request failed before a response arrived (or timed out)."""


class QueryTooShort(NoteTrailError):
    """Search input is shorter than the minimum query length."""

    def __init__(self, min_length: int) -> None:
        super().__init__(f"Search queries need at least {min_length} characters")
        self.min_length = min_length


class ResolutionError(NoteTrailError):
    """A link could not be turned into an absolute URL."""


class LogicError(NoteTrailError):
    """An internal invariant was violated. Indicates a bug, not a runtime condition."""

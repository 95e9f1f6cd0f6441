"""Why a report could not be decoded.

Inside the package every stage raises one of these, so a failure can be
traced to its cause.  The public ``from_*`` entry points catch them all
and hand the caller a bare ``None``: a report is either decoded in full
or not at all.
"""


class SmapsError(Exception):
    """Raise when an smaps report cannot be read or decoded."""


class HeaderError(SmapsError):
    """Raise when a line expected to be a mapping header is not one.

    Covers both a grammar mismatch and a numeric field that does not fit
    in 64 bits.
    """

    def __init__(self, message: str, *, line: str, lineno: int = 0) -> None:
        """Create a header error for the offending *line*."""
        super().__init__(message)
        self.line = line
        self.lineno = lineno


class ValueFormatError(SmapsError):
    """Raise when a ``Key: value`` detail line carries a non-numeric value."""

    def __init__(self, message: str, *, line: str, lineno: int = 0) -> None:
        """Create a value error for the offending *line*."""
        super().__init__(message)
        self.line = line
        self.lineno = lineno


class SourceError(SmapsError):
    """Raise when the report file cannot be opened or read."""

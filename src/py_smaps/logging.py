"""Parse diagnostics: a structured record of what the parser noticed.

Reading an smaps report is mostly silent: either every mapping decodes
or the whole report is rejected.  The one exception is a detail line
that does not split into ``Key: value``: it is skipped, and the skip
is worth remembering.  Rejections are worth remembering too, because
the public entry points collapse every failure into ``None``.

The logger here keeps those notes as an in-memory audit trail, much
like the kernel's own ``dmesg`` ring buffer:

- **LogLevel**: severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry**: a single structured record (level, message, source, line).
- **Logger**: an append-only log with filtering and clearing.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries**: log records should be immutable.
    - **Opt-in**: parsing functions take ``logger=None`` and record
      nothing unless a caller hands them a buffer.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "smaps").
        lineno: 1-based input line the event refers to (0 = not tied to a line).

    """

    level: LogLevel
    message: str
    source: str
    lineno: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message`` with the line when known."""
        if self.lineno:
            return f"[{self.level.name}] {self.source} line {self.lineno}: {self.message}"
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Diagnostics buffer handed to the parser by a caller.

    The parser only appends.  A caller that wants to know why a report
    came back as ``None`` (or which lines were skipped on the way to a
    successful parse) passes a fresh Logger and inspects it afterwards.
    """

    def __init__(self) -> None:
        """Create an empty diagnostics buffer."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of the recorded diagnostics in report order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        lineno: int = 0,
    ) -> None:
        """Record one diagnostic.

        Args:
            level: WARNING for a skipped detail line, ERROR for a rejected
                or unreadable report, DEBUG for a parse summary.
            message: What was noticed, quoting the offending line if any.
            source: Component that noticed it (the parser uses "smaps").
            lineno: 1-based report line, or 0 for whole-report events.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, lineno=lineno))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return the diagnostics at or above *min_level* from *source*.

        ``min_level=LogLevel.WARNING`` yields exactly the skipped lines and
        rejections, which is what the web API reports back to clients.
        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Forget every diagnostic, so one buffer can serve several parses."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of diagnostics recorded."""
        return len(self._entries)

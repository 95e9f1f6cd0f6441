"""Whole reports: turning an smaps file into a list of SMap entries.

An smaps report is a flat run of lines in which headers and detail
blocks alternate::

    header
        detail lines ...
    header
        detail lines ...

The driver walks the lines once: the current line must be a header,
every following line that is *not* a header belongs to its detail
block, and the next header starts the next entry.  There is no
recovery: a line where a header is expected, or a malformed number
anywhere, rejects the whole report.

Three entry points return ``list[SMap] | None``:

- ``from_str(text)``: the primitive the others build on.
- ``from_pid(pid)``: reads ``/proc/<pid>/smaps``.
- ``from_path(directory)``: reads ``<directory>/maps``.

``parse_smaps`` is the same driver but raises ``SmapsError`` subclasses
so the reason for a rejection is available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_smaps.config import ReaderConfig
from py_smaps.logging import Logger, LogLevel
from py_smaps.maps.errors import HeaderError, SmapsError, SourceError
from py_smaps.maps.mapping import Mapping, parse_mapping
from py_smaps.maps.smap import SMap, parse_details

if TYPE_CHECKING:
    from pathlib import Path

_SOURCE = "smaps"


def parse_smaps(raw: str, *, logger: Logger | None = None) -> list[SMap]:
    """Parse a complete smaps report.

    Args:
        raw: The full text of the report.
        logger: Where to note skipped lines, if anywhere.

    Returns:
        One SMap per mapping, in report order.

    Raises:
        HeaderError: If a line where a header is expected is not one
            (including the first line of an empty report).
        ValueFormatError: If any detail value is malformed.

    """
    lines = raw.split("\n")
    result: list[SMap] = []
    i = 0
    while i < len(lines):
        try:
            mapping = parse_mapping(lines[i])
        except HeaderError as e:
            e.lineno = i + 1
            raise
        i += 1
        block_start = i
        while i < len(lines) and Mapping.from_str(lines[i]) is None:
            i += 1
        result.append(
            parse_details(
                mapping,
                lines[block_start:i],
                logger=logger,
                start_lineno=block_start + 1,
            )
        )
    return result


def from_str(raw: str, *, logger: Logger | None = None) -> list[SMap] | None:
    """Parse a complete smaps report, or return None if it is malformed."""
    try:
        smaps = parse_smaps(raw, logger=logger)
    except SmapsError as e:
        if logger is not None:
            logger.log(
                LogLevel.ERROR,
                f"Rejected report: {e}",
                source=_SOURCE,
                lineno=getattr(e, "lineno", 0),
            )
        return None
    if logger is not None:
        logger.log(LogLevel.DEBUG, f"Parsed {len(smaps)} mappings", source=_SOURCE)
    return smaps


def read_report(path: Path) -> str:
    """Read a report file as text.

    Raises:
        SourceError: If the file cannot be opened or read.

    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read {path}: {e}"
        raise SourceError(msg) from e


def _from_file(path: Path, logger: Logger | None) -> list[SMap] | None:
    try:
        raw = read_report(path)
    except SourceError as e:
        if logger is not None:
            logger.log(LogLevel.ERROR, str(e), source=_SOURCE)
        return None
    return from_str(raw, logger=logger)


def from_pid(
    pid: int,
    *,
    config: ReaderConfig | None = None,
    logger: Logger | None = None,
) -> list[SMap] | None:
    """Parse the smaps report of process *pid*.

    Args:
        pid: Process id whose report to read.
        config: Where reports live; defaults to ``/proc/<pid>/smaps``.
        logger: Where to note diagnostics, if anywhere.

    Returns:
        The parsed entries, or None if the report could not be read or
        decoded.

    """
    cfg = config if config is not None else ReaderConfig()
    return _from_file(cfg.pid_report_path(pid), logger)


def from_path(
    path: Path | str,
    *,
    config: ReaderConfig | None = None,
    logger: Logger | None = None,
) -> list[SMap] | None:
    """Parse the ``maps`` report stored beneath directory *path*.

    Args:
        path: Directory containing the report, e.g. ``/proc/1234``.
        config: Which file name to look for; defaults to ``maps``.
        logger: Where to note diagnostics, if anywhere.

    Returns:
        The parsed entries, or None if the report could not be read or
        decoded.

    """
    cfg = config if config is not None else ReaderConfig()
    return _from_file(cfg.dir_report_path(path), logger)

"""Mapping headers: the first line of every smaps entry.

Each virtual memory area starts with a header in the classic
``/proc/<pid>/maps`` format::

    00400000-00452000 r-xp 00000000 08:02 173521      /usr/bin/dbus-daemon
    address           perms offset  dev   inode       pathname

- **address**: start and end of the range, in hex.
- **perms**: see ``permissions.py``.
- **offset**: byte offset into the backing file, in hex.
- **dev**: ``major:minor`` of the backing block device, in hex.
- **inode**: inode of the backing file, in decimal (0 = none).
- **pathname**: the rest of the line, verbatim.  Absent for anonymous
  memory; pseudo-names like ``[heap]`` or ``[stack]`` for special areas.
  It may contain spaces (``/tmp/my file (deleted)``).

The kernel is trusted: start <= end is not checked, and numbers are only
required to fit in 64 bits.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from py_smaps.maps.errors import HeaderError
from py_smaps.maps.permissions import Permissions

_U64_MAX = 2**64 - 1

# Most significant digits a u64 can need, per base.
_U64_DIGITS = {10: len(str(_U64_MAX)), 16: len(f"{_U64_MAX:x}")}

_HEX = r"[0-9a-f]+"

# Compiled once at import; shared read-only by every parse.
_HEADER_RE = re.compile(
    rf"({_HEX})-({_HEX})\s+([rwsxp-]+)\s+({_HEX})\s+({_HEX}):({_HEX})\s+(\d+)(?:\s+(.*))?",
    re.ASCII,
)


@dataclass(frozen=True)
class Device:
    """Backing block device of a mapping (0:0 for anonymous memory)."""

    major: int = 0
    minor: int = 0

    @property
    def is_anonymous(self) -> bool:
        """Return True when no block device backs the mapping."""
        return self.major == 0 and self.minor == 0

    def __str__(self) -> str:
        """Format as ``major:minor`` in two-digit hex, as the kernel does."""
        return f"{self.major:02x}:{self.minor:02x}"


@dataclass(frozen=True)
class Mapping:
    """One virtual address range as described by its header line."""

    start: int = 0
    """First address of the range."""

    end: int = 0
    """One past the last address of the range."""

    perms: Permissions = field(default_factory=Permissions)
    """Access permissions."""

    offset: int = 0
    """Byte offset into the backing file."""

    device: Device = field(default_factory=Device)
    """Backing block device."""

    inode: int = 0
    """Inode of the backing file (0 for anonymous memory)."""

    pathname: str | None = None
    """Backing file or pseudo-name, or None for anonymous memory."""

    @property
    def size(self) -> int:
        """Return the length of the range in bytes."""
        return self.end - self.start

    @classmethod
    def from_str(cls, line: str) -> Mapping | None:
        """Parse a header line, returning None if it is not one."""
        try:
            return parse_mapping(line)
        except HeaderError:
            return None

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict."""
        return {
            "start": self.start,
            "end": self.end,
            "perms": str(self.perms),
            "offset": self.offset,
            "device": {"major": self.device.major, "minor": self.device.minor},
            "inode": self.inode,
            "pathname": self.pathname,
        }


def _u64(text: str, base: int, *, name: str, line: str) -> int:
    msg = f"{name} {text[:32]!r} does not fit in 64 bits"
    # Checked before int() so huge fields never reach the str->int digit limit.
    if len(text.lstrip("0")) > _U64_DIGITS[base]:
        raise HeaderError(msg, line=line)
    value = int(text, base)
    if value > _U64_MAX:
        raise HeaderError(msg, line=line)
    return value


def parse_mapping(line: str) -> Mapping:
    """Parse one mapping header line.

    Args:
        line: The raw line; surrounding whitespace is ignored.

    Returns:
        The decoded Mapping.

    Raises:
        HeaderError: If the line does not follow the header grammar or
            one of its numbers is out of range.

    """
    match = _HEADER_RE.fullmatch(line.strip())
    if match is None:
        msg = f"Not a mapping header: {line!r}"
        raise HeaderError(msg, line=line)

    start, end, perms, offset, major, minor, inode, pathname = match.groups()
    return Mapping(
        start=_u64(start, 16, name="start address", line=line),
        end=_u64(end, 16, name="end address", line=line),
        perms=Permissions.from_str(perms),
        offset=_u64(offset, 16, name="offset", line=line),
        device=Device(
            major=_u64(major, 16, name="device major", line=line),
            minor=_u64(minor, 16, name="device minor", line=line),
        ),
        inode=_u64(inode, 10, name="inode", line=line),
        pathname=pathname,
    )

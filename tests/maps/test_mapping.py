"""Tests for mapping header lines.

A header looks like ``start-end perms offset major:minor inode [path]``.
Each header is parsed on its own, with no memory of earlier lines.
"""

import pytest

from py_smaps.maps.errors import HeaderError
from py_smaps.maps.mapping import Device, Mapping, parse_mapping
from py_smaps.maps.permissions import Permissions

RW_PRIVATE = Permissions(read=True, write=True, private=True)
EXPECTED_INODE = 173521
EXPECTED_MAJOR = 0xFF
EXPECTED_MINOR = 0x10


class TestParseMapping:
    """Verify decoding of well-formed headers."""

    def test_heap(self) -> None:
        """A [heap] header should decode every field."""
        mapping = Mapping.from_str("00e24000-011f7000 rw-p 00000000 00:00 0           [heap]")
        assert mapping == Mapping(
            start=0x00E24000,
            end=0x011F7000,
            perms=RW_PRIVATE,
            offset=0,
            device=Device(major=0, minor=0),
            inode=0,
            pathname="[heap]",
        )

    def test_anonymous_with_hex_offset_and_device(self) -> None:
        """A header without a path should have pathname None."""
        mapping = Mapping.from_str("35b1a21000-35b1a22000 rw-p abcd ff:10 0")
        assert mapping == Mapping(
            start=0x35B1A21000,
            end=0x35B1A22000,
            perms=RW_PRIVATE,
            offset=0xABCD,
            device=Device(major=EXPECTED_MAJOR, minor=EXPECTED_MINOR),
            inode=0,
            pathname=None,
        )

    def test_file_backed(self) -> None:
        """A file-backed header should carry its inode and path."""
        mapping = parse_mapping("00400000-00452000 r-xp 00000000 08:02 173521 /usr/bin/dbus-daemon")
        assert mapping.inode == EXPECTED_INODE
        assert mapping.pathname == "/usr/bin/dbus-daemon"
        assert mapping.perms == Permissions(read=True, execute=True, private=True)
        assert mapping.device == Device(major=8, minor=2)

    def test_path_with_spaces(self) -> None:
        """The path is the rest of the line, spaces included."""
        mapping = parse_mapping("7f00-8f00 rw-s 00000000 00:05 12 /tmp/my file (deleted)")
        assert mapping.pathname == "/tmp/my file (deleted)"

    def test_trailing_whitespace_means_no_path(self) -> None:
        """Trailing blanks after the inode should not produce a path."""
        mapping = parse_mapping("76be15f03000-76be160ed000 rw-p 00000000 00:00 0 ")
        assert mapping.pathname is None

    def test_surrounding_whitespace_ignored(self) -> None:
        """Leading whitespace and a trailing newline are stripped."""
        mapping = parse_mapping("  1000-2000 r--p 00000000 00:00 0 [vvar]\n")
        assert mapping.pathname == "[vvar]"

    def test_start_after_end_not_validated(self) -> None:
        """The kernel is trusted; start > end still parses."""
        mapping = parse_mapping("2000-1000 r--p 0 00:00 0")
        assert mapping.start > mapping.end

    def test_size(self) -> None:
        """size should be end - start."""
        assert parse_mapping("1000-3000 r--p 0 00:00 0").size == 0x2000

    def test_parsing_is_idempotent(self) -> None:
        """Parsing the same line twice gives equal results."""
        line = "00e24000-011f7000 rw-p 00000000 00:00 0 [heap]"
        assert parse_mapping(line) == parse_mapping(line)


class TestParseMappingFailures:
    """Verify rejection of lines that are not headers."""

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "    \n   ",
            "Size:               2996 kB",
            "VmFlags: rd wr",
            "00E24000-011F7000 rw-p 00000000 00:00 0",
            "00e24000-011f7000 rw-p 00000000 00:00",
            "00e24000 rw-p 00000000 00:00 0",
            "00e24000-011f7000 rwzp 00000000 00:00 0",
            "00e24000-011f7000 rw-p 00000000 00-00 0",
            "00e24000-011f7000 rw-p 00000000 00:00 0x1",
        ],
    )
    def test_not_a_header(self, line: str) -> None:
        """Lines outside the grammar should be rejected."""
        assert Mapping.from_str(line) is None
        with pytest.raises(HeaderError, match="Not a mapping header"):
            parse_mapping(line)

    def test_address_overflow(self) -> None:
        """Addresses wider than 64 bits should be rejected."""
        line = "10000000000000000-10000000000000001 rw-p 0 00:00 0"
        assert Mapping.from_str(line) is None
        with pytest.raises(HeaderError, match="64 bits"):
            parse_mapping(line)

    def test_inode_overflow(self) -> None:
        """An inode wider than 64 bits should be rejected."""
        with pytest.raises(HeaderError, match="inode"):
            parse_mapping("1000-2000 rw-p 0 00:00 18446744073709551616")

    def test_huge_inode_rejected(self) -> None:
        """An inode with thousands of digits is out of range, not a crash."""
        line = "1000-2000 rw-p 0 00:00 " + "9" * 5000
        assert Mapping.from_str(line) is None
        with pytest.raises(HeaderError, match="64 bits"):
            parse_mapping(line)

    def test_huge_address_rejected(self) -> None:
        """A hex field with thousands of digits is out of range."""
        line = "f" * 5000 + "-2000 rw-p 0 00:00 0"
        with pytest.raises(HeaderError, match="start address"):
            parse_mapping(line)

    def test_leading_zeros_still_fit(self) -> None:
        """Zero padding does not count against the 64-bit width."""
        mapping = parse_mapping("0" * 40 + "1000-2000 rw-p 0 00:00 " + "0" * 30 + "7")
        assert mapping.start == 0x1000
        assert mapping.inode == 7  # noqa: PLR2004

    def test_non_ascii_digits_rejected(self) -> None:
        """Only ASCII digits count as an inode."""
        assert Mapping.from_str("1000-2000 rw-p 0 00:00 ١٢") is None

    def test_non_ascii_separator_rejected(self) -> None:
        """Fields must be separated by ASCII whitespace."""
        assert Mapping.from_str("1000-2000\xa0 rw-p 0 00:00 0") is None
        assert Mapping.from_str("1000-2000 rw-p\xa00 00:00 0") is None

    def test_non_ascii_space_in_path_kept(self) -> None:
        """Once the inode is read, the rest of the line is the path."""
        mapping = parse_mapping("1000-2000 rw-p 0 00:00 0 /tmp/a\xa0b")
        assert mapping.pathname == "/tmp/a\xa0b"

    def test_error_carries_line(self) -> None:
        """HeaderError should remember the offending line."""
        with pytest.raises(HeaderError) as excinfo:
            parse_mapping("garbage")
        assert excinfo.value.line == "garbage"


class TestDevice:
    """Verify the device identifier."""

    def test_anonymous(self) -> None:
        """0:0 marks anonymous memory."""
        assert Device().is_anonymous
        assert not Device(major=8, minor=1).is_anonymous

    def test_str(self) -> None:
        """Devices render as two-digit hex pairs."""
        assert str(Device(major=EXPECTED_MAJOR, minor=EXPECTED_MINOR)) == "ff:10"


class TestMappingToDict:
    """Verify JSON serialization."""

    def test_to_dict(self) -> None:
        """to_dict should flatten permissions and device."""
        mapping = parse_mapping("1000-2000 r-xp 00000010 08:01 7 /lib/libc.so.6")
        assert mapping.to_dict() == {
            "start": 0x1000,
            "end": 0x2000,
            "perms": "r-xp",
            "offset": 0x10,
            "device": {"major": 8, "minor": 1},
            "inode": 7,
            "pathname": "/lib/libc.so.6",
        }

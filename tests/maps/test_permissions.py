"""Tests for the permission column decoder.

The kernel prints ``rwxp``-style tokens; each character sets one of
five independent booleans.
"""

from itertools import permutations

import pytest

from py_smaps.maps.permissions import Permissions


class TestPermissionsFromStr:
    """Verify decoding of permission tokens."""

    def test_read_write_private(self) -> None:
        """rw-p should set read, write and private only."""
        perms = Permissions.from_str("rw-p")
        assert perms == Permissions(read=True, write=True, private=True)

    def test_executable_shared(self) -> None:
        """r-xs should set read, execute and shared."""
        perms = Permissions.from_str("r-xs")
        assert perms == Permissions(read=True, execute=True, shared=True)

    def test_no_access(self) -> None:
        """---p should only set private."""
        assert Permissions.from_str("---p") == Permissions(private=True)

    def test_empty_token(self) -> None:
        """An empty token should decode to all-false."""
        assert Permissions.from_str("") == Permissions()

    def test_unknown_characters_ignored(self) -> None:
        """Characters outside the alphabet should be ignored."""
        assert Permissions.from_str("rzq?") == Permissions(read=True)

    def test_order_does_not_matter(self) -> None:
        """Every ordering of rwxsp should decode identically."""
        expected = Permissions(read=True, write=True, execute=True, shared=True, private=True)
        for chars in permutations("rwxsp"):
            assert Permissions.from_str("".join(chars)) == expected

    def test_is_frozen(self) -> None:
        """Permissions should be immutable."""
        perms = Permissions()
        with pytest.raises(AttributeError):
            perms.read = True  # type: ignore[misc]


class TestPermissionsStr:
    """Verify rendering back to the kernel's column."""

    @pytest.mark.parametrize("token", ["rw-p", "r-xp", "---p", "rw-s", "rwxs"])
    def test_kernel_tokens_render_back(self, token: str) -> None:
        """Tokens the kernel prints should render unchanged."""
        assert str(Permissions.from_str(token)) == token

    def test_neither_shared_nor_private(self) -> None:
        """With no sharing bit the last column is a dash."""
        assert str(Permissions(read=True)) == "r---"

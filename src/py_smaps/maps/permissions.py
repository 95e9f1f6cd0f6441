"""Access permissions of one mapping: the ``rw-p`` column.

The kernel prints four characters in a fixed order: read, write,
execute, then ``s`` (shared) or ``p`` (private).  A dash means the
permission is absent.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Permissions:
    """Five independent access bits.

    Shared and private may both be False: nothing ties the bits together.
    """

    read: bool = False
    write: bool = False
    execute: bool = False
    shared: bool = False
    private: bool = False

    @classmethod
    def from_str(cls, token: str) -> Permissions:
        """Decode a permission token such as ``r-xp``.

        Character order is not checked and unrecognized characters are
        ignored, so this never fails.
        """
        return cls(
            read="r" in token,
            write="w" in token,
            execute="x" in token,
            shared="s" in token,
            private="p" in token,
        )

    def __str__(self) -> str:
        """Render in the kernel's fixed column order."""
        if self.shared:
            sharing = "s"
        elif self.private:
            sharing = "p"
        else:
            sharing = "-"
        return (
            ("r" if self.read else "-")
            + ("w" if self.write else "-")
            + ("x" if self.execute else "-")
            + sharing
        )

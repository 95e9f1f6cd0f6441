"""Kernel VM flags: the ``VmFlags:`` line at the end of each mapping.

Each mapping in an smaps report ends with a line such as::

    VmFlags: rd wr mr mw me ac sd

Every two-letter mnemonic names one boolean attribute of the kernel's
``vm_area_struct``: readable, may-grow-down, huge-page advised, and so
on.  Newer kernels keep adding mnemonics, so anything we do not know
is simply dropped instead of rejected.

Design choices:
    - **StrEnum for mnemonics**: the member value *is* the kernel token,
      so decoding is a dictionary lookup.
    - **Frozen set of members** instead of 32 named booleans: membership
      queries (``VmFlag.RD in flags``) work generically, and adding a
      mnemonic is a one-line change.  Attribute access (``flags.rd``) is
      still offered for convenience.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum


class VmFlag(StrEnum):
    """The two-letter mnemonics printed by the kernel, in kernel order."""

    RD = "rd"  # readable
    WR = "wr"  # writeable
    EX = "ex"  # executable
    SH = "sh"  # shared
    MR = "mr"  # may read
    MW = "mw"  # may write
    ME = "me"  # may execute
    MS = "ms"  # may share
    GD = "gd"  # stack segment grows down
    PF = "pf"  # pure PFN range
    DW = "dw"  # disabled write to the mapped file
    LO = "lo"  # pages are locked in memory
    IO = "io"  # memory mapped I/O area
    SR = "sr"  # sequential read advise provided
    RR = "rr"  # random read advise provided
    DC = "dc"  # do not copy area on fork
    DE = "de"  # do not expand area on remapping
    AC = "ac"  # area is accountable
    NR = "nr"  # swap space is not reserved for the area
    HT = "ht"  # area uses huge tlb pages
    SF = "sf"  # synchronous page fault
    NL = "nl"  # non-linear mapping
    AR = "ar"  # architecture specific flag
    WF = "wf"  # wipe on fork
    DD = "dd"  # do not include area into core dump
    SD = "sd"  # soft-dirty flag
    MM = "mm"  # mixed map area
    HG = "hg"  # huge page advise flag
    NH = "nh"  # no-huge page advise flag
    MG = "mg"  # mergeable advise flag
    UM = "um"  # userfaultfd missing tracking
    UW = "uw"  # userfaultfd wr-protect tracking


_BY_MNEMONIC: dict[str, VmFlag] = {flag.value: flag for flag in VmFlag}


@dataclass(frozen=True)
class VmFlags:
    """The set of VM flags enabled on one mapping."""

    flags: frozenset[VmFlag] = field(default_factory=frozenset)

    @classmethod
    def from_str(cls, text: str) -> VmFlags:
        """Decode a space-separated list of mnemonics.

        Unknown and empty tokens are ignored; order and repetition do not
        matter.  Never fails.
        """
        found = {_BY_MNEMONIC[token] for token in text.split(" ") if token in _BY_MNEMONIC}
        return cls(frozenset(found))

    def __contains__(self, flag: object) -> bool:
        """Return True if *flag* (member or mnemonic string) is set."""
        return flag in self.flags

    def __iter__(self) -> Iterator[VmFlag]:
        """Iterate over the set flags in kernel order."""
        return (flag for flag in VmFlag if flag in self.flags)

    def __len__(self) -> int:
        """Return the number of flags set."""
        return len(self.flags)

    def __getattr__(self, name: str) -> bool:
        """Expose each mnemonic as a boolean attribute (``flags.rd``)."""
        flag = _BY_MNEMONIC.get(name)
        if flag is None:
            raise AttributeError(name)
        return flag in self.flags

    def __str__(self) -> str:
        """Render as the kernel would, space-separated in kernel order."""
        return " ".join(flag.value for flag in self)

"""Detail blocks: the memory accounting lines under each header.

After the header, the kernel prints one ``Key: value`` line per
statistic, then the VM flags::

    Size:               2996 kB
    KernelPageSize:        4 kB
    Rss:                2796 kB
    ...
    THPeligible:           1
    ProtectionKey:         0
    VmFlags: rd wr mr mw me ac sd

Byte counts carry a ``kB`` suffix and are normalized to bytes here;
values without it (``THPeligible``, ``ProtectionKey``) are taken as is.

Line policy:
    - **Unsplittable lines are skipped.**  A line that is not exactly one
      ``Key: value`` pair (the empty line after a trailing newline, a
      format we have never seen) is noted on the logger and ignored.
    - **Bad numbers are fatal.**  A well-formed pair whose value is not a
      number rejects the whole mapping, and with it the whole report.
    - **Unknown keys are ignored.**  There is no authoritative list of keys
      and kernels add new ones; only the value format is enforced.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field

from py_smaps.logging import Logger, LogLevel
from py_smaps.maps.errors import SmapsError, ValueFormatError
from py_smaps.maps.mapping import Mapping
from py_smaps.maps.vmflags import VmFlags

_U64_MAX = 2**64 - 1
_U64_DIGITS = len(str(_U64_MAX))
_KB_SUFFIX = "kB"
_KB = 1024
_VM_FLAGS_KEY = "VmFlags"
_NUMBER_RE = re.compile(r"\+?[0-9]+")

# Kernel key -> SMap counter attribute.
_COUNTER_KEYS: dict[str, str] = {
    "Size": "size",
    "KernelPageSize": "kernel_page_size",
    "MMUPageSize": "mmu_page_size",
    "Rss": "rss",
    "Pss": "pss",
    "Pss_Dirty": "pss_dirty",
    "Shared_Clean": "shared_clean",
    "Shared_Dirty": "shared_dirty",
    "Private_Clean": "private_clean",
    "Private_Dirty": "private_dirty",
    "Referenced": "referenced",
    "Anonymous": "anonymous",
    "KSM": "ksm",
    "LazyFree": "lazy_free",
    "AnonHugePages": "anon_huge_pages",
    "ShmemHugePages": "shmem_huge_pages",
    "ShmemPmdMapped": "shmem_pmd_mapped",
    "FilePmdMapped": "file_pmd_mapped",
    "Shared_Hugetlb": "shared_hugetlb",
    "Private_Hugetlb": "private_hugetlb",
    "Swap": "swap",
    "SwapPss": "swap_pss",
    "Locked": "locked",
    "THPeligible": "thp_eligible",
    "ProtectionKey": "protection_key",
}


@dataclass(frozen=True)
class SMap:
    """One complete smaps entry: the mapping plus its accounting.

    Byte counters are in bytes.  Every counter is 0 unless its key
    appeared in the report.
    """

    mapping: Mapping = field(default_factory=Mapping)
    size: int = 0
    kernel_page_size: int = 0
    mmu_page_size: int = 0
    rss: int = 0
    pss: int = 0
    pss_dirty: int = 0
    shared_clean: int = 0
    shared_dirty: int = 0
    private_clean: int = 0
    private_dirty: int = 0
    referenced: int = 0
    anonymous: int = 0
    ksm: int = 0
    lazy_free: int = 0
    anon_huge_pages: int = 0
    shmem_huge_pages: int = 0
    shmem_pmd_mapped: int = 0
    file_pmd_mapped: int = 0
    shared_hugetlb: int = 0
    private_hugetlb: int = 0
    swap: int = 0
    swap_pss: int = 0
    locked: int = 0
    thp_eligible: int = 0
    protection_key: int = 0
    vm_flags: VmFlags = field(default_factory=VmFlags)

    @property
    def uss(self) -> int:
        """Return the unique set size (private clean + private dirty)."""
        return self.private_clean + self.private_dirty

    @property
    def shared(self) -> int:
        """Return the shared resident memory (shared clean + shared dirty)."""
        return self.shared_clean + self.shared_dirty

    @classmethod
    def from_lines(cls, mapping: Mapping, lines: Iterable[str]) -> SMap | None:
        """Build an SMap from a detail block, or None if a value is malformed."""
        try:
            return parse_details(mapping, lines)
        except SmapsError:
            return None

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict."""
        data: dict[str, object] = {
            name: value
            for name, value in asdict(self).items()
            if name not in ("mapping", "vm_flags")
        }
        data["mapping"] = self.mapping.to_dict()
        data["vm_flags"] = [flag.value for flag in self.vm_flags]
        return data


def _parse_value(raw: str, *, line: str) -> int:
    """Convert a detail value to an integer, normalizing ``kB`` to bytes."""
    value = raw.strip()
    multiplier = 1
    if value.endswith(_KB_SUFFIX):
        multiplier = _KB
        value = value[: -len(_KB_SUFFIX)].strip()

    if not value or not value[-1].isascii() or not value[-1].isdigit():
        msg = f"Value {raw.strip()!r} is not a number"
        raise ValueFormatError(msg, line=line)
    if _NUMBER_RE.fullmatch(value) is None:
        msg = f"Value {raw.strip()!r} is not an unsigned integer"
        raise ValueFormatError(msg, line=line)

    msg = f"Value {raw.strip()[:32]!r} does not fit in 64 bits"
    # Checked before int() so huge values never reach the str->int digit limit.
    if len(value.lstrip("+").lstrip("0")) > _U64_DIGITS:
        raise ValueFormatError(msg, line=line)
    number = int(value) * multiplier
    if number > _U64_MAX:
        raise ValueFormatError(msg, line=line)
    return number


def parse_details(
    mapping: Mapping,
    lines: Iterable[str],
    *,
    logger: Logger | None = None,
    start_lineno: int = 1,
) -> SMap:
    """Fold a mapping's detail lines into an SMap.

    Args:
        mapping: The already-parsed header of this entry.
        lines: The lines between this header and the next one.
        logger: Where to note skipped lines, if anywhere.
        start_lineno: Line number of the first detail line in the report.

    Returns:
        The completed SMap.

    Raises:
        ValueFormatError: If any ``Key: value`` line has a value that is
            not an unsigned integer (after dropping a ``kB`` suffix).

    """
    counters: dict[str, int] = {}
    vm_flags = VmFlags()

    for lineno, line in enumerate(lines, start=start_lineno):
        parts = line.split(":")
        if len(parts) != 2:  # noqa: PLR2004
            if logger is not None:
                logger.log(
                    LogLevel.WARNING,
                    f"Skipping unparseable detail line: {line!r}",
                    source="smaps",
                    lineno=lineno,
                )
            continue

        key, raw = parts
        if key == _VM_FLAGS_KEY:
            vm_flags = VmFlags.from_str(raw)
            continue

        try:
            number = _parse_value(raw, line=line)
        except ValueFormatError as e:
            e.lineno = lineno
            raise

        attr = _COUNTER_KEYS.get(key)
        if attr is not None:
            counters[attr] = number

    return SMap(mapping=mapping, vm_flags=vm_flags, **counters)

"""Report totals: one line of numbers for a whole address space.

Tools like ``pmap -X`` and the kernel's own ``smaps_rollup`` sum the
per-mapping counters into process totals.  ``rollup`` does the same for
a parsed report.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass

from py_smaps.maps.smap import SMap


@dataclass(frozen=True)
class Rollup:
    """Summed counters over every mapping of a report (bytes)."""

    mappings: int = 0
    size: int = 0
    rss: int = 0
    pss: int = 0
    uss: int = 0
    shared: int = 0
    swap: int = 0
    swap_pss: int = 0
    anonymous: int = 0
    locked: int = 0

    def to_dict(self) -> dict[str, int]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)


def rollup(smaps: Iterable[SMap]) -> Rollup:
    """Sum a report's counters into a Rollup."""
    totals = dict.fromkeys(Rollup.__dataclass_fields__, 0)
    for entry in smaps:
        totals["mappings"] += 1
        totals["size"] += entry.size
        totals["rss"] += entry.rss
        totals["pss"] += entry.pss
        totals["uss"] += entry.uss
        totals["shared"] += entry.shared
        totals["swap"] += entry.swap
        totals["swap_pss"] += entry.swap_pss
        totals["anonymous"] += entry.anonymous
        totals["locked"] += entry.locked
    return Rollup(**totals)

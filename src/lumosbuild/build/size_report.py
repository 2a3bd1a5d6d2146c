"""Memory budget report for a linked firmware image.

Turns the size tool's text/data/bss split into per-region usage against the
board's flash and RAM capacity:

    Flash = text + data    (code and the load image of initialized data)
    RAM   = data + bss     (initialized and zeroed data at run time)
"""

from dataclasses import dataclass
from typing import List, Optional

from .linker import SizeInfo

# Usage at or above this share of a region is reported as near the limit
NEAR_LIMIT_PERCENT = 90.0


@dataclass(frozen=True)
class MemoryRegion:
    """Usage of one memory region."""

    name: str
    used: int
    capacity: Optional[int]  # None when the board does not declare it
    breakdown: str  # e.g. "text 1234 + data 16"

    @property
    def percent(self) -> Optional[float]:
        if not self.capacity:
            return None
        return self.used / self.capacity * 100

    @property
    def over_budget(self) -> bool:
        return self.capacity is not None and self.used > self.capacity

    @property
    def near_limit(self) -> bool:
        percent = self.percent
        return percent is not None and not self.over_budget and percent >= NEAR_LIMIT_PERCENT

    def format(self) -> str:
        line = f"  {self.name:<6s}{self.used:>10d}"
        if self.capacity:
            line += f" / {self.capacity:d} bytes ({self.percent:5.1f}%)"
        else:
            line += " bytes"
        return f"{line}  [{self.breakdown}]"


def memory_regions(size_info: SizeInfo) -> List[MemoryRegion]:
    """Split a size report into its flash and RAM regions."""
    return [
        MemoryRegion(
            "Flash",
            size_info.total_flash,
            size_info.max_flash,
            f"text {size_info.text} + data {size_info.data}",
        ),
        MemoryRegion(
            "RAM",
            size_info.total_ram,
            size_info.max_ram,
            f"data {size_info.data} + bss {size_info.bss}",
        ),
    ]


def budget_problems(size_info: SizeInfo) -> List[str]:
    """Describe every region that is full or nearly full."""
    problems = []
    for region in memory_regions(size_info):
        if region.over_budget:
            capacity = region.capacity or 0
            problems.append(
                f"{region.name} overflow: image needs {region.used} bytes, "
                f"board has {capacity} ({region.used - capacity} over)"
            )
        elif region.near_limit:
            problems.append(f"{region.name} is {region.percent:.1f}% full")
    return problems


def format_size_report(size_info: SizeInfo) -> List[str]:
    """Render the memory budget as printable lines."""
    lines = ["Memory usage:"]
    lines.extend(region.format() for region in memory_regions(size_info))
    return lines

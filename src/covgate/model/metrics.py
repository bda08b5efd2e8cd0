from __future__ import annotations

from dataclasses import dataclass

from covgate.model.types import FULL_COVERAGE


def ratio(covered: int, total: int, *, full: float = FULL_COVERAGE) -> float:
    """Return the covered fraction, defaulting to `full` when no total exists."""
    return full if total == 0 else covered / total


@dataclass(frozen=True, slots=True)
class CoverageCounter:
    """Covered/missed counts for one metric type within one scope."""

    covered: int
    missed: int

    def __post_init__(self) -> None:
        """Reject negative counts."""
        if self.covered < 0 or self.missed < 0:
            msg = f"counter values must be >= 0 (covered={self.covered}, missed={self.missed})"
            raise ValueError(msg)

    @property
    def total(self) -> int:
        return self.covered + self.missed

    @property
    def ratio(self) -> float:
        return ratio(self.covered, self.total)


__all__ = ["CoverageCounter", "ratio"]

"""Base types and interface for output formatters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from covgate.check import CheckResult


class Format(StrEnum):
    """Supported output formats."""

    AUTO = "auto"
    HUMAN = "human"
    JSON = "json"


@dataclass(slots=True)
class OutputMeta:
    """Container for options shared by all renderers."""

    report_xml: Path | None = None
    color: bool = False
    width: int = 100


class Formatter(Protocol):
    def __call__(self, result: CheckResult, meta: OutputMeta) -> str: ...


def format_ratio(value: float) -> str:
    return f"{value * 100:.1f}%"


__all__ = ["Format", "Formatter", "OutputMeta", "format_ratio"]

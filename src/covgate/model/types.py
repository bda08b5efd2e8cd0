"""Shared enumerations and constants used across covgate."""

from __future__ import annotations

from enum import Enum, StrEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CoverageRealm(Enum):
    """Granularity at which coverage is measured and thresholded.

    Each realm carries the Jacoco XML element name that identifies its scopes
    and the configuration key under which its thresholds are declared.
    """

    FILE = ("sourcefile", "fileThreshold")
    CLASS = ("class", "classThreshold")
    PACKAGE = ("package", "packageThreshold")
    REPORT = ("report", "reportThreshold")

    def __init__(self, tag_name: str, config_key: str) -> None:
        self.tag_name = tag_name
        self.config_key = config_key

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def lookup(cls, text: str) -> CoverageRealm:
        """Resolve a realm from its name (``file``) or config key (``fileThreshold``)."""
        key = text.strip().lower()
        for realm in cls:
            if key in {realm.label, realm.config_key.lower()}:
                return realm
        msg = f"unknown coverage realm: {text!r}"
        raise ValueError(msg)


class CoverageType(StrEnum):
    """Jacoco counter types, in the order Jacoco declares them."""

    INSTRUCTION = "INSTRUCTION"
    BRANCH = "BRANCH"
    LINE = "LINE"
    COMPLEXITY = "COMPLEXITY"
    METHOD = "METHOD"
    CLASS = "CLASS"

    @classmethod
    def lookup(cls, text: str) -> CoverageType:
        try:
            return cls(text.strip().upper())
        except ValueError as exc:
            msg = f"unknown coverage type: {text!r}"
            raise ValueError(msg) from exc


FULL_COVERAGE: float = 1.0


__all__ = [
    "FULL_COVERAGE",
    "CoverageRealm",
    "CoverageType",
]

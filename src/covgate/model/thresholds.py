from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from covgate.errors import InvalidThresholdError
from covgate.model.types import CoverageRealm, CoverageType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from covgate.model.observation import CoverageObservation

ThresholdKey = tuple[CoverageRealm, CoverageType]

_PERCENT = 100.0


@dataclass(frozen=True, slots=True)
class ThresholdViolation:
    """A metric whose coverage ratio fell below its required minimum."""

    coverage_type: CoverageType
    actual: float
    required: float


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Outcome of evaluating one observation against its thresholds."""

    violations: tuple[ThresholdViolation, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.violations


PASS = EvaluationResult()


def evaluate(
    observation: CoverageObservation,
    realm: CoverageRealm,
    thresholds: Mapping[ThresholdKey, float],
) -> EvaluationResult:
    """Compare every recorded metric of *observation* against *thresholds*.

    A metric passes when its ratio is at least the configured minimum. Pairs
    without a configured minimum are unconstrained, and minimums for metrics
    the observation does not carry are ignored.
    """
    violations: list[ThresholdViolation] = []
    for coverage_type, counter in observation.items():
        required = thresholds.get((realm, coverage_type))
        if required is None:
            continue
        actual = counter.ratio
        if actual < required:
            violations.append(ThresholdViolation(coverage_type, actual=actual, required=required))
    return EvaluationResult(tuple(violations)) if violations else PASS


# ---------------------------------------------------------------------------
# Threshold rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ThresholdRule:
    """Minimum coverage ratio for a realm.

    Fields
    ------
    realm:
        Realm whose scopes the rule constrains.
    minimum:
        Required coverage ratio (0..1).
    coverage_type:
        Metric type constrained; ``None`` constrains every type.
    scope:
        Regular expression searched in the scope name; ``None`` matches all scopes.
    """

    realm: CoverageRealm
    minimum: float
    coverage_type: CoverageType | None = None
    scope: str | None = None

    def __post_init__(self) -> None:
        """Validate the ratio range and the scope pattern."""
        if not 0.0 <= self.minimum <= 1.0:
            msg = f"threshold must be within [0, 1]: {self.minimum}"
            raise InvalidThresholdError(msg)
        if self.scope is not None:
            try:
                re.compile(self.scope)
            except re.error as exc:
                msg = f"invalid scope pattern {self.scope!r}: {exc}"
                raise InvalidThresholdError(msg) from exc

    def matches(self, scope_name: str) -> bool:
        return self.scope is None or re.search(self.scope, scope_name) is not None

    def types(self) -> tuple[CoverageType, ...]:
        return tuple(CoverageType) if self.coverage_type is None else (self.coverage_type,)


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Collection of threshold rules for all realms."""

    rules: tuple[ThresholdRule, ...] = field(default=())

    def is_empty(self) -> bool:
        return not self.rules

    def extend(self, rules: Iterable[ThresholdRule]) -> ThresholdConfig:
        return ThresholdConfig((*self.rules, *rules))

    def resolve(self, realm: CoverageRealm, scope_name: str) -> dict[ThresholdKey, float]:
        """Return the effective minimums for one scope.

        When several rules constrain the same metric, the lowest minimum wins so
        that a scoped rule can relax a realm-wide one.
        """
        resolved: dict[ThresholdKey, float] = {}
        for rule in self.rules:
            if rule.realm is not realm or not rule.matches(scope_name):
                continue
            for coverage_type in rule.types():
                key = (realm, coverage_type)
                current = resolved.get(key)
                resolved[key] = rule.minimum if current is None else min(current, rule.minimum)
        return resolved


# ---------------------------------------------------------------------------
# Expression parsing
# ---------------------------------------------------------------------------


def parse_ratio(value: str | float, *, token: str) -> float:
    """Parse ``0.8``, ``80%`` or a number into a ratio."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        msg = f"invalid threshold value in {token!r}: {value!r}"
        raise InvalidThresholdError(msg)
    text = value.strip()
    percent = text.endswith("%")
    try:
        number = float(text.rstrip("%").strip())
    except ValueError as exc:
        msg = f"invalid threshold value in {token!r}: {value!r}"
        raise InvalidThresholdError(msg) from exc
    return number / _PERCENT if percent else number


def parse_threshold(expression: str) -> ThresholdRule:
    """Parse an expression like ``file:LINE@Legacy\\.java=0.1``."""
    if not expression or not expression.strip():
        msg = "threshold expression must be non-empty"
        raise InvalidThresholdError(msg)

    text = expression.strip()
    head, sep, raw_value = text.rpartition("=")
    if not sep or not head.strip() or not raw_value.strip():
        msg = f"invalid threshold expression: {expression!r}"
        raise InvalidThresholdError(msg)

    selector, at, scope = head.partition("@")
    if at and not scope:
        msg = f"empty scope pattern in {expression!r}"
        raise InvalidThresholdError(msg)
    realm_text, colon, type_text = selector.partition(":")

    try:
        realm = CoverageRealm.lookup(realm_text)
        coverage_type = CoverageType.lookup(type_text) if colon else None
    except ValueError as exc:
        msg = f"{exc} in {expression!r}"
        raise InvalidThresholdError(msg) from exc

    return ThresholdRule(
        realm=realm,
        minimum=parse_ratio(raw_value, token=expression),
        coverage_type=coverage_type,
        scope=scope or None,
    )


__all__ = [
    "PASS",
    "EvaluationResult",
    "ThresholdConfig",
    "ThresholdKey",
    "ThresholdRule",
    "ThresholdViolation",
    "evaluate",
    "parse_ratio",
    "parse_threshold",
]

"""Run a coverage check over every scope of a Jacoco report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.errors import CovgateError
from covgate.jacoco.reader import iter_scope_elements, read_observation
from covgate.model import CoverageRealm, EvaluationResult, evaluate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from covgate.jacoco.types import ElementLike
    from covgate.model import ThresholdConfig


@dataclass(frozen=True, slots=True)
class ScopeResult:
    """Evaluation outcome for one scope.

    ``error`` is set when the scope could not be evaluated (malformed counters,
    duplicate metrics); such a scope counts as failed.
    """

    realm: CoverageRealm
    scope: str
    result: EvaluationResult | None = None
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.result is not None and self.result.passed


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of checking a whole report."""

    scopes: tuple[ScopeResult, ...]

    @property
    def passed(self) -> bool:
        return all(s.passed for s in self.scopes)

    @property
    def failures(self) -> list[ScopeResult]:
        return [s for s in self.scopes if not s.passed]

    @property
    def violation_count(self) -> int:
        return sum(len(s.result.violations) for s in self.scopes if s.result is not None)


def check_report(
    root: ElementLike,
    config: ThresholdConfig,
    *,
    realms: Iterable[CoverageRealm] | None = None,
) -> CheckResult:
    """Evaluate every scope of *root* against the rules in *config*."""
    selected = frozenset(realms) if realms else frozenset(CoverageRealm)
    results: list[ScopeResult] = []

    for scope in iter_scope_elements(root):
        if scope.realm not in selected:
            continue
        try:
            observation = read_observation(scope.element)
        except CovgateError as exc:
            logger.warning("cannot evaluate %s %s: %s", scope.realm.label, scope.name, exc)
            results.append(ScopeResult(scope.realm, scope.name, error=str(exc)))
            continue

        thresholds = config.resolve(scope.realm, scope.name)
        result = evaluate(observation, scope.realm, thresholds)
        if not result.passed:
            logger.debug(
                "%s %s: %d threshold violation(s)", scope.realm.label, scope.name, len(result.violations)
            )
        results.append(ScopeResult(scope.realm, scope.name, result=result))

    logger.debug("checked %d scope(s)", len(results))
    return CheckResult(tuple(results))


__all__ = ["CheckResult", "ScopeResult", "check_report"]

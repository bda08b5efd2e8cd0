"""Per-scope coverage observations.

An observation maps each reported :class:`CoverageType` to its
:class:`CoverageCounter` for exactly one scope (one source file, one class,
one package, or the whole report). It is filled while the scope's section of
the report is read and sealed once that section ends; afterwards it is
read-only and safe to share between evaluators.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from covgate.errors import DuplicateMetricError, MetricNotPresentError, ObservationSealedError
from covgate.model.metrics import CoverageCounter
from covgate.model.types import CoverageRealm, CoverageType


class CoverageObservation(Mapping[CoverageType, CoverageCounter]):
    """Counters for one scope, iterated in declared metric-type order."""

    __slots__ = ("_counters", "_sealed")

    def __init__(self) -> None:
        self._counters: dict[CoverageType, CoverageCounter] = {}
        self._sealed = False

    # Mapping protocol -------------------------------------------------------

    def __getitem__(self, key: CoverageType) -> CoverageCounter:
        return self._counters[key]

    def __iter__(self) -> Iterator[CoverageType]:
        return (t for t in CoverageType if t in self._counters)

    def __len__(self) -> int:
        return len(self._counters)

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "building"
        items = ", ".join(f"{t.value}={c.covered}/{c.total}" for t, c in self.items())
        return f"CoverageObservation({state}; {items})"

    # Lifecycle --------------------------------------------------------------

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> CoverageObservation:
        """Freeze the observation. Sealing twice is a no-op."""
        self._sealed = True
        return self

    def record(self, coverage_type: CoverageType, counter: CoverageCounter) -> None:
        if self._sealed:
            msg = f"cannot record {coverage_type.value}: observation is sealed"
            raise ObservationSealedError(msg)
        if coverage_type in self._counters:
            msg = f"metric {coverage_type.value} recorded twice for the same scope"
            raise DuplicateMetricError(msg)
        self._counters[coverage_type] = counter

    def ratio_for(self, coverage_type: CoverageType) -> float:
        try:
            counter = self._counters[coverage_type]
        except KeyError as exc:
            msg = f"metric {coverage_type.value} was not reported for this scope"
            raise MetricNotPresentError(msg) from exc
        return counter.ratio


# ---------------------------------------------------------------------------
# Functional surface
# ---------------------------------------------------------------------------


def realms() -> tuple[CoverageRealm, ...]:
    return tuple(CoverageRealm)


def tag_name_for(realm: CoverageRealm) -> str:
    return realm.tag_name


def config_key_for(realm: CoverageRealm) -> str:
    return realm.config_key


def new_observation() -> CoverageObservation:
    return CoverageObservation()


def record(observation: CoverageObservation, coverage_type: CoverageType, counter: CoverageCounter) -> None:
    observation.record(coverage_type, counter)


def ratio_for(observation: CoverageObservation, coverage_type: CoverageType) -> float:
    return observation.ratio_for(coverage_type)


__all__ = [
    "CoverageObservation",
    "config_key_for",
    "new_observation",
    "ratio_for",
    "realms",
    "record",
    "tag_name_for",
]

from __future__ import annotations

import pytest

from covgate.errors import DuplicateMetricError, MetricNotPresentError, ObservationSealedError
from covgate.model import (
    PASS,
    CoverageCounter,
    CoverageRealm,
    CoverageType,
    ThresholdViolation,
    config_key_for,
    evaluate,
    new_observation,
    ratio_for,
    realms,
    record,
    tag_name_for,
)


def _foo_observation():
    observation = new_observation()
    record(observation, CoverageType.LINE, CoverageCounter(covered=9, missed=1))
    record(observation, CoverageType.BRANCH, CoverageCounter(covered=4, missed=4))
    return observation.seal()


# --- realms ---


def test_realms_fixed_order() -> None:
    assert realms() == (CoverageRealm.FILE, CoverageRealm.CLASS, CoverageRealm.PACKAGE, CoverageRealm.REPORT)
    assert realms() == realms()


@pytest.mark.parametrize(
    ("realm", "tag", "key"),
    [
        (CoverageRealm.FILE, "sourcefile", "fileThreshold"),
        (CoverageRealm.CLASS, "class", "classThreshold"),
        (CoverageRealm.PACKAGE, "package", "packageThreshold"),
        (CoverageRealm.REPORT, "report", "reportThreshold"),
    ],
)
def test_realm_attributes(realm: CoverageRealm, tag: str, key: str) -> None:
    assert tag_name_for(realm) == tag
    assert config_key_for(realm) == key


def test_realm_attributes_distinct_and_non_empty() -> None:
    tags = [tag_name_for(r) for r in realms()]
    keys = [config_key_for(r) for r in realms()]
    assert all(tags) and all(keys)
    assert len(set(tags)) == len(tags)
    assert len(set(keys)) == len(keys)
    assert not set(tags) & set(keys)


@pytest.mark.parametrize("text", ["file", "FILE", "fileThreshold", " filethreshold "])
def test_realm_lookup(text: str) -> None:
    assert CoverageRealm.lookup(text) is CoverageRealm.FILE


def test_realm_lookup_unknown() -> None:
    with pytest.raises(ValueError, match="unknown coverage realm"):
        CoverageRealm.lookup("module")


# --- counters ---


def test_counter_ratio() -> None:
    counter = CoverageCounter(covered=80, missed=20)
    assert counter.total == 100
    assert counter.ratio == pytest.approx(0.80)


def test_counter_without_data_is_fully_covered() -> None:
    assert CoverageCounter(covered=0, missed=0).ratio == 1.0


def test_counter_rejects_negative_counts() -> None:
    with pytest.raises(ValueError, match=">= 0"):
        CoverageCounter(covered=-1, missed=3)


# --- observation lifecycle ---


def test_new_observation_is_empty_and_building() -> None:
    observation = new_observation()
    assert len(observation) == 0
    assert not observation.sealed
    for coverage_type in CoverageType:
        with pytest.raises(MetricNotPresentError):
            ratio_for(observation, coverage_type)


def test_record_twice_fails() -> None:
    observation = new_observation()
    record(observation, CoverageType.LINE, CoverageCounter(1, 1))
    with pytest.raises(DuplicateMetricError, match="LINE"):
        record(observation, CoverageType.LINE, CoverageCounter(2, 2))
    assert observation[CoverageType.LINE] == CoverageCounter(1, 1)


def test_seal_is_one_way_and_idempotent() -> None:
    observation = new_observation()
    observation.seal()
    observation.seal()
    assert observation.sealed
    with pytest.raises(ObservationSealedError):
        record(observation, CoverageType.METHOD, CoverageCounter(1, 0))


def test_sealed_check_precedes_duplicate_check() -> None:
    observation = new_observation()
    record(observation, CoverageType.LINE, CoverageCounter(1, 1))
    observation.seal()
    with pytest.raises(ObservationSealedError):
        record(observation, CoverageType.LINE, CoverageCounter(2, 2))


def test_iteration_follows_declared_type_order() -> None:
    observation = new_observation()
    record(observation, CoverageType.CLASS, CoverageCounter(1, 0))
    record(observation, CoverageType.LINE, CoverageCounter(1, 0))
    record(observation, CoverageType.INSTRUCTION, CoverageCounter(1, 0))
    assert list(observation) == [CoverageType.INSTRUCTION, CoverageType.LINE, CoverageType.CLASS]


def test_ratio_for_absent_metric() -> None:
    observation = _foo_observation()
    assert ratio_for(observation, CoverageType.LINE) == pytest.approx(0.9)
    with pytest.raises(MetricNotPresentError, match="METHOD"):
        ratio_for(observation, CoverageType.METHOD)


# --- evaluation ---


def test_evaluate_passes_at_boundaries() -> None:
    thresholds = {
        (CoverageRealm.FILE, CoverageType.LINE): 0.90,
        (CoverageRealm.FILE, CoverageType.BRANCH): 0.40,
    }
    result = evaluate(_foo_observation(), CoverageRealm.FILE, thresholds)
    assert result == PASS
    assert result.passed


def test_evaluate_reports_violation() -> None:
    thresholds = {(CoverageRealm.FILE, CoverageType.LINE): 0.95}
    result = evaluate(_foo_observation(), CoverageRealm.FILE, thresholds)
    assert not result.passed
    assert result.violations == (
        ThresholdViolation(CoverageType.LINE, actual=pytest.approx(0.90), required=0.95),
    )


def test_evaluate_ignores_other_realms_and_unconstrained_metrics() -> None:
    thresholds = {
        (CoverageRealm.CLASS, CoverageType.LINE): 1.0,
        (CoverageRealm.FILE, CoverageType.METHOD): 1.0,
    }
    assert evaluate(_foo_observation(), CoverageRealm.FILE, thresholds).passed


def test_evaluate_empty_observation_passes() -> None:
    thresholds = {(CoverageRealm.REPORT, t): 1.0 for t in CoverageType}
    assert evaluate(new_observation().seal(), CoverageRealm.REPORT, thresholds).passed


def test_evaluate_orders_violations_by_metric_type() -> None:
    observation = new_observation()
    record(observation, CoverageType.METHOD, CoverageCounter(0, 1))
    record(observation, CoverageType.BRANCH, CoverageCounter(0, 1))
    thresholds = {(CoverageRealm.CLASS, t): 0.5 for t in CoverageType}
    result = evaluate(observation.seal(), CoverageRealm.CLASS, thresholds)
    assert [v.coverage_type for v in result.violations] == [CoverageType.BRANCH, CoverageType.METHOD]

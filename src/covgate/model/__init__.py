"""Coverage data model: realms, counters, observations and thresholds."""

from covgate.model.metrics import CoverageCounter, ratio
from covgate.model.observation import (
    CoverageObservation,
    config_key_for,
    new_observation,
    ratio_for,
    realms,
    record,
    tag_name_for,
)
from covgate.model.thresholds import (
    PASS,
    EvaluationResult,
    ThresholdConfig,
    ThresholdKey,
    ThresholdRule,
    ThresholdViolation,
    evaluate,
    parse_ratio,
    parse_threshold,
)
from covgate.model.types import FULL_COVERAGE, CoverageRealm, CoverageType

__all__ = [
    "FULL_COVERAGE",
    "PASS",
    "CoverageCounter",
    "CoverageObservation",
    "CoverageRealm",
    "CoverageType",
    "EvaluationResult",
    "ThresholdConfig",
    "ThresholdKey",
    "ThresholdRule",
    "ThresholdViolation",
    "config_key_for",
    "evaluate",
    "new_observation",
    "parse_ratio",
    "parse_threshold",
    "ratio",
    "ratio_for",
    "realms",
    "record",
    "tag_name_for",
]

"""Centralised exception hierarchy for covgate."""

from __future__ import annotations


class CovgateError(Exception):
    """Base class for all custom covgate exceptions."""


class CoverageModelError(CovgateError):
    """Base class for contract violations on coverage observations."""


class DuplicateMetricError(CoverageModelError):
    """The same metric type was recorded twice for one scope."""


class MetricNotPresentError(CoverageModelError):
    """A ratio was requested for a metric type that was never recorded."""


class ObservationSealedError(CoverageModelError):
    """A counter was recorded after the observation was sealed."""


class JacocoXMLError(CovgateError):
    """Base class for errors related to Jacoco XML handling."""


class JacocoXMLNotFoundError(JacocoXMLError):
    """Jacoco XML report could not be located on disk."""


class InvalidJacocoXMLError(JacocoXMLError):
    """Jacoco XML file was found but does not contain a valid report."""


class InvalidThresholdError(CovgateError, ValueError):
    """A threshold expression or configuration entry is malformed."""


__all__ = [
    "CoverageModelError",
    "CovgateError",
    "DuplicateMetricError",
    "InvalidJacocoXMLError",
    "InvalidThresholdError",
    "JacocoXMLError",
    "JacocoXMLNotFoundError",
    "MetricNotPresentError",
    "ObservationSealedError",
]

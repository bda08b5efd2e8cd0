from __future__ import annotations

import json
from pathlib import Path

import pytest

from covgate.check import CheckResult, ScopeResult, check_report
from covgate.jacoco import read_root
from covgate.model import (
    PASS,
    CoverageRealm,
    CoverageType,
    EvaluationResult,
    ThresholdConfig,
    ThresholdViolation,
    parse_threshold,
)
from covgate.output import Format, OutputMeta, format_human, format_json, format_ratio, resolve_formatter

FAILED = CheckResult(
    (
        ScopeResult(CoverageRealm.FILE, "com/acme/Foo.java", result=PASS),
        ScopeResult(
            CoverageRealm.FILE,
            "com/acme/Legacy.java",
            result=EvaluationResult((ThresholdViolation(CoverageType.LINE, actual=0.1, required=0.9),)),
        ),
        ScopeResult(CoverageRealm.CLASS, "com/acme/Broken", error="metric LINE recorded twice"),
    )
)


def test_format_ratio() -> None:
    assert format_ratio(0.9) == "90.0%"
    assert format_ratio(1.0) == "100.0%"


def test_human_passed(sample_report: Path) -> None:
    result = check_report(read_root(sample_report), ThresholdConfig())
    out = format_human(result, OutputMeta())
    assert "All coverage thresholds met" in out
    assert "6 scopes checked" in out


def test_human_failures_without_color() -> None:
    out = format_human(FAILED, OutputMeta(color=False))
    assert "\x1b[" not in out
    assert "com/acme/Legacy.java" in out
    assert "10.0%" in out
    assert "90.0%" in out
    assert "Unevaluable class" in out
    assert "1 violation(s) in 2 of 3 scopes" in out


def test_human_color() -> None:
    out = format_human(FAILED, OutputMeta(color=True))
    assert "\x1b[" in out


def test_json_payload() -> None:
    payload = json.loads(format_json(FAILED, OutputMeta(report_xml=Path("/tmp/jacoco.xml"))))
    assert payload["passed"] is False
    assert payload["report"] == "/tmp/jacoco.xml"
    assert payload["summary"] == {"scopes": 3, "failed": 2, "violations": 1}
    assert payload["failures"][0] == {
        "realm": "file",
        "scope": "com/acme/Legacy.java",
        "error": None,
        "violations": [{"type": "LINE", "actual": 0.1, "required": 0.9}],
    }
    assert payload["failures"][1]["error"] == "metric LINE recorded twice"
    assert payload["tool"]["name"] == "covgate"


def test_json_passed(sample_report: Path) -> None:
    result = check_report(read_root(sample_report), ThresholdConfig((parse_threshold("report=0.5"),)))
    payload = json.loads(format_json(result, OutputMeta()))
    assert payload["passed"] is True
    assert payload["report"] is None
    assert payload["failures"] == []


@pytest.mark.parametrize(
    ("value", "is_tty", "expected"),
    [
        ("auto", True, Format.HUMAN),
        ("auto", False, Format.JSON),
        ("HUMAN", False, Format.HUMAN),
        ("json", True, Format.JSON),
    ],
)
def test_resolve_formatter(value: str, is_tty: bool, expected: Format) -> None:
    fmt, _formatter = resolve_formatter(value, is_tty=is_tty)
    assert fmt is expected


def test_resolve_formatter_suggests() -> None:
    with pytest.raises(ValueError, match="Did you mean 'json'"):
        resolve_formatter("jsn", is_tty=False)

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from jsonschema import validate

from covgate._meta import __version__
from covgate.config import get_schema

if TYPE_CHECKING:
    from covgate.check import CheckResult, ScopeResult
    from covgate.output.base import OutputMeta


SCHEMA_ID = "https://example.com/covgate.schema.json"


def _scope_payload(scope: ScopeResult) -> dict[str, Any]:
    violations = scope.result.violations if scope.result is not None else ()
    return {
        "realm": scope.realm.label,
        "scope": scope.scope,
        "error": scope.error,
        "violations": [
            {"type": v.coverage_type.value, "actual": v.actual, "required": v.required} for v in violations
        ],
    }


def build_payload(result: CheckResult, meta: OutputMeta) -> dict[str, Any]:
    failures = result.failures
    return {
        "schema": SCHEMA_ID,
        "schema_version": 1,
        "tool": {"name": "covgate", "version": __version__},
        "report": meta.report_xml.as_posix() if meta.report_xml else None,
        "passed": result.passed,
        "summary": {
            "scopes": len(result.scopes),
            "failed": len(failures),
            "violations": result.violation_count,
        },
        "failures": [_scope_payload(s) for s in failures],
    }


def format_json(result: CheckResult, meta: OutputMeta) -> str:
    payload = build_payload(result, meta)
    validate(payload, get_schema())
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["SCHEMA_ID", "build_payload", "format_json"]

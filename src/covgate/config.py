"""Central configuration and constants for ``covgate``.

Thresholds live in ``pyproject.toml`` under ``[tool.covgate]``. Each realm is
configured under its config key and accepts three shapes::

    [tool.covgate]
    report = "build/reports/jacoco/test/jacocoTestReport.xml"
    reportThreshold = 0.8                 # every metric type

    [tool.covgate.classThreshold]
    LINE = 0.9                            # per metric type
    BRANCH = "75%"

    [[tool.covgate.fileThreshold]]        # scoped rules
    minimum = 0.1
    type = "LINE"
    scope = "Legacy\\.java$"
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from covgate._meta import logger
from covgate.errors import InvalidThresholdError
from covgate.model import CoverageRealm, CoverageType, ThresholdConfig, ThresholdRule, parse_ratio

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

# Conventional report locations, relative to the project root (Gradle, then Maven).
DEFAULT_REPORT_PATHS: tuple[str, ...] = (
    "build/reports/jacoco/test/jacocoTestReport.xml",
    "target/site/jacoco/jacoco.xml",
)

TOOL_SECTION = "covgate"

_SCHEMA_FILES: dict[str, str] = {
    "v1": "schema.json",
}


@cache
def get_schema(version: str = "v1") -> dict[str, object]:
    """Load and cache the JSON schema for structured output."""
    try:
        filename = _SCHEMA_FILES[version]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema version: {version!r}. Available versions: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("covgate.data").joinpath(filename).read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class CovgateConfig:
    """Settings read from ``[tool.covgate]``."""

    report: Path | None = None
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)


def find_project_root(start: Path) -> Path:
    """Heuristic project root finder: walks upward looking for pyproject.toml or .git."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / "pyproject.toml").exists():
            return p
        if (p / ".git").exists():
            return p
    return cur


def _lookup_type(value: object, *, token: str) -> CoverageType:
    if not isinstance(value, str):
        msg = f"coverage type must be a string in {token}, got {value!r}"
        raise InvalidThresholdError(msg)
    try:
        return CoverageType.lookup(value)
    except ValueError as exc:
        msg = f"{exc} in {token}"
        raise InvalidThresholdError(msg) from exc


def _rule_from_table(realm: CoverageRealm, entry: object) -> ThresholdRule:
    token = realm.config_key
    if not isinstance(entry, dict):
        msg = f"{token} entries must be tables, got {entry!r}"
        raise InvalidThresholdError(msg)
    unknown = set(entry) - {"minimum", "type", "scope"}
    if unknown:
        msg = f"unknown keys in {token} entry: {', '.join(sorted(unknown))}"
        raise InvalidThresholdError(msg)
    if "minimum" not in entry:
        msg = f"{token} entry is missing 'minimum'"
        raise InvalidThresholdError(msg)

    raw_type = entry.get("type")
    raw_scope = entry.get("scope")
    coverage_type = _lookup_type(raw_type, token=token) if raw_type is not None else None
    if raw_scope is not None and not isinstance(raw_scope, str):
        msg = f"{token} scope must be a string, got {raw_scope!r}"
        raise InvalidThresholdError(msg)

    return ThresholdRule(
        realm=realm,
        minimum=parse_ratio(entry["minimum"], token=token),
        coverage_type=coverage_type,
        scope=raw_scope,
    )


def rules_for_realm(realm: CoverageRealm, value: object) -> list[ThresholdRule]:
    """Translate one ``<realm>Threshold`` value into threshold rules."""
    token = realm.config_key
    if isinstance(value, int | float | str) and not isinstance(value, bool):
        return [ThresholdRule(realm=realm, minimum=parse_ratio(value, token=token))]
    if isinstance(value, dict):
        rules: list[ThresholdRule] = []
        for type_name, minimum in value.items():
            rules.append(
                ThresholdRule(
                    realm=realm,
                    minimum=parse_ratio(minimum, token=f"{token}.{type_name}"),
                    coverage_type=_lookup_type(type_name, token=token),
                )
            )
        return rules
    if isinstance(value, list):
        return [_rule_from_table(realm, entry) for entry in value]
    msg = f"unsupported value for {token}: {value!r}"
    raise InvalidThresholdError(msg)


def config_from_table(table: dict[str, Any], *, base: Path) -> CovgateConfig:
    """Build a :class:`CovgateConfig` from the ``[tool.covgate]`` table."""
    known = {"report", *(realm.config_key for realm in CoverageRealm)}
    unknown = set(table) - known
    if unknown:
        msg = f"unknown keys in [tool.{TOOL_SECTION}]: {', '.join(sorted(unknown))}"
        raise InvalidThresholdError(msg)

    rules: list[ThresholdRule] = []
    for realm in CoverageRealm:
        if realm.config_key in table:
            rules.extend(rules_for_realm(realm, table[realm.config_key]))

    report = table.get("report")
    if report is not None and (not isinstance(report, str) or not report.strip()):
        msg = f"'report' must be a non-empty string, got {report!r}"
        raise InvalidThresholdError(msg)

    return CovgateConfig(
        report=(base / report.strip()).resolve() if report else None,
        thresholds=ThresholdConfig(tuple(rules)),
    )


def load_pyproject_config(pyproject: Path, *, strict: bool = False) -> CovgateConfig:
    """Read ``[tool.covgate]`` from *pyproject*.

    Unreadable files yield an empty config, unless *strict* is set (the file was
    named explicitly), in which case they raise :class:`InvalidThresholdError`.
    """
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            msg = f"failed to parse {pyproject}: {e}"
            raise InvalidThresholdError(msg) from e
        logger.warning("Failed to parse %s: %s", pyproject, e)
        return CovgateConfig()

    table = data.get("tool", {}).get(TOOL_SECTION)
    if table is None:
        logger.debug("no [tool.%s] section in %s", TOOL_SECTION, pyproject)
        return CovgateConfig()
    if not isinstance(table, dict):
        msg = f"[tool.{TOOL_SECTION}] must be a table in {pyproject}"
        raise InvalidThresholdError(msg)
    return config_from_table(table, base=pyproject.parent)


def load_config(config_path: Path | None = None, *, cwd: Path | None = None) -> CovgateConfig:
    """Load configuration from *config_path* or the project's ``pyproject.toml``."""
    if config_path is not None:
        return load_pyproject_config(config_path, strict=True)
    root = find_project_root(cwd or Path.cwd())
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return CovgateConfig()
    return load_pyproject_config(pyproject)


__all__ = [
    "DEFAULT_REPORT_PATHS",
    "LOG_FORMAT",
    "CovgateConfig",
    "config_from_table",
    "find_project_root",
    "get_schema",
    "load_config",
    "load_pyproject_config",
    "rules_for_realm",
]

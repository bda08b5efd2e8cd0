from __future__ import annotations

from pathlib import Path

from covgate.config import DEFAULT_REPORT_PATHS, find_project_root
from covgate.errors import JacocoXMLNotFoundError


def discover_report_path(*, cwd: Path, configured: Path | None = None) -> Path:
    """Discover the Jacoco XML report from configuration or build-tool conventions."""
    if configured is not None:
        if configured.exists():
            return configured.resolve()
        msg = f"configured Jacoco XML report not found: {configured}"
        raise JacocoXMLNotFoundError(msg)

    root = find_project_root(cwd)
    tried: list[Path] = []
    for base in dict.fromkeys((cwd.resolve(), root)):
        for rel in DEFAULT_REPORT_PATHS:
            candidate = (base / rel).resolve()
            if candidate.exists():
                return candidate
            tried.append(candidate)

    msg = "no Jacoco XML report provided and none discovered.\nTried: " + ", ".join(str(p) for p in tried)
    raise JacocoXMLNotFoundError(msg)


def resolve_report_path(report: Path | None, *, cwd: Path, configured: Path | None = None) -> Path:
    """Resolve an explicit report path, or discover one if none is provided."""
    if report is not None:
        if not report.exists():
            msg = f"Jacoco XML report not found: {report}"
            raise JacocoXMLNotFoundError(msg)
        return report.resolve()

    return discover_report_path(cwd=cwd, configured=configured)


__all__ = ["discover_report_path", "resolve_report_path"]

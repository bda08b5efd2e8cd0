from covgate.jacoco.discover import discover_report_path, resolve_report_path
from covgate.jacoco.reader import (
    Scope,
    ScopeElement,
    iter_scope_elements,
    iter_scopes,
    parse_counter,
    read_observation,
    read_root,
)

__all__ = [
    "Scope",
    "ScopeElement",
    "discover_report_path",
    "iter_scope_elements",
    "iter_scopes",
    "parse_counter",
    "read_observation",
    "read_root",
    "resolve_report_path",
]

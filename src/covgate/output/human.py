from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from covgate.output.base import format_ratio

if TYPE_CHECKING:
    from covgate.check import CheckResult
    from covgate.output.base import OutputMeta


def _build_table(result: CheckResult) -> Table:
    table = Table(title="Coverage threshold violations", box=box.SIMPLE_HEAVY, header_style="bold")

    table.add_column("Realm", style="magenta")
    table.add_column("Scope", style="cyan", overflow="fold")
    table.add_column("Metric")
    table.add_column("Actual", justify="right")
    table.add_column("Required", justify="right")

    for scope in result.failures:
        if scope.result is None:
            continue
        for violation in scope.result.violations:
            table.add_row(
                scope.realm.label,
                escape(scope.scope),
                violation.coverage_type.value,
                f"[red]{format_ratio(violation.actual)}[/red]",
                format_ratio(violation.required),
            )
    return table


def format_human(result: CheckResult, meta: OutputMeta) -> str:
    """Return a Rich-rendered summary of the check for terminals."""
    console = Console(
        width=meta.width,
        force_terminal=meta.color,
        color_system="standard" if meta.color else None,
        highlight=False,
    )
    total = len(result.scopes)
    with console.capture() as cap:
        if result.passed:
            console.print(f"[green]All coverage thresholds met[/green] ({total} scopes checked)")
        else:
            _print_failures(console, result)
    return cap.get()


def _print_failures(console: Console, result: CheckResult) -> None:
    if result.violation_count:
        console.print(_build_table(result))

    for scope in result.failures:
        if scope.error is not None:
            console.print(
                f"[red]Unevaluable {scope.realm.label}[/red] {escape(scope.scope)}: {escape(scope.error)}"
            )

    console.print(
        f"[bold red]Coverage check failed[/bold red]: {result.violation_count} violation(s) "
        f"in {len(result.failures)} of {len(result.scopes)} scopes"
    )


__all__ = ["format_human"]

"""Command line interface for ``covgate``."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click.utils as click_utils
import rich_click as click
from defusedxml import DefusedXmlException, ElementTree

from covgate._meta import __version__, logger
from covgate.check import check_report
from covgate.config import LOG_FORMAT, load_config
from covgate.errors import InvalidJacocoXMLError, InvalidThresholdError, JacocoXMLNotFoundError
from covgate.jacoco import read_root, resolve_report_path
from covgate.model import CoverageRealm, parse_threshold
from covgate.output import Format, OutputMeta, resolve_formatter

if TYPE_CHECKING:
    from covgate.model import ThresholdRule

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "auto_envvar_prefix": "COVGATE",
    "max_content_width": 100,
}

# --- rich-click configuration ---
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = CONTEXT_SETTINGS["max_content_width"]

_OPTION_GROUPS = [
    {
        "name": "Input & thresholds",
        "options": ["--config", "--threshold", "--realm"],
    },
    {
        "name": "Output format & presentation",
        "options": ["--format", "--output", "--color", "--no-color"],
    },
    {
        "name": "Logging & misc",
        "options": ["-q", "--quiet", "-v", "--verbose", "--debug", "--version", "--help"],
    },
]

click.rich_click.OPTION_GROUPS = {
    "covgate": _OPTION_GROUPS,
    "cli": _OPTION_GROUPS,
}
# ---------------------------------

EXIT_OK = 0
EXIT_THRESHOLD = 2
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_CONFIG = 78


def _configure_logging(*, quiet: bool, verbose: bool, debug: bool) -> None:
    level = logging.ERROR if quiet else (logging.DEBUG if (debug or verbose) else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if debug:
        logger.debug("debug logging enabled")


def _thresholds_cb(ctx, param, values):
    try:
        return tuple(parse_threshold(v) for v in values)
    except InvalidThresholdError as exc:
        raise click.BadParameter(str(exc)) from exc


def _write_output(text: str, destination: Path | None) -> None:
    if destination is None or destination == Path("-"):
        click.echo(text.rstrip("\n"))
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")


@click.command(
    context_settings=CONTEXT_SETTINGS,
    help=(
        "\b"
        "Check a Jacoco XML coverage report against per-realm thresholds.\n\n"
        "Common examples:\n"
        "  covgate build/reports/jacoco/test/jacocoTestReport.xml --threshold file=0.8\n"
        "  covgate --threshold class:BRANCH=75% --threshold 'file:LINE@Legacy\\.java=0.1'\n"
        "  covgate --config pyproject.toml --realm package --format json\n\n"
        "Thresholds are read from [tool.covgate] in pyproject.toml and extended by --threshold.\n"
    ),
    epilog=(
        "\b\n"
        "Exit status (for CI):\n"
        "  Code  Description\n"
        "  ----  -----------\n"
        "  0     every scope met its thresholds\n"
        "  2     coverage thresholds not met\n"
        "\n"
        "Other errors:\n"
        "  Code  Description\n"
        "  ----  -----------\n"
        "  1     unexpected failure\n"
        "  65    malformed Jacoco XML data\n"
        "  66    Jacoco XML report missing\n"
        "  78    configuration error (invalid [tool.covgate] thresholds)\n"
    ),
)
@click.argument("report", required=False, type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    help="pyproject.toml to read [tool.covgate] from (default: discovered from the working directory).",
)
@click.option(
    "--threshold",
    "threshold_options",
    multiple=True,
    callback=_thresholds_cb,
    help=(
        "Threshold as REALM[:TYPE][@SCOPE]=VALUE, e.g. file=0.8 or class:BRANCH=75%. "
        "Can be passed multiple times."
    ),
)
@click.option(
    "--realm",
    "realm_options",
    multiple=True,
    type=click.Choice([realm.label for realm in CoverageRealm], case_sensitive=False),
    help="Restrict the check to these realms (can repeat).",
)
@click.option(
    "--format",
    "format_option",
    default=Format.AUTO.value,
    show_default=True,
    type=click.Choice([fmt.value for fmt in Format], case_sensitive=False),
    help="Output format: human, json, or auto (TTY → human, non-TTY → json).",
)
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    help="Write the result to PATH instead of stdout (use '-' for stdout).",
)
@click.option("--color", is_flag=True, help="Force coloured output even if stdout is not a TTY.")
@click.option("--no-color", is_flag=True, help="Disable coloured output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential output (errors only).")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
@click.option("--debug", is_flag=True, help="Enable debug logging (includes tracebacks on errors).")
@click.version_option(__version__)
@click.pass_context
def cli(  # noqa: PLR0913, PLR0917
    ctx: click.Context,
    report: Path | None,
    config_path: Path | None,
    threshold_options: tuple[ThresholdRule, ...],
    realm_options: tuple[str, ...],
    format_option: str,
    output: Path | None,
    *,
    color: bool = False,
    no_color: bool = False,
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> None:
    """Check Jacoco coverage against thresholds."""
    if color and no_color:
        msg = "--color"
        raise click.BadOptionUsage(msg, "--color and --no-color cannot be combined")
    if quiet and verbose:
        msg = "--quiet"
        raise click.BadOptionUsage(msg, "--quiet and --verbose cannot be combined")

    _configure_logging(quiet=quiet, verbose=verbose, debug=debug)

    cwd = Path.cwd()
    try:
        config = load_config(config_path, cwd=cwd)
    except InvalidThresholdError as exc:
        if debug:
            raise
        click.echo(f"ERROR: invalid configuration: {exc}", err=True)
        ctx.exit(EXIT_CONFIG)

    thresholds = config.thresholds.extend(threshold_options)
    if thresholds.is_empty():
        logger.warning("no coverage thresholds configured; every scope passes")

    try:
        report_path = resolve_report_path(report, cwd=cwd, configured=config.report)
    except JacocoXMLNotFoundError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        ctx.exit(EXIT_NOINPUT)

    try:
        root = read_root(report_path)
    except OSError as exc:
        if debug:
            raise
        click.echo(f"ERROR: {exc}", err=True)
        ctx.exit(EXIT_NOINPUT)
    except (ElementTree.ParseError, DefusedXmlException, InvalidJacocoXMLError) as exc:
        if debug:
            raise
        click.echo(f"ERROR: failed to parse Jacoco XML: {exc}", err=True)
        ctx.exit(EXIT_DATAERR)

    logger.info("checking %s", report_path)
    realms = [CoverageRealm.lookup(value) for value in realm_options]
    result = check_report(root, thresholds, realms=realms)

    ansi_allowed = not click_utils.should_strip_ansi(sys.stdout)
    to_stdout = output in {None, Path("-")}
    use_color = True if color else False if no_color else (ansi_allowed and to_stdout)
    _fmt, formatter = resolve_formatter(format_option, is_tty=ansi_allowed and to_stdout)
    meta = OutputMeta(report_xml=report_path, color=use_color)
    _write_output(formatter(result, meta), output)

    if not result.passed:
        for scope in result.failures:
            logger.debug("failed %s %s", scope.realm.label, scope.scope)
        ctx.exit(EXIT_THRESHOLD)

    ctx.exit(EXIT_OK)


def main() -> None:
    cli()


__all__ = ["EXIT_CONFIG", "EXIT_DATAERR", "EXIT_NOINPUT", "EXIT_THRESHOLD", "cli", "main"]

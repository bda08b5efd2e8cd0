"""Formatter registry for covgate output formats."""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.output.base import Format
from covgate.output.human import format_human
from covgate.output.json import format_json

if TYPE_CHECKING:
    from covgate.output.base import Formatter

FORMATTERS: dict[Format, Formatter] = {
    Format.HUMAN: format_human,
    Format.JSON: format_json,
}


def resolve_formatter(format_str: str, *, is_tty: bool) -> tuple[Format, Formatter]:
    """Resolve *format_str* to a :class:`Format` and its formatter."""
    try:
        fmt = Format(format_str.lower())
    except ValueError as err:
        choices = [f.value for f in Format]
        suggestion = difflib.get_close_matches(format_str, choices, n=1)
        hint = f". Did you mean {suggestion[0]!r}?" if suggestion else ""
        msg = f"{format_str!r} is not one of {', '.join(choices)}{hint}"
        raise ValueError(msg) from err

    if fmt is Format.AUTO:
        fmt = Format.HUMAN if is_tty else Format.JSON

    logger.debug("selected formatter %s", fmt.value)
    return fmt, FORMATTERS[fmt]


__all__ = ["FORMATTERS", "resolve_formatter"]

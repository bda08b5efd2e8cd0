from covgate.output.base import Format, Formatter, OutputMeta, format_ratio
from covgate.output.human import format_human
from covgate.output.json import build_payload, format_json
from covgate.output.registry import FORMATTERS, resolve_formatter

__all__ = [
    "FORMATTERS",
    "Format",
    "Formatter",
    "OutputMeta",
    "build_payload",
    "format_human",
    "format_json",
    "format_ratio",
    "resolve_formatter",
]

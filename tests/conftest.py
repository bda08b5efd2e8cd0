from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from click.testing import CliRunner

Counters = Mapping[str, tuple[int, int]]


def _counters_xml(counters: Counters) -> str:
    return "".join(
        f'<counter type="{kind}" missed="{missed}" covered="{covered}"/>'
        for kind, (covered, missed) in counters.items()
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def jacoco_xml_content() -> Callable[..., str]:
    """Build a Jacoco XML report.

    ``packages`` maps a package name to a dict with optional ``sourcefiles``,
    ``classes`` (both ``{name: counters}``) and ``counters`` keys. Counters map
    a counter type to ``(covered, missed)``.
    """

    def build(
        packages: Mapping[str, Mapping[str, object]],
        *,
        counters: Counters | None = None,
        name: str = "demo",
    ) -> str:
        parts: list[str] = []
        for pkg_name, contents in packages.items():
            classes = "".join(
                f'<class name="{cls}">{_counters_xml(c)}</class>' for cls, c in contents.get("classes", {}).items()
            )
            sources = "".join(
                f'<sourcefile name="{src}"><line nr="1" mi="0" ci="1" mb="0" cb="0"/>{_counters_xml(c)}</sourcefile>'
                for src, c in contents.get("sourcefiles", {}).items()
            )
            pkg_counters = _counters_xml(contents.get("counters", {}))
            parts.append(f'<package name="{pkg_name}">{classes}{sources}{pkg_counters}</package>')
        return (
            f'<report name="{name}">'
            '<sessioninfo id="s1" start="1" dump="2"/>'
            f"{''.join(parts)}"
            f"{_counters_xml(counters or {})}"
            "</report>"
        )

    return build


@pytest.fixture
def jacoco_xml_file(
    tmp_path: Path,
    jacoco_xml_content: Callable[..., str],
) -> Callable[..., Path]:
    def write(
        packages: Mapping[str, Mapping[str, object]],
        *,
        counters: Counters | None = None,
        filename: str = "jacoco.xml",
    ) -> Path:
        xml_file = tmp_path / filename
        xml_file.write_text(jacoco_xml_content(packages, counters=counters), encoding="utf-8")
        return xml_file

    return write


@pytest.fixture
def sample_report(jacoco_xml_file: Callable[..., Path]) -> Path:
    """A small report: one well-covered file/class and one poorly covered one."""
    return jacoco_xml_file(
        {
            "com/acme": {
                "classes": {
                    "com/acme/Foo": {"LINE": (9, 1), "BRANCH": (4, 4)},
                    "com/acme/Legacy": {"LINE": (1, 9)},
                },
                "sourcefiles": {
                    "Foo.java": {"LINE": (9, 1), "BRANCH": (4, 4)},
                    "Legacy.java": {"LINE": (1, 9)},
                },
                "counters": {"LINE": (10, 10), "BRANCH": (4, 4)},
            }
        },
        counters={"LINE": (10, 10), "BRANCH": (4, 4)},
    )

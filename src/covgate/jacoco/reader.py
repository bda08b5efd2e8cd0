"""Map a Jacoco XML report onto per-scope coverage observations.

Jacoco nests its elements as ``report > [group >] package > (class | sourcefile)``
and every element carries its own aggregated ``<counter type=... missed=...
covered=.../>`` children. Only the direct counter children of an element
belong to that element's scope; counters of nested methods or lines do not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from defusedxml import ElementTree

from covgate._meta import logger
from covgate.errors import InvalidJacocoXMLError
from covgate.model import CoverageCounter, CoverageRealm, CoverageType, new_observation

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from covgate.jacoco.types import ElementLike
    from covgate.model import CoverageObservation


@dataclass(frozen=True, slots=True)
class ScopeElement:
    """A report element identified as one scope of a realm."""

    realm: CoverageRealm
    name: str
    element: ElementLike


@dataclass(frozen=True, slots=True)
class Scope:
    """A scope together with its sealed observation."""

    realm: CoverageRealm
    name: str
    observation: CoverageObservation


def read_root(path: Path) -> ElementLike:
    """Parse a Jacoco XML report and return the ``<report>`` root element.

    Jacoco reports carry no XML namespace; namespaced roots are rejected since
    scope and counter lookups use bare tag names.
    """
    root = ElementTree.parse(path).getroot()
    if root.tag != CoverageRealm.REPORT.tag_name:
        msg = f"unexpected root tag {root.tag!r} in {path}"
        raise InvalidJacocoXMLError(msg)
    return root


def parse_counter(element: ElementLike) -> tuple[CoverageType, CoverageCounter] | None:
    """Parse one ``<counter>`` element; unknown counter types yield ``None``."""
    raw_type = element.get("type") or ""
    try:
        coverage_type = CoverageType(raw_type)
    except ValueError:
        logger.debug("skipping unknown counter type %r", raw_type)
        return None

    covered_raw = element.get("covered")
    missed_raw = element.get("missed")
    try:
        counter = CoverageCounter(covered=int(covered_raw or ""), missed=int(missed_raw or ""))
    except ValueError as exc:
        msg = f"invalid {coverage_type.value} counter (covered={covered_raw!r}, missed={missed_raw!r})"
        raise InvalidJacocoXMLError(msg) from exc
    return coverage_type, counter


def read_observation(element: ElementLike) -> CoverageObservation:
    """Build and seal the observation from the direct counters of *element*."""
    observation = new_observation()
    for counter_elem in element.findall("./counter"):
        parsed = parse_counter(counter_elem)
        if parsed is None:
            continue
        observation.record(*parsed)
    return observation.seal()


def _file_scope_name(package_name: str, source_name: str) -> str:
    return f"{package_name}/{source_name}" if package_name else source_name


def iter_scope_elements(root: ElementLike) -> Iterator[ScopeElement]:
    """Yield every scope of the report, grouped by realm in realm order."""
    packages = list(root.iter(CoverageRealm.PACKAGE.tag_name))

    for pkg in packages:
        pkg_name = pkg.get("name") or ""
        for source in pkg.findall(f"./{CoverageRealm.FILE.tag_name}"):
            name = _file_scope_name(pkg_name, source.get("name") or "")
            yield ScopeElement(CoverageRealm.FILE, name, source)

    for pkg in packages:
        for cls in pkg.findall(f"./{CoverageRealm.CLASS.tag_name}"):
            yield ScopeElement(CoverageRealm.CLASS, cls.get("name") or "", cls)

    for pkg in packages:
        yield ScopeElement(CoverageRealm.PACKAGE, pkg.get("name") or "", pkg)

    yield ScopeElement(CoverageRealm.REPORT, root.get("name") or "", root)


def iter_scopes(root: ElementLike) -> Iterator[Scope]:
    """Yield every scope with its sealed observation."""
    for scope in iter_scope_elements(root):
        yield Scope(scope.realm, scope.name, read_observation(scope.element))


__all__ = [
    "Scope",
    "ScopeElement",
    "iter_scope_elements",
    "iter_scopes",
    "parse_counter",
    "read_observation",
    "read_root",
]

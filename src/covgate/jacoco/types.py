from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator


class ElementLike(Protocol):
    """Simplified Element protocol that matches the subset of behavior we consume."""

    tag: str

    def findall(self, path: str) -> list[ElementLike]: ...

    def iter(self, tag: str | None = None) -> Iterator[ElementLike]: ...

    def get(self, key: str, default: str | None = None) -> str | None: ...


__all__ = ["ElementLike"]

"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from kindpack import KindMismatchError, KindRegistry, TruncatedDataError
from kindpack.models import ExtensionRecord


class Point(ExtensionRecord):
    """Hand-written extension record: kind byte followed by two coordinate bytes."""

    kind = 0x40

    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"

    def to_bytes(self, options: Any = None, depth: int = 0) -> bytes:
        return bytes([self.kind, self.x, self.y])

    @classmethod
    def from_bytes(
        cls,
        data: Any,
        registry: Optional[KindRegistry] = None,
        options: Any = None,
        depth: int = 0,
    ) -> tuple[Point, int]:
        view = memoryview(data)
        if len(view) < 3:
            raise TruncatedDataError(f"Point needs 3 bytes, got {len(view)}")
        if view[0] != cls.kind:
            raise KindMismatchError(f"Expected kind 0x{cls.kind:02x}, got 0x{view[0]:02x}")
        return cls(view[1], view[2]), 3


@pytest.fixture
def point_type() -> type[Point]:
    """Extension record class with kind 0x40."""
    return Point


@pytest.fixture
def point_registry() -> KindRegistry:
    """Registry resolving the Point record."""
    registry = KindRegistry()
    registry.register_record(Point)
    return registry


@pytest.fixture
def sample_object() -> dict[str, Any]:
    """Smallest interesting object."""
    return {"name": "a"}


@pytest.fixture
def sample_object_bytes() -> bytes:
    """Canonical encoding of sample_object."""
    return bytes.fromhex("200a060401046e616d6501500161")

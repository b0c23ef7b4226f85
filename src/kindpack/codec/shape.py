"""Value shape classification.

This module inspects a Python value once, at the encode entry point, and
produces a ValueShape tree: every node names its category, leaves carry their
value, objects carry their fields already in canonical order. The encoders
walk this tree instead of re-inspecting Python types at every level.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..exceptions import DepthExceededError, EncodeError, UnsupportedTypeError
from ..models.extension import ExtensionRecord
from ..models.fields import MAX_UINT64, BigInt
from .primitives import encode_utf8
from .tags import Category


@dataclass(frozen=True)
class FieldShape:
    """A single object field.

    Attributes:
        name: Field name
        encoded_name: UTF-8 bytes of the name, the canonical sort key
        shape: Shape of the field value
    """

    name: str
    encoded_name: bytes
    shape: ValueShape


@dataclass(frozen=True)
class ValueShape:
    """Classified value.

    Attributes:
        category: Which of the closed set of categories the value belongs to
        value: The leaf value (str, int, bool) or the extension record;
            None for containers
        items: Item shapes for ARRAY
        fields: Field shapes for OBJECT, sorted by encoded name
    """

    category: Category
    value: Any = None
    items: tuple[ValueShape, ...] = ()
    fields: tuple[FieldShape, ...] = ()

    @classmethod
    def from_value(cls, value: Any, max_depth: int, depth: int = 0) -> ValueShape:
        """Classify ``value`` and everything nested inside it.

        Args:
            value: Value to classify
            max_depth: Maximum container nesting
            depth: Nesting depth of the container holding ``value``

        Returns:
            ValueShape for the value

        Raises:
            UnsupportedTypeError: If a value falls outside the value model
            DepthExceededError: If containers nest deeper than max_depth
            EncodeError: If an integer is out of range or a key is not a string
        """
        # Extension records are opaque and checked before anything else
        if isinstance(value, ExtensionRecord):
            return cls(Category.EXTENSION, value=value)

        # bool is a subclass of int, so it must be checked first
        if isinstance(value, bool):
            return cls(Category.BOOLEAN, value=value)

        # BigInt is also an int subclass; it opts into the arbitrary-precision form
        if isinstance(value, BigInt):
            if value < 0:
                raise EncodeError(f"BigInt must be non-negative, got {int(value)}")
            return cls(Category.VARBIGINT, value=int(value))

        if isinstance(value, int):
            if value < 0 or value > MAX_UINT64:
                raise EncodeError(
                    f"Integer {value} out of bounds [0, {MAX_UINT64}]; "
                    f"use BigInt for larger non-negative values"
                )
            return cls(Category.VARINT, value=value)

        if isinstance(value, str):
            return cls(Category.STRING, value=value)

        if isinstance(value, (list, tuple)):
            _check_depth(depth + 1, max_depth)
            items = tuple(cls.from_value(item, max_depth, depth + 1) for item in value)
            return cls(Category.ARRAY, items=items)

        if isinstance(value, Mapping):
            _check_depth(depth + 1, max_depth)
            return cls(Category.OBJECT, fields=_object_fields(value, max_depth, depth + 1))

        raise UnsupportedTypeError(f"Unsupported value type {type(value).__name__}")

    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]


def _check_depth(depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise DepthExceededError(f"Nesting depth {depth} exceeds max_depth={max_depth}")


def _object_fields(value: Mapping[Any, Any], max_depth: int, depth: int) -> tuple[FieldShape, ...]:
    fields: list[FieldShape] = []
    for name, field_value in value.items():
        if not isinstance(name, str):
            raise EncodeError(f"Object keys must be strings, got {type(name).__name__}")

        shape = ValueShape.from_value(field_value, max_depth, depth)
        if shape.category is Category.EXTENSION:
            raise UnsupportedTypeError(
                f"Field {name}: extension records are only allowed as array items "
                f"or at the top level"
            )
        fields.append(FieldShape(name=name, encoded_name=encode_utf8(name), shape=shape))

    # Canonical order: ascending by UTF-8 bytes
    fields.sort(key=lambda field: field.encoded_name)
    return tuple(fields)
